from dataclasses import dataclass
from typing import Protocol, Sequence

from .model import Document, Mark, SearchResult, TocEntry


@dataclass
class FormatterOutput:
    """What a text-producing collaborator hands back for one request."""
    text: str
    ok: bool
    reason: str = ""


class Formatter(Protocol):
    """
    Turns a page/section name into raw formatted text (overstrike or SGR encoded).
    "Not found" is reported through FormatterOutput.ok, never raised.
    """

    def man(self, args: str, local_file: bool = False) -> FormatterOutput:
        pass

    def apropos(self, args: str) -> FormatterOutput:
        pass

    def whatis(self, args: str) -> FormatterOutput:
        pass


class StructureSource(Protocol):
    """
    Knows where the formatter placed heading boundaries in a manual page.
    """

    def markers(self, args: str, local_file: bool = False) -> list[TocEntry]:
        pass


class Display(Protocol):
    """Draws a document; the core never writes to the terminal itself."""

    def draw(
        self,
        doc: Document,
        results: Sequence[SearchResult],
        mark: Mark,
    ) -> None:
        pass
