from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable


class LinkType(Enum):
    MAN = "man"  # manual page, e.g. "ls(1)"
    HTTP = "http"  # http(s) URL
    EMAIL = "email"
    FILE = "file"  # file in the local filesystem
    LOCAL_SEARCH = "local_search"  # find `target` in the current document


@dataclass
class Link:
    start: int  # character offsets in the line, half-open
    end: int
    type: LinkType
    target: str
    in_next: bool = False  # link is hyphenated into the next line
    start_next: int = 0  # next-line portion; meaningful only when in_next
    end_next: int = 0


@dataclass
class Line:
    text: str = ""
    # Places in the line where the text becomes regular/bold/italic/underlined.
    # Exactly one track is true at each position.
    reg: list[bool] = field(default_factory=list)
    bold: list[bool] = field(default_factory=list)
    italic: list[bool] = field(default_factory=list)
    uline: list[bool] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.text)

    @classmethod
    def plain(cls, text: str) -> "Line":
        n = len(text)
        return cls(text, [True] * n, [False] * n, [False] * n, [False] * n)

    @classmethod
    def styled(cls, text: str, style: str) -> "Line":
        """A line whose every character has `style` ("reg", "bold", "italic", "uline")."""
        line = cls.plain(text)
        if style != "reg":
            n = len(text)
            line.reg = [False] * n
            setattr(line, style, [True] * n)
        return line

    def style_at(self, i: int) -> str:
        if self.bold[i]:
            return "bold"
        if self.italic[i]:
            return "italic"
        if self.uline[i]:
            return "uline"
        return "reg"


@dataclass(frozen=True, order=True)
class LinkLocation:
    """A link in a sequence of lines; ordered by line, then link number.

    An absent location is represented by None rather than a flag.
    """
    line: int
    link: int


class TocKind(IntEnum):
    HEAD = 0  # section heading
    SUBHEAD = 1  # section subheading
    TAGPAR = 2  # tagged paragraph


@dataclass(frozen=True)
class TocEntry:
    kind: TocKind
    text: str


class RequestKind(Enum):
    NONE = "NONE"  # placeholder until the first real request
    INDEX = "INDEX"
    MAN = "MAN"
    MAN_LOCAL = "LOCAL"
    APROPOS = "APROPOS"
    WHATIS = "WHATIS"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class Viewport:
    top: int = 0
    left: int = 0
    focus: LinkLocation | None = None


@dataclass
class Request:
    kind: RequestKind
    args: str = ""
    # Last known view state, saved whenever the user navigates away
    saved_top: int = 0
    saved_left: int = 0
    saved_focus: LinkLocation | None = None


@dataclass(frozen=True, order=True)
class SearchResult:
    line: int
    start: int  # half-open
    end: int


@dataclass
class Mark:
    enabled: bool = False
    start_line: int = 0
    start_char: int = 0
    end_line: int = 0
    end_char: int = 0


@dataclass(frozen=True)
class ListingEntry:
    page: str
    section: str
    identifier: str  # "page(section)"
    description: str

    @classmethod
    def make(cls, page: str, section: str, description: str) -> "ListingEntry":
        return cls(page, section, f"{page}({section})", description)


@dataclass
class Document:
    title: str
    lines: list[Line] = field(default_factory=list)
    viewport: Viewport = field(default_factory=Viewport)
    error: bool = False
    message: str = ""
    # Search results for the last needle; reset whenever the lines change
    results: list[SearchResult] = field(default_factory=list)
    needle: str = ""
    toc_loader: Callable[[], list[TocEntry]] | None = field(default=None, repr=False)
    _toc: list[TocEntry] | None = field(default=None, repr=False)

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def toc(self) -> list[TocEntry]:
        """Table of contents, built on first access and cached."""
        if self._toc is None:
            self._toc = list(self.toc_loader()) if self.toc_loader else []
        return self._toc

    @property
    def toc_built(self) -> bool:
        return self._toc is not None

    def set_lines(self, lines: list[Line]) -> None:
        self.lines = lines
        self.results = []
        self.needle = ""

    def link_at(self, loc: LinkLocation | None) -> Link | None:
        if loc is None:
            return None
        return self.lines[loc.line].links[loc.link]
