"""Table of contents construction and lookup."""

from typing import Iterable, Sequence

from .model import Line, TocEntry, TocKind


def section_title(section: str) -> str:
    """Heading text used for a section group in listing pages."""
    return f"Section {section}"


def sc_toc(sections: Iterable[str]) -> list[TocEntry]:
    """TOC of a listing page: one heading per manual section."""
    return [TocEntry(TocKind.HEAD, section_title(sc)) for sc in sections]


def man_toc(markers: Iterable[TocEntry]) -> list[TocEntry]:
    """TOC of a manual page, taken verbatim from structural markers (blank ones dropped)."""
    return [m for m in markers if m.text.strip()]


def _squash(text: str) -> str:
    return " ".join(text.split())


def toc_line(lines: Sequence[Line], entry: TocEntry, after: int = 0) -> int | None:
    """
    Line number at or after `after` where `entry` appears.

    Headings must match a whole line; tagged paragraphs only its beginning,
    since the paragraph text may follow the tag on the same line.
    """
    want = _squash(entry.text)
    if not want:
        return None
    for i in range(max(after, 0), len(lines)):
        have = _squash(lines[i].text)
        if entry.kind == TocKind.TAGPAR:
            if have == want or have.startswith(want + " "):
                return i
        elif have == want:
            return i
    return None
