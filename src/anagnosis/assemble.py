"""Document assembly: formatter output and listings into navigable documents."""

import textwrap
from dataclasses import dataclass
from typing import Callable, Sequence

from .core.model import Document, Line, Link, LinkType, ListingEntry, TocEntry
from .core.ports import FormatterOutput
from .core.toc import sc_toc, section_title
from .format import LinkDetector, decode
from .listing import aprowhat_sections, group_by_section

# Left margin of body text, as in formatted manual pages
LMARGIN = 7
# Indentation of subheadings
SMARGIN = 3
# Widest tag that still shares its line with the description
MAX_TAG = 24


@dataclass
class ListingLayout:
    width: int = 80
    sections_on_top: bool = True


class LineBuilder:
    """Accumulates styled, optionally linked, text into a Line."""

    def __init__(self) -> None:
        self.line = Line()

    def add(
        self,
        text: str,
        style: str = "reg",
        link_type: LinkType | None = None,
        target: str | None = None,
    ) -> "LineBuilder":
        ln = self.line
        start = ln.length
        ln.text += text
        for track in ("reg", "bold", "italic", "uline"):
            getattr(ln, track).extend([track == style] * len(text))
        if link_type is not None:
            ln.links.append(Link(start, ln.length, link_type, target if target is not None else text))
        return self

    def pad(self, column: int) -> "LineBuilder":
        if self.line.length < column:
            self.add(" " * (column - self.line.length))
        return self

    def build(self) -> Line:
        return self.line


def _three_way(left: str, center: str, right: str, width: int) -> Line:
    """A header/footer line: `left` and `right` flush, `center` centred."""
    room = width - len(left) - len(right)
    if room < len(center) + 2:
        return Line.plain(f"{left}  {center}  {right}")
    before = (room - len(center)) // 2
    after = room - len(center) - before
    return Line.plain(left + " " * before + center + " " * after + right)


def error_document(title: str, message: str) -> Document:
    """An empty document flagged as carrying no content."""
    return Document(title=title, error=True, message=message)


def man_document(
    output: FormatterOutput,
    title: str,
    detector: LinkDetector | None = None,
    toc_loader: Callable[[], list[TocEntry]] | None = None,
) -> Document:
    """
    Build a manual page document from formatter output.

    The formatter already lays out the header and the footer; this decodes the
    text, trims trailing blank lines, and detects links.
    """
    if not output.ok:
        return error_document(title, output.reason or f"No manual entry for {title}")

    lines = decode(output.text)
    while lines and not lines[-1].text.strip():
        lines.pop()
    if not lines:
        return error_document(title, output.reason or f"No manual entry for {title}")

    (detector or LinkDetector()).detect(lines)
    doc = Document(title=title, toc_loader=toc_loader)
    doc.set_lines(lines)
    return doc


def _entry_lines(entry: ListingEntry, tag_width: int, width: int) -> list[Line]:
    """A tagged paragraph: the identifier as a bold link, then the wrapped description."""
    desc_col = LMARGIN + tag_width + 2
    wrapped = textwrap.wrap(entry.description, max(width - desc_col, 20)) or [""]

    first = LineBuilder().pad(LMARGIN).add(entry.identifier, "bold", LinkType.MAN, entry.identifier)
    out = []
    if len(entry.identifier) <= tag_width:
        first.pad(desc_col).add(wrapped[0])
        out.append(first.build())
        rest = wrapped[1:]
    else:
        out.append(first.build())
        rest = wrapped
    for chunk in rest:
        out.append(LineBuilder().pad(desc_col).add(chunk).build())
    return out


def listing_document(
    entries: Sequence[ListingEntry],
    key: str,
    title: str,
    version: str,
    date: str,
    sections: Sequence[str] | None = None,
    layout: ListingLayout | None = None,
    empty_message: str = "Nothing appropriate",
) -> Document:
    """
    Render apropos/whatis/index results as a manual-page-like document.

    `key` and `title` are the short and long page names shown in the header
    and footer. Sections default to the distinct sections of `entries`.
    """
    if not entries:
        return error_document(title, empty_message)
    layout = layout or ListingLayout()
    if sections is None:
        sections = aprowhat_sections(entries)
    sections = list(sections)
    width = layout.width

    lines: list[Line] = []
    blank = Line.plain

    lines.append(_three_way(key, title, key, width))
    lines.append(blank(""))

    lines.append(Line.styled("NAME", "bold"))
    lines.append(LineBuilder().pad(LMARGIN).add(f"{key} - {title}").build())
    lines.append(blank(""))

    if layout.sections_on_top:
        lines.append(Line.styled("SECTIONS", "bold"))
        for sc in sections:
            lines.append(
                LineBuilder()
                .pad(LMARGIN)
                .add(f"Manual pages in section {sc}", "uline", LinkType.LOCAL_SEARCH, section_title(sc))
                .build()
            )
        lines.append(blank(""))

    lines.append(Line.styled("MANUAL PAGES", "bold"))
    groups = group_by_section(entries, sections)
    for n, sc in enumerate(sections):
        if n > 0:
            lines.append(blank(""))
        lines.append(LineBuilder().pad(SMARGIN).add(section_title(sc), "bold").build())
        group = groups.get(sc, [])
        tag_width = min(max((len(e.identifier) for e in group), default=0), MAX_TAG)
        for entry in group:
            lines.extend(_entry_lines(entry, tag_width, width))

    lines.append(blank(""))
    lines.append(_three_way(version, date, key, width))

    doc = Document(title=title, toc_loader=lambda: sc_toc(sections))
    doc.set_lines(lines)
    return doc
