"""Plain terminal output of documents, with ANSI attributes."""

import sys
from typing import Sequence, TextIO

from ..core.model import Document, Line, Mark, SearchResult

SGR = {
    "reg": "",
    "bold": "\x1b[1m",
    "italic": "\x1b[3m",
    "uline": "\x1b[4m",
}
REVERSE = "\x1b[7m"
RESET = "\x1b[0m"


def highlights(doc: Document, results: Sequence[SearchResult], mark: Mark | None) -> dict[int, set[int]]:
    """Character positions to show in reverse video, per line."""
    out: dict[int, set[int]] = {}

    def add(line: int, start: int, end: int) -> None:
        out.setdefault(line, set()).update(range(start, end))

    for r in results:
        add(r.line, r.start, r.end)

    focus = doc.viewport.focus
    if focus is not None and focus.line < len(doc.lines):
        links = doc.lines[focus.line].links
        if focus.link < len(links):
            link = links[focus.link]
            add(focus.line, link.start, link.end)
            if link.in_next:
                add(focus.line + 1, link.start_next, link.end_next)

    if mark is not None and mark.enabled:
        for n in range(mark.start_line, mark.end_line + 1):
            if not 0 <= n < len(doc.lines):
                continue
            start = mark.start_char if n == mark.start_line else 0
            end = mark.end_char if n == mark.end_line else doc.lines[n].length
            add(n, start, end)
    return out


def render_line(line: Line, colors: bool = True, left: int = 0, reverse: set[int] | None = None) -> str:
    if not colors:
        return line.text[left:]
    reverse = reverse or set()
    parts = []
    current = None
    for i in range(left, line.length):
        attr = SGR[line.style_at(i)] + (REVERSE if i in reverse else "")
        if attr != current:
            parts.append(RESET + attr if current else attr)
            current = attr
        parts.append(line.text[i])
    if current:
        parts.append(RESET)
    return "".join(parts)


def render_document(
    doc: Document,
    colors: bool = True,
    height: int | None = None,
    results: Sequence[SearchResult] = (),
    mark: Mark | None = None,
) -> str:
    """
    Render `doc` from its viewport origin. With no `height`, render to the end.
    """
    top = doc.viewport.top
    stop = len(doc.lines) if height is None else min(len(doc.lines), top + height)
    marks = highlights(doc, results, mark) if colors else {}
    return "\n".join(
        render_line(doc.lines[n], colors, doc.viewport.left, marks.get(n))
        for n in range(top, stop)
    )


class TerminalDisplay:
    """Display that writes a screenful (or the whole page) to a stream."""

    def __init__(self, stream: TextIO | None = None, colors: bool = True, height: int | None = None):
        self.stream = stream or sys.stdout
        self.colors = colors
        self.height = height

    def draw(self, doc: Document, results: Sequence[SearchResult], mark: Mark) -> None:
        text = render_document(doc, self.colors, self.height, results, mark)
        if text:
            self.stream.write(text + "\n")
