"""Link navigation over a sequence of lines.

Link locations are ordered by line number, then by link number within the
line. A missing location is None.
"""

from typing import Sequence

from .model import Line, LinkLocation


def _check(lines: Sequence[Line], loc: LinkLocation) -> None:
    if not 0 <= loc.line < len(lines):
        raise IndexError(f"line {loc.line} out of range (0..{len(lines) - 1})")
    if not 0 <= loc.link < len(lines[loc.line].links):
        raise IndexError(f"link {loc.link} out of range in line {loc.line}")


def next_link(lines: Sequence[Line], start: LinkLocation | None) -> LinkLocation | None:
    """The first link after `start`; with no `start`, the first link overall."""
    if start is None:
        return first_link(lines, 0, len(lines) - 1)
    _check(lines, start)

    if start.link + 1 < len(lines[start.line].links):
        return LinkLocation(start.line, start.link + 1)
    for i in range(start.line + 1, len(lines)):
        if lines[i].links:
            return LinkLocation(i, 0)
    return None


def prev_link(lines: Sequence[Line], start: LinkLocation | None) -> LinkLocation | None:
    """The last link before `start`; with no `start`, the last link overall."""
    if start is None:
        return last_link(lines, 0, len(lines) - 1)
    _check(lines, start)

    if start.link > 0:
        return LinkLocation(start.line, start.link - 1)
    for i in range(start.line - 1, -1, -1):
        if lines[i].links:
            return LinkLocation(i, len(lines[i].links) - 1)
    return None


def first_link(lines: Sequence[Line], lo: int, hi: int) -> LinkLocation | None:
    """The first link on lines `lo`..`hi` (inclusive; `hi` is clamped to the last line)."""
    if lo < 0:
        raise ValueError(f"negative line number {lo}")
    for i in range(lo, min(hi, len(lines) - 1) + 1):
        if lines[i].links:
            return LinkLocation(i, 0)
    return None


def last_link(lines: Sequence[Line], lo: int, hi: int) -> LinkLocation | None:
    """The last link on lines `lo`..`hi` (inclusive; `hi` is clamped to the last line)."""
    if lo < 0:
        raise ValueError(f"negative line number {lo}")
    for i in range(min(hi, len(lines) - 1), lo - 1, -1):
        if lines[i].links:
            return LinkLocation(i, len(lines[i].links) - 1)
    return None
