"""Extraction of marked (selected) text."""

from typing import Sequence

from .model import Line, Mark


def mark_ok(mark: Mark, lines: Sequence[Line]) -> bool:
    """True if `mark` is enabled, ordered, and inside `lines`."""
    if not mark.enabled:
        return False
    if (mark.start_line, mark.start_char) > (mark.end_line, mark.end_char):
        return False
    if mark.start_line < 0 or mark.end_line >= len(lines):
        return False
    if not 0 <= mark.start_char <= lines[mark.start_line].length:
        return False
    if not 0 <= mark.end_char <= lines[mark.end_line].length:
        return False
    return True


def get_mark(mark: Mark, lines: Sequence[Line]) -> str | None:
    """
    The text covered by `mark`, or None if the mark is unusable.

    Character positions are half-open: the character at `end_char` is not
    included. Lines are joined with newlines.
    """
    if not mark_ok(mark, lines):
        return None

    first = lines[mark.start_line].text
    if mark.start_line == mark.end_line:
        return first[mark.start_char : mark.end_char]

    parts = [first[mark.start_char :]]
    for i in range(mark.start_line + 1, mark.end_line):
        parts.append(lines[i].text)
    parts.append(lines[mark.end_line].text[: mark.end_char])
    return "\n".join(parts)
