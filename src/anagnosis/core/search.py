"""Incremental search over decoded lines."""

from typing import Sequence

from .model import Line, SearchResult


def _fold(s: str) -> str:
    # Per character, so offsets in the folded text match the original
    return "".join(c.lower() if len(c.lower()) == 1 else c for c in s)


def search(needle: str, lines: Sequence[Line], case_sensitive: bool = False) -> list[SearchResult]:
    """
    All non-overlapping occurrences of `needle`, sorted by (line, start).

    Each line is scanned left to right, resuming after the end of every hit.
    """
    if not needle:
        return []
    if not case_sensitive:
        needle = _fold(needle)

    results: list[SearchResult] = []
    for n, line in enumerate(lines):
        hay = line.text if case_sensitive else _fold(line.text)
        pos = hay.find(needle)
        while pos != -1:
            results.append(SearchResult(n, pos, pos + len(needle)))
            pos = hay.find(needle, pos + len(needle))
    return results


def search_next(results: Sequence[SearchResult], from_line: int) -> SearchResult | None:
    """The first result on a line after `from_line`.

    Further hits on `from_line` itself are skipped: navigation moves from one
    line with hits to the next.
    """
    for r in results:
        if r.line > from_line:
            return r
    return None


def search_prev(results: Sequence[SearchResult], from_line: int) -> SearchResult | None:
    """The last result on a line before `from_line`."""
    for r in reversed(results):
        if r.line < from_line:
            return r
    return None


def results_in_line(results: Sequence[SearchResult], line: int) -> list[SearchResult]:
    return [r for r in results if r.line == line]
