"""Tests for extracting marked text."""

from anagnosis.core.mark import get_mark, mark_ok
from anagnosis.core.model import Line, Mark


def _lines(*texts):
    return [Line.plain(t) for t in texts]


def test_single_line_mark():
    """Test a mark within one line."""
    lines = _lines("first", "second", "the quick fox")
    assert get_mark(Mark(True, 2, 4, 2, 9), lines) == "quick"


def test_empty_mark():
    """Test a mark whose start equals its end."""
    lines = _lines("the quick fox")
    assert get_mark(Mark(True, 0, 5, 0, 5), lines) == ""


def test_multi_line_mark():
    """Test a mark spanning several lines."""
    lines = _lines("alpha beta", "gamma", "delta epsilon")
    assert get_mark(Mark(True, 0, 6, 2, 5), lines) == "beta\ngamma\ndelta"


def test_mark_to_line_end():
    """Test marking to the end of a line and from the start of the next."""
    lines = _lines("ab", "cd")
    assert get_mark(Mark(True, 0, 2, 1, 0), lines) == "\n"
    assert get_mark(Mark(True, 0, 0, 1, 2), lines) == "ab\ncd"


def test_disabled_mark():
    """Test a disabled mark yields nothing."""
    assert get_mark(Mark(False, 0, 0, 0, 1), _lines("abc")) is None


def test_inverted_mark():
    """Test a mark whose end precedes its start."""
    lines = _lines("abc", "def")
    assert get_mark(Mark(True, 1, 0, 0, 2), lines) is None
    assert get_mark(Mark(True, 0, 2, 0, 1), lines) is None


def test_out_of_range_mark():
    """Test marks outside the document."""
    lines = _lines("abc")
    assert get_mark(Mark(True, 0, 0, 1, 0), lines) is None
    assert get_mark(Mark(True, 0, 0, 0, 4), lines) is None
    assert get_mark(Mark(True, 0, -1, 0, 2), lines) is None


def test_mark_ok():
    """Test mark validation."""
    lines = [Line.plain("the quick fox"), Line.plain("jumps")]
    assert mark_ok(Mark(True, 0, 4, 1, 5), lines)
    assert not mark_ok(Mark(False, 0, 4, 1, 5), lines)
    assert not mark_ok(Mark(True, 1, 0, 0, 4), lines)
    assert not mark_ok(Mark(True, 0, 0, 2, 0), lines)
    assert not mark_ok(Mark(True, 1, 0, 1, 6), lines)
