"""Tests for the branch-and-truncate history."""

from anagnosis.core.history import History
from anagnosis.core.model import LinkLocation, RequestKind


def test_push_back_and_branch():
    """Test the classic browser scenario: back twice, then a new page."""
    h = History(RequestKind.INDEX)
    assert (h.current, h.top) == (0, 0)

    h.push(RequestKind.MAN, "ls(1)")
    assert (h.current, h.top) == (1, 1)
    h.push(RequestKind.MAN, "cat(1)")
    assert (h.current, h.top) == (2, 2)

    assert h.back(2)
    assert h.current == 0

    h.push(RequestKind.WHATIS, "foo")
    assert (h.current, h.top) == (1, 1)
    assert h.entry.kind == RequestKind.WHATIS
    assert [e.kind for e in h.entries] == [RequestKind.INDEX, RequestKind.WHATIS]


def test_back_forward_bounds():
    """Test moves outside [0, top] fail and change nothing."""
    h = History(RequestKind.INDEX)
    h.push(RequestKind.MAN, "ls(1)")

    assert not h.back(2)
    assert h.current == 1
    assert not h.forward(1)
    assert h.current == 1
    assert h.back(1)
    assert h.forward(1)
    assert h.current == 1


def test_jump():
    """Test absolute jumps."""
    h = History(RequestKind.INDEX)
    h.push(RequestKind.MAN, "a(1)")
    h.push(RequestKind.MAN, "b(1)")

    assert h.jump(0)
    assert h.entry.kind == RequestKind.INDEX
    assert h.jump(2)
    assert h.entry.args == "b(1)"
    assert not h.jump(3)
    assert not h.jump(-1)
    assert h.current == 2


def test_view_state_saved_and_restored():
    """Test returning to a page restores its viewport."""
    h = History(RequestKind.MAN, "ls(1)")
    h.view.top = 40
    h.view.left = 3
    h.view.focus = LinkLocation(41, 0)

    h.push(RequestKind.MAN, "cat(1)")
    # A new page starts at the top
    assert (h.view.top, h.view.left, h.view.focus) == (0, 0, None)
    h.view.top = 7

    assert h.back(1)
    assert (h.view.top, h.view.left, h.view.focus) == (40, 3, LinkLocation(41, 0))

    assert h.forward(1)
    assert h.view.top == 7


def test_back_then_forward_restores_state():
    """Test back(n) then forward(n) returns to the same entry and view."""
    h = History(RequestKind.INDEX)
    for i in range(4):
        h.push(RequestKind.MAN, f"p{i}(1)")
        h.view.top = i * 10
    before = (h.current, h.view.top, h.view.left, h.view.focus)

    assert h.back(3)
    assert h.forward(3)
    assert (h.current, h.view.top, h.view.left, h.view.focus) == before


def test_replace_keeps_view_state():
    """Test replace only touches kind and args."""
    h = History()
    h.view.top = 5
    h.push(RequestKind.MAN, "x(1)")
    h.view.top = 9
    h.replace(RequestKind.MAN, "y(1)")
    assert h.entry.args == "y(1)"
    assert h.view.top == 9


def test_reset_discards_future():
    """Test reset drops forward entries without moving."""
    h = History(RequestKind.INDEX)
    h.push(RequestKind.MAN, "a(1)")
    h.push(RequestKind.MAN, "b(1)")
    h.back(2)
    h.reset()
    assert (h.current, h.top) == (0, 0)
    assert not h.forward(1)
    assert h.future() == []


def test_past_and_future():
    """Test the past/future views."""
    h = History(RequestKind.INDEX)
    h.push(RequestKind.MAN, "a(1)")
    h.push(RequestKind.MAN, "b(1)")
    h.back(1)
    assert [e.args for e in h.past()] == [""]
    assert [e.args for e in h.future()] == ["b(1)"]
    assert len(h) == 3
