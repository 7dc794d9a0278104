"""Branch-and-truncate history of page requests."""

from .model import Request, RequestKind, Viewport


class History:
    """
    Visited requests, with `current` and `top` indices.

    The history owns the live viewport. Every move saves the viewport into the
    entry being left and restores it from the entry being entered, so returning
    to a page puts the user back where they were.
    """

    def __init__(self, kind: RequestKind = RequestKind.NONE, args: str = ""):
        self.entries: list[Request] = [Request(kind, args)]
        self.current = 0
        self.top = 0
        self.view = Viewport()

    def __len__(self) -> int:
        return self.top + 1

    @property
    def entry(self) -> Request:
        return self.entries[self.current]

    def _save(self) -> None:
        req = self.entries[self.current]
        req.saved_top = self.view.top
        req.saved_left = self.view.left
        req.saved_focus = self.view.focus

    def _restore(self) -> None:
        req = self.entries[self.current]
        self.view.top = req.saved_top
        self.view.left = req.saved_left
        self.view.focus = req.saved_focus

    def replace(self, kind: RequestKind, args: str = "") -> None:
        """Overwrite the current entry's request, leaving its view state alone."""
        req = self.entries[self.current]
        req.kind = kind
        req.args = args

    def push(self, kind: RequestKind, args: str = "") -> None:
        """Add an entry after the current one; any forward entries are discarded."""
        self._save()
        del self.entries[self.current + 1 :]
        self.entries.append(Request(RequestKind.NONE))
        self.current += 1
        self.top = self.current
        self.replace(kind, args)
        self._restore()

    def jump(self, pos: int) -> bool:
        if pos < 0 or pos > self.top:
            return False
        self._save()
        self.current = pos
        self._restore()
        return True

    def back(self, n: int = 1) -> bool:
        return self.jump(self.current - n)

    def forward(self, n: int = 1) -> bool:
        return self.jump(self.current + n)

    def reset(self) -> None:
        """Discard every entry after the current one."""
        del self.entries[self.current + 1 :]
        self.top = self.current

    def past(self) -> list[Request]:
        return self.entries[: self.current]

    def future(self) -> list[Request]:
        return self.entries[self.current + 1 : self.top + 1]
