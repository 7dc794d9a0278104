"""Link detection in decoded manual page text."""

import os
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from ..core.model import Line, Link, LinkType

# Sections are numeric (1, 3p, 0p, 8x) or one of the letter sections n, l, o;
# other letters are left alone so that prose such as "file(s)" is no link
MAN_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.:@+-]*\((?:[0-9][A-Za-z0-9]*|[nlo])\)")
URL_RE = re.compile(r"(?:https?|ftp)://[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+")
EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}")
# A path must start a word: beginning of line, after a blank, an opening
# bracket or a quote
FILE_RE = re.compile(r"(?<![^\s(\[<\"'`])~?/[A-Za-z0-9_.+~/-]+")

# Sentence punctuation that may trail a URL or a path without belonging to it
TRAILING = ".,;:!?'\"`"

# Hyphens a formatter ends a wrapped line with: ASCII, and U+2010 in UTF-8 locales
WRAP_HYPHENS = ("-", "\u2010")


def _trim(text: str, start: int, end: int) -> int:
    """Drop trailing punctuation and unbalanced closing brackets."""
    while end > start:
        c = text[end - 1]
        if c in TRAILING:
            end -= 1
        elif c == ")" and text.count("(", start, end) < text.count(")", start, end):
            end -= 1
        elif c == "]" and text.count("[", start, end) < text.count("]", start, end):
            end -= 1
        else:
            break
    return end


@dataclass
class Matcher:
    type: LinkType
    pattern: re.Pattern
    trim: bool = False
    accept: Callable[[str], bool] | None = None

    def find(self, text: str, pos: int) -> tuple[int, int] | None:
        """Leftmost acceptable match at or after `pos`, as (start, end)."""
        while pos <= len(text):
            m = self.pattern.search(text, pos)
            if m is None:
                return None
            start, end = m.start(), m.end()
            if self.trim:
                end = _trim(text, start, end)
            if end > start and (self.accept is None or self.accept(text[start:end])):
                return (start, end)
            pos = start + 1
        return None


def default_matchers(
    kinds: Iterable[LinkType] = (LinkType.MAN, LinkType.HTTP, LinkType.EMAIL, LinkType.FILE),
    file_exists: Callable[[str], bool] | None = None,
) -> list[Matcher]:
    """The fixed-priority matcher battery: man page, then URL, then email, then file."""
    wanted = set(kinds)

    accept = None
    if file_exists is not None:

        def accept(path: str) -> bool:
            return file_exists(os.path.expanduser(path))

    battery = [
        Matcher(LinkType.MAN, MAN_RE),
        Matcher(LinkType.HTTP, URL_RE, trim=True),
        Matcher(LinkType.EMAIL, EMAIL_RE),
        Matcher(LinkType.FILE, FILE_RE, trim=True, accept=accept),
    ]
    return [m for m in battery if m.type in wanted]


class LinkDetector:
    """
    Scan decoded lines for links.

    Leftmost match wins, ties go to the earlier matcher, and scanning resumes
    after the end of each claimed span, so links never overlap.
    """

    def __init__(self, matchers: Sequence[Matcher] | None = None):
        self.matchers = list(matchers) if matchers is not None else default_matchers()

    def _leftmost(self, text: str, pos: int) -> tuple[int, int, LinkType] | None:
        best = None
        for matcher in self.matchers:
            found = matcher.find(text, pos)
            if found is not None and (best is None or found[0] < best[0]):
                best = (found[0], found[1], matcher.type)
        return best

    def scan(self, text: str, pos: int = 0) -> list[Link]:
        """Links in a single line of text, starting at `pos`, ignoring wraps."""
        links: list[Link] = []
        while True:
            hit = self._leftmost(text, pos)
            if hit is None:
                return links
            start, end, type_ = hit
            links.append(Link(start, end, type_, text[start:end]))
            pos = end

    def detect(self, lines: list[Line]) -> None:
        """Fill in `links` for every line, joining links hyphenated across lines."""
        claimed = 0  # prefix of the current line owned by the previous line's link
        for i, line in enumerate(lines):
            text = line.text
            stripped = text.rstrip()
            nxt = lines[i + 1].text if i + 1 < len(lines) else ""

            if not (stripped.endswith(WRAP_HYPHENS) and nxt.strip()):
                line.links = self.scan(text, claimed)
                claimed = 0
                continue

            junction = len(stripped) - 1
            indent = len(nxt) - len(nxt.lstrip())
            joined = text[:junction] + nxt[indent:]

            links: list[Link] = []
            pos = claimed
            claimed = 0
            while True:
                hit = self._leftmost(joined, pos)
                if hit is None or hit[0] >= junction:
                    break
                start, end, type_ = hit
                if end <= junction:
                    links.append(Link(start, end, type_, joined[start:end]))
                    pos = end
                    continue
                # Crosses the wrap: the hyphen belongs to the wrap, not the target
                tail = end - junction
                links.append(
                    Link(
                        start=start,
                        end=junction + 1,
                        type=type_,
                        target=joined[start:end],
                        in_next=True,
                        start_next=indent,
                        end_next=indent + tail,
                    )
                )
                claimed = indent + tail
                break
            line.links = links
