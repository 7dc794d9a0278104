"""Structural markers (headings, subheadings, tags) read from roff sources."""

import bz2
import gzip
import lzma
import re
import shlex
import subprocess
from pathlib import Path

from ..core.model import TocEntry, TocKind
from ..core.status import CollaboratorError

FONT_MACROS = {"B", "I", "SM", "SB", "BR", "RB", "BI", "IB", "IR", "RI"}
# mdoc macros that only decorate their arguments
MDOC_DECOR = {
    "Ar", "Cm", "Dv", "Em", "Er", "Ev", "Ic", "Li", "Ns", "Op", "Pa", "Sy",
    "Va", "Xo", "Xc", "Ql", "Dq", "Sq", "Oo", "Oc", "Ek", "Bk", "Nm",
}

NAMED_CHARS = {
    "em": "—",
    "en": "–",
    "hy": "-",
    "aq": "'",
    "dq": '"',
    "lq": '"',
    "rq": '"',
    "oq": "'",
    "cq": "'",
    "bu": "•",
    "co": "©",
    "rg": "®",
    "ti": "~",
    "ha": "^",
}

ESCAPE_RE = re.compile(
    r"""\\(?:
        f(?:\[[^\]]*\]|\(..|.)      # font change
      | s[+-]?(?:\d+|\[[^\]]*\]|\(..)  # size change
      | \*(?:\[(?P<s1>[^\]]*)\]|\((?P<s2>..)|(?P<s3>.))  # string
      | \((?P<c1>..)                # named character
      | \[(?P<c2>[^\]]*)\]          # named character
      | (?P<other>.)
    )""",
    re.VERBOSE,
)


def _escape(m: re.Match) -> str:
    name = m.group("c1") or m.group("c2") or m.group("s1") or m.group("s2") or m.group("s3")
    if name is not None:
        return NAMED_CHARS.get(name, "")
    other = m.group("other")
    if other is None:
        return ""  # font or size change
    if other in "-":
        return "-"
    if other in "e\\":
        return "\\"
    if other in " ~0":
        return " "
    if other in "&|^:%c)":
        return ""
    if other == '"':
        return ""
    return other


def unescape(text: str) -> str:
    """Strip roff escapes from `text`, keeping what they print."""
    # A \" comment runs to the end of the line
    cut = text.find('\\"')
    if cut != -1:
        text = text[:cut]
    return ESCAPE_RE.sub(_escape, text).strip()


def split_args(text: str) -> list[str]:
    """Split macro arguments on blanks, honouring double quotes ("" is a literal quote)."""
    args: list[str] = []
    i, n = 0, len(text)
    while i < n:
        while i < n and text[i] in " \t":
            i += 1
        if i >= n:
            break
        if text[i] == '"':
            i += 1
            buf = []
            while i < n:
                if text[i] == '"':
                    if i + 1 < n and text[i + 1] == '"':
                        buf.append('"')
                        i += 2
                        continue
                    i += 1
                    break
                buf.append(text[i])
                i += 1
            args.append("".join(buf))
        else:
            start = i
            while i < n and text[i] not in " \t":
                # Escaped blanks don't split
                if text[i] == "\\" and i + 1 < n:
                    i += 2
                    continue
                i += 1
            args.append(text[start:i])
    return args


def _request(line: str) -> tuple[str, str] | None:
    """(macro, rest) for a control line, None for a text line."""
    if not line or line[0] not in ".'":
        return None
    body = line[1:].lstrip()
    if body.startswith('\\"'):
        return ("\\\"", "")
    name, _, rest = body.partition(" ")
    return (name, rest.strip())


def _mdoc_text(args: list[str]) -> str:
    out = []
    flag = False
    for a in args:
        if a == "Fl":
            flag = True
            continue
        if a in MDOC_DECOR:
            continue
        out.append(("-" + a) if flag else a)
        flag = False
    if flag:
        out.append("-")
    return unescape(" ".join(out))


def parse_roff_markers(source: str) -> list[TocEntry]:
    """
    Table of contents entries from a man(7) or mdoc(7) source, in order.

    .SH/.Sh give headings, .SS/.Ss subheadings, and .TP/.IP/.It tags give
    tagged paragraphs.
    """
    lines = source.splitlines()
    out: list[TocEntry] = []
    i = 0
    n = len(lines)

    def next_text(j: int) -> tuple[str, int]:
        # Text of the first printable line from j on, resolving font macros
        while j < n:
            req = _request(lines[j])
            if req is None:
                return (unescape(lines[j]), j)
            name, rest = req
            if name in FONT_MACROS and rest:
                args = split_args(rest)
                joiner = " " if len(name) == 1 or name in ("SM", "SB") else ""
                return (unescape(joiner.join(args)), j)
            if name in ("SH", "SS", "TP", "Sh", "Ss"):
                break
            j += 1
        return ("", j - 1)

    while i < n:
        req = _request(lines[i])
        if req is None:
            i += 1
            continue
        name, rest = req

        if name in ("SH", "Sh", "SS", "Ss"):
            kind = TocKind.HEAD if name in ("SH", "Sh") else TocKind.SUBHEAD
            if rest:
                text = unescape(" ".join(split_args(rest)))
            else:
                text, i = next_text(i + 1)
            if text:
                out.append(TocEntry(kind, text))
        elif name == "TP":
            text, i = next_text(i + 1)
            if text:
                out.append(TocEntry(TocKind.TAGPAR, text))
        elif name == "IP":
            args = split_args(rest)
            if args and unescape(args[0]):
                out.append(TocEntry(TocKind.TAGPAR, unescape(args[0])))
        elif name == "It":
            text = _mdoc_text(split_args(rest))
            if text:
                out.append(TocEntry(TocKind.TAGPAR, text))
        i += 1
    return out


# Suffixes read_source understands, plain first
SOURCE_SUFFIXES = ("", ".gz", ".bz2", ".xz", ".lzma")


def read_source(path: Path) -> str:
    """Read a possibly compressed roff source."""
    suffix = path.suffix
    if suffix == ".gz":
        opener = gzip.open
    elif suffix == ".bz2":
        opener = bz2.open
    elif suffix in (".xz", ".lzma"):
        opener = lzma.open
    else:
        opener = open
    with opener(path, "rt", encoding="utf-8", errors="replace") as f:
        return f.read()


class RoffStructure:
    """StructureSource that locates page sources with `man -w` and parses them."""

    def __init__(self, man: str = "man"):
        self.man = man

    def locate(self, args: str) -> Path | None:
        try:
            proc = subprocess.run(
                [self.man, "-w", *shlex.split(args)],
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise CollaboratorError(f"Cannot run {self.man}: {e}") from e
        if proc.returncode != 0:
            return None
        first = proc.stdout.strip().splitlines()
        return Path(first[0]) if first else None

    def markers(self, args: str, local_file: bool = False) -> list[TocEntry]:
        path = Path(args) if local_file else self.locate(args)
        if path is None or not path.is_file():
            return []
        source = read_source(path)

        # Follow a single .so redirection, relative to the manual root
        first = _request(source.lstrip().split("\n", 1)[0]) if source.strip() else None
        if first and first[0] == "so" and first[1]:
            target = resolve_so(path.parent.parent / first[1])
            if target is not None:
                source = read_source(target)

        return parse_roff_markers(source)


def resolve_so(target: Path) -> Path | None:
    """The file a .so request names, or its compressed form."""
    for suffix in SOURCE_SUFFIXES:
        candidate = target.with_name(target.name + suffix)
        if candidate.is_file():
            return candidate
    return None
