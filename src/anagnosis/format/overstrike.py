"""Decoding of formatter output into text plus style tracks.

Two conventions are understood:

- overstrike: ``X\\bX`` is bold, ``_\\bX`` is underlined (``_\\bX\\bX`` counts as bold)
- ANSI SGR escapes: ``ESC[1m`` bold, ``ESC[3m`` italic, ``ESC[4m`` underline,
  with ``0``/``22``/``23``/``24`` switching them off again
"""

import re

from ..core.model import Line

BS = "\b"
ESC = "\x1b"

# CSI: ESC [ params intermediates final
CSI_RE = re.compile(r"\x1b\[([0-9;?]*)[ -/]*([@-~])")


def _sgr(params: str, state: dict[str, bool]) -> None:
    codes = [int(p) for p in params.split(";") if p.isdigit()] or [0]
    for code in codes:
        if code == 0:
            state.update(bold=False, italic=False, uline=False)
        elif code == 1:
            state["bold"] = True
        elif code == 3:
            state["italic"] = True
        elif code == 4:
            state["uline"] = True
        elif code == 22:
            state["bold"] = False
        elif code == 23:
            state["italic"] = False
        elif code == 24:
            state["uline"] = False


def _current(state: dict[str, bool]) -> str:
    if state["bold"]:
        return "bold"
    if state["italic"]:
        return "italic"
    if state["uline"]:
        return "uline"
    return "reg"


def decode_line(raw: str) -> Line:
    """Decode one raw formatter line into a Line (without links)."""
    if not raw:
        return Line()

    chars: list[str] = []
    styles: list[str] = []
    state = {"bold": False, "italic": False, "uline": False}

    i = 0
    n = len(raw)
    while i < n:
        c = raw[i]

        if c == ESC:
            m = CSI_RE.match(raw, i)
            if m is None:
                # Lone escape; drop it
                i += 1
                continue
            if m.group(2) == "m":
                _sgr(m.group(1), state)
            i = m.end()
            continue

        if c == BS:
            # Needs a visible character on both sides; otherwise it is dropped
            # and the previous character keeps its style
            if chars and i + 1 < n and raw[i + 1] not in (BS, ESC):
                prev = chars[-1]
                nxt = raw[i + 1]
                if prev == nxt:
                    styles[-1] = "bold"
                elif prev == "_":
                    chars[-1] = nxt
                    if styles[-1] != "bold":
                        styles[-1] = "uline"
                elif nxt == "_":
                    # X\b_ is underline too
                    if styles[-1] != "bold":
                        styles[-1] = "uline"
                else:
                    # Overstruck glyph (e.g. o\b+ for a bullet); keep the later one
                    chars[-1] = nxt
                i += 2
                continue
            i += 1
            continue

        chars.append(c)
        styles.append(_current(state))
        i += 1

    text = "".join(chars)
    return Line(
        text=text,
        reg=[s == "reg" for s in styles],
        bold=[s == "bold" for s in styles],
        italic=[s == "italic" for s in styles],
        uline=[s == "uline" for s in styles],
    )


def decode(text: str) -> list[Line]:
    """Decode a whole formatter output blob, one Line per input line."""
    if not text:
        return []
    raw_lines = text.split("\n")
    if raw_lines and raw_lines[-1] == "":
        raw_lines.pop()
    return [decode_line(raw.rstrip("\r")) for raw in raw_lines]
