"""apropos/whatis results: parsing and lookups."""

import re
from typing import Sequence

from .core.model import ListingEntry

# "ls (1)               - list directory contents"
# "ls(1) - list directory contents"
# "cal, ncal (1)        - displays a calendar"
APROWHAT_RE = re.compile(r"^(?P<names>\S.*?)\s*\((?P<section>[^()\s]+)\)\s+-+\s+(?P<descr>.*)$")


def parse_aprowhat(text: str) -> list[ListingEntry]:
    """
    Parse apropos/whatis output into entries, in output order.

    Lines that don't look like results are skipped. A comma-separated list of
    names yields one entry per name. Duplicates are kept.
    """
    entries: list[ListingEntry] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        m = APROWHAT_RE.match(line)
        if not m:
            continue
        section = m.group("section")
        descr = m.group("descr").strip()
        for name in m.group("names").split(","):
            name = name.strip()
            if name:
                entries.append(ListingEntry.make(name, section, descr))
    return entries


def aprowhat_sections(entries: Sequence[ListingEntry]) -> list[str]:
    """Distinct section names, in first-seen order (case-sensitive)."""
    seen: dict[str, None] = {}
    for e in entries:
        seen.setdefault(e.section, None)
    return list(seen)


def aprowhat_has(needle: str, entries: Sequence[ListingEntry]) -> bool:
    """True if some entry's identifier equals `needle`, ignoring case."""
    needle = needle.casefold()
    return any(e.identifier.casefold() == needle for e in entries)


def aprowhat_search(needle: str, entries: Sequence[ListingEntry], pos: int, fullsub: bool) -> int:
    """
    Index of the first entry after `pos` whose identifier contains `needle`
    (`fullsub`) or starts with it (not `fullsub`), ignoring case; -1 if none.

    Pass pos=-1 to search from the first entry.
    """
    needle = needle.casefold()
    for i in range(max(pos + 1, 0), len(entries)):
        ident = entries[i].identifier.casefold()
        if (needle in ident) if fullsub else ident.startswith(needle):
            return i
    return -1


def group_by_section(entries: Sequence[ListingEntry], sections: Sequence[str]) -> dict[str, list[ListingEntry]]:
    """Entries grouped per section, groups in `sections` order, entries in input order."""
    groups: dict[str, list[ListingEntry]] = {sc: [] for sc in sections}
    for e in entries:
        if e.section in groups:
            groups[e.section].append(e)
    return groups
