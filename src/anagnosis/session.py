"""The viewer session: history, the current page, and everything that acts on it."""

import datetime
import os
from dataclasses import dataclass

from . import __version__
from .assemble import ListingLayout, error_document, listing_document, man_document
from .config import AnagConfig
from .core.history import History
from .core.mark import get_mark
from .core.model import (
    Document,
    LinkLocation,
    LinkType,
    ListingEntry,
    Mark,
    Request,
    RequestKind,
    SearchResult,
    TocEntry,
    TocKind,
)
from .core.navigator import first_link, next_link, prev_link
from .core.ports import Formatter, FormatterOutput, StructureSource
from .core.search import search, search_next, search_prev
from .core.toc import man_toc, toc_line
from .format.links import LinkDetector, default_matchers
from .listing import aprowhat_has, aprowhat_search, aprowhat_sections, parse_aprowhat


@dataclass
class LinkAction:
    """Outcome of following a link.

    MAN and LOCAL_SEARCH links are handled by the session (`handled`); the
    caller decides what to do with the others (open a browser, a mail client...).
    """
    type: LinkType
    target: str
    handled: bool
    ok: bool = True


def make_detector(config: AnagConfig) -> LinkDetector:
    wanted = [
        t
        for t, on in (
            (LinkType.MAN, config.links.man),
            (LinkType.HTTP, config.links.http),
            (LinkType.EMAIL, config.links.email),
            (LinkType.FILE, config.links.file),
        )
        if on
    ]
    file_exists = os.path.exists if config.links.check_files else None
    return LinkDetector(default_matchers(wanted, file_exists=file_exists))


class Session:
    """
    Owns the history and the current page. Single writer: every operation runs
    to completion, and a new page is only installed once fully built.
    """

    def __init__(
        self,
        formatter: Formatter,
        structure: StructureSource | None = None,
        config: AnagConfig | None = None,
        date: str | None = None,
    ):
        self.formatter = formatter
        self.structure = structure
        self.config = config or AnagConfig()
        self.version = f"anagnosis {__version__}"
        self.date = date or datetime.date.today().isoformat()
        self.detector = make_detector(self.config)

        self.history = History()
        self.page = Document(title="")
        self.page.viewport = self.history.view
        self.mark = Mark()
        self.err = False
        self.err_msg = ""

        # Every page on the system, fetched on first successful use
        self._all: list[ListingEntry] | None = None
        self.index_error = ""

    @property
    def view(self):
        return self.history.view

    # Listing cache

    def all_pages(self) -> list[ListingEntry]:
        if self._all is None:
            out = self.formatter.apropos(self.config.commands.index_args)
            if not out.ok:
                self.index_error = out.reason
                return []
            self.index_error = ""
            self._all = parse_aprowhat(out.text)
        return self._all

    def all_sections(self) -> list[str]:
        return aprowhat_sections(self.all_pages())

    def page_exists(self, ident: str) -> bool:
        return aprowhat_has(ident, self.all_pages())

    def complete(self, prefix: str, after: int = -1, fullsub: bool = False) -> int:
        return aprowhat_search(prefix, self.all_pages(), after, fullsub)

    # Document assembly

    def _layout(self) -> ListingLayout:
        return ListingLayout(
            width=self.config.layout.width,
            sections_on_top=self.config.layout.sections_on_top,
        )

    def _listing(self, out: FormatterOutput, key: str, title: str) -> Document:
        if not out.ok:
            return error_document(title, out.reason or f"{key}: nothing appropriate")
        entries = parse_aprowhat(out.text)
        return listing_document(
            entries,
            key=key,
            title=title,
            version=self.version,
            date=self.date,
            layout=self._layout(),
            empty_message=f"{key}: nothing appropriate",
        )

    def build(self, req: Request) -> Document:
        """Build the document for `req` without installing it."""
        kind, args = req.kind, req.args

        if kind in (RequestKind.MAN, RequestKind.MAN_LOCAL):
            local = kind == RequestKind.MAN_LOCAL
            structure = self.structure

            def loader() -> list[TocEntry]:
                if structure is None:
                    return []
                return man_toc(structure.markers(args, local))

            return man_document(self.formatter.man(args, local), args, self.detector, loader)

        if kind == RequestKind.APROPOS:
            return self._listing(self.formatter.apropos(args), "APROPOS", f"Apropos results for '{args}'")

        if kind == RequestKind.WHATIS:
            return self._listing(self.formatter.whatis(args), "WHATIS", f"Whatis results for '{args}'")

        if kind == RequestKind.INDEX:
            entries = self.all_pages()
            return listing_document(
                entries,
                key="INDEX",
                title="All Manual Pages",
                version=self.version,
                date=self.date,
                sections=aprowhat_sections(entries),
                layout=self._layout(),
                empty_message=self.index_error or "No manual pages found",
            )

        raise ValueError(f"Cannot build a page for request kind {kind.label}")

    def _install(self, doc: Document) -> None:
        doc.viewport = self.history.view
        self.page = doc
        self.mark = Mark()
        self.err = False
        self.err_msg = ""

    def _fail(self, doc: Document) -> bool:
        self.err = True
        self.err_msg = doc.message
        return False

    def populate_page(self) -> bool:
        """(Re)build the page for the current history entry; keep the old page on failure."""
        doc = self.build(self.history.entry)
        if doc.error:
            return self._fail(doc)
        self._install(doc)
        return True

    def populate_toc(self) -> list[TocEntry]:
        return self.page.toc

    # History

    def open(self, kind: RequestKind, args: str = "") -> bool:
        """Show a new page. On failure the history and the page are left untouched."""
        doc = self.build(Request(kind, args))
        if doc.error:
            return self._fail(doc)
        if self.history.entry.kind == RequestKind.NONE:
            self.history.replace(kind, args)
        else:
            self.history.push(kind, args)
        self._install(doc)
        return True

    def jump(self, pos: int) -> bool:
        old = self.history.current
        if not self.history.jump(pos):
            return False
        if not self.populate_page():
            self.history.jump(old)
            return False
        return True

    def back(self, n: int = 1) -> bool:
        return self.jump(self.history.current - n)

    def forward(self, n: int = 1) -> bool:
        return self.jump(self.history.current + n)

    def reload(self) -> bool:
        return self.populate_page()

    # Links

    def focus_next(self) -> bool:
        loc = next_link(self.page.lines, self.view.focus)
        if loc is None:
            return False
        self.view.focus = loc
        return True

    def focus_prev(self) -> bool:
        loc = prev_link(self.page.lines, self.view.focus)
        if loc is None:
            return False
        self.view.focus = loc
        return True

    def focus_first_visible(self, height: int) -> bool:
        loc = first_link(self.page.lines, self.view.top, self.view.top + height - 1)
        if loc is None:
            return False
        self.view.focus = loc
        return True

    def follow(self, loc: LinkLocation | None = None) -> LinkAction | None:
        """Follow the link at `loc` (default: the focused link)."""
        loc = loc or self.view.focus
        link = self.page.link_at(loc)
        if link is None:
            return None

        if link.type == LinkType.MAN:
            return LinkAction(link.type, link.target, True, self.open(RequestKind.MAN, link.target))

        if link.type == LinkType.LOCAL_SEARCH:
            line = toc_line(self.page.lines, TocEntry(TocKind.HEAD, link.target), after=loc.line + 1)
            self.search(link.target, case_sensitive=True)
            if line is None:
                return LinkAction(link.type, link.target, True, False)
            self.view.top = line
            return LinkAction(link.type, link.target, True)

        return LinkAction(link.type, link.target, False)

    # Search

    def search(self, needle: str, case_sensitive: bool | None = None) -> list[SearchResult]:
        if case_sensitive is None:
            case_sensitive = self.config.search.case_sensitive
        self.page.results = search(needle, self.page.lines, case_sensitive)
        self.page.needle = needle
        return self.page.results

    def search_next(self) -> SearchResult | None:
        r = search_next(self.page.results, self.view.top)
        if r is not None:
            self.view.top = r.line
        return r

    def search_prev(self) -> SearchResult | None:
        r = search_prev(self.page.results, self.view.top)
        if r is not None:
            self.view.top = r.line
        return r

    def goto_toc(self, entry: TocEntry) -> bool:
        line = toc_line(self.page.lines, entry)
        if line is None:
            return False
        self.view.top = line
        return True

    # Marking

    def marked_text(self) -> str | None:
        return get_mark(self.mark, self.page.lines)
