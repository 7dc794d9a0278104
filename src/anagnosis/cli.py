"""CLI for anagnosis - a hypertext viewer for manual pages."""

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Any, NoReturn

from . import __version__
from .core.model import RequestKind, TocKind
from .core.status import CollaboratorError, ExitStatus
from .export.terminal import render_document
from .runtime import build_session

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

TOC_KIND_NAMES = {
    TocKind.HEAD: "heading",
    TocKind.SUBHEAD: "subheading",
    TocKind.TAGPAR: "tagged-paragraph",
}


class ArgumentParser(argparse.ArgumentParser):
    """argparse, but usage errors exit with the usage error status."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(int(ExitStatus.USAGE_ERROR), f"{self.prog}: error: {message}\n")


def _request(args: argparse.Namespace) -> tuple[RequestKind, str]:
    local = getattr(args, "local_file", False)
    return (RequestKind.MAN_LOCAL if local else RequestKind.MAN, " ".join(args.page))


def _open(args: argparse.Namespace, rt: Any, kind: RequestKind, target: str) -> int:
    if not rt.open(kind, target):
        if not args.quiet:
            print(f"Error: {rt.err_msg}", file=sys.stderr)
        return int(ExitStatus.NOT_FOUND)
    return int(ExitStatus.SUCCESS)


def _dump(args: argparse.Namespace, data: Any) -> None:
    if getattr(args, "yaml", False):
        import yaml

        print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), end="")
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False))


def _show(args: argparse.Namespace, rt: Any, kind: RequestKind, target: str) -> int:
    status = _open(args, rt, kind, target)
    if status != ExitStatus.SUCCESS:
        return status
    colors = rt.config.ui.colors and not args.no_color
    print(render_document(rt.page, colors=colors))
    return status


def cmd_show(args: argparse.Namespace, rt: Any) -> int:
    """Print a formatted manual page."""
    kind, target = _request(args)
    return _show(args, rt, kind, target)


def cmd_apropos(args: argparse.Namespace, rt: Any) -> int:
    """Search manual page names and descriptions."""
    return _show(args, rt, RequestKind.APROPOS, " ".join(args.keyword))


def cmd_whatis(args: argparse.Namespace, rt: Any) -> int:
    """Show pages whose names match."""
    return _show(args, rt, RequestKind.WHATIS, " ".join(args.name))


def cmd_index(args: argparse.Namespace, rt: Any) -> int:
    """List every manual page on the system."""
    return _show(args, rt, RequestKind.INDEX, "")


def cmd_toc(args: argparse.Namespace, rt: Any) -> int:
    """Print the table of contents of a page."""
    kind, target = _request(args)
    status = _open(args, rt, kind, target)
    if status != ExitStatus.SUCCESS:
        return status

    toc = rt.populate_toc()
    if args.json or args.yaml:
        _dump(args, [{"kind": TOC_KIND_NAMES[e.kind], "text": e.text} for e in toc])
    else:
        for entry in toc:
            print("  " * int(entry.kind) + entry.text)
    return status


def cmd_links(args: argparse.Namespace, rt: Any) -> int:
    """List the links found in a page."""
    kind, target = _request(args)
    status = _open(args, rt, kind, target)
    if status != ExitStatus.SUCCESS:
        return status

    found = []
    for n, line in enumerate(rt.page.lines):
        for link in line.links:
            item = {
                "line": n,
                "start": link.start,
                "end": link.end,
                "type": link.type.value,
                "target": link.target,
            }
            if link.in_next:
                item["next"] = [link.start_next, link.end_next]
            found.append(item)

    if args.json or args.yaml:
        _dump(args, found)
    else:
        for item in found:
            print(f"{item['line']}:{item['start']}\t{item['type']}\t{item['target']}")
    return status


def cmd_search(args: argparse.Namespace, rt: Any) -> int:
    """Search a page for text."""
    kind, target = _request(args)
    status = _open(args, rt, kind, target)
    if status != ExitStatus.SUCCESS:
        return status

    case_sensitive = True if args.case_sensitive else None
    results = rt.search(args.needle, case_sensitive=case_sensitive)
    lines = rt.page.lines
    if args.json:
        _dump(args, [{"line": r.line, "start": r.start, "end": r.end} for r in results])
    else:
        for r in results:
            print(f"{r.line}:{r.start}\t{lines[r.line].text.strip()}")
    if not results:
        if not args.quiet:
            print(f"Pattern not found: {args.needle}", file=sys.stderr)
        return int(ExitStatus.NOT_FOUND)
    return status


def version_text() -> str:
    return "\n".join(
        [
            f"anagnosis {__version__}",
            f"python {platform.python_version()}",
            f"platform {platform.platform()}",
        ]
    )


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="anag", description="Hypertext viewer for manual pages")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: ./anagnosis.toml, then ~/.config/anagnosis/anagnosis.toml)",
    )
    parser.add_argument("--width", type=int, default=None, help="Line width (overrides config)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimize output")
    parser.add_argument("--json", action="store_true", help="Machine-readable output")
    parser.add_argument("--version", action="store_true", help="Show version information")

    subparsers = parser.add_subparsers(dest="cmd")

    def page_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("page", nargs="+", help="Page name, optionally preceded by a section")
        p.add_argument(
            "-l", "--local-file", action="store_true", help="Treat the argument as a local file"
        )

    p_show = subparsers.add_parser("show", help="Print a formatted manual page")
    page_args(p_show)
    p_show.add_argument("--no-color", action="store_true", help="Plain text output")

    p_apropos = subparsers.add_parser("apropos", help="Search page names and descriptions")
    p_apropos.add_argument("keyword", nargs="+")
    p_apropos.add_argument("--no-color", action="store_true", help="Plain text output")

    p_whatis = subparsers.add_parser("whatis", help="Show pages whose names match")
    p_whatis.add_argument("name", nargs="+")
    p_whatis.add_argument("--no-color", action="store_true", help="Plain text output")

    p_index = subparsers.add_parser("index", help="List all manual pages")
    p_index.add_argument("--no-color", action="store_true", help="Plain text output")

    p_toc = subparsers.add_parser("toc", help="Print a page's table of contents")
    page_args(p_toc)
    p_toc.add_argument("--yaml", action="store_true", help="YAML output")

    p_links = subparsers.add_parser("links", help="List links in a page")
    page_args(p_links)
    p_links.add_argument("--yaml", action="store_true", help="YAML output")

    p_search = subparsers.add_parser("search", help="Search a page for text")
    p_search.add_argument("needle")
    page_args(p_search)
    p_search.add_argument(
        "-s", "--case-sensitive", action="store_true", help="Match case exactly"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(version_text())
        sys.exit(int(ExitStatus.SUCCESS))
    if not args.cmd:
        parser.error("a command is required")

    try:
        rt = build_session(config_path=args.config, width=args.width)
    except (tomllib.TOMLDecodeError, ValueError) as e:
        print(f"Error: configuration: {e}", file=sys.stderr)
        sys.exit(int(ExitStatus.CONFIG_ERROR))

    handlers = {
        "show": cmd_show,
        "apropos": cmd_apropos,
        "whatis": cmd_whatis,
        "index": cmd_index,
        "toc": cmd_toc,
        "links": cmd_links,
        "search": cmd_search,
    }
    handler = handlers[args.cmd]

    try:
        exit_code = handler(args, rt)
    except CollaboratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(int(e.status))
    except ValueError as e:
        # e.g. unbalanced quotes in page arguments
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(int(ExitStatus.USAGE_ERROR))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(int(ExitStatus.OPER_ERROR))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
