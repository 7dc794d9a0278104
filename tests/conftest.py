"""Shared fixtures: a formatter that serves canned pages instead of running man."""

import pytest

from anagnosis.config import AnagConfig
from anagnosis.core.model import TocEntry, TocKind
from anagnosis.core.ports import FormatterOutput
from anagnosis.session import Session


def bold(text: str) -> str:
    return "".join(f"{c}\b{c}" for c in text)


PAGES = {
    "ls(1)": "\n".join(
        [
            f"{bold('LS')}(1)            User Commands            {bold('LS')}(1)",
            "",
            bold("NAME"),
            "       ls - list directory contents",
            "",
            bold("DESCRIPTION"),
            "       List files. See also cat(1) and",
            "       https://www.gnu.org/software/coreutils/ls.",
            "       Colors: ls ls ls",
            "",
            bold("SEE ALSO"),
            "       cat(1), nope(1)",
            "",
        ]
    ),
    "cat(1)": "\n".join(
        [
            bold("NAME"),
            "       cat - concatenate files",
            "",
            bold("SEE ALSO"),
            "       ls(1)",
        ]
    ),
}

APROPOS = {
    "list": "ls (1)               - list directory contents\n",
    ".": (
        "cat (1)              - concatenate files\n"
        "ls (1)               - list directory contents\n"
        "mount (8)            - mount a filesystem\n"
    ),
}

WHATIS = {
    "ls": "ls (1)               - list directory contents\n",
}


class FakeFormatter:
    """Formatter collaborator serving the canned pages above."""

    def __init__(self):
        self.calls = []

    def man(self, args, local_file=False):
        self.calls.append(("man", args, local_file))
        if args in PAGES:
            return FormatterOutput(PAGES[args], True)
        return FormatterOutput("", False, f"No manual entry for {args}")

    def apropos(self, args):
        self.calls.append(("apropos", args))
        if args in APROPOS:
            return FormatterOutput(APROPOS[args], True)
        return FormatterOutput("", False, f"{args}: nothing appropriate.")

    def whatis(self, args):
        self.calls.append(("whatis", args))
        if args in WHATIS:
            return FormatterOutput(WHATIS[args], True)
        return FormatterOutput("", False, f"{args}: nothing appropriate.")


class FakeStructure:
    """Structure collaborator returning fixed headings."""

    def __init__(self):
        self.calls = 0

    def markers(self, args, local_file=False):
        self.calls += 1
        return [
            TocEntry(TocKind.HEAD, "NAME"),
            TocEntry(TocKind.HEAD, "DESCRIPTION"),
            TocEntry(TocKind.HEAD, "SEE ALSO"),
        ]


@pytest.fixture
def formatter():
    return FakeFormatter()


@pytest.fixture
def structure():
    return FakeStructure()


@pytest.fixture
def session(formatter, structure):
    config = AnagConfig()
    config.links.check_files = False
    return Session(formatter, structure, config, date="2024-05-01")
