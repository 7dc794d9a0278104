"""Tests for the anag command line."""

import json

import pytest
import yaml

from anagnosis import cli
from anagnosis.config import AnagConfig
from anagnosis.core.status import CollaboratorError, ExitStatus
from anagnosis.session import Session

from conftest import FakeFormatter, FakeStructure


@pytest.fixture
def fake_session(monkeypatch):
    """Point the CLI at canned pages instead of the system's man."""

    def build(config_path=None, config=None, width=None):
        config = AnagConfig()
        config.links.check_files = False
        config.ui.colors = False
        return Session(FakeFormatter(), FakeStructure(), config, date="2024-05-01")

    monkeypatch.setattr(cli, "build_session", build)


def run(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def test_show(fake_session, capsys):
    """Test printing a page."""
    assert run(["show", "ls(1)"]) == ExitStatus.SUCCESS
    out = capsys.readouterr().out
    assert "NAME" in out
    assert "list directory contents" in out
    assert "\b" not in out


def test_show_not_found(fake_session, capsys):
    """Test a missing page exits with the not-found status."""
    assert run(["show", "nope"]) == ExitStatus.NOT_FOUND
    assert "No manual entry for nope" in capsys.readouterr().err


def test_show_not_found_quiet(fake_session, capsys):
    """Test -q suppresses the error message."""
    assert run(["-q", "show", "nope"]) == ExitStatus.NOT_FOUND
    assert capsys.readouterr().err == ""


def test_toc_json(fake_session, capsys):
    """Test the table of contents as JSON."""
    assert run(["--json", "toc", "ls(1)"]) == ExitStatus.SUCCESS
    data = json.loads(capsys.readouterr().out)
    assert data[0] == {"kind": "heading", "text": "NAME"}


def test_toc_yaml(fake_session, capsys):
    """Test the table of contents as YAML."""
    assert run(["toc", "--yaml", "ls(1)"]) == ExitStatus.SUCCESS
    data = yaml.safe_load(capsys.readouterr().out)
    assert [e["text"] for e in data] == ["NAME", "DESCRIPTION", "SEE ALSO"]


def test_links(fake_session, capsys):
    """Test listing links."""
    assert run(["--json", "links", "ls(1)"]) == ExitStatus.SUCCESS
    data = json.loads(capsys.readouterr().out)
    targets = [d["target"] for d in data]
    assert "cat(1)" in targets
    assert "https://www.gnu.org/software/coreutils/ls" in targets


def test_search(fake_session, capsys):
    """Test searching a page."""
    assert run(["--json", "search", "-s", "cat(1)", "ls(1)"]) == ExitStatus.SUCCESS
    data = json.loads(capsys.readouterr().out)
    assert [d["line"] for d in data] == [6, 11]


def test_search_no_hits(fake_session, capsys):
    """Test a search without hits exits with the not-found status."""
    assert run(["search", "xyzzy", "ls(1)"]) == ExitStatus.NOT_FOUND


def test_apropos(fake_session, capsys):
    """Test an apropos listing."""
    assert run(["apropos", "list"]) == ExitStatus.SUCCESS
    out = capsys.readouterr().out
    assert "ls(1)" in out
    assert "Apropos results for 'list'" in out


def test_index(fake_session, capsys):
    """Test the index of all pages."""
    assert run(["index"]) == ExitStatus.SUCCESS
    assert "mount(8)" in capsys.readouterr().out


def test_usage_error():
    """Test a bad option exits with the usage error status."""
    assert run(["--no-such-option"]) == ExitStatus.USAGE_ERROR
    assert run([]) == ExitStatus.USAGE_ERROR


def test_config_error(tmp_path, capsys):
    """Test a malformed config file exits with the configuration error status."""
    path = tmp_path / "anagnosis.toml"
    path.write_text("[layout\n")
    assert run(["--config", str(path), "show", "ls"]) == ExitStatus.CONFIG_ERROR
    assert "configuration" in capsys.readouterr().err


def test_collaborator_error(monkeypatch, capsys):
    """Test a crashing collaborator maps to its exit status."""

    class Broken(FakeFormatter):
        def man(self, args, local_file=False):
            raise CollaboratorError("man crashed")

    monkeypatch.setattr(cli, "build_session", lambda **kw: Session(Broken(), None, AnagConfig()))
    assert run(["show", "ls"]) == ExitStatus.CHILD_ERROR
    assert "man crashed" in capsys.readouterr().err


def test_version_flag(capsys):
    """Test --version."""
    assert run(["--version"]) == ExitStatus.SUCCESS
    out = capsys.readouterr().out
    assert "anagnosis" in out
    assert "python" in out
    assert "platform" in out
