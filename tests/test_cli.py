"""CLI behaviour tests."""

from __future__ import annotations

import json

import pytest

from codecontext.cli import _build_parser, main
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--verbose", "build"]).verbose is True
    assert parser.parse_args(["build", "--verbose"]).verbose is True


def test_cli_build_defaults() -> None:
    args = _build_parser().parse_args(["build", "--force"])
    assert args.command == "build"
    assert args.path == "."
    assert args.force is True


def test_build_command_reports_counts(repo_builder: RepoBuilder, capsys) -> None:
    repo_builder.write({"a.py": "def helper(): pass\ndef main(): helper()\n"})

    main(["build", str(repo_builder.path())])

    assert "Index full: 1 files, 2 symbols" in capsys.readouterr().out
    main(["build", str(repo_builder.path())])
    assert "Index fresh" in capsys.readouterr().out


def test_show_command_prints_json(repo_builder: RepoBuilder, capsys) -> None:
    repo_builder.write({"a.py": "def helper(): pass\ndef main(): helper()\n"})

    main(["show", "helper", str(repo_builder.path()), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload[0]["name"] == "helper"
    assert payload[0]["called_by"] == ["main"]


def test_show_unknown_symbol_exits(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"a.py": "def helper(): pass\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["show", "missing", str(repo_builder.path())])
    assert excinfo.value.code == 1


def test_outline_command(repo_builder: RepoBuilder, capsys) -> None:
    repo_builder.write({"a.py": "def helper(): pass\n"})

    main(["outline", str(repo_builder.path())])

    out = capsys.readouterr().out
    assert out.startswith("# repo\n")
    assert "`helper()`" in out


def test_missing_path_exits(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(tmp_path / "nope")])
    assert excinfo.value.code == 1
