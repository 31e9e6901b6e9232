"""Tests for the vidcat entry point."""

from __future__ import annotations

from typer.testing import CliRunner

from vidcat.cli.main import app

runner = CliRunner()


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("vidcat ")


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.startswith("vidcat ")


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for cmd in ("init", "build", "search", "facets", "score", "export", "report", "history", "saved"):
        assert cmd in result.output


def test_verbose_flag_accepted(built) -> None:
    result = runner.invoke(app, ["-v", "facets", "--facet", "hdr"])
    assert result.exit_code == 0, result.output
