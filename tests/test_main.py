"""Tests for the top-level CLI wiring."""
from typer.testing import CliRunner

from playlist_shelf.main import app

runner = CliRunner()


def test_help_lists_command_groups():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "auth" in result.output
    assert "catalog" in result.output


def test_catalog_help():
    result = runner.invoke(app, ["catalog", "load", "--help"])
    assert result.exit_code == 0
    assert "--source" in result.output
