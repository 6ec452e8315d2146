"""Tests for utils/output.py — JSON/CSV/table output routing."""
import json

from playlist_shelf.utils.output import OutputFormat, print_csv, print_json, print_output


# ── print_json ───────────────────────────────────────────────────────

def test_print_json_list(capsys):
    print_json([{"title": "a"}, {"title": "b"}])
    assert len(json.loads(capsys.readouterr().out)) == 2


def test_print_json_dict(capsys):
    print_json({"key": "value"})
    assert json.loads(capsys.readouterr().out) == {"key": "value"}


def test_print_json_non_serializable_uses_str(capsys):
    from datetime import datetime

    print_json({"at": datetime(2024, 1, 1)})
    assert json.loads(capsys.readouterr().out) == {"at": "2024-01-01 00:00:00"}


# ── print_csv ────────────────────────────────────────────────────────

def test_print_csv_basic(capsys):
    print_csv([{"title": "a", "tracks": 1}, {"title": "b", "tracks": 2}])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].strip() == "title,tracks"
    assert len(lines) == 3


def test_print_csv_selected_columns(capsys):
    print_csv([{"title": "a", "tracks": 1, "extra": "x"}], columns=["title", "tracks"])
    assert "extra" not in capsys.readouterr().out


def test_print_csv_rows_with_missing_keys(capsys):
    """Omitted playlists only carry a title; other cells stay empty."""
    print_csv([{"#": 1, "title": "[unavailable]"}, {"#": 2, "title": "b", "by": "u"}])
    lines = [l.strip() for l in capsys.readouterr().out.strip().splitlines()]
    assert lines[0] == "#,title,by"
    assert lines[1] == "1,[unavailable],"


def test_print_csv_empty(capsys):
    print_csv([])
    assert capsys.readouterr().out == ""


def test_print_csv_dict_input(capsys):
    print_csv({"title": "a"})
    assert len(capsys.readouterr().out.strip().splitlines()) == 2


# ── print_output routing ────────────────────────────────────────────

def test_output_routes_to_json(capsys):
    print_output([{"x": 1}], fmt=OutputFormat.JSON)
    assert json.loads(capsys.readouterr().out) == [{"x": 1}]


def test_output_routes_to_csv(capsys):
    print_output([{"x": 1}], fmt=OutputFormat.CSV)
    assert capsys.readouterr().out.splitlines()[0].strip() == "x"


def test_output_table_goes_to_stderr(capsys):
    print_output([{"title": "Late Night"}], fmt=OutputFormat.TABLE, title="Playlists")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Late Night" in captured.err


def test_output_table_empty(capsys):
    print_output([], fmt=OutputFormat.TABLE)
    assert "No results" in capsys.readouterr().err


def test_output_table_prints_brackets_literally(capsys):
    print_output([{"title": "Live [/2020] set"}, {"title": "[unavailable]"}], fmt=OutputFormat.TABLE)
    err = capsys.readouterr().err
    assert "Live [/2020] set" in err
    assert "[unavailable]" in err
