"""Tests for utils/errors.py — taxonomy, error code classification, hints."""
import json

import pytest

from playlist_shelf.utils.errors import (
    CatalogError,
    CatalogUnavailable,
    CredentialError,
    ExhaustedRetries,
    InvalidTokenResponse,
    TransportError,
    _get_hint,
    handle_error,
)


# ── Taxonomy ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("cls", [ExhaustedRetries, InvalidTokenResponse, TransportError])
def test_credential_errors_are_catalog_errors(cls):
    assert issubclass(cls, CredentialError)
    assert issubclass(cls, CatalogError)


def test_catalog_unavailable_is_not_a_credential_error():
    assert not issubclass(CatalogUnavailable, CredentialError)


def test_exhausted_retries_message():
    err = ExhaustedRetries(4)
    assert err.attempts == 4
    assert "429" in str(err)


# ── _get_hint ─────────────────────────────────────────────────────────

def test_hint_429():
    assert "rate" in _get_hint("HTTP 429 Too Many Requests").lower()


def test_hint_401():
    assert "auth refresh" in _get_hint("HTTP 401 Unauthorized")


def test_hint_token():
    assert "SOUNDCLOUD_CLIENT_ID" in _get_hint("Invalid token response")


def test_hint_catalog():
    assert "catalog" in _get_hint("Catalog unavailable (./x.json)").lower()


def test_hint_timeout():
    assert "timed out" in _get_hint("read timeout").lower()


def test_hint_connection():
    assert "network" in _get_hint("Connection refused").lower()


def test_hint_no_match():
    assert _get_hint("some random error") is None


# ── handle_error JSON output ──────────────────────────────────────────

def test_handle_error_exhausted_retries(capsys):
    handle_error(ExhaustedRetries(4))
    data = json.loads(capsys.readouterr().out)
    assert data["error"] is True
    assert data["code"] == "RATE_LIMITED"
    assert "hint" in data


def test_handle_error_invalid_token(capsys):
    handle_error(InvalidTokenResponse("Invalid token response"))
    assert json.loads(capsys.readouterr().out)["code"] == "AUTH_ERROR"


def test_handle_error_transport(capsys):
    handle_error(TransportError("Token endpoint unreachable: boom"))
    assert json.loads(capsys.readouterr().out)["code"] == "CONNECTION_ERROR"


def test_handle_error_catalog_unavailable(capsys):
    handle_error(CatalogUnavailable("Catalog unavailable (./playlists.json)"))
    assert json.loads(capsys.readouterr().out)["code"] == "CATALOG_UNAVAILABLE"


def test_handle_error_message_fallback(capsys):
    handle_error(RuntimeError("request timeout"))
    assert json.loads(capsys.readouterr().out)["code"] == "TIMEOUT"


def test_handle_error_generic_code(capsys):
    handle_error(RuntimeError("something went wrong"))
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "RUNTIME_ERROR"
    assert "hint" not in data


def test_handle_error_human_readable_on_stderr(capsys):
    handle_error(CatalogUnavailable("Catalog unavailable"))
    assert "Error:" in capsys.readouterr().err
