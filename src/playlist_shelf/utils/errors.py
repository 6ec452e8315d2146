"""Error taxonomy and structured error handling for CLI output."""

from __future__ import annotations

import json
import sys

from rich.console import Console

console = Console(stderr=True)


class CatalogError(RuntimeError):
    """A failure that leaves nothing useful to show for the whole catalog."""


class CredentialError(CatalogError):
    """The access token could not be obtained."""


class ExhaustedRetries(CredentialError):
    """The token endpoint kept answering 429 after every allowed retry."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Token endpoint rate limited (429) after {attempts} attempts")


class InvalidTokenResponse(CredentialError):
    """The token endpoint answered without a usable access token."""


class TransportError(CredentialError):
    """The token endpoint could not be reached."""


class CatalogUnavailable(CatalogError):
    """The top-level catalog document could not be fetched or parsed."""


# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("429", "Rate limited: wait a moment and retry, or raise the pacing interval"),
    ("rate limit", "Rate limited: wait a moment and retry, or raise the pacing interval"),
    ("401", "Token may be stale: run `playlist-shelf auth refresh`"),
    ("unauthorized", "Token may be stale: run `playlist-shelf auth refresh`"),
    ("token", "Check SOUNDCLOUD_CLIENT_ID / SOUNDCLOUD_CLIENT_SECRET in your .env"),
    ("catalog", "Check the catalog source path or URL (PLAYLIST_SHELF_CATALOG_SOURCE)"),
    ("timeout", "Request timed out: try again or check network connectivity"),
    ("connection", "Connection error: check network connectivity"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _get_code(error: Exception) -> str:
    """Classify an error, by type first and by message otherwise."""
    if isinstance(error, ExhaustedRetries):
        return "RATE_LIMITED"
    if isinstance(error, TransportError):
        return "CONNECTION_ERROR"
    if isinstance(error, InvalidTokenResponse):
        return "AUTH_ERROR"
    if isinstance(error, CatalogUnavailable):
        return "CATALOG_UNAVAILABLE"

    message = str(error).lower()
    if "401" in message or "unauthorized" in message:
        return "AUTH_ERROR"
    if "429" in message or "rate limit" in message:
        return "RATE_LIMITED"
    if "timeout" in message:
        return "TIMEOUT"
    if "connection" in message:
        return "CONNECTION_ERROR"
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for scripting:
    {"error": true, "code": "RATE_LIMITED", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _get_hint(message)

    error_obj: dict[str, object] = {
        "error": True,
        "code": _get_code(error),
        "message": message,
    }
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
