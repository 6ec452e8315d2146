"""CLI commands for access token management."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console

from playlist_shelf.auth import TokenRefresher
from playlist_shelf.config import Settings, get_config
from playlist_shelf.storage import JsonFileStore
from playlist_shelf.token_store import TokenStore
from playlist_shelf.utils.errors import CatalogError, handle_error
from playlist_shelf.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Manage the cached access token.")


def _token_store(settings: Settings) -> TokenStore:
    return TokenStore(JsonFileStore(settings.token_cache_path))


def _status_row(store: TokenStore, status_label: str) -> dict[str, object]:
    status = store.status()
    return {
        "status": status_label,
        "expires_at": str(status.expires_at) if status.expires_at else "N/A",
        "seconds_remaining": status.seconds_remaining or 0,
    }


async def _obtain(settings: Settings, force: bool) -> TokenStore:
    store = _token_store(settings)
    refresher = TokenRefresher(settings, store, max_retries=settings.max_retries)
    try:
        await refresher.refresh(force=force)
    finally:
        await refresher.close()
    return store


@app.command()
def login(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Obtain an access token, reusing the cached one while it is fresh."""
    settings = get_config()

    try:
        console.print("Authenticating with the client-credentials grant...", style="yellow")
        store = asyncio.run(_obtain(settings, force=False))
        print_output(_status_row(store, "authenticated"), output, title="Authentication")
    except CatalogError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command()
def status(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show the cached token status."""
    store = _token_store(get_config())

    token_status = store.status()
    result = {
        "has_token": token_status.has_token,
        "is_expired": token_status.is_expired,
        "expires_at": str(token_status.expires_at) if token_status.expires_at else "N/A",
        "seconds_remaining": token_status.seconds_remaining or 0,
    }
    print_output(result, output, title="Token Status")


@app.command()
def refresh(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Force a new access token, ignoring the cached one."""
    settings = get_config()

    try:
        console.print("Force refreshing token...", style="yellow")
        store = asyncio.run(_obtain(settings, force=True))
        print_output(_status_row(store, "refreshed"), output, title="Token Refreshed")
    except CatalogError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command()
def clear() -> None:
    """Delete the cached token."""
    _token_store(get_config()).clear()
    console.print("Cached token cleared.", style="green")
