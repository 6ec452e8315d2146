"""CLI commands for loading the playlist catalog."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console

from playlist_shelf.auth import CredentialProvider, TokenRefresher
from playlist_shelf.client import AuthenticatedClient
from playlist_shelf.config import Settings, get_config
from playlist_shelf.loader import BatchLoader, CatalogSession
from playlist_shelf.render import ConsoleSink
from playlist_shelf.storage import JsonFileStore
from playlist_shelf.token_store import TokenStore
from playlist_shelf.utils.errors import handle_error
from playlist_shelf.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="catalog", help="Load and display the playlist catalog.")

COLUMNS = ["#", "title", "by", "tracks", "duration", "url"]


async def _run_session(settings: Settings, source: str, sink: ConsoleSink) -> None:
    store = TokenStore(JsonFileStore(settings.token_cache_path))
    refresher = TokenRefresher(settings, store, max_retries=settings.max_retries)
    credentials = CredentialProvider()
    client = AuthenticatedClient(
        credentials,
        refresher,
        api_base=settings.api_base,
        timeout=settings.request_timeout,
    )
    loader = BatchLoader(
        client,
        batch_size=settings.batch_size,
        pacing_interval=settings.pacing_interval,
    )
    try:
        await CatalogSession(refresher, credentials, loader).run(source, sink)
    finally:
        await client.close()
        await refresher.close()


@app.command("load")
def load(
    source: Annotated[str | None, typer.Option("--source", "-s", help="Catalog path or URL (default from settings)")] = None,
    batch_size: Annotated[int | None, typer.Option("--batch-size", min=1, help="Playlists per batch")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Resolve every playlist in the catalog and print them in catalog order."""
    settings = get_config()
    if batch_size is not None:
        settings = settings.model_copy(update={"batch_size": batch_size})

    sink = ConsoleSink(show_progress=output == OutputFormat.TABLE)
    asyncio.run(_run_session(settings, source or settings.catalog_source, sink))

    if sink.error is not None:
        handle_error(sink.error)
        raise typer.Exit(1)

    print_output(sink.rows, output, columns=COLUMNS, title="Playlists")
