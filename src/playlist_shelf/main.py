"""playlist-shelf CLI entry point.

Loads a SoundCloud playlist catalog in paced batches behind a cached
client-credentials token.
"""

from __future__ import annotations

import logging

import typer

from playlist_shelf.commands.auth_cmd import app as auth_app
from playlist_shelf.commands.catalog_cmd import app as catalog_app

app = typer.Typer(
    name="playlist-shelf",
    help="Load a SoundCloud playlist catalog behind a cached access token.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(auth_app, name="auth")
app.add_typer(catalog_app, name="catalog")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """playlist-shelf: authenticate and load the playlist catalog."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
