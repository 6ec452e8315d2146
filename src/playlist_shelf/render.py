"""Console render sink for the catalog CLI."""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from playlist_shelf.client import OMITTED
from playlist_shelf.loader import LoadSlot
from playlist_shelf.models.playlist import Playlist
from playlist_shelf.utils.errors import CatalogError

console = Console(stderr=True)


class ConsoleSink:
    """Collects resolved playlists as rows, reporting progress on stderr.

    Rows keep catalog order regardless of the order results arrive in.
    """

    def __init__(self, show_progress: bool = True) -> None:
        self._show_progress = show_progress
        self._rows: dict[int, dict[str, Any]] = {}
        self._detached: set[int] = set()
        self._total = 0
        self.error: CatalogError | None = None

    def prepare(self, slots: Sequence[LoadSlot]) -> None:
        self._total = len(slots)
        if self._show_progress:
            console.print(f"Loading [bold]{self._total}[/bold] playlists...", style="yellow")

    def detach(self, index: int) -> None:
        """Drop the display target for a slot; its result will be discarded."""
        self._detached.add(index)

    def is_attached(self, index: int) -> bool:
        return 0 <= index < self._total and index not in self._detached

    def on_item(self, index: int, result: Any) -> None:
        if result is OMITTED:
            self._rows[index] = {"#": index + 1, "title": "[unavailable]"}
            return
        try:
            playlist = Playlist.model_validate(result)
        except ValidationError:
            self._rows[index] = {"#": index + 1, "title": "[unreadable]"}
            return
        self._rows[index] = {"#": index + 1, **playlist.to_row()}
        if self._show_progress:
            console.print(f"[dim]{len(self._rows)}/{self._total}[/dim] {escape(playlist.title)}")

    def on_unavailable(self, error: CatalogError) -> None:
        self.error = error
        console.print("[red]Error loading playlists[/red]")

    @property
    def rows(self) -> list[dict[str, Any]]:
        return [self._rows[index] for index in sorted(self._rows)]
