"""Paced batch loading of the playlist catalog.

Entries are resolved in fixed-size batches: concurrently inside a batch,
strictly in order across batches, with a pause between batches to keep
bursts off the API and the token endpoint.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence

import httpx
from pydantic import ValidationError

from playlist_shelf.auth import CredentialProvider, Sleep, TokenRefresher
from playlist_shelf.client import OMITTED, AuthenticatedClient
from playlist_shelf.models.playlist import Catalog
from playlist_shelf.utils.chunking import chunk_list
from playlist_shelf.utils.errors import CatalogError, CatalogUnavailable, CredentialError

logger = logging.getLogger(__name__)

BATCH_SIZE = 5
PACING_INTERVAL = 0.5


class SlotState(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    OMITTED = "omitted"
    SKIPPED = "skipped"


@dataclass
class LoadSlot:
    """Placeholder for one catalog entry, addressed by its position in the list."""
    index: int
    url: str
    state: SlotState = SlotState.PENDING
    result: Any = None

    def settle(self, result: Any) -> None:
        if self.state is not SlotState.PENDING:
            raise RuntimeError(f"Slot {self.index} already settled ({self.state.value})")
        self.result = result
        self.state = SlotState.OMITTED if result is OMITTED else SlotState.DELIVERED

    def skip(self) -> None:
        if self.state is not SlotState.PENDING:
            raise RuntimeError(f"Slot {self.index} already settled ({self.state.value})")
        self.state = SlotState.SKIPPED


class RenderSink(Protocol):
    """Whatever displays the catalog."""

    def prepare(self, slots: Sequence[LoadSlot]) -> None:
        """Called once with every slot before any request is issued."""

    def is_attached(self, index: int) -> bool:
        """Whether the display target for a slot still exists."""

    def on_item(self, index: int, result: Any) -> None:
        """Called as each entry settles; result may be OMITTED."""

    def on_unavailable(self, error: CatalogError) -> None:
        """Called once when the catalog as a whole cannot be shown."""


class CallbackSink:
    """Adapts a plain ``on_item(index, result)`` callable to a RenderSink."""

    def __init__(
        self,
        on_item: Callable[[int, Any], None],
        on_unavailable: Callable[[CatalogError], None] | None = None,
    ) -> None:
        self._on_item = on_item
        self._on_unavailable = on_unavailable

    def prepare(self, slots: Sequence[LoadSlot]) -> None:
        pass

    def is_attached(self, index: int) -> bool:
        return True

    def on_item(self, index: int, result: Any) -> None:
        self._on_item(index, result)

    def on_unavailable(self, error: CatalogError) -> None:
        if self._on_unavailable is not None:
            self._on_unavailable(error)


class BatchLoader:
    """Resolves catalog entries in paced, bounded batches."""

    def __init__(
        self,
        client: AuthenticatedClient,
        batch_size: int = BATCH_SIZE,
        pacing_interval: float = PACING_INTERVAL,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._batch_size = batch_size
        self._pacing_interval = pacing_interval
        self._sleep = sleep

    async def load(self, urls: Sequence[str], sink: RenderSink) -> list[LoadSlot]:
        """Resolve every URL and hand each result to the sink as it settles.

        Any other per-entry failure is logged and that slot is omitted.

        Raises:
            CredentialError: A token refresh failed while resolving a batch.
                The batch still settles fully before this is raised.
        """
        slots = [LoadSlot(index=i, url=url) for i, url in enumerate(urls)]
        sink.prepare(slots)

        batches = chunk_list(slots, self._batch_size)
        for number, batch in enumerate(batches, start=1):
            logger.info(f"Loading batch {number}/{len(batches)} ({len(batch)} playlists)")
            outcomes = await asyncio.gather(
                *(self._load_slot(slot, sink) for slot in batch),
                return_exceptions=True,
            )
            fatal = None
            for slot, outcome in zip(batch, outcomes):
                if outcome is None:
                    continue
                if isinstance(outcome, CredentialError) or not isinstance(outcome, Exception):
                    fatal = fatal or outcome
                else:
                    logger.error(f"Playlist {slot.url} failed: {outcome!r}")
                    if slot.state is SlotState.PENDING:
                        slot.settle(OMITTED)
            if fatal is not None:
                raise fatal

            if number < len(batches):
                await self._sleep(self._pacing_interval)

        return slots

    async def _load_slot(self, slot: LoadSlot, sink: RenderSink) -> None:
        try:
            result = await self._client.resolve(slot.url)
        except CredentialError:
            slot.settle(OMITTED)
            raise

        if not sink.is_attached(slot.index):
            logger.info(f"Display target for slot {slot.index} is gone, discarding result")
            slot.skip()
            return

        slot.settle(result)
        if result is OMITTED:
            logger.warning(f"No playlist data for {slot.url}")
        sink.on_item(slot.index, result)


async def fetch_catalog(source: str, http: httpx.AsyncClient | None = None) -> list[str]:
    """Read the catalog document from a local path or an http(s) URL.

    Raises:
        CatalogUnavailable: The document could not be read or parsed.
    """
    try:
        if source.startswith(("http://", "https://")):
            if http is None:
                async with httpx.AsyncClient(timeout=30.0) as owned:
                    response = await owned.get(source)
            else:
                response = await http.get(source)
            response.raise_for_status()
            raw = response.text
        else:
            raw = Path(source).expanduser().read_text()
        return Catalog.model_validate_json(raw).playlists
    except (OSError, UnicodeDecodeError, httpx.HTTPError, ValidationError) as e:
        raise CatalogUnavailable(f"Catalog unavailable ({source}): {e}") from e


class CatalogSession:
    """Warms the credential, reads the catalog and loads every playlist.

    Any catalog-wide failure is reported to the sink once instead of raising.
    """

    def __init__(
        self,
        refresher: TokenRefresher,
        credentials: CredentialProvider,
        loader: BatchLoader,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._refresher = refresher
        self._credentials = credentials
        self._loader = loader
        self._http = http

    async def run(self, source: str, sink: RenderSink) -> list[LoadSlot]:
        try:
            await self._credentials.ensure(self._refresher)
            urls = await fetch_catalog(source, self._http)
            logger.info(f"Catalog lists {len(urls)} playlists")
            return await self._loader.load(urls, sink)
        except CatalogError as e:
            logger.error(f"Error loading playlists: {e}")
            sink.on_unavailable(e)
            return []
