"""Shared fixtures for the playlist-shelf test suite."""
from __future__ import annotations

import pytest

from playlist_shelf.config import Settings
from playlist_shelf.storage import MemoryStore
from playlist_shelf.token_store import TokenStore

TOKEN_URL = "https://api.soundcloud.com/oauth2/token"
API_BASE = "https://api.soundcloud.com"


class FakeClock:
    """Settable stand-in for time.time."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    """Async sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def anyio_backend() -> str:
    """Run AnyIO tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",
        token_url=TOKEN_URL,
        api_base=API_BASE,
        catalog_source="./test-playlists.json",
        token_cache_path="./test-cache/storage.json",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def token_store(memory_store, clock) -> TokenStore:
    return TokenStore(memory_store, clock=clock)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()
