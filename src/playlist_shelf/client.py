"""Authenticated API client for SoundCloud resources.

Injects the bearer token and replays a request once after a 401. Failures
that only affect one resource come back as ``OMITTED`` instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

import httpx

from playlist_shelf.auth import CredentialProvider, TokenRefresher

logger = logging.getLogger(__name__)

AUTH_SCHEME = "OAuth"


class _Omitted:
    """Result of a fetch that produced nothing to show."""

    _instance: _Omitted | None = None

    def __new__(cls) -> _Omitted:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMITTED"


OMITTED = _Omitted()


class AuthenticatedClient:
    """HTTP client for bearer-authenticated GET requests."""

    def __init__(
        self,
        credentials: CredentialProvider,
        refresher: TokenRefresher,
        api_base: str = "https://api.soundcloud.com",
        http: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._credentials = credentials
        self._refresher = refresher
        self._api_base = api_base.rstrip("/")
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def get_json(self, url: str) -> Any:
        """GET a JSON document, or OMITTED if none could be obtained.

        A 401 refreshes the token and re-issues the request exactly once.
        Errors raised by the token refresh itself propagate.
        """
        response = await self._send(url)
        if response is None:
            return OMITTED

        if response.status_code == 401:
            logger.warning("Got 401, refreshing token and retrying...")
            record = await self._refresher.refresh(force=True)
            self._credentials.refreshed(record.value)
            response = await self._send(url)
            if response is None:
                return OMITTED
            if response.status_code == 401:
                logger.warning(f"Still unauthorized after token refresh, omitting {url}")
                return OMITTED

        if response.status_code != 200:
            logger.info(f"Omitting {url} (HTTP {response.status_code})")
            return OMITTED

        try:
            return response.json()
        except ValueError:
            logger.info(f"Omitting {url}: response is not valid JSON")
            return OMITTED

    async def resolve(self, entry: str) -> Any:
        """Fetch a catalog entry, routing public permalinks through /resolve."""
        return await self.get_json(self.resource_url(entry))

    def resource_url(self, entry: str) -> str:
        """API URL for a catalog entry."""
        if urlsplit(entry).netloc in ("", urlsplit(self._api_base).netloc):
            return entry
        return str(httpx.URL(f"{self._api_base}/resolve", params={"url": entry}))

    async def _send(self, url: str) -> httpx.Response | None:
        headers = {"Accept": "application/json"}
        token = self._credentials.current()
        if token:
            headers["Authorization"] = f"{AUTH_SCHEME} {token}"

        try:
            return await self._http.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"HTTP error for {url}: {e}")
            return None

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
