"""OAuth2 client-credentials authentication for the SoundCloud API.

Handles token refresh with rate-limit backoff, and holds the session's
current token.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx
from pydantic import ValidationError

from playlist_shelf.config import Settings
from playlist_shelf.models.auth import CredentialRecord, TokenResponse
from playlist_shelf.token_store import TokenStore
from playlist_shelf.utils.errors import ExhaustedRetries, InvalidTokenResponse, TransportError

logger = logging.getLogger(__name__)

# Used when the token endpoint omits expires_in
DEFAULT_TTL_SECONDS = 3600
MAX_RETRIES = 3

Sleep = Callable[[float], Awaitable[None]]


def backoff_delay(attempt: int) -> float:
    """Seconds to wait before the given attempt: 0, 2, 4, 8, ..."""
    return float(2 ** attempt) if attempt else 0.0


class TokenRefresher:
    """Obtains access tokens, preferring the cached one."""

    def __init__(
        self,
        settings: Settings,
        store: TokenStore,
        http: httpx.AsyncClient | None = None,
        max_retries: int = MAX_RETRIES,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._store = store
        self._max_retries = max_retries
        self._sleep = sleep
        self._http = http or httpx.AsyncClient(timeout=settings.request_timeout)

    @property
    def store(self) -> TokenStore:
        return self._store

    async def refresh(self, attempt: int = 0, *, force: bool = False) -> CredentialRecord:
        """Return a usable credential, calling the token endpoint if needed.

        Args:
            attempt: Attempt number to start from; sets the first backoff delay.
            force: Skip the cached token on the first pass, e.g. after the API
                rejected it with a 401.

        Raises:
            ExhaustedRetries: The endpoint answered 429 on every attempt.
            InvalidTokenResponse: The endpoint answered without a token.
            TransportError: The endpoint could not be reached.
        """
        skip_cache = force
        while True:
            if not skip_cache:
                cached = self._store.read()
                if cached is not None:
                    return cached
            skip_cache = False

            delay = backoff_delay(attempt)
            if delay:
                logger.warning(f"Token endpoint rate limited (429). Waiting {delay:.1f}s...")
                await self._sleep(delay)

            response = await self._request_token()

            if response.status_code == 429:
                if attempt < self._max_retries:
                    attempt += 1
                    continue
                raise ExhaustedRetries(attempt + 1)

            return self._store_token(response)

    async def _request_token(self) -> httpx.Response:
        try:
            return await self._http.post(
                self._settings.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._settings.client_id,
                    "client_secret": self._settings.client_secret,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Token refresh error: {e}")
            raise TransportError(f"Token endpoint unreachable: {e}") from e

    def _store_token(self, response: httpx.Response) -> CredentialRecord:
        if response.status_code >= 400:
            raise InvalidTokenResponse(
                f"Token refresh failed (HTTP {response.status_code}): {response.text}"
            )
        try:
            token_data = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Token refresh error: {e}")
            raise InvalidTokenResponse("Invalid token response") from e

        record = self._store.write(
            token_data.access_token, token_data.expires_in or DEFAULT_TTL_SECONDS
        )
        logger.info("Obtained a new access token")
        return record

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()


class CredentialProvider:
    """Holds the token used for API requests during one session."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def current(self) -> str | None:
        return self._token

    def refreshed(self, token: str) -> None:
        self._token = token

    async def ensure(self, refresher: TokenRefresher) -> str:
        """Make sure a token is held, fetching one when empty."""
        if self._token is None:
            record = await refresher.refresh()
            self.refreshed(record.value)
        return self._token  # type: ignore[return-value]
