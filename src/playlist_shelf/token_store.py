"""Cached access token persistence with expiry tracking."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable

from pydantic import ValidationError

from playlist_shelf.models.auth import CredentialRecord, TokenStatus
from playlist_shelf.storage import KeyValueStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "sc_token_data"


class TokenStore:
    """Reads and writes the single cached credential record."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = TOKEN_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._key = key
        self._clock = clock

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def read(self) -> CredentialRecord | None:
        """Return the cached record if it is still usable.

        Missing, corrupt and expired records all read as None. An expired
        record is left in place; the next write replaces it.
        """
        record = self._load()
        if record is None or not record.is_usable(self.now_ms()):
            return None
        return record

    def write(self, value: str, ttl_seconds: int) -> CredentialRecord:
        """Persist a new token expiring ttl_seconds from now."""
        record = CredentialRecord(value=value, expires_at=self.now_ms() + ttl_seconds * 1000)
        self._store.set(self._key, record.model_dump_json(by_alias=True))
        return record

    def clear(self) -> None:
        self._store.delete(self._key)

    def status(self) -> TokenStatus:
        """Describe the stored record, expired or not."""
        record = self._load()
        if record is None:
            return TokenStatus(has_token=False, is_expired=True)

        now = self.now_ms()
        is_expired = not record.is_usable(now)
        seconds_remaining = None
        if not is_expired:
            seconds_remaining = (record.expires_at - now) // 1000

        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            expires_at=datetime.fromtimestamp(record.expires_at / 1000),
            seconds_remaining=seconds_remaining,
        )

    def _load(self) -> CredentialRecord | None:
        raw = self._store.get(self._key)
        if raw is None:
            return None
        try:
            return CredentialRecord.model_validate_json(raw)
        except ValidationError:
            logger.info("Discarding unparseable cached token")
            return None
