"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# Tokens are treated as expired this long before their real expiry
SAFETY_MARGIN_MS = 5 * 60 * 1000


class TokenResponse(BaseModel):
    """Response from the SoundCloud OAuth2 token endpoint."""
    access_token: str = Field(min_length=1)
    token_type: str = "bearer"
    expires_in: int | None = None
    scope: str | None = None


class CredentialRecord(BaseModel):
    """A cached access token and the epoch millisecond it expires at.

    Serialized as ``{"token": ..., "expiresAt": ...}``.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: str = Field(alias="token", min_length=1)
    expires_at: int = Field(alias="expiresAt")

    def is_usable(self, now_ms: int) -> bool:
        """True while the token is outside the expiry safety margin."""
        return now_ms < self.expires_at - SAFETY_MARGIN_MS


class TokenStatus(BaseModel):
    """Current state of the cached access token."""
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
