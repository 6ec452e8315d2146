"""Configuration management for playlist-shelf.

Loads credentials from .env and non-secret settings from config/settings.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv


class Settings(BaseModel):
    """Application settings loaded from settings.yaml and environment variables."""
    client_id: str = Field(description="SoundCloud OAuth client ID")
    client_secret: str = Field(description="SoundCloud OAuth client secret")
    token_url: str = Field(default="https://api.soundcloud.com/oauth2/token", description="OAuth2 token endpoint")
    api_base: str = Field(default="https://api.soundcloud.com", description="API root used to resolve permalinks")
    catalog_source: str = Field(default="./playlists.json", description="Path or URL of the catalog document")
    token_cache_path: str = Field(default="~/.cache/playlist-shelf/storage.json", description="Persistent token cache file")
    batch_size: int = Field(default=5, ge=1, description="Playlists resolved concurrently per batch")
    pacing_interval: float = Field(default=0.5, ge=0, description="Seconds to wait between batches")
    max_retries: int = Field(default=3, ge=0, description="Token endpoint retries on HTTP 429")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")


# Environment overrides for non-secret settings
_ENV_OVERRIDES: dict[str, str] = {
    "token_url": "PLAYLIST_SHELF_TOKEN_URL",
    "api_base": "PLAYLIST_SHELF_API_BASE",
    "catalog_source": "PLAYLIST_SHELF_CATALOG_SOURCE",
    "token_cache_path": "PLAYLIST_SHELF_TOKEN_CACHE",
    "batch_size": "PLAYLIST_SHELF_BATCH_SIZE",
    "pacing_interval": "PLAYLIST_SHELF_PACING_INTERVAL",
    "max_retries": "PLAYLIST_SHELF_MAX_RETRIES",
    "request_timeout": "PLAYLIST_SHELF_REQUEST_TIMEOUT",
}


def _find_project_root() -> Path:
    """Walk up from the working directory to find the project root (where config/ or .env lives)."""
    current = Path.cwd().resolve()
    for parent in [current, *current.parents]:
        if (parent / "config" / "settings.yaml").exists() or (parent / ".env").exists():
            return parent
    # Fallback: cwd
    return current


def _load_yaml_settings(project_root: Path) -> dict[str, Any]:
    """Load optional overrides from config/settings.yaml."""
    settings_path = project_root / "config" / "settings.yaml"
    if not settings_path.exists():
        return {}

    with open(settings_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {settings_path}")
    return {key: value for key, value in data.items() if key in Settings.model_fields}


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings(file_settings: dict[str, Any] | None = None) -> Settings:
    """Build settings from file values, then environment variables.

    Supports both SOUNDCLOUD_* and legacy camelCase names from .env.
    """
    values: dict[str, Any] = dict(file_settings or {})
    for field, env_key in _ENV_OVERRIDES.items():
        val = _env(env_key)
        if val:
            values[field] = val

    values["client_id"] = _env("SOUNDCLOUD_CLIENT_ID", "clientId")
    values["client_secret"] = _env("SOUNDCLOUD_CLIENT_SECRET", "clientSecret")
    return Settings(**values)


@lru_cache(maxsize=1)
def get_config() -> Settings:
    """Load and cache the application settings."""
    project_root = _find_project_root()

    # Load .env from project root if it exists
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return _load_settings(_load_yaml_settings(project_root))
