"""Catalog and playlist data models."""

from __future__ import annotations

from pydantic import BaseModel, Field

PLACEHOLDER_ARTWORK = "https://placeholder.com/500x500"


def format_duration(ms: int) -> str:
    """Format a millisecond duration as ``m:ss``."""
    minutes, remainder = divmod(max(ms, 0), 60_000)
    seconds = round(remainder / 1000)
    if seconds == 60:
        minutes += 1
        seconds = 0
    return f"{minutes}:{seconds:02d}"


class Catalog(BaseModel):
    """The static catalog document listing playlist URLs."""
    playlists: list[str]


class PlaylistUser(BaseModel):
    username: str = ""


class Playlist(BaseModel):
    """The subset of a resolved playlist the shelf displays."""
    title: str = ""
    permalink_url: str = ""
    artwork_url: str | None = None
    user: PlaylistUser = Field(default_factory=PlaylistUser)
    track_count: int = 0
    duration: int = 0

    @property
    def artwork(self) -> str:
        """Large artwork variant, or a placeholder when the playlist has none."""
        if not self.artwork_url:
            return PLACEHOLDER_ARTWORK
        return self.artwork_url.replace("large", "t500x500")

    @property
    def duration_label(self) -> str:
        return format_duration(self.duration)

    def to_row(self) -> dict[str, str | int]:
        """Flatten into a row for table/json/csv output."""
        return {
            "title": self.title,
            "by": self.user.username,
            "tracks": self.track_count,
            "duration": self.duration_label,
            "url": self.permalink_url,
            "artwork": self.artwork,
        }
