"""Pydantic models for the music player status API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

PlayerStatusValue = Literal["playing", "paused", "stopped"]


class PlayerTrack(BaseModel):
    """Track details nested in the player status response."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    track_number: str = ""
    duration: float = 0
    id: int = 0


class PlayerStatus(BaseModel):
    """Raw ``GET /status`` response from the player."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    status: PlayerStatusValue
    id: int = 0
    title: str = ""
    artist: str = ""
    album: str = ""
    progress: float = 0
    track: PlayerTrack | None = None

    @property
    def album_name(self) -> str:
        """Album name used for art caching (track album preferred), stripped."""
        track_album = self.track.album if self.track else ""
        return (track_album or self.album or "").strip()
