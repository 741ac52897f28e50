"""Pydantic models for the published now playing snapshot."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"

PublishedStatus = Literal["playing", "paused"]


class ColorPalette(BaseModel):
    """Colors extracted from the album art."""

    model_config = ConfigDict(frozen=True)

    dominant: str = Field(pattern=HEX_COLOR_PATTERN, description="Mean pixel color")
    accent: str = Field(pattern=HEX_COLOR_PATTERN, description="Dominant brightened x1.2 per channel")
    highlight: str = Field(pattern=HEX_COLOR_PATTERN, description="Salient vivid color blended toward white")


class PlaybackSnapshot(BaseModel):
    """The single now playing record published by the poller.

    Serialized with camelCase keys (``albumArtist``, ``artBase64``,
    ``updatedAt``...) on the wire; snake_case names work in Python.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    track_number: str = ""
    duration: int = Field(default=0, ge=0, description="Track length in seconds")
    progress: float = Field(default=0, description="Playback position as reported by the player")
    status: PublishedStatus
    art_base64: str | None = Field(default=None, description="Base64 JPEG album art")
    colors: ColorPalette | None = None
    updated_at: int = Field(ge=0, description="Publish time in epoch milliseconds")

    @field_validator("title", "artist", "album", "album_artist", "track_number", "art_base64")
    @classmethod
    def check_encodable(cls, v: str | None) -> str | None:
        """Reject text that cannot be encoded as UTF-8, such as lone surrogates."""
        if v is not None:
            try:
                v.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ValueError("must be valid Unicode text") from e
        return v

    @model_validator(mode="after")
    def check_art_has_colors(self) -> "PlaybackSnapshot":
        """Album art and its palette travel together."""
        if (self.art_base64 is None) != (self.colors is None):
            raise ValueError("artBase64 and colors must be both present or both absent")
        return self

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
