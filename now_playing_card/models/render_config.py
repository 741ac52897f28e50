"""Render configuration for the SVG card and the theme file schema."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from now_playing_card.models.snapshot import HEX_COLOR_PATTERN

AlbumPosition = Literal["left", "right"]
TextAlign = Literal["left", "center", "right"]
FontFormat = Literal["truetype", "opentype", "woff", "woff2"]


class RenderConfig(BaseModel):
    """Presentation options for one render call.

    Immutable; built per request by ``build_render_config`` from the defaults
    below, an optional theme and query overrides.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")

    width: int = Field(default=800, gt=0)
    height: int = Field(default=200, gt=0)
    album_size: int = Field(default=150, gt=0)
    border_radius: int = Field(default=16, ge=2)

    text_primary: str = Field(default="#fafafa", pattern=HEX_COLOR_PATTERN)
    text_secondary: str = Field(default="#cbd5e1", pattern=HEX_COLOR_PATTERN)
    text_muted: str = Field(default="#94a3b8", pattern=HEX_COLOR_PATTERN)
    card_border: str = Field(default="#27272a", pattern=HEX_COLOR_PATTERN)

    album_position: AlbumPosition = "left"
    text_align: TextAlign = "left"

    show_status: bool = True
    show_title: bool = True
    show_artist: bool = True
    show_album: bool = True

    font_title_family: str | None = None
    font_body_family: str | None = None
    font_title_data_url: str | None = None
    font_title_format: FontFormat | None = None
    font_body_data_url: str | None = None
    font_body_format: FontFormat | None = None
    font_fallback: str = "sans-serif"


class ThemeFile(BaseModel):
    """Schema of ``themes/<name>.json``.

    Every key is optional and camelCase; unknown keys make the whole theme
    invalid. ``fontTitle``/``fontBody`` name files in the fonts directory.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    album_size: int | None = Field(default=None, gt=0)
    border_radius: int | None = Field(default=None, ge=2)

    text_primary: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    text_secondary: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    text_muted: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    card_border: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)

    album_position: AlbumPosition | None = None
    text_align: TextAlign | None = None

    show_status: bool | None = None
    show_title: bool | None = None
    show_artist: bool | None = None
    show_album: bool | None = None

    font_title: str | None = Field(default=None, pattern=r"^[a-z0-9._-]+$")
    font_body: str | None = Field(default=None, pattern=r"^[a-z0-9._-]+$")
    font_title_family: str | None = Field(default=None, pattern=r"^[A-Za-z0-9 _-]+$")
    font_body_family: str | None = Field(default=None, pattern=r"^[A-Za-z0-9 _-]+$")
    font_fallback: str | None = Field(default=None, pattern=r"^[A-Za-z0-9 _,'-]+$")

    def overrides(self) -> dict[str, Any]:
        """Fields explicitly set in the file, snake_case."""
        return self.model_dump(exclude_none=True)


def build_render_config(*layers: dict[str, Any] | None) -> RenderConfig:
    """Merge partial overrides over the defaults, later layers winning.

    Typical call: ``build_render_config(theme_overrides, query_overrides)``.
    Keys are snake_case field names; keys that are not RenderConfig fields
    (such as font file names) and ``None`` layers are ignored.

    Returns:
        Frozen RenderConfig
    """
    merged: dict[str, Any] = RenderConfig().model_dump()
    for layer in layers:
        if not layer:
            continue
        merged.update({key: value for key, value in layer.items() if key in RenderConfig.model_fields})
    return RenderConfig.model_validate(merged)
