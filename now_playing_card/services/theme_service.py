"""Theme and font resolution for per-request render configuration.

A RenderConfig is layered from the defaults, an optional named theme file and
the request's query parameters. Broken themes, unknown fonts and malformed
query values are logged and ignored so the widget always renders.
"""

import base64
import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from now_playing_card.cache import SimpleCache, cached
from now_playing_card.exceptions import FontException, NowPlayingException, ThemeException
from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.models.render_config import RenderConfig, ThemeFile, build_render_config

logger = get_logger(__name__)

THEME_NAME_PATTERN = re.compile(r"^[a-z0-9_-]+$")
FONT_FILE_PATTERN = re.compile(r"^[a-z0-9._-]+$")
FONT_FAMILY_PATTERN = re.compile(r"^[a-z0-9 _-]+$")

# extension -> (CSS format, MIME type)
FONT_TYPES = {
    ".ttf": ("truetype", "font/ttf"),
    ".otf": ("opentype", "font/otf"),
    ".woff": ("woff", "font/woff"),
    ".woff2": ("woff2", "font/woff2"),
}

_BOOL_VALUES = {"1": True, "true": True, "0": False, "false": False}
_SHOW_PARAMS = {
    "showStatus": "show_status",
    "showTitle": "show_title",
    "showArtist": "show_artist",
    "showAlbum": "show_album",
}


@dataclass(frozen=True)
class EmbeddedFont:
    """A font file ready to inline as ``@font-face``."""

    family: str
    data_url: str
    format: str


def _ignored(param: str, value: str) -> None:
    log_with_context(
        logger,
        "debug",
        "Ignoring invalid query override",
        param=param,
        value=value[:64],
        event_type="query_override_ignored",
    )


def parse_query_overrides(params: Mapping[str, str]) -> tuple[str | None, dict[str, Any]]:
    """Translate widget query parameters into snake_case overrides.

    Args:
        params: Query parameters of the widget request

    Returns:
        Tuple of (theme name or None, overrides). Overrides may contain the
        font file names ``font_title``/``font_body`` besides RenderConfig
        fields. Invalid values are dropped.
    """
    overrides: dict[str, Any] = {}

    theme = params.get("theme")
    if theme is not None and not THEME_NAME_PATTERN.match(theme):
        _ignored("theme", theme)
        theme = None

    position = params.get("position")
    if position is not None:
        if position in ("left", "right"):
            overrides["album_position"] = position
        else:
            _ignored("position", position)

    align = params.get("align")
    if align is not None:
        align = "center" if align == "centre" else align
        if align in ("left", "center", "right"):
            overrides["text_align"] = align
        else:
            _ignored("align", align)

    for param, field_name in _SHOW_PARAMS.items():
        value = params.get(param)
        if value is None:
            continue
        parsed = _BOOL_VALUES.get(value.lower())
        if parsed is None:
            _ignored(param, value)
        else:
            overrides[field_name] = parsed

    for param, field_name in (("fontTitle", "font_title"), ("fontBody", "font_body")):
        value = params.get(param)
        if value is None:
            continue
        if FONT_FILE_PATTERN.match(value):
            overrides[field_name] = value
        else:
            _ignored(param, value)

    for param, field_name in (("fontTitleFamily", "font_title_family"), ("fontBodyFamily", "font_body_family")):
        value = params.get(param)
        if value is None:
            continue
        if FONT_FAMILY_PATTERN.match(value):
            overrides[field_name] = value
        else:
            _ignored(param, value)

    return theme, overrides


def read_theme_file(themes_dir: Path, name: str) -> dict[str, Any]:
    """Load and validate ``<themes_dir>/<name>.json``.

    Returns:
        Snake_case overrides set by the theme

    Raises:
        ThemeException: If the name is invalid, the file is missing, is not
            JSON or does not match the theme schema
    """
    if not THEME_NAME_PATTERN.match(name):
        raise ThemeException(f"Invalid theme name: {name!r}")

    path = themes_dir / f"{name}.json"
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ThemeException(f"Theme not found: {name}", details={"path": str(path)}) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ThemeException(f"Theme file unreadable: {name}: {e}", details={"path": str(path)}) from e

    try:
        return ThemeFile.model_validate(data).overrides()
    except ValidationError as e:
        raise ThemeException(
            f"Theme does not match schema: {name}",
            details={"path": str(path), "errors": e.error_count()},
        ) from e


def read_font_file(fonts_dir: Path, filename: str) -> EmbeddedFont:
    """Load a font file and encode it as a data URL.

    The family defaults to the file stem; callers override it when the
    request or theme names one.

    Raises:
        FontException: If the name is invalid, the type is unsupported or the
            file cannot be read
    """
    if not FONT_FILE_PATTERN.match(filename):
        raise FontException(f"Invalid font file name: {filename!r}")

    path = fonts_dir / filename
    font_type = FONT_TYPES.get(path.suffix.lower())
    if font_type is None:
        raise FontException(f"Unsupported font type: {filename}")
    if path.resolve().parent != fonts_dir.resolve() or not path.is_file():
        raise FontException(f"Font not found: {filename}", details={"path": str(path)})

    try:
        payload = base64.b64encode(path.read_bytes()).decode("ascii")
    except OSError as e:
        raise FontException(f"Font file unreadable: {filename}: {e}") from e

    css_format, mime = font_type
    return EmbeddedFont(family=path.stem, data_url=f"data:{mime};base64,{payload}", format=css_format)


class ThemeLoader:
    """Resolves themes and fonts by name through a never-expiring cache.

    Theme and font files are treated as immutable for the process lifetime,
    so a failed lookup is cached too (as an empty result).
    """

    def __init__(self, themes_dir: Path, fonts_dir: Path, cache: SimpleCache | None = None):
        self.themes_dir = themes_dir
        self.fonts_dir = fonts_dir
        self.cache = cache or SimpleCache()

    async def load_theme(self, name: str) -> dict[str, Any]:
        """Theme overrides for ``name``, or ``{}`` when the theme is unusable."""

        async def fetch() -> dict[str, Any]:
            try:
                return read_theme_file(self.themes_dir, name)
            except NowPlayingException as e:
                log_with_context(
                    logger,
                    "warning",
                    "Theme unavailable, using defaults",
                    theme=name,
                    error=e.message,
                    event_type="theme_fallback",
                )
                return {}

        return await cached(self.cache, f"theme:{name}", fetch)

    async def load_font(self, filename: str) -> EmbeddedFont | None:
        """Embedded font for ``filename``, or None when it is unusable."""

        async def fetch() -> EmbeddedFont | bool:
            try:
                return read_font_file(self.fonts_dir, filename)
            except NowPlayingException as e:
                log_with_context(
                    logger,
                    "warning",
                    "Font unavailable, using fallback",
                    font=filename,
                    error=e.message,
                    event_type="font_fallback",
                )
                return False

        font = await cached(self.cache, f"font:{filename}", fetch)
        return font or None

    async def resolve(self, params: Mapping[str, str]) -> RenderConfig:
        """Build the RenderConfig for a widget request.

        Layers: defaults <- theme (``theme`` param) <- query overrides <-
        embedded fonts (from ``fontTitle``/``fontBody``, query or theme).

        Args:
            params: Query parameters of the request

        Returns:
            Frozen RenderConfig; defaults if the layered result is invalid
        """
        theme_name, query = parse_query_overrides(params)
        theme = await self.load_theme(theme_name) if theme_name else {}
        layered = {**theme, **query}

        fonts: dict[str, Any] = {}
        for role in ("title", "body"):
            filename = layered.get(f"font_{role}")
            if not filename:
                continue
            font = await self.load_font(filename)
            if font is None:
                continue
            fonts[f"font_{role}_data_url"] = font.data_url
            fonts[f"font_{role}_format"] = font.format
            if not layered.get(f"font_{role}_family"):
                fonts[f"font_{role}_family"] = font.family

        try:
            return build_render_config(theme, query, fonts)
        except ValidationError as e:
            log_with_context(
                logger,
                "warning",
                "Layered render config invalid, using defaults",
                theme=theme_name,
                errors=e.error_count(),
                event_type="render_config_fallback",
            )
            return RenderConfig()
