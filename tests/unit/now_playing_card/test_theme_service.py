"""Unit tests for theme/font resolution and query overrides."""

import base64
import json

import pytest

from now_playing_card.exceptions import FontException, ThemeException
from now_playing_card.models import RenderConfig
from now_playing_card.services.theme_service import (
    ThemeLoader,
    parse_query_overrides,
    read_font_file,
    read_theme_file,
)

FONT_BYTES = b"\x00\x01fake-font"


@pytest.fixture
def themes_dir(tmp_path):
    directory = tmp_path / "themes"
    directory.mkdir()
    (directory / "midnight.json").write_text(
        json.dumps({"textPrimary": "#f8fafc", "albumPosition": "right", "borderRadius": 20})
    )
    (directory / "fonty.json").write_text(json.dumps({"fontTitle": "inter.woff2", "fontTitleFamily": "Inter"}))
    (directory / "broken.json").write_text("{not json")
    (directory / "extra-key.json").write_text(json.dumps({"background": "#000000"}))
    return directory


@pytest.fixture
def fonts_dir(tmp_path):
    directory = tmp_path / "fonts"
    directory.mkdir()
    (directory / "inter.woff2").write_bytes(FONT_BYTES)
    (directory / "mono.ttf").write_bytes(FONT_BYTES)
    (directory / "readme.txt").write_text("not a font")
    return directory


@pytest.fixture
def loader(themes_dir, fonts_dir):
    return ThemeLoader(themes_dir, fonts_dir)


def test_parse_query_overrides_valid_values():
    theme, overrides = parse_query_overrides(
        {
            "theme": "midnight",
            "position": "right",
            "align": "centre",
            "showStatus": "0",
            "showTitle": "true",
            "showArtist": "FALSE",
            "showAlbum": "1",
            "fontTitle": "inter.woff2",
            "fontBodyFamily": "open sans",
        }
    )

    assert theme == "midnight"
    assert overrides == {
        "album_position": "right",
        "text_align": "center",
        "show_status": False,
        "show_title": True,
        "show_artist": False,
        "show_album": True,
        "font_title": "inter.woff2",
        "font_body_family": "open sans",
    }


def test_parse_query_overrides_ignores_invalid_values():
    theme, overrides = parse_query_overrides(
        {
            "theme": "../etc/passwd",
            "position": "top",
            "align": "justify",
            "showStatus": "yes",
            "fontTitle": "../secret.ttf",
            "fontBodyFamily": "Evil;}",
            "width": "2000",
        }
    )

    assert theme is None
    assert overrides == {}


def test_read_theme_file(themes_dir):
    assert read_theme_file(themes_dir, "midnight") == {
        "text_primary": "#f8fafc",
        "album_position": "right",
        "border_radius": 20,
    }


@pytest.mark.parametrize("name", ["missing", "broken", "extra-key", "Bad Name"])
def test_read_theme_file_failures(themes_dir, name):
    with pytest.raises(ThemeException):
        read_theme_file(themes_dir, name)


def test_read_font_file(fonts_dir):
    font = read_font_file(fonts_dir, "inter.woff2")

    assert font.family == "inter"
    assert font.format == "woff2"
    assert font.data_url == "data:font/woff2;base64," + base64.b64encode(FONT_BYTES).decode("ascii")


@pytest.mark.parametrize("filename", ["readme.txt", "missing.ttf", "..ttf", "Upper.ttf"])
def test_read_font_file_failures(fonts_dir, filename):
    with pytest.raises(FontException):
        read_font_file(fonts_dir, filename)


@pytest.mark.asyncio
async def test_resolve_without_params_is_default(loader):
    assert await loader.resolve({}) == RenderConfig()


@pytest.mark.asyncio
async def test_resolve_layers_query_over_theme(loader):
    config = await loader.resolve({"theme": "midnight", "position": "left", "showAlbum": "0"})

    assert config.text_primary == "#f8fafc"
    assert config.border_radius == 20
    assert config.album_position == "left"
    assert not config.show_album


@pytest.mark.asyncio
@pytest.mark.parametrize("theme", ["missing", "broken", "extra-key"])
async def test_resolve_unusable_theme_falls_back_to_defaults(loader, theme):
    assert await loader.resolve({"theme": theme}) == RenderConfig()


@pytest.mark.asyncio
async def test_resolve_embeds_query_font_with_stem_family(loader):
    config = await loader.resolve({"fontBody": "mono.ttf"})

    assert config.font_body_family == "mono"
    assert config.font_body_format == "truetype"
    assert config.font_body_data_url.startswith("data:font/ttf;base64,")
    assert config.font_title_data_url is None


@pytest.mark.asyncio
async def test_resolve_embeds_theme_font_with_theme_family(loader):
    config = await loader.resolve({"theme": "fonty"})

    assert config.font_title_family == "Inter"
    assert config.font_title_format == "woff2"


@pytest.mark.asyncio
async def test_resolve_unknown_font_is_ignored(loader):
    config = await loader.resolve({"fontTitle": "nope.woff"})
    assert config.font_title_data_url is None
    assert config.font_title_family is None


@pytest.mark.asyncio
async def test_theme_lookups_are_cached(loader, themes_dir):
    first = await loader.load_theme("midnight")
    (themes_dir / "midnight.json").unlink()

    assert await loader.load_theme("midnight") == first
    # Failures are cached too
    assert await loader.load_theme("missing") == {}
    (themes_dir / "missing.json").write_text(json.dumps({"width": 300}))
    assert await loader.load_theme("missing") == {}


@pytest.mark.asyncio
async def test_font_failures_are_cached(loader, fonts_dir):
    assert await loader.load_font("later.ttf") is None
    (fonts_dir / "later.ttf").write_bytes(FONT_BYTES)
    assert await loader.load_font("later.ttf") is None
