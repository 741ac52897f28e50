"""Unit tests for album art processing with Pillow."""

import base64
import io

import pytest
from PIL import Image

from now_playing_card.exceptions import ArtworkException
from now_playing_card.services.artwork_service import DOWNSAMPLE_SIZE, build_album_art, process_album_art


def _decode(jpeg_bytes: bytes) -> Image.Image:
    return Image.open(io.BytesIO(jpeg_bytes))


def test_large_art_is_cropped_to_target_square(album_art_bytes):
    art = process_album_art(album_art_bytes, target_size=400)

    image = _decode(art.jpeg_bytes)
    assert image.format == "JPEG"
    assert image.size == (400, 400)
    assert (art.downsample_width, art.downsample_height) == (DOWNSAMPLE_SIZE, DOWNSAMPLE_SIZE)
    assert len(art.downsample) == DOWNSAMPLE_SIZE * DOWNSAMPLE_SIZE * 3


def test_small_art_is_not_enlarged(image_bytes_factory):
    art = process_album_art(image_bytes_factory((300, 200), (10, 120, 200)), target_size=400)

    assert _decode(art.jpeg_bytes).size == (300, 200)


def test_tiny_art_keeps_its_size_for_the_downsample(image_bytes_factory):
    art = process_album_art(image_bytes_factory((16, 16), (10, 120, 200)), target_size=400)

    assert (art.downsample_width, art.downsample_height) == (16, 16)
    assert art.stats.means == pytest.approx((10, 120, 200))
    assert art.stats.maxima == (10, 120, 200)


def test_jpeg_input_is_accepted(image_bytes_factory):
    art = process_album_art(image_bytes_factory((500, 500), (50, 50, 50), "JPEG"))
    assert _decode(art.jpeg_bytes).size == (400, 400)


def test_build_album_art_returns_base64_and_palette(image_bytes_factory):
    art_base64, palette = build_album_art(image_bytes_factory((300, 300), (200, 30, 30)))

    assert _decode(base64.b64decode(art_base64)).size == (300, 300)
    assert palette.dominant == "#c81e1e"
    assert palette.accent == "#f02424"


def test_build_album_art_is_deterministic(album_art_bytes):
    assert build_album_art(album_art_bytes) == build_album_art(album_art_bytes)


def test_undecodable_bytes_raise():
    with pytest.raises(ArtworkException) as exc_info:
        process_album_art(b"not an image")

    assert exc_info.value.details["error_type"] == "decode_error"
