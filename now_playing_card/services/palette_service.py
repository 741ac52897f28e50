"""Album art palette extraction.

Works on plain pixel statistics so it can be tested without decoding images:
per-channel mean/max of the resized art and a small raw RGB downsample.
"""

import math
from dataclasses import dataclass

from now_playing_card.models.snapshot import ColorPalette
from now_playing_card.svg.colors import blend_with_white, brighten, hex_to_rgb, rgb_to_hex, rgb_to_hsl, round_half_up

ACCENT_GAIN = 1.2
HIGHLIGHT_WHITE_BLEND = 0.10

# Saliency filters
NEAR_WHITE = 235
NEAR_BLACK = 20
MIN_SATURATION = 0.35
MIN_LIGHTNESS = 0.18
MAX_LIGHTNESS = 0.85
TARGET_LIGHTNESS = 0.55
MAX_RGB_DISTANCE = math.sqrt(3) * 255


@dataclass(frozen=True)
class ChannelStats:
    """Per-channel statistics of the resized album art (R, G, B)."""

    means: tuple[float, float, float]
    maxima: tuple[int, int, int]


def dominant_color(stats: ChannelStats) -> str:
    """Mean color of the image."""
    return rgb_to_hex(*(round_half_up(mean) for mean in stats.means))


def accent_color(dominant: str) -> str:
    """Dominant brightened by x1.2 per channel (a brightness boost, not a complement)."""
    return brighten(dominant, ACCENT_GAIN)


def saliency_score(r: int, g: int, b: int, dominant_rgb: tuple[int, int, int]) -> float | None:
    """Score a pixel for use as highlight, or None when it is filtered out.

    Near-white, near-black, washed-out and too dark/light pixels are skipped.
    Saturation dominates the score; distance from the dominant color and
    closeness to mid lightness break ties.
    """
    if r > NEAR_WHITE and g > NEAR_WHITE and b > NEAR_WHITE:
        return None
    if r < NEAR_BLACK and g < NEAR_BLACK and b < NEAR_BLACK:
        return None

    _, saturation, lightness = rgb_to_hsl(r, g, b)
    if saturation < MIN_SATURATION or lightness < MIN_LIGHTNESS or lightness > MAX_LIGHTNESS:
        return None

    dr, dg, db = dominant_rgb
    distance = math.sqrt((r - dr) ** 2 + (g - dg) ** 2 + (b - db) ** 2) / MAX_RGB_DISTANCE
    return saturation * 0.7 + distance * 0.2 + (1 - abs(lightness - TARGET_LIGHTNESS)) * 0.1


def find_salient_color(raw: bytes, width: int, height: int, dominant: str) -> str | None:
    """Scan a raw RGB buffer for the most salient pixel.

    Args:
        raw: Packed RGB bytes, row-major, 3 bytes per pixel
        width: Buffer width in pixels
        height: Buffer height in pixels
        dominant: Dominant color of the full image

    Returns:
        Hex color of the first pixel with the strictly highest score, or None
        when every pixel is filtered out
    """
    dominant_rgb = hex_to_rgb(dominant)
    best_score = 0.0
    best: tuple[int, int, int] | None = None

    for i in range(width * height):
        idx = i * 3
        r, g, b = raw[idx], raw[idx + 1], raw[idx + 2]
        score = saliency_score(r, g, b, dominant_rgb)
        if score is not None and score > best_score:
            best_score = score
            best = (r, g, b)

    return rgb_to_hex(*best) if best else None


def extract_palette(stats: ChannelStats, raw: bytes, width: int, height: int) -> ColorPalette:
    """Compute dominant, accent and highlight colors for album art.

    Args:
        stats: Channel statistics of the resized art
        raw: Raw RGB downsample of the same art
        width: Downsample width
        height: Downsample height

    Returns:
        ColorPalette; highlight falls back to the per-channel maximum when no
        pixel of the downsample is salient
    """
    dominant = dominant_color(stats)
    candidate = find_salient_color(raw, width, height, dominant)
    fallback = rgb_to_hex(*stats.maxima)
    return ColorPalette(
        dominant=dominant,
        accent=accent_color(dominant),
        highlight=blend_with_white(candidate or fallback, HIGHLIGHT_WHITE_BLEND),
    )
