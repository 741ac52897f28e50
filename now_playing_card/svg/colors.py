"""Hex color math shared by the card renderer and the palette extractor."""

import math

RGB = tuple[int, int, int]


def round_half_up(value: float) -> int:
    """Round x.5 toward +infinity (not banker's rounding)."""
    return math.floor(value + 0.5)


def clamp_channel(value: int) -> int:
    return max(0, min(255, value))


def hex_to_rgb(hex_color: str) -> RGB:
    """Parse ``#rrggbb`` (leading ``#`` optional, any case) into an RGB tuple."""
    normalized = hex_color.lstrip("#")
    return int(normalized[0:2], 16), int(normalized[2:4], 16), int(normalized[4:6], 16)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def mix(hex_a: str, hex_b: str, ratio: float) -> str:
    """Blend two hex colors channel by channel.

    Args:
        hex_a: Base color
        hex_b: Blend color
        ratio: 0 keeps ``hex_a``, 1 yields ``hex_b``; values outside [0, 1]
            extrapolate and are clamped per channel

    Returns:
        Mixed hex color
    """
    a = hex_to_rgb(hex_a)
    b = hex_to_rgb(hex_b)
    r, g, b_val = (clamp_channel(round_half_up(ca * (1 - ratio) + cb * ratio)) for ca, cb in zip(a, b))
    return rgb_to_hex(r, g, b_val)


def brighten(hex_color: str, gain: float) -> str:
    """Multiply every channel by ``gain``, capped at 255."""
    return rgb_to_hex(*(min(255, round_half_up(c * gain)) for c in hex_to_rgb(hex_color)))


def blend_with_white(hex_color: str, ratio: float) -> str:
    """Move every channel ``ratio`` of the way toward 255."""
    return rgb_to_hex(*(min(255, round_half_up(c + (255 - c) * ratio)) for c in hex_to_rgb(hex_color)))


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 0-255 RGB to HSL with hue in degrees and s/l in [0, 1].

    Uses the standard six-case hue formula; ``fmod`` keeps the sign of the
    red-case term so negative hues wrap by adding 360.
    """
    r_norm, g_norm, b_norm = r / 255, g / 255, b / 255
    high = max(r_norm, g_norm, b_norm)
    low = min(r_norm, g_norm, b_norm)
    delta = high - low
    hue = 0.0
    saturation = 0.0
    lightness = (high + low) / 2

    if delta != 0:
        saturation = delta / (1 - abs(2 * lightness - 1))
        if high == r_norm:
            hue = math.fmod((g_norm - b_norm) / delta, 6)
        elif high == g_norm:
            hue = (b_norm - r_norm) / delta + 2
        else:
            hue = (r_norm - g_norm) / delta + 4
        hue *= 60
        if hue < 0:
            hue += 360

    return hue, saturation, lightness
