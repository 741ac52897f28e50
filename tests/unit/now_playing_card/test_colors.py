"""Unit tests for hex color math."""

import pytest

from now_playing_card.svg.colors import (
    blend_with_white,
    brighten,
    hex_to_rgb,
    mix,
    rgb_to_hex,
    rgb_to_hsl,
    round_half_up,
)


@pytest.mark.parametrize("a,b", [("#000000", "#ffffff"), ("#c81e1e", "#0d0f12"), ("#22C55E", "#fafafa")])
def test_mix_endpoints(a, b):
    """Ratio 0 keeps the first color, ratio 1 yields the second."""
    assert mix(a, b, 0) == a.lower()
    assert mix(a, b, 1) == b.lower()


def test_mix_midpoint_rounds_half_up():
    # 255 * 0.5 = 127.5 rounds up, not to even
    assert mix("#000000", "#ffffff", 0.5) == "#808080"
    assert mix("#000000", "#020202", 0.25) == "#010101"


def test_mix_extrapolation_is_clamped():
    assert mix("#808080", "#ffffff", 2) == "#ffffff"
    assert mix("#808080", "#ffffff", -2) == "#000000"


def test_hex_round_trip_accepts_missing_hash():
    assert hex_to_rgb("c81e1e") == (200, 30, 30)
    assert hex_to_rgb("#C81E1E") == (200, 30, 30)
    assert rgb_to_hex(200, 30, 30) == "#c81e1e"


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_brighten_caps_at_255():
    assert brighten("#c81e1e", 1.2) == "#f02424"
    assert brighten("#e0e0e0", 1.2) == "#ffffff"


def test_blend_with_white():
    assert blend_with_white("#c81e1e", 0.1) == "#ce3535"
    assert blend_with_white("#ffffff", 0.5) == "#ffffff"


def test_rgb_to_hsl_primaries():
    assert rgb_to_hsl(255, 0, 0) == (0.0, 1.0, 0.5)
    hue, saturation, lightness = rgb_to_hsl(0, 0, 255)
    assert hue == pytest.approx(240)
    assert saturation == pytest.approx(1)
    assert lightness == pytest.approx(0.5)


def test_rgb_to_hsl_negative_hue_wraps():
    # Red dominant with blue above green gives a negative raw hue
    hue, _, _ = rgb_to_hsl(255, 0, 128)
    assert 300 < hue < 360


def test_rgb_to_hsl_gray_has_no_saturation():
    assert rgb_to_hsl(128, 128, 128)[:2] == (0.0, 0.0)
