"""Procedural waveform paths for the animated card background.

Heights come from a sin-based hash so a given seed always yields the same
silhouette; seeds are derived from the track title via ``hash_string`` so a
track keeps the same motion across renders.
"""

import math

from now_playing_card.svg.document import Element, format_number

WAVE_POINTS = 28
MORPH_SEED_OFFSET = 2.5

Point = tuple[float, float]


def seeded_random(index: float, seed: float) -> float:
    """Fractional part of ``sin(index * 12.9898 + seed) * 43758.5453``, in [0, 1)."""
    value = math.sin(index * 12.9898 + seed) * 43758.5453
    return value - math.floor(value)


def hash_string(text: str) -> int:
    """Stable non-negative seed for ``text``.

    Accumulates ``hash * 31 + code_unit`` over the UTF-16 code units of
    ``text`` with signed 32-bit wraparound and returns the absolute value.
    """
    encoded = text.encode("utf-16-le")
    value = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def wave_points(
    start_x: float, end_x: float, base_y: float, height: float, seed: float, points: int = WAVE_POINTS
) -> list[Point]:
    """Control points evenly spaced from ``start_x`` to ``end_x``, rising above ``base_y``."""
    step = (end_x - start_x) / (points - 1)
    result = []
    for i in range(points):
        rand = seeded_random(i, seed) * 0.75 + seeded_random(i + 7, seed) * 0.25
        result.append((start_x + i * step, base_y - rand * height))
    return result


def _coords(*values: float) -> str:
    return " ".join(format_number(v) for v in values)


def wave_path(
    start_x: float, end_x: float, base_y: float, height: float, seed: float, points: int = WAVE_POINTS
) -> str:
    """Build a closed, smoothed wave silhouette as SVG path data.

    Each interior point contributes a quadratic segment whose control point is
    the previous raw point and whose end is the midpoint between the previous
    and current points. The final segment lands on the last point, then the
    shape drops to the baseline at both ends.
    """
    values = wave_points(start_x, end_x, base_y, height, seed, points)

    commands = [f"M {_coords(*values[0])}"]
    for prev, current in zip(values, values[1:-1]):
        mid_x = (prev[0] + current[0]) / 2
        mid_y = (prev[1] + current[1]) / 2
        commands.append(f"Q {_coords(prev[0], prev[1], mid_x, mid_y)}")
    second_last, last = values[-2], values[-1]
    commands.append(f"Q {_coords(second_last[0], second_last[1], last[0], last[1])}")
    commands.append(f"L {_coords(end_x, base_y)} L {_coords(start_x, base_y)} Z")
    return " ".join(commands)


def waveform_layer(
    color: str,
    opacity: float,
    start_x: float,
    end_x: float,
    base_y: float,
    height: float,
    seed: float,
    duration: float,
) -> Element:
    """A filled wave path that morphs into a sibling shape and back, forever.

    Args:
        color: Fill color
        opacity: Layer opacity
        start_x: Wave start position
        end_x: Wave end position
        base_y: Baseline Y position
        height: Wave amplitude
        seed: Random seed of the first shape (the second uses ``seed + 2.5``)
        duration: Length of one A -> B -> A cycle in seconds

    Returns:
        ``<path>`` element carrying its ``<animate>`` child
    """
    path_a = wave_path(start_x, end_x, base_y, height, seed)
    path_b = wave_path(start_x, end_x, base_y, height, seed + MORPH_SEED_OFFSET)
    return Element(
        "path",
        {"d": path_a, "fill": color, "opacity": opacity},
        children=[
            Element(
                "animate",
                {
                    "attributeName": "d",
                    "values": f"{path_a};{path_b};{path_a}",
                    "dur": f"{format_number(duration)}s",
                    "repeatCount": "indefinite",
                },
            )
        ],
    )
