"""Text helpers for SVG layout: escaping, width estimates and truncation."""

import re

# Applied in order; "&" first so later entities are not escaped twice
_MARKUP_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

# Anything outside the XML 1.0 Char production, e.g. C0 controls
_INVALID_XML_CHARS = re.compile(r"[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

CHAR_WIDTH_FACTOR = 0.55
ELLIPSIS = "..."


def escape_for_markup(text: str) -> str:
    """Escape the five XML special characters for SVG text and attributes.

    Characters XML 1.0 does not allow at all are dropped.
    """
    text = _INVALID_XML_CHARS.sub("", text)
    for raw, entity in _MARKUP_ENTITIES:
        text = text.replace(raw, entity)
    return text


def estimate_width(text: str, font_size: float) -> float:
    """Rough pixel width of ``text``; only used for layout decisions."""
    return len(text) * (font_size * CHAR_WIDTH_FACTOR)


def max_chars_for_width(width: float, font_size: float, floor: int = 10) -> int:
    """Character budget that fits ``width`` at ``font_size`` (never below ``floor``)."""
    return max(floor, int(width // (font_size * CHAR_WIDTH_FACTOR)))


def truncate(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` characters, ending with an ellipsis when cut.

    Args:
        text: Input text
        max_chars: Maximum number of characters, ellipsis included (>= 3)

    Returns:
        ``text`` unchanged when it fits, otherwise the first ``max_chars - 3``
        characters followed by ``...``
    """
    if len(text) <= max_chars:
        return text
    return text[: max_chars - len(ELLIPSIS)] + ELLIPSIS
