"""SVG card rendering"""

from now_playing_card.svg.card import CardState, classify, render_card

__all__ = ["CardState", "classify", "render_card"]
