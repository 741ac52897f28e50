"""Static glyphs drawn into the card."""

from now_playing_card.svg.document import Element, format_number

# Beamed eighth notes on a 50x70 canvas
MUSIC_NOTE_PATH = (
    "M20 60 L20 15 L50 5 L50 50 C50 56 45 60 38 60 C30 60 25 56 25 50 C25 43 30 40 38 40 "
    "C42 40 45 41 47 43 L47 20 L23 28 L23 60 C23 66 18 70 10 70 C3 70 0 66 0 60 "
    "C0 53 5 50 10 50 C14 50 17 51 20 53 Z"
)


def music_note_placeholder(album_x: float, album_y: float, album_size: float, color: str) -> Element:
    """Music note centered in the album slot, used when there is no art."""
    scale = album_size / 100
    note_x = album_x + album_size / 2 - 25 * scale
    note_y = album_y + album_size / 2 - 30 * scale
    return Element(
        "g",
        {
            "transform": f"translate({format_number(note_x)}, {format_number(note_y)}) scale({format_number(scale)})",
            "opacity": 0.8,
        },
        children=[Element("path", {"d": MUSIC_NOTE_PATH, "fill": color})],
    )
