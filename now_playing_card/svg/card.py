"""Now playing SVG card renderer.

``render_card`` turns the latest snapshot (or ``None``) and a RenderConfig into
self-contained animated SVG markup. Rendering is pure: the only input besides
its arguments is the clock, and that can be pinned with ``now_ms``.
"""

import time
from dataclasses import dataclass
from enum import Enum

from now_playing_card.models.render_config import RenderConfig
from now_playing_card.models.snapshot import PlaybackSnapshot
from now_playing_card.svg.colors import mix
from now_playing_card.svg.document import SVG_NAMESPACE, XLINK_NAMESPACE, Comment, Element, format_number, serialize
from now_playing_card.svg.icons import music_note_placeholder
from now_playing_card.svg.text import estimate_width, max_chars_for_width, truncate
from now_playing_card.svg.waves import hash_string, waveform_layer

STALE_AFTER_MS = 5 * 60 * 1000

FALLBACK_ACCENT = "#22c55e"
BASE_DARK_TARGET = "#050505"
MID_DARK_TARGET = "#0d0f12"

PADDING = 26
TEXT_GAP = 22
TITLE_FONT_SIZE = 24
ARTIST_FONT_SIZE = 15
ALBUM_FONT_SIZE = 13
STATUS_FONT_SIZE = 12
TITLE_SCROLL_GAP = 36
# Independent of title length, so long titles appear to scroll faster
TITLE_SCROLL_SECONDS = 15

WAVE_HEIGHT = 170
EMPTY_TITLE_SEED = "tauon"
EMPTY_MESSAGE = "Nothing playing right now"


class CardState(str, Enum):
    """What the card is showing, derived from the snapshot and the clock."""

    PLAYING = "playing"
    PAUSED = "paused"
    STALE = "stale"
    EMPTY = "empty"

    @property
    def has_track(self) -> bool:
        return self is not CardState.EMPTY

    @property
    def pill_text(self) -> str:
        if self is CardState.STALE:
            return "LAST PLAYED"
        if self is CardState.PLAYING:
            return "NOW PLAYING"
        return "PAUSED"


def classify(snapshot: PlaybackSnapshot | None, now_ms: int) -> CardState:
    """Classify a snapshot; anything older than five minutes is stale whatever its status."""
    if snapshot is None:
        return CardState.EMPTY
    if now_ms - snapshot.updated_at > STALE_AFTER_MS:
        return CardState.STALE
    if snapshot.status == "playing":
        return CardState.PLAYING
    return CardState.PAUSED


@dataclass(frozen=True)
class CardColors:
    dominant: str
    accent: str
    base_dark: str
    mid_dark: str
    highlight: str


def derive_colors(snapshot: PlaybackSnapshot | None, config: RenderConfig) -> CardColors:
    """Frame colors from the art palette, falling back to the configured border color."""
    palette = snapshot.colors if snapshot else None
    dominant = palette.dominant if palette else config.card_border
    accent = palette.accent if palette else FALLBACK_ACCENT
    highlight = palette.highlight if palette else mix(accent, "#ffffff", 0.45)
    return CardColors(
        dominant=dominant,
        accent=accent,
        base_dark=mix(dominant, BASE_DARK_TARGET, 0.82),
        mid_dark=mix(dominant, MID_DARK_TARGET, 0.7),
        highlight=highlight,
    )


@dataclass(frozen=True)
class CardLayout:
    """Pixel geometry of the album slot and the text block."""

    album_x: float
    album_y: float
    album_size: float
    text_area_left: float
    text_area_right: float
    text_anchor: str
    text_x: float

    @property
    def text_area_width(self) -> float:
        return max(0, self.text_area_right - self.text_area_left)

    @property
    def status_y(self) -> float:
        return self.album_y + 18

    @property
    def title_y(self) -> float:
        return self.album_y + 40

    @property
    def artist_y(self) -> float:
        return self.album_y + 76

    @property
    def album_line_y(self) -> float:
        return self.album_y + 90


def compute_layout(config: RenderConfig) -> CardLayout:
    """Place the album square on its side and the text block on the other."""
    album_size = config.album_size
    on_right = config.album_position == "right"
    album_x = config.width - PADDING - album_size if on_right else PADDING
    album_y = (config.height - album_size) / 2
    text_area_left = PADDING if on_right else album_x + album_size + TEXT_GAP
    text_area_right = album_x - TEXT_GAP if on_right else config.width - PADDING
    text_area_width = max(0, text_area_right - text_area_left)

    if config.text_align == "right":
        anchor, text_x = "end", text_area_right
    elif config.text_align == "center":
        anchor, text_x = "middle", text_area_left + text_area_width / 2
    else:
        anchor, text_x = "start", text_area_left

    return CardLayout(
        album_x=album_x,
        album_y=album_y,
        album_size=album_size,
        text_area_left=text_area_left,
        text_area_right=text_area_right,
        text_anchor=anchor,
        text_x=text_x,
    )


def title_scroll_needed(title: str, config: RenderConfig, clip_width: float) -> bool:
    """Scroll only for non-centered text whose estimated width overflows the clip."""
    return config.text_align != "center" and clip_width > 0 and estimate_width(title, TITLE_FONT_SIZE) > clip_width


def font_stack(family: str | None, fallback: str) -> str:
    return f"'{family}', {fallback}" if family else fallback


def font_face_css(family: str | None, data_url: str | None, font_format: str | None) -> str:
    """``@font-face`` rule for an embedded font, or an empty string."""
    if not (family and data_url):
        return ""
    return (
        "@font-face {\n"
        f"  font-family: '{family}';\n"
        f"  src: url({data_url}) format('{font_format or 'truetype'}');\n"
        "  font-weight: 400;\n"
        "  font-style: normal;\n"
        "  font-display: swap;\n"
        "}"
    )


def _drop_shadow(std_deviation: int, color: str, opacity: float) -> Element:
    return Element(
        "feDropShadow",
        {"dx": 0, "dy": 0, "stdDeviation": std_deviation, "flood-color": color, "flood-opacity": opacity},
    )


def _gradient(gradient_id: str, stops: list[dict]) -> Element:
    return Element(
        "linearGradient",
        {"id": gradient_id, "x1": 0, "y1": 0, "x2": 0, "y2": 1},
        children=[Element("stop", stop) for stop in stops],
    )


def _defs(config: RenderConfig, layout: CardLayout, colors: CardColors) -> Element:
    defs = Element("defs")

    css = "\n".join(
        rule
        for rule in (
            font_face_css(config.font_title_family, config.font_title_data_url, config.font_title_format),
            font_face_css(config.font_body_family, config.font_body_data_url, config.font_body_format),
        )
        if rule
    )
    if css:
        defs.append(Element("style", text=css))

    defs.append(
        _gradient(
            "cardGradient",
            [
                {"offset": "0%", "stop-color": colors.base_dark},
                {"offset": "60%", "stop-color": colors.mid_dark},
                {"offset": "100%", "stop-color": colors.base_dark},
            ],
        )
    )
    defs.append(
        _gradient(
            "barsFade",
            [
                {"offset": "0%", "stop-color": colors.highlight, "stop-opacity": 1},
                {"offset": "100%", "stop-color": colors.accent, "stop-opacity": 0.3},
            ],
        )
    )
    defs.append(
        Element(
            "clipPath",
            {"id": "albumClip"},
            children=[
                Element(
                    "rect",
                    {
                        "x": layout.album_x,
                        "y": layout.album_y,
                        "width": layout.album_size,
                        "height": layout.album_size,
                        "rx": config.border_radius,
                    },
                )
            ],
        )
    )
    defs.append(
        Element(
            "clipPath",
            {"id": "cardClip", "clipPathUnits": "userSpaceOnUse"},
            children=[
                Element(
                    "rect",
                    {"x": 2, "y": 2, "width": config.width - 4, "height": config.height - 4, "rx": config.border_radius - 2},
                )
            ],
        )
    )
    defs.append(
        Element(
            "clipPath",
            {"id": "titleClip", "clipPathUnits": "userSpaceOnUse"},
            children=[
                Element(
                    "rect",
                    {
                        "x": layout.text_area_left,
                        "y": layout.album_y + 34,
                        "width": layout.text_area_width,
                        "height": 26,
                    },
                )
            ],
        )
    )
    defs.append(
        Element(
            "filter",
            {"id": "glow", "x": "-50%", "y": "-50%", "width": "200%", "height": "200%"},
            children=[_drop_shadow(8, colors.highlight, 0.65), _drop_shadow(16, colors.highlight, 0.25)],
        )
    )
    defs.append(
        Element(
            "filter",
            {"id": "textGlow", "x": "-50%", "y": "-50%", "width": "200%", "height": "200%"},
            children=[_drop_shadow(4, colors.highlight, 0.6)],
        )
    )
    return defs


def _waves(config: RenderConfig, colors: CardColors, state: CardState, title_seed: int) -> list[Element]:
    start_x, end_x, base_y = 2, config.width - 2, config.height - 2

    ambient = Element("g", {"fill": "url(#barsFade)", "opacity": 0.4, "clip-path": "url(#cardClip)"})
    ambient.append(waveform_layer(colors.highlight, 0.28, start_x, end_x, base_y, WAVE_HEIGHT, title_seed * 0.03, 8))
    ambient.append(
        waveform_layer(colors.highlight, 0.18, start_x, end_x, base_y, WAVE_HEIGHT * 0.7, title_seed * 0.05 + 4.1, 12)
    )
    groups = [Comment("Background waveform"), ambient]

    if state is CardState.PLAYING:
        active = Element("g", {"fill": "url(#barsFade)", "opacity": 0.45, "clip-path": "url(#cardClip)"})
        active.append(
            waveform_layer(colors.highlight, 0.65, start_x, end_x, base_y, WAVE_HEIGHT * 0.85, title_seed * 0.08 + 8.2, 5)
        )
        groups.append(active)
    return groups


def _title_lines(
    title: str, config: RenderConfig, layout: CardLayout, title_family: str
) -> list[Element | Comment]:
    text_attrs = {
        "fill": config.text_primary,
        "font-size": TITLE_FONT_SIZE,
        "font-weight": 600,
    }
    clip_width = layout.text_area_width

    if title_scroll_needed(title, config, clip_width):
        distance = max(estimate_width(title, TITLE_FONT_SIZE) + TITLE_SCROLL_GAP, clip_width + TITLE_SCROLL_GAP)
        copies = [
            Element(
                "text",
                {
                    "x": x,
                    "y": layout.title_y,
                    **text_attrs,
                    "filter": "url(#textGlow)",
                    "font-family": title_family,
                },
                text=title,
            )
            for x in (layout.text_area_left, layout.text_area_left + distance)
        ]
        marquee = Element(
            "g",
            children=[
                *copies,
                Element(
                    "animateTransform",
                    {
                        "attributeName": "transform",
                        "type": "translate",
                        "from": "0 0",
                        "to": f"-{format_number(distance)} 0",
                        "dur": f"{TITLE_SCROLL_SECONDS}s",
                        "repeatCount": "indefinite",
                    },
                ),
            ],
        )
        return [Comment("Title"), Element("g", {"clip-path": "url(#titleClip)"}, children=[marquee])]

    max_chars = max_chars_for_width(layout.text_area_width, TITLE_FONT_SIZE)
    return [
        Comment("Title"),
        Element(
            "text",
            {
                "x": layout.text_x,
                "y": layout.title_y,
                **text_attrs,
                "text-overflow": "ellipsis",
                "filter": "url(#textGlow)",
                "text-anchor": layout.text_anchor,
                "font-family": title_family,
            },
            text=truncate(title, max_chars),
        ),
    ]


def _secondary_line(
    label: str, text: str, y: float, fill: str, font_size: int, layout: CardLayout, body_family: str
) -> list[Element | Comment]:
    max_chars = max_chars_for_width(layout.text_area_width, font_size)
    return [
        Comment(label),
        Element(
            "text",
            {
                "x": layout.text_x,
                "y": y,
                "fill": fill,
                "font-size": font_size,
                "text-anchor": layout.text_anchor,
                "font-family": body_family,
            },
            text=truncate(text, max_chars),
        ),
    ]


def _text_block(
    snapshot: PlaybackSnapshot | None,
    state: CardState,
    config: RenderConfig,
    layout: CardLayout,
    colors: CardColors,
) -> Element:
    body_family = font_stack(config.font_body_family, config.font_fallback)
    title_family = font_stack(config.font_title_family, config.font_fallback)
    block = Element("g", {"font-family": body_family})

    if snapshot is None or not state.has_track:
        block.append(Comment("Not playing message"))
        block.append(
            Element(
                "text",
                {
                    "x": layout.text_x,
                    "y": config.height / 2,
                    "fill": config.text_muted,
                    "font-size": 14,
                    "dominant-baseline": "middle",
                    "text-anchor": layout.text_anchor,
                    "font-family": body_family,
                },
                text=EMPTY_MESSAGE,
            )
        )
        return block

    if config.show_status:
        block.append(Comment("Status pill"))
        block.append(
            Element(
                "text",
                {
                    "x": layout.text_x,
                    "y": layout.status_y,
                    "fill": colors.highlight,
                    "font-size": STATUS_FONT_SIZE,
                    "font-weight": 700,
                    "letter-spacing": "0.12em",
                    "filter": "url(#textGlow)",
                    "text-anchor": layout.text_anchor,
                    "font-family": body_family,
                },
                text=state.pill_text,
            )
        )
    if config.show_title:
        block.extend(_title_lines(snapshot.title, config, layout, title_family))
    if config.show_artist:
        block.extend(
            _secondary_line(
                "Artist", snapshot.artist, layout.artist_y, config.text_secondary, ARTIST_FONT_SIZE, layout, body_family
            )
        )
    if config.show_album:
        block.extend(
            _secondary_line(
                "Album", snapshot.album, layout.album_line_y, config.text_muted, ALBUM_FONT_SIZE, layout, body_family
            )
        )
    return block


def _album_art(
    snapshot: PlaybackSnapshot | None, state: CardState, config: RenderConfig, layout: CardLayout, colors: CardColors
) -> list[Element | Comment]:
    box = {"x": layout.album_x, "y": layout.album_y, "width": layout.album_size, "height": layout.album_size}

    if snapshot is None or not state.has_track or not snapshot.art_base64:
        return [
            Comment("Album art placeholder"),
            music_note_placeholder(layout.album_x, layout.album_y, layout.album_size, colors.highlight),
        ]

    return [
        Comment("Album art with rounded corners"),
        Element(
            "image",
            {
                **box,
                "xlink:href": f"data:image/jpeg;base64,{snapshot.art_base64}",
                "clip-path": "url(#albumClip)",
                "preserveAspectRatio": "xMidYMid slice",
                "filter": "url(#glow)",
            },
        ),
        Element(
            "rect",
            {
                **box,
                "rx": config.border_radius,
                "fill": "none",
                "stroke": colors.highlight,
                "stroke-opacity": 0.75,
                "stroke-width": 3,
                "filter": "url(#textGlow)",
            },
        ),
    ]


def build_card(snapshot: PlaybackSnapshot | None, config: RenderConfig, now_ms: int) -> Element:
    """Build the card as an element tree (see ``render_card``)."""
    state = classify(snapshot, now_ms)
    colors = derive_colors(snapshot, config)
    layout = compute_layout(config)
    title_seed = hash_string((snapshot.title if snapshot else "") or EMPTY_TITLE_SEED)

    svg = Element(
        "svg",
        {
            "width": config.width,
            "height": config.height,
            "viewBox": f"0 0 {config.width} {config.height}",
            "xmlns": SVG_NAMESPACE,
            "xmlns:xlink": XLINK_NAMESPACE,
        },
    )
    svg.append(_defs(config, layout, colors))

    svg.append(Comment("Card background with clean rounded border"))
    svg.append(
        Element("rect", {"width": config.width, "height": config.height, "rx": config.border_radius, "fill": colors.mid_dark})
    )
    svg.append(
        Element(
            "rect",
            {
                "x": 2,
                "y": 2,
                "width": config.width - 4,
                "height": config.height - 4,
                "rx": config.border_radius - 2,
                "fill": "url(#cardGradient)",
            },
        )
    )
    svg.extend(_waves(config, colors, state, title_seed))

    svg.append(Comment("Text content"))
    svg.append(_text_block(snapshot, state, config, layout, colors))
    svg.extend(_album_art(snapshot, state, config, layout, colors))
    return svg


def render_card(
    snapshot: PlaybackSnapshot | None,
    config: RenderConfig | None = None,
    now_ms: int | None = None,
    declaration: bool = True,
) -> str:
    """Render the now playing card.

    Args:
        snapshot: Latest published snapshot, or None when nothing was published
        config: Presentation options (defaults when omitted)
        now_ms: Current time in epoch milliseconds (wall clock when omitted)
        declaration: Prefix the XML declaration (off for inline HTML embedding)

    Returns:
        SVG document as a string
    """
    if config is None:
        config = RenderConfig()
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return serialize(build_card(snapshot, config, now_ms), declaration=declaration)
