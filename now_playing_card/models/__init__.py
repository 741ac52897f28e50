"""Now playing card models"""

from now_playing_card.models.base_models import HealthResponse, PublishResponse
from now_playing_card.models.player import PlayerStatus, PlayerTrack
from now_playing_card.models.render_config import RenderConfig, ThemeFile, build_render_config
from now_playing_card.models.snapshot import ColorPalette, PlaybackSnapshot

__all__ = [
    "ColorPalette",
    "HealthResponse",
    "PlaybackSnapshot",
    "PlayerStatus",
    "PlayerTrack",
    "PublishResponse",
    "RenderConfig",
    "ThemeFile",
    "build_render_config",
]
