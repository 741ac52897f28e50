"""Update admission filter and album art cache for the poller.

Both are plain immutable records: functions take the previous record and
return a new one, so the poller owns all of its state explicitly.
"""

from dataclasses import dataclass, replace

from now_playing_card.models.snapshot import ColorPalette

PLAYABLE_STATUSES = ("playing", "paused")


@dataclass(frozen=True)
class AdmissionState:
    """What the poller last published and last observed.

    ``last_sent_*`` only move on a successful publish; ``last_seen_status``
    moves on every observation.
    """

    last_sent_track_id: int | None = None
    last_sent_status: str | None = None
    last_seen_status: str | None = None


def should_publish(state: AdmissionState, track_id: int, status: str) -> bool:
    """Decide whether an observed player status is worth publishing.

    Publishes on a new track, a play/pause toggle, or when playback resumes
    after the player was seen stopped. Statuses other than playing/paused
    are never published.
    """
    if status not in PLAYABLE_STATUSES:
        return False
    if track_id != state.last_sent_track_id:
        return True
    if status != state.last_sent_status:
        return True
    return state.last_seen_status == "stopped"


def record_seen(state: AdmissionState, status: str) -> AdmissionState:
    """State after observing ``status`` without publishing."""
    return replace(state, last_seen_status=status)


def record_published(state: AdmissionState, track_id: int, status: str) -> AdmissionState:
    """State after a successful publish."""
    return AdmissionState(last_sent_track_id=track_id, last_sent_status=status, last_seen_status=status)


@dataclass(frozen=True)
class AlbumArtCache:
    """Art and palette of the last album whose art was processed."""

    album_name: str | None = None
    art_base64: str | None = None
    colors: ColorPalette | None = None

    def lookup(self, album_name: str) -> tuple[str, ColorPalette] | None:
        """Cached art for ``album_name`` (non-empty, exact match), or None."""
        if album_name and album_name == self.album_name and self.art_base64 and self.colors:
            return self.art_base64, self.colors
        return None
