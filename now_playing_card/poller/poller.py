"""Poll the music player and publish admitted snapshots to the server."""

import asyncio
import time

import httpx

from now_playing_card.config import PollerSettings
from now_playing_card.exceptions import ArtworkException, PlayerException, PublishException
from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.models.player import PlayerStatus
from now_playing_card.models.snapshot import ColorPalette, PlaybackSnapshot
from now_playing_card.poller.admission import (
    AdmissionState,
    AlbumArtCache,
    record_published,
    record_seen,
    should_publish,
)
from now_playing_card.services import artwork_service, player_service, publish_service

logger = get_logger(__name__)


def build_snapshot(
    status: PlayerStatus,
    art_base64: str | None,
    colors: ColorPalette | None,
    updated_at: int,
) -> PlaybackSnapshot:
    """Assemble the published snapshot from a playable player status.

    Top-level status fields win over the nested track, with placeholder text
    when both are empty.
    """
    track = status.track
    return PlaybackSnapshot(
        title=status.title or (track.title if track else "") or "Unknown Title",
        artist=status.artist or (track.artist if track else "") or "Unknown Artist",
        album=status.album or (track.album if track else "") or "Unknown Album",
        album_artist=(track.album_artist if track else "") or status.artist or "Unknown Artist",
        track_number=track.track_number if track else "",
        duration=max(0, int(track.duration)) if track else 0,
        progress=status.progress,
        status=status.status,
        art_base64=art_base64,
        colors=colors,
        updated_at=updated_at,
    )


class NowPlayingPoller:
    """Owns the poll loop state: admission record, art cache and HTTP client.

    ``tick`` runs one sequential status -> art -> publish cycle; ``run``
    repeats it with a fixed delay, so ticks never overlap.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: PollerSettings,
        admission: AdmissionState | None = None,
        art_cache: AlbumArtCache | None = None,
    ):
        self.client = client
        self.settings = settings
        self.admission = admission or AdmissionState()
        self.art_cache = art_cache or AlbumArtCache()

    async def tick(self) -> bool:
        """Poll once.

        Returns:
            True if a snapshot was published
        """
        try:
            status = await player_service.fetch_status(
                self.client, self.settings.player_url, timeout=self.settings.status_timeout_seconds
            )
        except PlayerException as e:
            log_with_context(
                logger,
                "warning",
                "Player unreachable, skipping update",
                error=e.message,
                event_type="player_unreachable",
            )
            return False

        if not should_publish(self.admission, status.id, status.status):
            self.admission = record_seen(self.admission, status.status)
            return False

        try:
            art_base64, colors = await self._resolve_art(status)
        except ArtworkException as e:
            log_with_context(
                logger,
                "warning",
                "Album art unreachable, skipping update",
                track_id=status.id,
                error=e.message,
                event_type="art_unreachable",
            )
            return False

        snapshot = build_snapshot(status, art_base64, colors, updated_at=int(time.time() * 1000))

        try:
            await publish_service.publish_snapshot(
                self.client,
                self.settings.server_url,
                self.settings.api_key,
                snapshot,
                timeout=self.settings.publish_timeout_seconds,
            )
        except PublishException as e:
            log_with_context(
                logger,
                "warning",
                "Publish failed, will retry next tick",
                error=e.message,
                status_code=e.status_code,
                event_type="publish_failed",
            )
            return False

        self.admission = record_published(self.admission, status.id, status.status)
        log_with_context(
            logger,
            "info",
            f"Updated: {snapshot.title} by {snapshot.artist}",
            track_id=status.id,
            status=status.status,
            has_art=snapshot.art_base64 is not None,
            event_type="snapshot_published",
        )
        return True

    async def _resolve_art(self, status: PlayerStatus) -> tuple[str | None, ColorPalette | None]:
        """Art and palette for the status' album, reusing the cache within an album.

        Raises:
            ArtworkException: If the art request fails at the transport level
        """
        album_name = status.album_name
        if status.id <= 0 or not album_name:
            return None, None

        hit = self.art_cache.lookup(album_name)
        if hit:
            return hit

        image_bytes = await player_service.fetch_album_art(
            self.client, self.settings.player_url, status.id, timeout=self.settings.art_timeout_seconds
        )
        if image_bytes is None:
            return None, None

        try:
            art_base64, colors = await asyncio.to_thread(
                artwork_service.build_album_art, image_bytes, self.settings.art_target_size
            )
        except ArtworkException as e:
            log_with_context(
                logger,
                "warning",
                "Album art undecodable, publishing without art",
                track_id=status.id,
                error=e.message,
                event_type="art_decode_failed",
            )
            return None, None

        self.art_cache = AlbumArtCache(album_name=album_name, art_base64=art_base64, colors=colors)
        return art_base64, colors

    async def run(self) -> None:
        """Poll forever, sleeping ``poll_interval_seconds`` between ticks."""
        while True:
            try:
                await self.tick()
            except Exception as e:
                log_with_context(
                    logger,
                    "error",
                    "Unexpected error during poll tick",
                    error=str(e),
                    error_type=type(e).__name__,
                    event_type="tick_error",
                )
                logger.error("Exception traceback:", exc_info=True)
            await asyncio.sleep(self.settings.poll_interval_seconds)
