"""Music player HTTP API client."""

import httpx
from pydantic import ValidationError

from now_playing_card.exceptions import ArtworkException, PlayerUnreachableException
from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.models.player import PlayerStatus

STATUS_TIMEOUT_SECONDS = 5.0
ART_TIMEOUT_SECONDS = 10.0

logger = get_logger(__name__)


async def fetch_status(
    client: httpx.AsyncClient,
    player_url: str,
    timeout: float = STATUS_TIMEOUT_SECONDS,
) -> PlayerStatus:
    """Fetch the current playback status from the player.

    Args:
        client: Shared HTTP client
        player_url: Base URL of the player API (without trailing slash)
        timeout: Request timeout in seconds

    Returns:
        Parsed PlayerStatus

    Raises:
        PlayerUnreachableException: On network errors, timeouts, non-2xx
            responses or an unparseable body
    """
    url = f"{player_url}/status"
    try:
        response = await client.get(url, timeout=timeout)
        response.raise_for_status()
        return PlayerStatus.model_validate(response.json())
    except httpx.HTTPStatusError as e:
        raise PlayerUnreachableException(
            f"Player status request failed (HTTP {e.response.status_code})",
            details={"status_code": e.response.status_code, "url": url},
        ) from e
    except httpx.HTTPError as e:
        raise PlayerUnreachableException(
            f"Failed to reach player: {str(e) or type(e).__name__}",
            details={"error_type": "network_error", "url": url},
        ) from e
    except (ValueError, ValidationError) as e:
        raise PlayerUnreachableException(
            f"Failed to parse player status: {str(e)}",
            details={"error_type": "parsing_error", "url": url},
        ) from e


async def fetch_album_art(
    client: httpx.AsyncClient,
    player_url: str,
    track_id: int,
    timeout: float = ART_TIMEOUT_SECONDS,
) -> bytes | None:
    """Download the medium-size album art for a track.

    Args:
        client: Shared HTTP client
        player_url: Base URL of the player API
        track_id: Player track id
        timeout: Request timeout in seconds

    Returns:
        Raw image bytes, or None when the player has no art for the track
        (any non-2xx response)

    Raises:
        ArtworkException: On network errors or timeouts
    """
    url = f"{player_url}/pic/medium/{track_id}"
    try:
        response = await client.get(url, timeout=timeout)
    except httpx.HTTPError as e:
        raise ArtworkException(
            f"Failed to fetch album art: {str(e) or type(e).__name__}",
            details={"error_type": "network_error", "track_id": track_id},
        ) from e

    if response.is_error:
        log_with_context(
            logger,
            "warning",
            "Album art fetch failed",
            status_code=response.status_code,
            track_id=track_id,
            event_type="art_fetch_failed",
        )
        return None

    return response.content
