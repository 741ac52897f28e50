"""Deliver snapshots from the poller to the now playing server."""

import httpx

from now_playing_card.exceptions import PublishException
from now_playing_card.models.snapshot import PlaybackSnapshot

PUBLISH_TIMEOUT_SECONDS = 10.0


async def publish_snapshot(
    client: httpx.AsyncClient,
    server_url: str,
    api_key: str,
    snapshot: PlaybackSnapshot,
    timeout: float = PUBLISH_TIMEOUT_SECONDS,
) -> None:
    """POST a snapshot to ``{server_url}/api/now-playing``.

    Args:
        client: Shared HTTP client
        server_url: Base URL of the server (without trailing slash)
        api_key: Shared secret sent as Bearer token
        snapshot: Snapshot to store
        timeout: Request timeout in seconds

    Raises:
        PublishException: On network errors, timeouts or non-2xx responses
    """
    try:
        response = await client.post(
            f"{server_url}/api/now-playing",
            json=snapshot.to_wire(),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise PublishException(
            f"Server rejected snapshot (HTTP {e.response.status_code})",
            status_code=e.response.status_code,
            details={"api_response": e.response.text},
        ) from e
    except httpx.HTTPError as e:
        raise PublishException(
            f"Failed to publish snapshot: {str(e) or type(e).__name__}",
            details={"error_type": "network_error"},
        ) from e
