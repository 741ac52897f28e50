"""Unit tests for snapshot publishing."""

import httpx
import pytest

from now_playing_card.exceptions import ErrorCode, PublishException
from now_playing_card.services import publish_service

SERVER_URL = "http://server.test"
PUBLISH_URL = f"{SERVER_URL}/api/now-playing"


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", PUBLISH_URL), **kwargs)


@pytest.mark.asyncio
async def test_publish_snapshot_posts_wire_format(mock_http_client, sample_snapshot):
    mock_http_client.post.return_value = _response(200, json={"success": True})

    await publish_service.publish_snapshot(mock_http_client, SERVER_URL, "secret", sample_snapshot, timeout=3.0)

    mock_http_client.post.assert_called_once_with(
        PUBLISH_URL,
        json=sample_snapshot.to_wire(),
        headers={"Authorization": "Bearer secret"},
        timeout=3.0,
    )


@pytest.mark.asyncio
async def test_publish_snapshot_rejected(mock_http_client, sample_snapshot):
    mock_http_client.post.return_value = _response(401, json={"error": "Unauthorized"})

    with pytest.raises(PublishException) as exc_info:
        await publish_service.publish_snapshot(mock_http_client, SERVER_URL, "wrong", sample_snapshot)

    assert exc_info.value.code == ErrorCode.PUBLISH_ERROR
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_publish_snapshot_network_error(mock_http_client, sample_snapshot):
    mock_http_client.post.side_effect = httpx.ConnectError("refused")

    with pytest.raises(PublishException) as exc_info:
        await publish_service.publish_snapshot(mock_http_client, SERVER_URL, "secret", sample_snapshot)

    assert exc_info.value.status_code == 502
    assert exc_info.value.details["error_type"] == "network_error"
