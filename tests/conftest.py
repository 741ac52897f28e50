"""Pytest configuration and shared fixtures."""

import io
import os
import time
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Settings are read when the app is imported
os.environ["API_KEY"] = "test-api-key"
os.environ.pop("SNAPSHOT_PATH", None)

from now_playing_card.config import PollerSettings  # noqa: E402
from now_playing_card.core.middleware import limiter  # noqa: E402
from now_playing_card.main import app as fastapi_app  # noqa: E402
from now_playing_card.models import ColorPalette, PlaybackSnapshot  # noqa: E402

TEST_API_KEY = "test-api-key"
PLAYER_URL = "http://player.test/api1"
SERVER_URL = "http://server.test"


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Rate limit counters are process-wide; start every test from zero."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def test_client():
    """FastAPI test client with lifespan context."""
    with TestClient(fastapi_app) as client:
        yield client


@pytest.fixture
def auth_headers():
    """Authorization header accepted by the publish endpoint."""
    return {"Authorization": f"Bearer {TEST_API_KEY}"}


@pytest.fixture
def mock_http_client():
    """Mock httpx.AsyncClient for player and server calls."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get = AsyncMock()
    mock_client.post = AsyncMock()
    mock_client.aclose = AsyncMock()
    return mock_client


@pytest.fixture
def mock_poller_settings():
    """PollerSettings instance with test values."""
    return PollerSettings(
        api_key="poller-key",
        server_url=SERVER_URL,
        player_url=PLAYER_URL,
        poll_interval_seconds=0.01,
    )


@pytest.fixture
def sample_palette():
    return ColorPalette(dominant="#c81e1e", accent="#f02424", highlight="#ce3535")


@pytest.fixture
def sample_snapshot(sample_palette):
    """Fresh playing snapshot with art."""
    return PlaybackSnapshot(
        title="Bohemian Rhapsody",
        artist="Queen",
        album="A Night at the Opera",
        album_artist="Queen",
        track_number="11",
        duration=354,
        progress=125.5,
        status="playing",
        art_base64="aGVsbG8=",
        colors=sample_palette,
        updated_at=int(time.time() * 1000),
    )


@pytest.fixture
def sample_snapshot_wire(sample_snapshot):
    """The sample snapshot as the poller sends it (camelCase JSON)."""
    return sample_snapshot.to_wire()


@pytest.fixture
def player_status_payload():
    """``GET /status`` body of a playing track."""
    return {
        "status": "playing",
        "id": 5,
        "title": "Bohemian Rhapsody",
        "artist": "Queen",
        "album": "A Night at the Opera",
        "progress": 125.5,
        "track": {
            "title": "Bohemian Rhapsody",
            "artist": "Queen",
            "album": "A Night at the Opera",
            "album_artist": "Queen",
            "track_number": 11,
            "duration": 354.6,
            "id": 5,
        },
    }


def make_image_bytes(size: tuple[int, int], color: tuple[int, int, int], image_format: str = "PNG") -> bytes:
    """Encode a solid-color image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def album_art_bytes():
    """A 600x500 PNG, larger than the target size."""
    return make_image_bytes((600, 500), (200, 30, 30))


@pytest.fixture
def image_bytes_factory():
    """Callable producing solid-color encoded images."""
    return make_image_bytes
