"""Integration tests for the HTTP surface."""

import json
import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from now_playing_card.dependencies import get_snapshot_store
from now_playing_card.main import app

CORS_ORIGIN = "Access-Control-Allow-Origin"


def test_root_lists_endpoints(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"] == {
        "widget": "/widget.svg",
        "preview": "/preview",
        "update": "POST /api/now-playing",
        "debug": "/api/now-playing",
        "health": "/health",
    }


def test_health(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "version" in response.json()


def test_get_now_playing_is_null_before_publish(test_client):
    response = test_client.get("/api/now-playing")

    assert response.status_code == 200
    assert response.json() is None
    assert response.headers["cache-control"] == "no-cache"


def test_publish_then_read_back(test_client, auth_headers, sample_snapshot_wire):
    response = test_client.post("/api/now-playing", json=sample_snapshot_wire, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert test_client.get("/api/now-playing").json() == sample_snapshot_wire


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer wrong-key"}, {"Authorization": "Basic dGVzdDp0ZXN0"}],
)
def test_publish_requires_api_key(test_client, sample_snapshot_wire, headers):
    response = test_client.post("/api/now-playing", json=sample_snapshot_wire, headers=headers)

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized"
    assert test_client.get("/api/now-playing").json() is None


def test_publish_checks_auth_before_body(test_client):
    response = test_client.post("/api/now-playing", content=b"{not json")

    assert response.status_code == 401


def test_publish_rejects_invalid_json(test_client, auth_headers):
    response = test_client.post(
        "/api/now-playing",
        content=b"{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON", "code": "INVALID_SNAPSHOT"}


def test_publish_rejects_invalid_snapshot(test_client, auth_headers, sample_snapshot_wire):
    test_client.post("/api/now-playing", json=sample_snapshot_wire, headers=auth_headers)

    response = test_client.post(
        "/api/now-playing",
        json={**sample_snapshot_wire, "status": "stopped", "duration": -3},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid snapshot"
    assert response.json()["details"]["fields"] == ["duration", "status"]
    # Store untouched
    assert test_client.get("/api/now-playing").json() == sample_snapshot_wire


def test_publish_is_rate_limited(test_client, auth_headers, sample_snapshot_wire):
    statuses = [
        test_client.post("/api/now-playing", json=sample_snapshot_wire, headers=auth_headers).status_code
        for _ in range(61)
    ]

    assert statuses[:60] == [200] * 60
    assert statuses[60] == 429


def test_widget_empty_card(test_client):
    response = test_client.get("/widget.svg")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/svg+xml"
    assert response.headers["cache-control"] == "s-maxage=1"
    assert response.headers[CORS_ORIGIN] == "*"
    assert "Nothing playing right now" in response.text
    assert "<image" not in response.text


def test_widget_renders_published_snapshot(test_client, auth_headers, sample_snapshot_wire):
    test_client.post("/api/now-playing", json=sample_snapshot_wire, headers=auth_headers)

    response = test_client.get("/widget.svg")

    root = ET.fromstring(response.content)
    assert root.attrib["width"] == "800"
    assert "NOW PLAYING" in response.text
    assert "Bohemian Rhapsody" in response.text
    assert "data:image/jpeg;base64,aGVsbG8=" in response.text


def test_widget_legacy_path(test_client):
    response = test_client.get("/now-playing.svg")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/svg+xml"


def test_widget_query_overrides(test_client):
    response = test_client.get("/widget.svg", params={"theme": "compact-right", "align": "centre"})

    root = ET.fromstring(response.content)
    assert root.attrib["width"] == "600"
    assert root.attrib["height"] == "160"
    assert 'text-anchor="middle"' in response.text


def test_widget_ignores_invalid_query(test_client):
    default = test_client.get("/widget.svg").text

    response = test_client.get(
        "/widget.svg",
        params={"theme": "does-not-exist", "position": "top", "showTitle": "maybe", "fontTitle": "../x.ttf"},
    )

    assert response.status_code == 200
    assert response.text == default


def test_preview_embeds_svg(test_client):
    response = test_client.get("/preview")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["cache-control"] == "no-cache"
    assert "<svg" in response.text
    assert "<?xml" not in response.text
    assert "Nothing playing right now" in response.text


def test_unknown_route_is_not_found(test_client):
    response = test_client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}
    assert response.headers[CORS_ORIGIN] == "*"


def test_wrong_method_is_not_found(test_client):
    response = test_client.delete("/api/now-playing")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_options_preflight(test_client):
    response = test_client.options("/api/now-playing")

    assert response.status_code == 204
    assert response.content == b""
    assert response.headers[CORS_ORIGIN] == "*"
    assert "POST" in response.headers["Access-Control-Allow-Methods"]
    assert "Authorization" in response.headers["Access-Control-Allow-Headers"]


def test_unexpected_error_is_generic_500():
    async def broken_store():
        raise RuntimeError("database exploded")

    app.dependency_overrides[get_snapshot_store] = broken_store
    try:
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/now-playing")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert response.headers[CORS_ORIGIN] == "*"


def test_publish_rejects_unencodable_text(test_client, auth_headers, sample_snapshot_wire):
    # json.dumps escapes the lone surrogate as "\ud800"
    body = json.dumps({**sample_snapshot_wire, "title": "\ud800abc"})

    response = test_client.post(
        "/api/now-playing",
        content=body,
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["details"]["fields"] == ["title"]
    assert test_client.get("/api/now-playing").json() is None
    widget = test_client.get("/widget.svg")
    assert widget.status_code == 200
    assert "Nothing playing right now" in widget.text
