"""Snapshot publish and read endpoints used by the poller."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from now_playing_card.core.middleware import PUBLISH_RATE_LIMIT, limiter
from now_playing_card.dependencies import get_snapshot_store
from now_playing_card.exceptions import InvalidSnapshotException
from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.models import PlaybackSnapshot, PublishResponse
from now_playing_card.security import verify_api_key
from now_playing_card.state_managers import SnapshotStore

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/now-playing",
    summary="Publish the now playing snapshot",
    description="""
    Replaces the stored snapshot. The body is a camelCase snapshot as sent by
    the poller.

    **Authentication:** `Authorization: Bearer <API_KEY>`

    **Rate Limited:** 60 requests/minute
    """,
    response_model=PublishResponse,
    responses={
        400: {"description": "Invalid JSON or invalid snapshot"},
        401: {"description": "Missing or invalid API key"},
    },
)
@limiter.limit(PUBLISH_RATE_LIMIT)
async def publish_now_playing(
    request: Request,
    store: SnapshotStore = Depends(get_snapshot_store),
    _api_key: None = Depends(verify_api_key),
) -> JSONResponse:
    """Validate and store a snapshot.

    The body is parsed here rather than by FastAPI so that malformed payloads
    answer 400 with the same error shape as every other failure.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise InvalidSnapshotException("Invalid JSON") from e

    try:
        snapshot = PlaybackSnapshot.model_validate(payload)
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) or "body" for err in e.errors()})
        raise InvalidSnapshotException("Invalid snapshot", details={"fields": fields}) from e

    await store.set(snapshot)
    log_with_context(
        logger,
        "info",
        "Snapshot updated",
        title=snapshot.title,
        artist=snapshot.artist,
        status=snapshot.status,
        has_art=snapshot.art_base64 is not None,
        event_type="snapshot_updated",
    )
    return JSONResponse(content=PublishResponse().model_dump())


@router.get(
    "/now-playing",
    summary="Read the stored snapshot",
    description="Returns the latest snapshot, or `null` when nothing was published yet.",
)
async def get_now_playing(store: SnapshotStore = Depends(get_snapshot_store)) -> JSONResponse:
    """Debug view of the stored snapshot."""
    snapshot = await store.get()
    return JSONResponse(
        content=snapshot.to_wire() if snapshot else None,
        headers={"Cache-Control": "no-cache"},
    )
