"""Widget routes: the animated SVG card and its HTML preview."""

import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from now_playing_card.dependencies import get_snapshot_store, get_theme_loader
from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.services.theme_service import ThemeLoader
from now_playing_card.state_managers import SnapshotStore
from now_playing_card.svg import classify, render_card
from now_playing_card.views.template_renderer import TemplateRenderer

router = APIRouter()
logger = get_logger(__name__)

SVG_MEDIA_TYPE = "image/svg+xml"


@router.get(
    "/widget.svg",
    summary="Now playing card",
    description="""
    Animated SVG card for the latest snapshot.

    Query parameters override the presentation: `theme`, `position`, `align`,
    `showStatus`, `showTitle`, `showArtist`, `showAlbum`, `fontTitle`,
    `fontBody`, `fontTitleFamily`, `fontBodyFamily`. Invalid values are ignored.
    """,
    response_class=Response,
    responses={200: {"content": {SVG_MEDIA_TYPE: {}}}},
)
@router.get("/now-playing.svg", include_in_schema=False)
async def widget_svg(
    request: Request,
    store: SnapshotStore = Depends(get_snapshot_store),
    theme_loader: ThemeLoader = Depends(get_theme_loader),
) -> Response:
    """Render the card with the request's presentation overrides."""
    config = await theme_loader.resolve(request.query_params)
    snapshot = await store.get()
    now_ms = int(time.time() * 1000)
    svg = render_card(snapshot, config, now_ms)

    log_with_context(
        logger,
        "debug",
        "Rendered widget",
        card_state=classify(snapshot, now_ms).value,
        width=config.width,
        height=config.height,
        event_type="widget_rendered",
    )
    return Response(content=svg, media_type=SVG_MEDIA_TYPE, headers={"Cache-Control": "s-maxage=1"})


@router.get("/preview", response_class=HTMLResponse)
async def preview(
    request: Request,
    store: SnapshotStore = Depends(get_snapshot_store),
    theme_loader: ThemeLoader = Depends(get_theme_loader),
) -> HTMLResponse:
    """HTML page embedding the same card, for eyeballing themes."""
    config = await theme_loader.resolve(request.query_params)
    snapshot = await store.get()
    now_ms = int(time.time() * 1000)
    svg = render_card(snapshot, config, now_ms, declaration=False)

    log_with_context(
        logger,
        "debug",
        "Rendered preview",
        card_state=classify(snapshot, now_ms).value,
        event_type="preview_rendered",
    )
    return TemplateRenderer.render_preview(request, svg, config)
