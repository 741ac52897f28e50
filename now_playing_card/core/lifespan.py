"""Application lifespan management."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from now_playing_card import __version__
from now_playing_card.config import get_settings
from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.services.theme_service import ThemeLoader
from now_playing_card.state_managers import create_snapshot_store

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown events.

    Exceptions after yield are logged and re-raised so cleanup still runs.
    """
    settings = get_settings()
    app.state.startup_time = time.time()
    app.state.request_count = 0

    log_with_context(
        logger,
        "info",
        "Starting now playing server",
        version=__version__,
        event_type="app_startup",
    )

    # Initialize state managers
    app.state.snapshot_store = create_snapshot_store(settings.snapshot_path)
    await app.state.snapshot_store.initialize()
    app.state.theme_loader = ThemeLoader(settings.themes_dir, settings.fonts_dir)
    log_with_context(
        logger,
        "info",
        "State managers initialized",
        store=type(app.state.snapshot_store).__name__,
        themes_dir=str(settings.themes_dir),
        fonts_dir=str(settings.fonts_dir),
        event_type="state_managers_ready",
    )

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        log_with_context(
            logger,
            "info",
            "Shutting down now playing server",
            event_type="app_shutdown",
        )

        await app.state.snapshot_store.cleanup()
        await app.state.theme_loader.cache.clear()
        log_with_context(
            logger,
            "info",
            "State managers cleaned up",
            event_type="state_managers_cleanup",
        )
