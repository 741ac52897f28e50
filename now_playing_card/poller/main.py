"""Poller entry point: build the HTTP client and run the poll loop."""

import asyncio
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
from dotenv import load_dotenv
from pydantic import ValidationError

from now_playing_card import __version__
from now_playing_card.config import PollerSettings, get_poller_settings
from now_playing_card.exceptions import ConfigurationException
from now_playing_card.logging_config import get_logger, log_with_context, setup_logging
from now_playing_card.middleware.logging_middleware import redact_sensitive_data
from now_playing_card.poller.poller import NowPlayingPoller

logger = get_logger(__name__)


async def log_request(request: httpx.Request) -> None:
    """Event hook to log requests with redacted sensitive data."""
    log_with_context(
        logger,
        "debug",
        "HTTP Request",
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="http_request",
    )


async def log_response(response: httpx.Response) -> None:
    """Event hook to log responses with redacted sensitive data."""
    log_with_context(
        logger,
        "debug",
        "HTTP Response",
        status_code=response.status_code,
        url=redact_sensitive_data(str(response.request.url)),
        event_type="http_response",
    )


def create_http_client() -> httpx.AsyncClient:
    """HTTP client shared by status, art and publish requests.

    Per-request timeouts come from PollerSettings; the client timeout only
    bounds connection setup and pool checkout.
    """
    event_hooks: dict[str, list[Callable[..., Any]]] = {
        "request": [log_request],
        "response": [log_response],
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=5.0,  # Connection establishment timeout
            read=10.0,  # Read response timeout
            write=5.0,  # Write operation timeout
            pool=5.0,  # Pool checkout timeout
        ),
        limits=httpx.Limits(
            max_keepalive_connections=2,
            max_connections=4,
            keepalive_expiry=30.0,
        ),
        follow_redirects=True,
        event_hooks=event_hooks,
    )


def load_settings() -> PollerSettings:
    """Load poller settings.

    Raises:
        ConfigurationException: If required settings are missing or invalid
    """
    try:
        return get_poller_settings()
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        raise ConfigurationException(
            f"Invalid poller configuration: {', '.join(fields)}",
            details={"fields": fields},
        ) from e


async def main(settings: PollerSettings) -> None:
    """Run the poller until cancelled."""
    log_with_context(
        logger,
        "info",
        "Starting now playing poller",
        version=__version__,
        player_url=redact_sensitive_data(settings.player_url),
        server_url=redact_sensitive_data(settings.server_url),
        poll_interval_seconds=settings.poll_interval_seconds,
        event_type="poller_startup",
    )

    async with create_http_client() as client:
        poller = NowPlayingPoller(client, settings)
        try:
            await poller.run()
        finally:
            log_with_context(
                logger,
                "info",
                "Shutting down now playing poller",
                event_type="poller_shutdown",
            )


def run() -> None:
    """Console entry point for ``now-playing-poller``."""
    load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")
    setup_logging(os.getenv("LOG_LEVEL", "INFO"), log_name="poller")

    try:
        settings = load_settings()
    except ConfigurationException as e:
        log_with_context(
            logger,
            "critical",
            e.message,
            error_code=e.code.value,
            event_type="config_error",
        )
        raise SystemExit(1) from e

    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
