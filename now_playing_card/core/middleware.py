"""Middleware configuration."""

from fastapi import FastAPI, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from now_playing_card.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# The widget is embedded from arbitrary origins, so CORS is fully open.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

PUBLISH_RATE_LIMIT = "60/minute"

# Shared by the routers' @limiter.limit decorators and the RateLimitExceeded handler
limiter = Limiter(key_func=get_remote_address)


def setup_middleware(app: FastAPI) -> Limiter:
    """Configure all middleware for the application.

    Args:
        app: FastAPI application instance

    Returns:
        Limiter instance for rate limiting
    """
    log_with_context(
        logger,
        "info",
        "Configuring permissive CORS headers",
        event_type="security_config",
        allow_origin=CORS_HEADERS["Access-Control-Allow-Origin"],
    )

    app.state.limiter = limiter

    @app.middleware("http")
    async def cors_and_count(request: Request, call_next):
        """Count requests, answer preflights and add CORS headers."""
        app.state.request_count = getattr(app.state, "request_count", 0) + 1

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    return limiter
