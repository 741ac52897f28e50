"""Exception handlers for the server application."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from now_playing_card.core.middleware import CORS_HEADERS
from now_playing_card.exceptions import ErrorCode, NotFoundException, NowPlayingException
from now_playing_card.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


async def now_playing_exception_handler(request: Request, exc: NowPlayingException) -> JSONResponse:
    """Handle custom exceptions with their HTTP status codes.

    Returns ``{"error": message, "code": code}``; ``details`` is added only
    when the exception carries some.
    """
    log_with_context(
        logger,
        "warning",
        "Request failed",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
        event_type="request_error",
    )

    content: dict[str, Any] = {"error": exc.message, "code": exc.code.value}
    if exc.details:
        content["details"] = exc.details

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes and unsupported methods answer 404 with a fixed body."""
    if exc.status_code in (404, 405):
        not_found = NotFoundException()
        return JSONResponse(status_code=not_found.status_code, content={"error": not_found.message})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions with logging.

    Errors escaping to here bypass the HTTP middleware, so the CORS headers
    are added explicitly.
    """
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        error_code=ErrorCode.INTERNAL_ERROR.value,
        method=request.method,
        path=request.url.path,
        event_type="unhandled_error",
    )
    # Also log the traceback separately for debugging
    logger.error("Exception traceback:", exc_info=True)

    # Don't expose internal error details to clients
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=CORS_HEADERS,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(NowPlayingException, now_playing_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, general_exception_handler)
