"""Bearer token authentication for the publish endpoint."""

import secrets

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from now_playing_card.config import Settings, get_settings
from now_playing_card.exceptions import UnauthorizedException
from now_playing_card.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


async def verify_api_key(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> None:
    """Verify the shared API key from the Authorization header.

    Runs before the request body is read, so unauthorized requests never
    reach snapshot validation.

    Raises:
        UnauthorizedException: If the key is missing or does not match

    Example:
        Authorization: Bearer your-api-key-here
    """
    client_ip = request.client.host if request.client else "unknown"

    if not credentials:
        log_with_context(
            logger,
            "warning",
            "Missing API key",
            event_type="auth_failure",
            path=request.url.path,
            ip=client_ip,
        )
        raise UnauthorizedException()

    if not secrets.compare_digest(credentials.credentials.encode(), settings.api_key.encode()):
        log_with_context(
            logger,
            "warning",
            "Invalid API key",
            event_type="auth_failure",
            path=request.url.path,
            ip=client_ip,
        )
        raise UnauthorizedException()

    log_with_context(
        logger,
        "debug",
        "API key verified",
        event_type="auth_success",
        path=request.url.path,
    )
