"""Custom exceptions for the now playing card with proper HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    NOW_PLAYING_ERROR = "NOW_PLAYING_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Publish endpoint errors
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_SNAPSHOT = "INVALID_SNAPSHOT"

    # Player errors
    PLAYER_ERROR = "PLAYER_ERROR"
    PLAYER_UNREACHABLE = "PLAYER_UNREACHABLE"
    ARTWORK_ERROR = "ARTWORK_ERROR"

    # Poller -> server publish errors
    PUBLISH_ERROR = "PUBLISH_ERROR"

    # Theme/font errors
    THEME_ERROR = "THEME_ERROR"
    FONT_ERROR = "FONT_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


class NowPlayingException(Exception):
    """Base exception for now playing errors with HTTP status code support.

    All custom exceptions inherit from this class so that the server's
    exception handlers and the poller's tick boundary can treat them alike.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NOW_PLAYING_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize now playing exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class UnauthorizedException(NowPlayingException):
    """Missing or invalid bearer token on the publish endpoint."""

    def __init__(self, message: str = "Unauthorized", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.UNAUTHORIZED, status_code=401, details=details)


class InvalidSnapshotException(NowPlayingException):
    """Publish payload is not valid JSON or not a valid snapshot."""

    def __init__(self, message: str = "Invalid JSON", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.INVALID_SNAPSHOT, status_code=400, details=details)


class NotFoundException(NowPlayingException):
    """Route does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code=ErrorCode.NOT_FOUND, status_code=404)


class PlayerException(NowPlayingException):
    """Music player API errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PLAYER_ERROR,
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class PlayerUnreachableException(PlayerException):
    """Player status could not be fetched (network error, timeout, non-2xx)."""

    def __init__(self, message: str = "Player unreachable", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.PLAYER_UNREACHABLE,
            status_code=503,
            details=details,
        )


class ArtworkException(PlayerException):
    """Album art could not be downloaded or decoded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.ARTWORK_ERROR, status_code=502, details=details)


class PublishException(NowPlayingException):
    """Snapshot could not be delivered to the server."""

    def __init__(self, message: str, status_code: int = 502, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.PUBLISH_ERROR, status_code=status_code, details=details)


class ThemeException(NowPlayingException):
    """Theme file missing or not matching the theme schema."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.THEME_ERROR, status_code=500, details=details)


class FontException(NowPlayingException):
    """Font file missing or unsupported."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.FONT_ERROR, status_code=500, details=details)


class ConfigurationException(NowPlayingException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)
