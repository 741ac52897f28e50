from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent  # now-playing-card/

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=Path(BASE_DIR / ".env"),
    env_file_encoding="utf-8",
    case_sensitive=False,
    extra="ignore",
    validate_default=True,
)


def _normalize_log_level(value: str) -> str:
    value = value.strip().upper()
    if value not in LOG_LEVELS:
        raise ValueError(f"unknown log level: {value}")
    return value


class Settings(BaseSettings):
    """Server settings with validation.

    The shared API key is required; everything else has a working default.
    Secrets must be provided via environment variables or the .env file.
    """

    # Shared secret the poller presents as a Bearer token
    api_key: str = Field(min_length=1, description="Shared secret for POST /api/now-playing")

    # API server settings
    api_host: str = Field(default="0.0.0.0", min_length=1, description="Server bind host")
    api_port: int = Field(ge=1, le=65535, default=8000, description="Server port")

    # Theme and font lookup
    themes_dir: Path = Field(default=BASE_DIR / "themes", description="Directory of <name>.json theme files")
    fonts_dir: Path = Field(default=BASE_DIR / "fonts", description="Directory of embeddable font files")

    # Optional file mirror of the latest snapshot (in-memory when unset)
    snapshot_path: Path | None = Field(default=None, description="JSON file holding the latest snapshot")

    log_level: str = Field(default="INFO", description="Logging level")

    model_config = _SETTINGS_CONFIG

    @field_validator("api_key", "api_host", mode="after")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Ensure the value is not whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("value must not be blank")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level is a known logging level."""
        return _normalize_log_level(v)


class PollerSettings(BaseSettings):
    """Poller settings: where the player lives and where to publish snapshots."""

    api_key: str = Field(min_length=1, description="Shared secret sent as Bearer token")
    server_url: str = Field(pattern=r"^https?://", description="Base URL of the now playing server")
    player_url: str = Field(
        default="http://localhost:7814/api1",
        pattern=r"^https?://",
        description="Base URL of the player HTTP API",
    )

    poll_interval_seconds: float = Field(default=10.0, gt=0, description="Delay between poll ticks")
    status_timeout_seconds: float = Field(default=5.0, gt=0)
    art_timeout_seconds: float = Field(default=10.0, gt=0)
    publish_timeout_seconds: float = Field(default=10.0, gt=0)
    art_target_size: int = Field(default=400, ge=24, description="Square size of the embedded album art")

    log_level: str = Field(default="INFO", description="Logging level")

    model_config = _SETTINGS_CONFIG

    @field_validator("api_key", mode="after")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Ensure api_key is not whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("api_key must not be blank")
        return v

    @field_validator("server_url", "player_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop trailing slashes so paths can be appended directly."""
        return v.strip().rstrip("/")

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level is a known logging level."""
        return _normalize_log_level(v)


# Singleton settings instances (cached for performance)
_settings_instance: Settings | None = None
_poller_settings_instance: PollerSettings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Avoids re-reading the .env file on every request. Use with FastAPI's
    Depends().

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def get_poller_settings() -> PollerSettings:
    """Get singleton PollerSettings instance.

    Returns:
        Cached PollerSettings instance
    """
    global _poller_settings_instance
    if _poller_settings_instance is None:
        _poller_settings_instance = PollerSettings()
    return _poller_settings_instance
