"""Main FastAPI application entry point."""

import os
from pathlib import Path

from dotenv import load_dotenv

from now_playing_card.core.app_factory import create_app
from now_playing_card.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

# Configure structured logging (JSON to file + console)
log_level = os.getenv("LOG_LEVEL", "INFO")
setup_logging(log_level)

# Create application
app = create_app()


@app.get("/")
async def root():
    """Capability listing."""
    return {
        "endpoints": {
            "widget": "/widget.svg",
            "preview": "/preview",
            "update": "POST /api/now-playing",
            "debug": "/api/now-playing",
            "health": "/health",
        },
    }


def run() -> None:
    """Console entry point for ``now-playing-server``."""
    import uvicorn

    from now_playing_card.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "now_playing_card.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
