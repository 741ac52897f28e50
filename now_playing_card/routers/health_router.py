"""Health endpoint."""

from fastapi import APIRouter

from now_playing_card import __version__
from now_playing_card.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint for container healthchecks and monitoring."""
    return HealthResponse(status="ok", version=__version__)
