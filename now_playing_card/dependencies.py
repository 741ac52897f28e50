"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from now_playing_card.services.theme_service import ThemeLoader
from now_playing_card.state_managers import SnapshotStore


async def get_snapshot_store(request: Request) -> SnapshotStore:
    """
    Get the snapshot store from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        The shared SnapshotStore instance.

    Raises:
        RuntimeError: If the snapshot store is not initialized.
    """
    store: SnapshotStore | None = getattr(request.app.state, "snapshot_store", None)

    if store is None:
        raise RuntimeError("Snapshot store not initialized.")

    return store


async def get_theme_loader(request: Request) -> ThemeLoader:
    """
    Get the theme and font loader from app state.

    Raises:
        RuntimeError: If the theme loader is not initialized.
    """
    loader: ThemeLoader | None = getattr(request.app.state, "theme_loader", None)

    if loader is None:
        raise RuntimeError("Theme loader not initialized.")

    return loader
