"""State managers for the server's mutable state: the latest snapshot slot.

All state managers inherit from StateManager and guard their state with an
asyncio.Lock so a read never observes a half-written value.
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.models.snapshot import PlaybackSnapshot

logger = get_logger(__name__)


class StateManager(ABC):
    """Base class for all state managers.

    Subclasses implement the lifecycle hooks called by the app lifespan.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


class SnapshotStore(StateManager):
    """Single-slot store for the latest published snapshot.

    Last write wins; there is no history.
    """

    def __init__(self):
        self._snapshot: PlaybackSnapshot | None = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        pass

    async def cleanup(self) -> None:
        pass

    async def get(self) -> PlaybackSnapshot | None:
        """Return the latest snapshot, or None if nothing was published yet."""
        async with self._lock:
            return self._snapshot

    async def set(self, snapshot: PlaybackSnapshot) -> None:
        """Replace the stored snapshot."""
        async with self._lock:
            await self._write(snapshot)
            self._snapshot = snapshot

    async def _write(self, snapshot: PlaybackSnapshot) -> None:
        """Persist hook; called under the lock before the slot is swapped."""


class MemorySnapshotStore(SnapshotStore):
    """Snapshot store living only in process memory."""


class FileSnapshotStore(SnapshotStore):
    """Snapshot store mirrored to a JSON file so it survives restarts.

    Writes go to a temporary sibling file that atomically replaces the
    target, so the file always holds a complete snapshot.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = path

    async def initialize(self) -> None:
        """Load the previously stored snapshot, if any."""
        if not self.path.exists():
            return
        try:
            data = json.loads(await asyncio.to_thread(self.path.read_text, encoding="utf-8"))
            snapshot = PlaybackSnapshot.model_validate(data) if data is not None else None
        except (OSError, ValueError, ValidationError) as e:
            log_with_context(
                logger,
                "warning",
                "Stored snapshot unreadable, starting empty",
                path=str(self.path),
                error=str(e),
                event_type="snapshot_load_failed",
            )
            return
        async with self._lock:
            self._snapshot = snapshot
        log_with_context(
            logger,
            "info",
            "Loaded stored snapshot",
            path=str(self.path),
            has_snapshot=snapshot is not None,
            event_type="snapshot_loaded",
        )

    async def _write(self, snapshot: PlaybackSnapshot) -> None:
        await asyncio.to_thread(self._replace_file, json.dumps(snapshot.to_wire()))

    def _replace_file(self, payload: str) -> None:
        """Write ``payload`` to a temporary sibling, then swap it into place."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise


def create_snapshot_store(path: Path | None) -> SnapshotStore:
    """File-backed store when ``path`` is set, in-memory otherwise."""
    if path is None:
        return MemorySnapshotStore()
    return FileSnapshotStore(path)
