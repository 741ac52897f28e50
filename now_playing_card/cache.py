"""Simple in-memory read-through cache for theme and font lookups."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any, TypeVar

from now_playing_card.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

T = TypeVar("T")


class CacheEntry:
    """A cached value with an optional expiration time."""

    def __init__(self, value: Any, expires_at: datetime | None):
        self.value = value
        self.expires_at = expires_at

    def is_expired(self) -> bool:
        """Check if cache entry has expired (entries without expiry never do)."""
        return self.expires_at is not None and datetime.now() >= self.expires_at


class SimpleCache:
    """Simple in-memory cache with optional TTL support.

    Safe for concurrent async access using asyncio.Lock.
    """

    def __init__(self):
        self._cache: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    async def get(self, key: str) -> Any | None:
        """Get cached value if not expired.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        async with self._lock:
            entry = self._cache.get(key)
            if entry and not entry.is_expired():
                log_with_context(
                    logger,
                    "debug",
                    "Cache hit",
                    cache_key=key,
                    event_type="cache_hit",
                )
                return entry.value

            if entry:
                del self._cache[key]
                log_with_context(
                    logger,
                    "debug",
                    "Cache expired",
                    cache_key=key,
                    event_type="cache_expired",
                )

            return None

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Set cached value.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Time to live in seconds, or None to keep it for the
                process lifetime
        """
        async with self._lock:
            expires_at = datetime.now() + timedelta(seconds=ttl_seconds) if ttl_seconds is not None else None
            self._cache[key] = CacheEntry(value, expires_at)
            log_with_context(
                logger,
                "debug",
                "Cache set",
                cache_key=key,
                ttl_seconds=ttl_seconds,
                event_type="cache_set",
            )

    async def clear(self, key: str | None = None) -> None:
        """Clear cache entry or entire cache.

        Args:
            key: Specific key to clear, or None to clear all
        """
        async with self._lock:
            if key:
                self._cache.pop(key, None)
            else:
                self._cache.clear()
                log_with_context(
                    logger,
                    "info",
                    "Cache cleared",
                    event_type="cache_clear_all",
                )


async def cached(
    cache: SimpleCache,
    key: str,
    fetch_func: Callable[[], Awaitable[T]],
    ttl_seconds: int | None = None,
) -> T:
    """Read-through wrapper for async loaders.

    Args:
        cache: Cache instance
        key: Cache key
        fetch_func: Async function to call on a cache miss
        ttl_seconds: Time to live in seconds (None: never expires)

    Returns:
        Cached or freshly loaded value
    """
    cached_value: T | None = await cache.get(key)
    if cached_value is not None:
        return cached_value

    log_with_context(
        logger,
        "debug",
        "Cache miss, loading fresh value",
        cache_key=key,
        event_type="cache_miss",
    )
    value: T = await fetch_func()

    await cache.set(key, value, ttl_seconds)

    return value
