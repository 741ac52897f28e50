"""Unit tests for the in-memory cache."""

from unittest.mock import AsyncMock

import pytest

from now_playing_card.cache import SimpleCache, cached


@pytest.mark.asyncio
async def test_set_get_and_clear():
    cache = SimpleCache()
    await cache.set("theme:midnight", {"width": 600})

    assert await cache.get("theme:midnight") == {"width": 600}
    assert len(cache) == 1

    await cache.clear("theme:midnight")
    assert await cache.get("theme:midnight") is None

    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.clear()
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_expired_entries_are_dropped():
    cache = SimpleCache()
    await cache.set("short", "value", ttl_seconds=0)

    assert await cache.get("short") is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_cached_loads_once():
    cache = SimpleCache()
    fetch = AsyncMock(return_value="loaded")

    assert await cached(cache, "key", fetch) == "loaded"
    assert await cached(cache, "key", fetch) == "loaded"
    fetch.assert_awaited_once()


@pytest.mark.asyncio
async def test_cached_keeps_falsy_values():
    cache = SimpleCache()
    fetch = AsyncMock(return_value={})

    await cached(cache, "missing", fetch)
    await cached(cache, "missing", fetch)
    fetch.assert_awaited_once()
