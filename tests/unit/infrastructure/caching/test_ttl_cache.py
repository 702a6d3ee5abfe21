# tests/unit/infrastructure/caching/test_ttl_cache.py
from __future__ import annotations

import pytest

from wishlist_api.infrastructure.caching.ttl_cache import InMemoryTTLCache


@pytest.mark.asyncio
async def test_fresh_entry_is_returned(cache: InMemoryTTLCache) -> None:
    await cache.set_json("product:p1", {"name": "Widget"}, ttl=300)

    assert await cache.get_json("product:p1") == {"name": "Widget"}


@pytest.mark.asyncio
async def test_entry_expires_at_ttl_boundary(cache: InMemoryTTLCache, cache_clock) -> None:
    await cache.set_json("wishlist:u1", {"userId": "u1"}, ttl=300)

    cache_clock.advance(299.9)
    assert await cache.get_json("wishlist:u1") is not None
    cache_clock.advance(0.1)
    assert await cache.get_json("wishlist:u1") is None


@pytest.mark.asyncio
async def test_stale_entries_are_kept_until_overwritten(cache: InMemoryTTLCache, cache_clock) -> None:
    await cache.set_json("wishlist:u1", {"v": 1}, ttl=10)
    cache_clock.advance(11)

    assert await cache.get_json("wishlist:u1") is None
    assert len(cache) == 1

    await cache.set_json("wishlist:u1", {"v": 2}, ttl=10)
    assert await cache.get_json("wishlist:u1") == {"v": 2}
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_values_do_not_alias_caller_state(cache: InMemoryTTLCache) -> None:
    value = {"items": [1]}
    await cache.set_json("wishlist:u1", value, ttl=60)
    value["items"].append(2)

    first = await cache.get_json("wishlist:u1")
    assert first == {"items": [1]}
    first["items"].append(3)
    assert await cache.get_json("wishlist:u1") == {"items": [1]}


@pytest.mark.asyncio
async def test_non_positive_ttl_skips_write(cache: InMemoryTTLCache) -> None:
    await cache.set_json("product:p1", {"x": 1}, ttl=0)

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_delete_and_clear(cache: InMemoryTTLCache) -> None:
    await cache.set_json("wishlist:u1", {"a": 1}, ttl=60)
    await cache.set_json("product:p1", {"b": 2}, ttl=60)

    await cache.delete("wishlist:u1")
    await cache.delete("wishlist:missing")
    assert await cache.get_json("wishlist:u1") is None
    assert await cache.get_json("product:p1") == {"b": 2}

    await cache.clear()
    assert len(cache) == 0
