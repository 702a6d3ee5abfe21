# src/wishlist_api/infrastructure/caching/ttl_cache.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""In-process TTL Cache.

Synopsis:
    Process-local implementation of the application CachePort. Entries are
    stored with their capture time and are fresh while
    ``now - captured_at < ttl``.

Design:
    * Lazy expiry: a stale entry reads as a miss but is left in place until
      the next ``set_json`` for that key overwrites it. There is no sweeper.
    * Unbounded: no size limit and no LRU eviction. Long-lived processes with
      many one-off users accumulate stale entries; bound the size before
      relying on this for large keyspaces.
    * Values are deep-copied through JSON on the way in and out so a cached
      value never aliases caller state.
    * A ``threading.Lock`` guards the map so the cache is safe to share
      between the event loop and worker threads.
    * The clock is injectable for deterministic tests.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable, Mapping
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from wishlist_api.application.interfaces.cache_port import CachePort
from wishlist_api.infrastructure.observability.metrics import get_cache_operations_total

__all__ = ["InMemoryTTLCache"]


@dataclass(slots=True)
class _Entry:
    payload: str
    captured_at: float
    ttl: float


def _namespace(key: str) -> str:
    return key.split(":", 1)[0] if ":" in key else "default"


class InMemoryTTLCache(CachePort):
    """Dictionary-backed JSON cache with lazily checked TTLs.

    Args:
        clock: Monotonic seconds source. Defaults to :func:`time.monotonic`.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of stored entries, stale ones included."""
        with self._lock:
            return len(self._entries)

    @staticmethod
    def _count(operation: str, key: str, hit: str) -> None:
        with suppress(Exception):
            get_cache_operations_total().labels(
                operation=operation, namespace=_namespace(key), hit=hit
            ).inc()

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        """Return the fresh value for ``key`` or ``None``.

        Stale entries are treated as absent and are not removed.
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            payload = entry.payload if entry and now - entry.captured_at < entry.ttl else None
        self._count("get_json", key, "false" if payload is None else "true")
        if payload is None:
            return None
        return json.loads(payload)

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        """Store ``value`` under ``key``; ``ttl <= 0`` is a no-op."""
        if ttl <= 0:
            return
        entry = _Entry(payload=json.dumps(value), captured_at=self._clock(), ttl=float(ttl))
        with self._lock:
            self._entries[key] = entry
        self._count("set_json", key, "n/a")

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
        self._count("delete", key, "n/a")

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        self._count("clear", "all:*", "n/a")
