# src/wishlist_api/infrastructure/caching/json_cache.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""JSON Cache (Redis-backed).

Synopsis:
    Adapter that implements the application CachePort Protocol on top of the
    shared Redis client provided by `infrastructure/caching/redis_client.py`.
    Used instead of the in-process TTL cache when several API processes
    should share cached wishlists and product details.

Design:
    * Uses the global Redis client via `get_redis_client()` unless a client
      is injected.
    * Pure JSON (utf-8) serialization; no pickle.
    * Key policy:
        - Namespace prefix owns service + version: `wishlist:v1`
        - Callers provide the logical key: `wishlist:<userId>` or
          `product:<productId>`
    * TTL is delegated to Redis (`SET ... EX`).
    * `clear()` only removes keys under the configured namespace.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from wishlist_api.application.interfaces.cache_port import CachePort
from wishlist_api.infrastructure.caching.redis_client import RedisClient, get_redis_client
from wishlist_api.infrastructure.observability.metrics import (
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
)

__all__ = ["RedisJsonCache"]

_CLEAR_BATCH = 500


class RedisJsonCache(CachePort):
    """Redis-backed implementation of the CachePort Protocol.

    Keys are stored as ``{namespace}:{key}``; the ``key`` arguments passed to
    methods are the logical keys used by the orchestrator.
    """

    def __init__(
        self, *, namespace: str = "wishlist:v1", client: RedisClient | None = None
    ) -> None:
        """Initialize the cache adapter.

        Args:
            namespace: Prefix applied to all keys to avoid collisions.
            client: Optional Redis client; defaults to the shared client.
        """
        self._ns = namespace.rstrip(":")
        self._client = client

    def _redis(self) -> RedisClient:
        return self._client if self._client is not None else get_redis_client()

    def _k(self, key: str) -> str:
        """Build a namespaced key."""
        return f"{self._ns}:{key.lstrip(':')}"

    @staticmethod
    def _observe(operation: str, key: str, hit: str, started: float) -> None:
        namespace = key.split(":", 1)[0] if ":" in key else "default"
        with suppress(Exception):
            get_cache_operation_duration_seconds().labels(
                operation=operation, namespace=namespace, hit=hit
            ).observe(time.perf_counter() - started)
            get_cache_operations_total().labels(
                operation=operation, namespace=namespace, hit=hit
            ).inc()

    # ------------------------------------------------------------------ #
    # CachePort implementation
    # ------------------------------------------------------------------ #
    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        """Get a JSON-serialized value by key.

        Args:
            key: Logical cache key.

        Returns:
            Deserialized mapping if present, else None.
        """
        start = time.perf_counter()
        hit_label = "false"
        try:
            raw = await self._redis().get(self._k(key))
            if raw is None:
                return None
            hit_label = "true"
            return json.loads(raw)
        finally:
            self._observe("get_json", key, hit_label, start)

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        """Set a JSON-serialized value with TTL.

        Args:
            key: Logical cache key.
            value: JSON-serializable mapping.
            ttl: Time-to-live in seconds; ``<= 0`` skips the write.
        """
        if ttl <= 0:
            return
        start = time.perf_counter()
        try:
            await self._redis().set(self._k(key), json.dumps(value), ex=ttl)
        finally:
            self._observe("set_json", key, "n/a", start)

    async def delete(self, key: str) -> None:
        start = time.perf_counter()
        try:
            await self._redis().delete(self._k(key))
        finally:
            self._observe("delete", key, "n/a", start)

    async def clear(self) -> None:
        """Delete every key under this cache's namespace."""
        start = time.perf_counter()
        redis = self._redis()
        batch: list[str] = []
        try:
            async for raw_key in redis.scan_iter(match=f"{self._ns}:*", count=_CLEAR_BATCH):
                batch.append(raw_key)
                if len(batch) >= _CLEAR_BATCH:
                    await redis.delete(*batch)
                    batch.clear()
            if batch:
                await redis.delete(*batch)
        finally:
            self._observe("clear", "all:*", "n/a", start)
