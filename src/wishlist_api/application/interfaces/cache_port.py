# src/wishlist_api/application/interfaces/cache_port.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Application Interface: Cache Port.

Synopsis:
    Minimal JSON cache behavior used by the wishlist orchestrator. Enables
    swapping the in-process TTL cache, Redis, or no cache at all.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class CachePort(Protocol):
    """JSON cache with TTL semantics.

    Implementations must store values as JSON-serializable mappings, apply
    TTL in seconds, and never hand out a reference that aliases caller state.
    TTLs ``<= 0`` mean "do not cache".
    """

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        """Get a JSON-serializable value by key.

        Args:
            key: Cache key (for example ``wishlist:u1`` or ``product:p1``).

        Returns:
            Deserialized JSON mapping if present and fresh, else ``None``.
        """

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        """Set a JSON-serializable value with TTL.

        Args:
            key: Cache key.
            value: JSON-serializable mapping.
            ttl: Time-to-live in seconds.
        """

    async def delete(self, key: str) -> None:
        """Evict ``key`` if present."""

    async def clear(self) -> None:
        """Evict every entry owned by this cache."""
