# src/wishlist_api/domain/interfaces/repositories/wishlist_store.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Wishlist Store Protocol.

Synopsis:
    Persistence contract for wishlist documents keyed by user id. Stores are
    stateless collaborators with no cache awareness.

Layer:
    domain/interfaces/repositories
"""

from __future__ import annotations

from typing import Protocol

from wishlist_api.domain.entities.wishlist import Wishlist


class WishlistStore(Protocol):
    """Upsert-style persistence for wishlists."""

    async def find_by_user_id(self, user_id: str) -> Wishlist | None:
        """Return the user's wishlist or ``None`` if none was ever saved."""
        ...

    async def create_or_update(self, wishlist: Wishlist) -> Wishlist:
        """Persist ``wishlist`` keyed by ``user_id`` and return the stored state.

        Raises:
            PersistenceError: The underlying store failed.
        """
        ...
