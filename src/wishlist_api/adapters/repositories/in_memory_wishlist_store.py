# src/wishlist_api/adapters/repositories/in_memory_wishlist_store.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""In-memory WishlistStore for local development and tests.

Documents are held in their serialized form so callers never share mutable
state with the store.
"""

from __future__ import annotations

from typing import Any

from wishlist_api.domain.entities.wishlist import Wishlist


class InMemoryWishlistStore:
    """Dictionary-backed WishlistStore keyed by user id."""

    def __init__(self) -> None:
        self._docs: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._docs)

    async def find_by_user_id(self, user_id: str) -> Wishlist | None:
        doc = self._docs.get(user_id)
        return Wishlist.from_document(doc) if doc is not None else None

    async def create_or_update(self, wishlist: Wishlist) -> Wishlist:
        self._docs[wishlist.user_id] = wishlist.to_document()
        return Wishlist.from_document(self._docs[wishlist.user_id])
