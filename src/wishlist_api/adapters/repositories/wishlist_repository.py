# src/wishlist_api/adapters/repositories/wishlist_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
SqlAlchemyWishlistStore: wishlist persistence on async SQLAlchemy.

Purpose:
    Implement the WishlistStore protocol over the ``wishlists`` table. Each
    call opens its own session and transaction; the store holds no state
    between calls and knows nothing about caching.

Layer: adapters / repositories

Notes:
    * ``create_or_update`` is an upsert keyed by ``user_id`` (``session.merge``
      on the primary key), portable across PostgreSQL and SQLite.
    * Driver and ORM failures are raised as ``PersistenceError``.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wishlist_api.domain.entities.wishlist import Wishlist, WishlistItem
from wishlist_api.domain.exceptions.wishlist import PersistenceError
from wishlist_api.infrastructure.database.models.wishlist import WishlistRow
from wishlist_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def _aware(value: datetime) -> datetime:
    """SQLite drops tzinfo; every stored timestamp is UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_row(wishlist: Wishlist) -> WishlistRow:
    return WishlistRow(
        user_id=wishlist.user_id,
        items=[item.to_document() for item in wishlist.items],
        created_at=wishlist.created_at,
        updated_at=wishlist.updated_at,
    )


def _to_entity(row: WishlistRow) -> Wishlist:
    return Wishlist(
        user_id=row.user_id,
        items=tuple(WishlistItem.from_document(doc) for doc in row.items or ()),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlAlchemyWishlistStore:
    """WishlistStore backed by an async SQLAlchemy session factory."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the store.

        Args:
            sessionmaker: Factory producing sessions bound to the target database.
        """
        self._sessionmaker = sessionmaker

    async def find_by_user_id(self, user_id: str) -> Wishlist | None:
        try:
            async with self._sessionmaker() as session:
                row = await session.get(WishlistRow, user_id)
                return _to_entity(row) if row is not None else None
        except SQLAlchemyError as exc:
            logger.error(
                "wishlist_store_read_failed",
                extra={"user_id": user_id, "error_type": type(exc).__name__},
            )
            raise PersistenceError() from exc

    async def create_or_update(self, wishlist: Wishlist) -> Wishlist:
        try:
            async with self._sessionmaker() as session, session.begin():
                merged = await session.merge(_to_row(wishlist))
                await session.flush()
                return _to_entity(merged)
        except SQLAlchemyError as exc:
            logger.error(
                "wishlist_store_write_failed",
                extra={"user_id": wishlist.user_id, "error_type": type(exc).__name__},
            )
            raise PersistenceError() from exc
