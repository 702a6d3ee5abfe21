# Copyright (c)
# SPDX-License-Identifier: MIT
"""ORM model for wishlist documents.

One row per user; ``user_id`` is the primary key so the store cannot hold two
wishlists for the same user. Items are kept as an ordered JSON array in their
wire shape.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONDocument


class WishlistRow(Base):
    """Persistence row for :class:`~wishlist_api.domain.entities.wishlist.Wishlist`."""

    __tablename__ = "wishlists"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSONDocument, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
