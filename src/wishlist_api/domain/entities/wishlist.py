# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Wishlist Entities

Purpose:
    Immutable domain representation of a user's wishlist and its items.
    Mutations return new instances; the persisted/wire document shape is
    ``{userId, items, createdAt, updatedAt}`` with camelCase item fields.

Layer: domain/entities
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .base import BaseEntity, from_iso, to_iso, utc_now
from .product import ProductDetails


@dataclass(frozen=True, slots=True)
class WishlistItem(BaseEntity):
    """A product reference saved in a wishlist.

    Args:
        product_id: Catalog identifier, unique within one wishlist.
        name: Product name captured when the item was added.
        price: Product price captured when the item was added (non-negative).
        image: Image URL.
        category: Category label.
        description: Free text.
        variants: Opaque variant records.
        total_stock: Units in stock at capture time (non-negative).
        reviews: Opaque review records.

    Raises:
        ValueError: If invariants are violated.
    """

    product_id: str
    name: str
    price: float
    image: str = ""
    category: str = ""
    description: str = ""
    variants: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    total_stock: int = 0
    reviews: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.product_id:
            raise ValueError("product_id must be non-empty")
        if self.price < 0:
            raise ValueError("price must be >= 0")
        if self.total_stock < 0:
            raise ValueError("total_stock must be >= 0")

    @classmethod
    def from_product(cls, product: ProductDetails) -> WishlistItem:
        """Capture a wishlist item from normalized product details."""
        return cls(
            product_id=product.product_id,
            name=product.name,
            price=product.price,
            image=product.image_url,
            category=product.category,
            description=product.description,
            variants=product.variants,
            total_stock=product.total_stock,
            reviews=product.reviews,
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "category": self.category,
            "description": self.description,
            "variants": [dict(v) for v in self.variants],
            "totalStock": self.total_stock,
            "reviews": [dict(r) for r in self.reviews],
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> WishlistItem:
        return cls(
            product_id=str(doc["productId"]),
            name=str(doc.get("name") or ""),
            price=float(doc.get("price") or 0),
            image=str(doc.get("image") or ""),
            category=str(doc.get("category") or ""),
            description=str(doc.get("description") or ""),
            variants=tuple(dict(v) for v in doc.get("variants") or ()),
            total_stock=int(doc.get("totalStock") or 0),
            reviews=tuple(dict(r) for r in doc.get("reviews") or ()),
        )


@dataclass(frozen=True, slots=True)
class Wishlist(BaseEntity):
    """A user's wishlist.

    Args:
        user_id: Owner; at most one wishlist exists per user.
        items: Items in insertion (display) order; product ids are unique.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).

    Raises:
        ValueError: If ``user_id`` is empty or product ids repeat.
    """

    user_id: str
    items: tuple[WishlistItem, ...] = ()
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("user_id must be non-empty")
        ids = [item.product_id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("product ids within a wishlist must be unique")

    @classmethod
    def empty(cls, user_id: str, *, now: datetime | None = None) -> Wishlist:
        """Return a new, unpersisted wishlist with no items."""
        ts = now or utc_now()
        return cls(user_id=user_id, items=(), created_at=ts, updated_at=ts)

    def find(self, product_id: str) -> WishlistItem | None:
        """Return the item for ``product_id`` or ``None``."""
        return next((i for i in self.items if i.product_id == product_id), None)

    def contains(self, product_id: str) -> bool:
        return self.find(product_id) is not None

    def with_item(self, item: WishlistItem, *, now: datetime | None = None) -> Wishlist:
        """Return a copy with ``item`` appended and ``updated_at`` bumped."""
        return replace(self, items=(*self.items, item), updated_at=now or utc_now())

    def without_item(self, product_id: str, *, now: datetime | None = None) -> Wishlist:
        """Return a copy without ``product_id`` and ``updated_at`` bumped."""
        remaining = tuple(i for i in self.items if i.product_id != product_id)
        return replace(self, items=remaining, updated_at=now or utc_now())

    def cleared(self, *, now: datetime | None = None) -> Wishlist:
        """Return a copy with no items and ``updated_at`` bumped."""
        return replace(self, items=(), updated_at=now or utc_now())

    def to_document(self) -> dict[str, Any]:
        """Return the persisted/wire document as a JSON-compatible mapping."""
        return {
            "userId": self.user_id,
            "items": [item.to_document() for item in self.items],
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Wishlist:
        """Rebuild an instance from :meth:`to_document` output."""
        return cls(
            user_id=str(doc["userId"]),
            items=tuple(WishlistItem.from_document(i) for i in doc.get("items") or ()),
            created_at=from_iso(doc["createdAt"]),
            updated_at=from_iso(doc["updatedAt"]),
        )
