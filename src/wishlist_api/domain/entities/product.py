# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Product Details Entity

Purpose:
    Immutable, normalized view of a catalog product as needed by the wishlist
    (no I/O). Optional attributes are defaulted so downstream code never
    branches on absence.

Layer: domain/entities
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class ProductDetails(BaseEntity):
    """Normalized product attributes.

    Args:
        product_id: Catalog identifier.
        name: Display name (non-empty).
        price: Unit price (non-negative).
        image_url: Image URL, ``""`` when unknown.
        category: Category label, ``""`` when unknown.
        description: Free text, ``""`` when unknown.
        variants: Opaque variant records.
        total_stock: Units in stock (non-negative).
        reviews: Opaque review records.

    Raises:
        ValueError: If invariants are violated.
    """

    product_id: str
    name: str
    price: float
    image_url: str = ""
    category: str = ""
    description: str = ""
    variants: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    total_stock: int = 0
    reviews: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.product_id:
            raise ValueError("product_id must be non-empty")
        if not self.name:
            raise ValueError("name must be non-empty")
        if self.price < 0:
            raise ValueError("price must be >= 0")
        if self.total_stock < 0:
            raise ValueError("total_stock must be >= 0")

    def to_document(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping suitable for caching."""
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": self.price,
            "imageUrl": self.image_url,
            "category": self.category,
            "description": self.description,
            "variants": [dict(v) for v in self.variants],
            "totalStock": self.total_stock,
            "reviews": [dict(r) for r in self.reviews],
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> ProductDetails:
        """Rebuild an instance from :meth:`to_document` output."""
        return cls(
            product_id=str(doc["productId"]),
            name=str(doc["name"]),
            price=float(doc["price"]),
            image_url=str(doc.get("imageUrl") or ""),
            category=str(doc.get("category") or ""),
            description=str(doc.get("description") or ""),
            variants=tuple(dict(v) for v in doc.get("variants") or ()),
            total_stock=int(doc.get("totalStock") or 0),
            reviews=tuple(dict(r) for r in doc.get("reviews") or ()),
        )
