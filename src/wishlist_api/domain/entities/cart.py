# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Cart Transfer Entities

Purpose:
    Value objects exchanged with the cart subsystem and the outcome of a
    wishlist-to-cart transfer.

Layer: domain/entities
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class CartLineRequest(BaseEntity):
    """A single ``{productId, quantity}`` line sent to the cart subsystem."""

    product_id: str
    quantity: int = 1

    def __post_init__(self) -> None:
        if not self.product_id:
            raise ValueError("product_id must be non-empty")
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    def to_document(self) -> dict[str, Any]:
        return {"productId": self.product_id, "quantity": self.quantity}


@dataclass(frozen=True, slots=True)
class TransferResult(BaseEntity):
    """Outcome of a successful wishlist-to-cart transfer.

    Args:
        product_id: Product that was moved.
        cart_items: Line items reported by the cart subsystem, passed through
            as returned.
        success: Always ``True`` for a returned result; failures raise.
        message: Human-readable summary.
    """

    product_id: str
    cart_items: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    success: bool = True
    message: str = "Item added to cart successfully"

    def to_document(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "productId": self.product_id,
            "cartItems": [dict(i) for i in self.cart_items],
        }
