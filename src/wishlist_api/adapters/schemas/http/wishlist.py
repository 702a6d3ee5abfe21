# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Wishlist HTTP Schemas (Adapters Layer)

Purpose:
    Request and response contracts for the wishlist endpoints. Field names are
    camelCase on the wire.

Layer: adapters/schemas/http
"""
from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from wishlist_api.adapters.schemas.http.base import CamelHTTPSchema

__all__ = [
    "AddItemRequest",
    "TransferResultHTTP",
    "WishlistHTTP",
    "WishlistItemHTTP",
]


class AddItemRequest(CamelHTTPSchema):
    """Body for adding an item or moving it to the cart.

    A blank or missing ``productId`` is accepted here and rejected by the
    orchestrator so the caller gets the standard "Product ID is required"
    error rather than a schema error.
    """

    product_id: str | None = Field(default=None, description="Catalog product id.")
    quantity: int | None = Field(
        default=None, ge=1, le=999, description="Cart quantity; defaults to 1."
    )


class WishlistItemHTTP(CamelHTTPSchema):
    """A wishlist entry as exposed over HTTP."""

    product_id: str
    name: str
    price: float = Field(..., ge=0)
    image: str = ""
    category: str = ""
    description: str = ""
    variants: list[dict[str, Any]] = Field(default_factory=list)
    total_stock: int = Field(default=0, ge=0)
    reviews: list[dict[str, Any]] = Field(default_factory=list)


class WishlistHTTP(CamelHTTPSchema):
    """A user's wishlist as exposed over HTTP."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "userId": "u1",
                "items": [
                    {
                        "productId": "p1",
                        "name": "Widget",
                        "price": 9.99,
                        "image": "",
                        "category": "",
                        "description": "",
                        "variants": [],
                        "totalStock": 0,
                        "reviews": [],
                    }
                ],
                "createdAt": "2024-01-01T00:00:00.000Z",
                "updatedAt": "2024-01-01T00:00:00.000Z",
            }
        }
    )

    user_id: str
    items: list[WishlistItemHTTP] = Field(default_factory=list)
    created_at: str = Field(..., description="ISO-8601 creation timestamp.")
    updated_at: str = Field(..., description="ISO-8601 last update timestamp.")


class TransferResultHTTP(CamelHTTPSchema):
    """Result of moving a wishlist item into the cart."""

    success: bool
    message: str
    product_id: str
    cart_items: list[dict[str, Any]] = Field(
        default_factory=list, description="Cart line items as reported by the cart service."
    )
