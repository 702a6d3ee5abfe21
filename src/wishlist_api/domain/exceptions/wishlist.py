# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Wishlist Domain Exceptions

Purpose:
    Typed error conditions raised by the wishlist orchestrator and its
    collaborators. Mapped to HTTP by the transport boundary.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import BadRequestError, InternalError, NotFoundError


class WishlistNotFound(NotFoundError):
    """No wishlist document exists for the user."""

    code = "WISHLIST_NOT_FOUND"
    default_message = "Wishlist not found"


class ItemNotFound(NotFoundError):
    """The product is not present in the user's wishlist."""

    code = "ITEM_NOT_FOUND"
    default_message = "Item not found in wishlist"


class ProductNotFound(NotFoundError):
    """The product catalog has no such product."""

    code = "PRODUCT_NOT_FOUND"
    default_message = "Product not found"


class ProductIdRequired(BadRequestError):
    """A product id was not supplied."""

    code = "PRODUCT_ID_REQUIRED"
    default_message = "Product ID is required"


class DuplicateItem(BadRequestError):
    """The product is already present in the wishlist."""

    code = "ITEM_ALREADY_EXISTS"
    default_message = "Item already exists in wishlist"


class InvalidProductData(BadRequestError):
    """The product catalog returned a payload without required fields."""

    code = "INVALID_PRODUCT_DATA"
    default_message = "Invalid product data format"


class ProductFetchFailed(BadRequestError):
    """The product catalog could not be queried."""

    code = "PRODUCT_FETCH_FAILED"
    default_message = "Failed to fetch product details"


class CartTransferFailed(BadRequestError):
    """The cart service rejected, failed, or answered malformed data."""

    code = "CART_TRANSFER_FAILED"
    default_message = "Failed to add item to cart"


class PersistenceError(InternalError):
    """The wishlist store failed to read or write."""

    code = "PERSISTENCE_ERROR"
    default_message = "Database operation failed"


class InvalidQuantity(BadRequestError):
    """A cart transfer asked for fewer than one unit."""

    code = "INVALID_QUANTITY"
    default_message = "Quantity must be at least 1"
