# src/wishlist_api/domain/interfaces/gateways/cart_transfer.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Cart Transfer Gateway Protocol.

Synopsis:
    Domain-level Protocol for the remote cart subsystem. Callers supply only
    ``productId``/``quantity`` per line; the cart subsystem fills in the rest
    of each line item (description, color, size, price).

Layer:
    domain/interfaces/gateways
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from wishlist_api.domain.entities.cart import CartLineRequest


class CartTransferGateway(Protocol):
    """Abstraction over the remote cart subsystem."""

    async def add_to_cart(self, user_id: str, lines: Sequence[CartLineRequest]) -> Any:
        """Add lines to the user's cart.

        Args:
            user_id: Cart owner.
            lines: Non-empty sequence of line requests.

        Returns:
            The decoded response as returned by the cart subsystem (expected
            ``{"items": [...]}``), or ``None`` if it answered with no body.
            Callers must validate the shape.

        Raises:
            ValueError: ``user_id`` is empty or ``lines`` is empty.
            Exception: Transport or remote failures; may carry ``code`` and
                ``details`` attributes for diagnostics.
        """
        ...
