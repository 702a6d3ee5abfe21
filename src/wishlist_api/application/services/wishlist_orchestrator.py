# src/wishlist_api/application/services/wishlist_orchestrator.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Service: Wishlist Orchestrator

Purpose:
    Compose the wishlist store, the product catalog, the cart subsystem, and a
    TTL cache into the wishlist operations (get/add/remove/clear) and the
    wishlist-to-cart transfer.

Design:
    * Read-through caching for product details (``product:<id>``) and wishlist
      documents (``wishlist:<userId>``). Absent wishlists are not cached.
    * Invalidate-on-write: after a successful persist the wishlist key is
      evicted; the new state is never written back into the cache.
    * Transfer ordering: cart call, response validation gate, then removal
      from the wishlist. The removal is the commit point and nothing is
      compensated if it fails.
    * Typed :class:`DomainError` instances propagate unchanged. Untyped
      failures are wrapped only where the operation defines a wrapping
      (product fetch, cart call); everything else reaches the boundary.
    * Concurrent mutations for one user are not serialized. Two concurrent
      ``add_item`` calls can both observe "not present" and both append.

Layer: application/services
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from wishlist_api.application.interfaces.cache_port import CachePort
from wishlist_api.domain.entities.base import utc_now
from wishlist_api.domain.entities.cart import CartLineRequest, TransferResult
from wishlist_api.domain.entities.product import ProductDetails
from wishlist_api.domain.entities.wishlist import Wishlist, WishlistItem
from wishlist_api.domain.exceptions.base import DomainError
from wishlist_api.domain.exceptions.wishlist import (
    CartTransferFailed,
    DuplicateItem,
    InvalidProductData,
    InvalidQuantity,
    ItemNotFound,
    ProductFetchFailed,
    ProductIdRequired,
    ProductNotFound,
    WishlistNotFound,
)
from wishlist_api.domain.interfaces.gateways.cart_transfer import CartTransferGateway
from wishlist_api.domain.interfaces.gateways.product_lookup import (
    ProductLookupGateway,
    ProductLookupStatus,
)
from wishlist_api.domain.interfaces.repositories.wishlist_store import WishlistStore
from wishlist_api.infrastructure.logging.logger import get_json_logger
from wishlist_api.infrastructure.observability.metrics import inc_cart_transfer

__all__ = [
    "DEFAULT_CACHE_TTL_S",
    "WishlistOrchestrator",
    "product_cache_key",
    "wishlist_cache_key",
]

logger = get_json_logger(__name__)

#: Freshness window for both cache namespaces.
DEFAULT_CACHE_TTL_S = 300


def wishlist_cache_key(user_id: str) -> str:
    """Build the cache key for a user's wishlist document."""
    return f"wishlist:{user_id}"


def product_cache_key(product_id: str) -> str:
    """Build the cache key for normalized product details."""
    return f"product:{product_id}"


def _parse_product_payload(product_id: str, raw_payload: str | None) -> ProductDetails:
    """Decode and validate a catalog payload into :class:`ProductDetails`.

    Raises:
        ProductFetchFailed: The payload is not decodable JSON.
        InvalidProductData: Required fields are missing or malformed.
    """
    try:
        data = json.loads(raw_payload) if raw_payload else None
    except ValueError as exc:
        raise ProductFetchFailed() from exc

    if not isinstance(data, Mapping):
        raise InvalidProductData()

    name = data.get("name")
    price = data.get("price")
    if not name or not isinstance(name, str):
        raise InvalidProductData()
    if isinstance(price, bool) or not isinstance(price, int | float) or price < 0:
        raise InvalidProductData()

    try:
        return ProductDetails(
            product_id=product_id,
            name=name,
            price=float(price),
            image_url=str(data.get("imageUrl") or ""),
            category=str(data.get("category") or ""),
            description=str(data.get("description") or ""),
            variants=tuple(dict(v) for v in data.get("variants") or () if isinstance(v, Mapping)),
            total_stock=max(int(data.get("totalStock") or 0), 0),
            reviews=tuple(dict(r) for r in data.get("reviews") or () if isinstance(r, Mapping)),
        )
    except (TypeError, ValueError) as exc:
        raise InvalidProductData() from exc


def _validate_cart_response(response: Any) -> tuple[Mapping[str, Any], ...]:
    """Gate a cart response; return its line items or raise.

    Raises:
        CartTransferFailed: No response, an empty response, or a response
            without a proper ``items`` sequence of records.
    """
    if response is None:
        raise CartTransferFailed("Failed to add item to cart - no response from cart service")
    if isinstance(response, Mapping | Sequence) and len(response) == 0:
        raise CartTransferFailed(
            "Cart service returned empty response - service may be unavailable"
        )
    items = response.get("items") if isinstance(response, Mapping) else None
    if (
        not isinstance(items, list | tuple)
        or not all(isinstance(i, Mapping) for i in items)
    ):
        raise CartTransferFailed("Invalid response format from cart service")
    return tuple(dict(i) for i in items)


class WishlistOrchestrator:
    """Wishlist operations and the wishlist-to-cart transfer.

    Args:
        store: Authoritative wishlist persistence.
        products: Product catalog gateway.
        cart: Cart subsystem gateway.
        cache: Optional cache; ``None`` disables caching entirely.
        cache_ttl_seconds: Freshness window for cached entries.
        clock: Source of timestamps for ``createdAt``/``updatedAt``.
    """

    def __init__(
        self,
        store: WishlistStore,
        products: ProductLookupGateway,
        cart: CartTransferGateway,
        cache: CachePort | None = None,
        *,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_S,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._products = products
        self._cart = cart
        self._cache = cache
        self._ttl = cache_ttl_seconds
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Cached reads
    # ------------------------------------------------------------------ #
    async def get_product_details(self, product_id: str) -> ProductDetails:
        """Return product details, read through the ``product:`` namespace.

        Cached entries are returned without revalidation against the catalog.

        Raises:
            ProductNotFound: The catalog reports no such product.
            InvalidProductData: The catalog payload lacks ``name``/``price``.
            ProductFetchFailed: The catalog errored or was unreachable.
            UpstreamUnavailableError: The catalog circuit is open.
        """
        key = product_cache_key(product_id)
        if self._cache is not None:
            cached = await self._cache.get_json(key)
            if cached is not None:
                logger.debug("product_cache_hit", extra={"product_id": product_id})
                return ProductDetails.from_document(cached)

        try:
            response = await self._products.get_product(product_id)
        except DomainError:
            raise
        except Exception as exc:
            logger.warning(
                "product_fetch_failed",
                extra={"product_id": product_id, "error": type(exc).__name__},
            )
            raise ProductFetchFailed() from exc

        if response.status is ProductLookupStatus.NOT_FOUND:
            logger.warning("product_not_found", extra={"product_id": product_id})
            raise ProductNotFound()
        if response.status is not ProductLookupStatus.SUCCESS:
            logger.warning("product_lookup_error", extra={"product_id": product_id})
            raise ProductFetchFailed()

        product = _parse_product_payload(product_id, response.raw_payload)
        if self._cache is not None:
            await self._cache.set_json(key, product.to_document(), ttl=self._ttl)
        return product

    async def find_wishlist(self, user_id: str) -> Wishlist | None:
        """Return the user's wishlist, read through the ``wishlist:`` namespace.

        A missing wishlist is not cached, so one created later is seen on the
        next read.
        """
        key = wishlist_cache_key(user_id)
        if self._cache is not None:
            cached = await self._cache.get_json(key)
            if cached is not None:
                logger.debug("wishlist_cache_hit", extra={"user_id": user_id})
                return Wishlist.from_document(cached)

        wishlist = await self._store.find_by_user_id(user_id)
        if wishlist is not None and self._cache is not None:
            await self._cache.set_json(key, wishlist.to_document(), ttl=self._ttl)
        return wishlist

    async def _persist(self, wishlist: Wishlist) -> Wishlist:
        """Persist and evict the user's cache entry."""
        saved = await self._store.create_or_update(wishlist)
        await self.invalidate_user(wishlist.user_id)
        return saved

    async def invalidate_user(self, user_id: str) -> None:
        """Evict the cached wishlist for ``user_id``."""
        if self._cache is not None:
            await self._cache.delete(wishlist_cache_key(user_id))
            logger.debug("wishlist_cache_evicted", extra={"user_id": user_id})

    async def clear_all_cache(self) -> None:
        """Drop every cached wishlist and product entry."""
        if self._cache is not None:
            await self._cache.clear()
            logger.info("cache_cleared")

    # ------------------------------------------------------------------ #
    # Wishlist operations
    # ------------------------------------------------------------------ #
    async def get_wishlist(self, user_id: str) -> Wishlist:
        """Return the user's wishlist.

        Raises:
            WishlistNotFound: The user has no wishlist.
        """
        wishlist = await self.find_wishlist(user_id)
        if wishlist is None:
            logger.warning("wishlist_not_found", extra={"user_id": user_id})
            raise WishlistNotFound()
        return wishlist

    async def add_item(
        self, user_id: str, product_id: str | None, quantity: int | None = None
    ) -> Wishlist:
        """Add a product to the user's wishlist, creating the wishlist if needed.

        ``quantity`` is accepted for parity with :meth:`add_to_cart`; wishlist
        items do not track quantities.

        Raises:
            ProductIdRequired: ``product_id`` is empty.
            DuplicateItem: The product is already in the wishlist.
            ProductNotFound, InvalidProductData, ProductFetchFailed: From the
                product lookup. Nothing is persisted in these cases.
        """
        if not product_id:
            raise ProductIdRequired()

        product = await self.get_product_details(product_id)
        wishlist = await self.find_wishlist(user_id)
        if wishlist is None:
            logger.debug("wishlist_created", extra={"user_id": user_id})
            wishlist = Wishlist.empty(user_id, now=self._clock())

        if wishlist.contains(product_id):
            logger.warning(
                "wishlist_item_duplicate",
                extra={"user_id": user_id, "product_id": product_id},
            )
            raise DuplicateItem()

        updated = wishlist.with_item(WishlistItem.from_product(product), now=self._clock())
        saved = await self._persist(updated)
        logger.debug(
            "wishlist_item_added", extra={"user_id": user_id, "product_id": product_id}
        )
        return saved

    async def remove_item(self, user_id: str, product_id: str) -> Wishlist:
        """Remove a product from the user's wishlist.

        Raises:
            WishlistNotFound: The user has no wishlist.
            ItemNotFound: The product is not in the wishlist.
        """
        wishlist = await self.get_wishlist(user_id)
        if not wishlist.contains(product_id):
            logger.warning(
                "wishlist_item_not_found",
                extra={"user_id": user_id, "product_id": product_id},
            )
            raise ItemNotFound()

        saved = await self._persist(wishlist.without_item(product_id, now=self._clock()))
        logger.debug(
            "wishlist_item_removed", extra={"user_id": user_id, "product_id": product_id}
        )
        return saved

    async def clear_wishlist(self, user_id: str) -> Wishlist:
        """Remove every item from the user's wishlist.

        Clearing an already-empty wishlist succeeds.

        Raises:
            WishlistNotFound: The user has no wishlist.
        """
        wishlist = await self.get_wishlist(user_id)
        saved = await self._persist(wishlist.cleared(now=self._clock()))
        logger.debug("wishlist_cleared", extra={"user_id": user_id})
        return saved

    # ------------------------------------------------------------------ #
    # Transfer
    # ------------------------------------------------------------------ #
    async def add_to_cart(
        self, user_id: str, product_id: str | None, quantity: int | None = None
    ) -> TransferResult:
        """Move a wishlist item into the user's cart.

        Steps run strictly in order: validate input, confirm the product,
        call the cart, gate the response, then remove the item from the
        wishlist. A failure before the removal leaves the wishlist untouched.
        A failure during the removal leaves the cart side-effect in place.

        Raises:
            ProductIdRequired: ``product_id`` is empty.
            InvalidQuantity: ``quantity`` is given and below 1.
            ProductNotFound, InvalidProductData, ProductFetchFailed: From the
                product lookup; the cart is not called.
            CartTransferFailed: The cart call failed or its response was
                rejected by the gate; the wishlist is unchanged.
            WishlistNotFound, ItemNotFound: Raised by the removal after the
                cart accepted the item.
        """
        if not product_id:
            raise ProductIdRequired()
        if quantity is not None and quantity < 1:
            raise InvalidQuantity()

        await self.get_product_details(product_id)
        line = CartLineRequest(product_id=product_id, quantity=1 if quantity is None else quantity)
        logger.debug(
            "cart_transfer_started",
            extra={"user_id": user_id, "product_id": product_id, "quantity": line.quantity},
        )

        try:
            response = await self._cart.add_to_cart(user_id, [line])
        except DomainError:
            inc_cart_transfer("transport_error")
            raise
        except Exception as exc:
            inc_cart_transfer("transport_error")
            logger.error(
                "cart_transfer_transport_error",
                extra={
                    "user_id": user_id,
                    "product_id": product_id,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                    "error_code": getattr(exc, "code", None),
                    "error_details": getattr(exc, "details", None),
                },
            )
            raise CartTransferFailed(f"Unable to add item to cart: {exc}") from exc

        try:
            cart_items = _validate_cart_response(response)
        except CartTransferFailed as exc:
            inc_cart_transfer("rejected")
            logger.error(
                "cart_transfer_rejected",
                extra={"user_id": user_id, "product_id": product_id, "reason": exc.message},
            )
            raise

        try:
            await self.remove_item(user_id, product_id)
        except Exception:
            # The cart already holds the item; no compensation is attempted.
            inc_cart_transfer("removal_failed")
            logger.error(
                "cart_transfer_removal_failed",
                extra={"user_id": user_id, "product_id": product_id},
            )
            raise

        inc_cart_transfer("success")
        logger.info(
            "cart_transfer_succeeded",
            extra={"user_id": user_id, "product_id": product_id, "lines": len(cart_items)},
        )
        return TransferResult(product_id=product_id, cart_items=cart_items)
