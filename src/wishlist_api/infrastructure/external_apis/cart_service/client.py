# src/wishlist_api/infrastructure/external_apis/cart_service/client.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Cart Service Client: async, instrumented, never retried.

Implements the CartTransferGateway protocol over the cart service's HTTP API:

* ``POST {base}/v1/carts/{userId}/items`` with
  ``{"userId", "items": [{productId, quantity, description, color, size, price}]}``.
  Only ``productId``/``quantity`` are meaningful; the cart service fills the
  remaining line fields itself.
* Adding to a cart is not idempotent, so requests are never retried.
* 5xx and transport errors count against the circuit breaker; 4xx do not.
* HTTP error statuses raise :class:`CartServiceError` with ``code`` (status)
  and ``details`` (body text) for operator diagnostics.
* The decoded body is returned unvalidated; an empty body yields ``None``.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any, Final
from urllib.parse import quote

import httpx

from wishlist_api.domain.entities.cart import CartLineRequest
from wishlist_api.infrastructure.logging.logger import get_json_logger, get_request_id
from wishlist_api.infrastructure.observability.metrics import observe_upstream_request
from wishlist_api.infrastructure.resilience.circuit_breaker import CircuitBreaker

__all__ = ["CartServiceError", "HttpCartTransferClient"]

logger = get_json_logger(__name__)

_DEFAULT_TIMEOUT: Final[float] = 5.0
_DEFAULT_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json",
    "User-Agent": "wishlist-api-cart-client/1.0",
}


class CartServiceError(Exception):
    """The cart service answered with an error status or an undecodable body."""

    def __init__(self, message: str, *, code: int | None = None, details: str | None = None):
        super().__init__(message)
        self.code = code
        self.details = details


def _line_payload(line: CartLineRequest) -> dict[str, Any]:
    return {
        "productId": line.product_id,
        "quantity": line.quantity,
        "description": "",
        "color": "",
        "size": "",
        "price": 0,
    }


class HttpCartTransferClient:
    """HTTP implementation of the cart transfer gateway."""

    def __init__(
        self,
        *,
        base_url: str,
        http: httpx.AsyncClient | None = None,
        timeout_s: float = _DEFAULT_TIMEOUT,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Cart service base URL, e.g. ``http://cart:3003``.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            timeout_s: Per-request timeout in seconds.
            breaker: Circuit breaker instance; created if omitted.
        """
        self._base_url = base_url.rstrip("/")
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=timeout_s, headers=_DEFAULT_HEADERS.copy()
        )
        self._timeout = timeout_s
        self._breaker = breaker or CircuitBreaker(name="cart_service")

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def add_to_cart(self, user_id: str, lines: Sequence[CartLineRequest]) -> Any:
        """Add lines to the user's cart.

        Args:
            user_id: Cart owner.
            lines: Non-empty sequence of line requests.

        Returns:
            Decoded JSON body, or ``None`` for an empty body.

        Raises:
            ValueError: ``user_id`` is empty or ``lines`` is empty.
            UpstreamUnavailableError: The circuit is open.
            CartServiceError: Error status or undecodable body.
            httpx.TransportError: Network failure or timeout.
        """
        if not user_id:
            raise ValueError("userId is required")
        if not lines:
            raise ValueError("items array is required and must not be empty")

        url = f"{self._base_url}/v1/carts/{quote(user_id, safe='')}/items"
        body = {"userId": user_id, "items": [_line_payload(line) for line in lines]}
        rid = get_request_id()
        headers = {"X-Request-ID": rid} if rid else {}

        logger.debug("cart_service_call", extra={"user_id": user_id, "lines": len(lines)})
        started = time.perf_counter()
        outcome = "error"
        try:
            async with self._breaker.guard():
                response = await self._client.post(
                    url, json=body, headers=headers, timeout=self._timeout
                )
                if response.status_code >= 500:
                    raise CartServiceError(
                        f"Cart service responded with HTTP {response.status_code}",
                        code=response.status_code,
                        details=response.text,
                    )
            if response.status_code >= 400:
                raise CartServiceError(
                    f"Cart service rejected the request with HTTP {response.status_code}",
                    code=response.status_code,
                    details=response.text,
                )
            outcome = "success"
        finally:
            observe_upstream_request(
                service="cart",
                operation="add_to_cart",
                outcome=outcome,
                seconds=time.perf_counter() - started,
            )

        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise CartServiceError(
                "Cart service returned a non-JSON body",
                code=response.status_code,
                details=response.text[:200],
            ) from exc
