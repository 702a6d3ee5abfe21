# src/wishlist_api/infrastructure/external_apis/product_service/client.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Product Service Client: resilient, instrumented, async.

Implements the ProductLookupGateway protocol over the product catalog's
HTTP API:

* ``GET {base}/v1/products/{productId}`` with a per-request timeout.
* Jittered exponential retries on transport errors and 5xx.
* Circuit breaker; an open circuit raises ``UpstreamUnavailableError``.
* Status mapping: 200 -> SUCCESS (raw body), 404 -> NOT_FOUND, else ERROR.
* Transport errors that survive the retry budget are raised to the caller.
"""

from __future__ import annotations

import time
from typing import Final
from urllib.parse import quote

import httpx

from wishlist_api.domain.interfaces.gateways.product_lookup import (
    ProductLookupResponse,
    ProductLookupStatus,
)
from wishlist_api.infrastructure.logging.logger import get_json_logger, get_request_id
from wishlist_api.infrastructure.observability.metrics import observe_upstream_request
from wishlist_api.infrastructure.resilience.circuit_breaker import CircuitBreaker
from wishlist_api.infrastructure.resilience.retry import RetryPolicy, retry_async

__all__ = ["HttpProductLookupClient"]

logger = get_json_logger(__name__)

_DEFAULT_TIMEOUT: Final[float] = 5.0
_DEFAULT_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json",
    "User-Agent": "wishlist-api-product-client/1.0",
}


class _UpstreamServerError(Exception):
    """5xx from the catalog after retries; counted as a breaker failure."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"product service responded with HTTP {response.status_code}")
        self.response = response


def _retryable(outcome: Exception | httpx.Response) -> bool:
    if isinstance(outcome, httpx.Response):
        return outcome.status_code >= 500
    return isinstance(outcome, httpx.TransportError)


class HttpProductLookupClient:
    """HTTP implementation of the product lookup gateway."""

    def __init__(
        self,
        *,
        base_url: str,
        http: httpx.AsyncClient | None = None,
        timeout_s: float = _DEFAULT_TIMEOUT,
        retry_policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Catalog base URL, e.g. ``http://products:3001``.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            timeout_s: Per-request timeout in seconds.
            retry_policy: Retry configuration; defaults to two retries.
            breaker: Circuit breaker instance; created if omitted.
        """
        self._base_url = base_url.rstrip("/")
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=timeout_s, headers=_DEFAULT_HEADERS.copy()
        )
        self._timeout = timeout_s
        self._retry = retry_policy or RetryPolicy(total=2, base=0.1, cap=1.0)
        self._breaker = breaker or CircuitBreaker(name="product_service")

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        rid = get_request_id()
        return {"X-Request-ID": rid} if rid else {}

    async def get_product(self, product_id: str) -> ProductLookupResponse:
        """Look up one product.

        Args:
            product_id: Catalog identifier.

        Returns:
            Status plus raw body text.

        Raises:
            UpstreamUnavailableError: The circuit is open.
            httpx.TransportError: The catalog stayed unreachable after retries.
        """
        url = f"{self._base_url}/v1/products/{quote(product_id, safe='')}"
        started = time.perf_counter()
        outcome = "error"

        async def _call() -> httpx.Response:
            return await self._client.get(url, headers=self._headers(), timeout=self._timeout)

        try:
            async with self._breaker.guard():
                response = await retry_async(_call, policy=self._retry, retry_on=_retryable)
                if response.status_code >= 500:
                    raise _UpstreamServerError(response)
        except _UpstreamServerError as exc:
            logger.warning(
                "product_service_server_error",
                extra={"product_id": product_id, "status": exc.response.status_code},
            )
            return ProductLookupResponse(status=ProductLookupStatus.ERROR)
        else:
            outcome = "success" if response.status_code in (200, 404) else "error"
        finally:
            observe_upstream_request(
                service="product",
                operation="get_product",
                outcome=outcome,
                seconds=time.perf_counter() - started,
            )

        if response.status_code == 200:
            return ProductLookupResponse(
                status=ProductLookupStatus.SUCCESS, raw_payload=response.text
            )
        if response.status_code == 404:
            return ProductLookupResponse(status=ProductLookupStatus.NOT_FOUND)

        logger.warning(
            "product_service_unexpected_status",
            extra={"product_id": product_id, "status": response.status_code},
        )
        return ProductLookupResponse(status=ProductLookupStatus.ERROR)
