# tests/unit/infrastructure/external_apis/test_product_service_client.py
from __future__ import annotations

import httpx
import pytest
import respx

from wishlist_api.domain.exceptions.base import UpstreamUnavailableError
from wishlist_api.domain.interfaces.gateways.product_lookup import ProductLookupStatus
from wishlist_api.infrastructure.external_apis.product_service.client import (
    HttpProductLookupClient,
)
from wishlist_api.infrastructure.logging.logger import set_request_context
from wishlist_api.infrastructure.resilience.circuit_breaker import CircuitBreaker
from wishlist_api.infrastructure.resilience.retry import RetryPolicy

BASE = "http://products.test"
NO_WAIT = RetryPolicy(total=2, base=0.0, cap=0.0)


def _client(**kwargs) -> HttpProductLookupClient:
    kwargs.setdefault("retry_policy", NO_WAIT)
    return HttpProductLookupClient(base_url=f"{BASE}/", **kwargs)


@pytest.mark.asyncio
@respx.mock
async def test_success_returns_raw_body() -> None:
    set_request_context(request_id="req-42")
    route = respx.get(f"{BASE}/v1/products/p1").mock(
        return_value=httpx.Response(200, text='{"name":"Widget","price":9.99}')
    )
    client = _client()

    response = await client.get_product("p1")
    await client.aclose()

    assert response.status is ProductLookupStatus.SUCCESS
    assert response.raw_payload == '{"name":"Widget","price":9.99}'
    assert route.calls.last.request.headers["X-Request-ID"] == "req-42"


@pytest.mark.asyncio
@respx.mock
async def test_not_found_maps_to_not_found() -> None:
    route = respx.get(f"{BASE}/v1/products/missing").mock(return_value=httpx.Response(404))

    response = await _client().get_product("missing")

    assert response.status is ProductLookupStatus.NOT_FOUND
    assert response.raw_payload is None
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_client_error_status_maps_to_error_without_retry() -> None:
    route = respx.get(f"{BASE}/v1/products/p1").mock(return_value=httpx.Response(400))

    response = await _client().get_product("p1")

    assert response.status is ProductLookupStatus.ERROR
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_server_errors_are_retried_then_reported() -> None:
    route = respx.get(f"{BASE}/v1/products/p1").mock(
        side_effect=[httpx.Response(503), httpx.Response(503), httpx.Response(503)]
    )

    response = await _client().get_product("p1")

    assert response.status is ProductLookupStatus.ERROR
    assert route.call_count == 3


@pytest.mark.asyncio
@respx.mock
async def test_transient_transport_error_recovers() -> None:
    respx.get(f"{BASE}/v1/products/p1").mock(
        side_effect=[httpx.ConnectError("refused"), httpx.Response(200, text="{}")]
    )

    response = await _client().get_product("p1")

    assert response.status is ProductLookupStatus.SUCCESS


@pytest.mark.asyncio
@respx.mock
async def test_persistent_transport_error_is_raised() -> None:
    respx.get(f"{BASE}/v1/products/p1").mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(httpx.TransportError):
        await _client().get_product("p1")


@pytest.mark.asyncio
@respx.mock
async def test_open_circuit_short_circuits() -> None:
    route = respx.get(f"{BASE}/v1/products/p1").mock(return_value=httpx.Response(500))
    breaker = CircuitBreaker(name="product_service", failure_threshold=1, recovery_timeout_s=60)
    client = _client(breaker=breaker, retry_policy=RetryPolicy(total=0))

    assert (await client.get_product("p1")).status is ProductLookupStatus.ERROR
    with pytest.raises(UpstreamUnavailableError):
        await client.get_product("p1")

    assert route.call_count == 1
