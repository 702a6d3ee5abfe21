# tests/conftest.py
from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from wishlist_api.adapters.repositories.in_memory_wishlist_store import InMemoryWishlistStore
from wishlist_api.application.services.wishlist_orchestrator import WishlistOrchestrator
from wishlist_api.config.settings import Settings, get_settings
from wishlist_api.domain.entities.cart import CartLineRequest
from wishlist_api.domain.interfaces.gateways.product_lookup import (
    ProductLookupResponse,
    ProductLookupStatus,
)
from wishlist_api.infrastructure.caching.ttl_cache import InMemoryTTLCache


class FakeProductLookup:
    """Scriptable product catalog. Unknown ids report NOT_FOUND."""

    def __init__(self) -> None:
        self.responses: dict[str, ProductLookupResponse] = {}
        self.calls: list[str] = []
        self.error: Exception | None = None

    def add(self, product_id: str, **fields: Any) -> None:
        self.responses[product_id] = ProductLookupResponse(
            status=ProductLookupStatus.SUCCESS, raw_payload=json.dumps(fields)
        )

    def set_raw(self, product_id: str, status: ProductLookupStatus, raw: str | None) -> None:
        self.responses[product_id] = ProductLookupResponse(status=status, raw_payload=raw)

    async def get_product(self, product_id: str) -> ProductLookupResponse:
        self.calls.append(product_id)
        if self.error is not None:
            raise self.error
        return self.responses.get(
            product_id, ProductLookupResponse(status=ProductLookupStatus.NOT_FOUND)
        )


class FakeCart:
    """Records calls and returns a scripted response (or raises)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[CartLineRequest]]] = []
        self.response: Any = None
        self.error: Exception | None = None

    async def add_to_cart(self, user_id: str, lines: Sequence[CartLineRequest]) -> Any:
        self.calls.append((user_id, list(lines)))
        if self.error is not None:
            raise self.error
        if self.response is None:
            return {
                "userId": user_id,
                "items": [line.to_document() for line in lines],
            }
        return self.response


class ManualClock:
    """Monotonic seconds under test control."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SteppingUtcClock:
    """UTC datetimes advancing one second per call."""

    def __init__(self) -> None:
        self._current = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self._current += timedelta(seconds=1)
        return self._current


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests on in-memory backends and a fresh settings singleton."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("WISHLIST_STORE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def products() -> FakeProductLookup:
    fake = FakeProductLookup()
    fake.add("p1", name="Widget", price=9.99)
    fake.add("p2", name="Gadget", price=19.5, imageUrl="https://img/p2.png", totalStock=3)
    return fake


@pytest.fixture
def cart() -> FakeCart:
    return FakeCart()


@pytest.fixture
def store() -> InMemoryWishlistStore:
    return InMemoryWishlistStore()


@pytest.fixture
def cache_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def cache(cache_clock: ManualClock) -> InMemoryTTLCache:
    return InMemoryTTLCache(clock=cache_clock)


@pytest.fixture
def orchestrator(
    store: InMemoryWishlistStore,
    products: FakeProductLookup,
    cart: FakeCart,
    cache: InMemoryTTLCache,
) -> WishlistOrchestrator:
    return WishlistOrchestrator(store, products, cart, cache, clock=SteppingUtcClock())


@pytest.fixture
def app_settings() -> Settings:
    return Settings(ENVIRONMENT="test", ALLOWED_ORIGINS="*")
