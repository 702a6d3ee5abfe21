# src/wishlist_api/dependencies/core/bootstrap.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (store, cache, upstream clients).

This module owns the lifecycle of shared infrastructure used by the FastAPI app.
Configuration is read from Settings, and construction is delegated to the
infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields the resolved Settings, the wired orchestrator and the readiness probes.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import httpx
from fastapi import FastAPI
from sqlalchemy import text

from wishlist_api.adapters.repositories.in_memory_wishlist_store import InMemoryWishlistStore
from wishlist_api.adapters.repositories.wishlist_repository import SqlAlchemyWishlistStore
from wishlist_api.application.interfaces.cache_port import CachePort
from wishlist_api.application.services.wishlist_orchestrator import WishlistOrchestrator
from wishlist_api.config.settings import CacheBackend, Settings, StoreBackend, get_settings
from wishlist_api.domain.interfaces.repositories.wishlist_store import WishlistStore
from wishlist_api.infrastructure.caching.json_cache import RedisJsonCache
from wishlist_api.infrastructure.caching.ttl_cache import InMemoryTTLCache
from wishlist_api.infrastructure.external_apis.cart_service.client import (
    HttpCartTransferClient,
)
from wishlist_api.infrastructure.external_apis.product_service.client import (
    HttpProductLookupClient,
)
from wishlist_api.infrastructure.logging.logger import configure_root_logging, get_json_logger
from wishlist_api.infrastructure.resilience.circuit_breaker import CircuitBreaker
from wishlist_api.infrastructure.resilience.retry import RetryPolicy

logger = get_json_logger(__name__)

Probe = Callable[[], Awaitable[object]]


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    orchestrator: WishlistOrchestrator
    readiness_probes: dict[str, Probe] = field(default_factory=dict)


def _breaker(name: str, settings: Settings) -> CircuitBreaker:
    return CircuitBreaker(
        name=name,
        failure_threshold=settings.upstream_breaker_failure_threshold,
        recovery_timeout_s=settings.upstream_breaker_recovery_s,
    )


@asynccontextmanager
async def bootstrap(
    app: FastAPI, settings: Settings | None = None
) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and tear down shared infrastructure.

    Responsibilities:
        * Configure root JSON logging.
        * Build the wishlist store (in-memory or SQLAlchemy).
        * Build the cache (in-process TTL map or Redis).
        * Create the product and cart HTTP clients with their breakers.
        * Ensure all of the above are shut down on exit, even on error.

    Args:
        app: FastAPI application instance.
        settings: Explicit settings; defaults to :func:`get_settings`.

    Yields:
        BootstrapState: Settings, orchestrator and readiness probes.
    """
    settings = settings or get_settings()
    configure_root_logging(settings.log_level)
    logger.info(
        "bootstrap.start",
        extra={
            "store_backend": settings.store_backend.value,
            "cache_backend": settings.cache_backend.value,
        },
    )

    # Imported as modules so tests can monkeypatch their functions.
    import wishlist_api.infrastructure.caching.redis_client as redis_client
    import wishlist_api.infrastructure.database.session as db_session

    probes: dict[str, Probe] = {}

    store: WishlistStore
    if settings.store_backend is StoreBackend.SQLALCHEMY:
        db_session.init_engine_and_sessionmaker(settings)
        store = SqlAlchemyWishlistStore(db_session.get_sessionmaker())

        async def _db_probe() -> None:
            async with db_session.get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))

        probes["store"] = _db_probe
    else:
        store = InMemoryWishlistStore()

    cache: CachePort
    if settings.cache_backend is CacheBackend.REDIS:
        redis_client.init_redis(settings)
        cache = RedisJsonCache(namespace=settings.redis_namespace)

        async def _redis_probe() -> None:
            await redis_client.get_redis_client().ping()

        probes["cache"] = _redis_probe
    else:
        cache = InMemoryTTLCache()

    product_http = httpx.AsyncClient(timeout=settings.product_service_timeout_s)
    cart_http = httpx.AsyncClient(timeout=settings.cart_service_timeout_s)
    products = HttpProductLookupClient(
        base_url=settings.product_service_url,
        http=product_http,
        timeout_s=settings.product_service_timeout_s,
        retry_policy=RetryPolicy(total=settings.product_service_max_retries, base=0.1, cap=1.0),
        breaker=_breaker("product_service", settings),
    )
    cart = HttpCartTransferClient(
        base_url=settings.cart_service_url,
        http=cart_http,
        timeout_s=settings.cart_service_timeout_s,
        breaker=_breaker("cart_service", settings),
    )

    orchestrator = WishlistOrchestrator(
        store,
        products,
        cart,
        cache,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )
    state = BootstrapState(settings=settings, orchestrator=orchestrator, readiness_probes=probes)

    try:
        yield state
    finally:
        for name, client in (("product", product_http), ("cart", cart_http)):
            try:
                await client.aclose()
            except Exception:
                logger.exception("bootstrap.http_client_close_failed", extra={"client": name})

        if settings.cache_backend is CacheBackend.REDIS:
            try:
                await redis_client.close_redis()
            except Exception:
                logger.exception("bootstrap.redis_close_failed")

        if settings.store_backend is StoreBackend.SQLALCHEMY:
            try:
                await db_session.dispose_engine()
            except Exception:
                logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")
