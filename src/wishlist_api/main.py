# src/wishlist_api/main.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and routers.
    Provides an application factory (`create_app`) and a module-level app
    (`app`) for uvicorn and tooling.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan builds the store, cache and upstream clients and tears them
      down safely.
    • Root JSON logging is configured at import time.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from wishlist_api.adapters.routers import health_router, metrics_router, wishlist_router
from wishlist_api.config.settings import Settings, get_settings
from wishlist_api.dependencies.core.bootstrap import bootstrap
from wishlist_api.infrastructure.http.errors import (
    UnhandledErrorMiddleware,
    install_exception_handlers,
)
from wishlist_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from wishlist_api.infrastructure.middleware.access_log import AccessLogMiddleware
from wishlist_api.infrastructure.middleware.request_id import RequestIdMiddleware

configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``get__v1_wishlists_user_id``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


def _lifespan_for(
    settings: Settings,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Expose bootstrapped infrastructure on ``app.state`` while serving."""
        async with bootstrap(app, settings) as state:
            app.state.settings = state.settings
            app.state.orchestrator = state.orchestrator
            app.state.readiness_probes = state.readiness_probes
            yield

    return runtime_lifespan


def _attach_middlewares(app: FastAPI) -> None:
    """Attach core middleware, innermost first.

    Resulting request order:

        1. RequestIdMiddleware (correlation id on state, contextvars, header)
        2. AccessLogMiddleware (structured access log + latency histogram)
        3. UnhandledErrorMiddleware (untyped exceptions to the error envelope)
    """
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)


def _attach_cors(app: FastAPI, settings: Settings) -> None:
    """Attach CORS middleware based on settings."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; defaults to :func:`get_settings`.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings = settings or get_settings()
    version = settings.service_version or "0.0.0"

    app = FastAPI(
        title="Wishlist API",
        version=version,
        description="Per-user wishlists with product enrichment and cart transfer.",
        lifespan=_lifespan_for(settings),
        generate_unique_id_function=_stable_operation_id,
    )
    app.state.settings = settings

    install_exception_handlers(app)
    _attach_middlewares(app)
    _attach_cors(app, settings)

    app.include_router(wishlist_router.router)
    app.include_router(health_router.router)
    app.include_router(metrics_router.router)

    logger.info(
        "service_startup",
        extra={
            "service": settings.service_name,
            "version": version,
            "environment": settings.environment.value,
        },
    )
    return app


app = create_app()
