# src/wishlist_api/adapters/routers/metrics_router.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

Warms the lazily created collectors so their series appear on the very first
scrape.

Layer:
    adapters/routers
"""

from __future__ import annotations

from contextlib import suppress

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from wishlist_api.infrastructure.observability.metrics import (
    get_cache_operations_total,
    get_cart_transfers_total,
    get_http_server_request_duration_seconds,
    get_upstream_request_duration_seconds,
)

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics in text exposition format."""
    with suppress(Exception):
        get_cache_operations_total()
        get_cart_transfers_total()
        get_upstream_request_duration_seconds()
        get_http_server_request_duration_seconds()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
