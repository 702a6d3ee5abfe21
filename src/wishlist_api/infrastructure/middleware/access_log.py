# src/wishlist_api/infrastructure/middleware/access_log.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Access Log Middleware.

Summary:
    Emits one structured access record per request/response pair and records
    request latency in the ``http_server_request_duration_seconds`` histogram.

Fields:
    evt: Literal "access" marker.
    method: HTTP method.
    path: URL path (no scheme/host).
    route: Matched route template, used as the metric label.
    status: HTTP status code (500 if unhandled exception).
    elapsed_ms: Latency in milliseconds, rounded to two decimals.
    client_ip: Best-effort client IP (from connection).
    ok: True if the downstream handler returned normally; False if raised.
"""

from __future__ import annotations

import logging
import time
from contextlib import suppress
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from wishlist_api.infrastructure.logging.logger import get_json_logger
from wishlist_api.infrastructure.observability.metrics import (
    get_http_server_request_duration_seconds,
)

_logger: logging.Logger = get_json_logger(__name__)


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return str(getattr(route, "path", None) or "unmatched")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured access logging middleware."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Log a single access record around the downstream handler."""
        t0 = time.perf_counter()
        response: Response | None = None
        ok = False
        try:
            response = await call_next(request)
            ok = True
            return response
        finally:
            elapsed = time.perf_counter() - t0
            status_code = response.status_code if response is not None else 500
            route = _route_template(request)
            log: dict[str, Any] = {
                "evt": "access",
                "method": request.method,
                "path": request.url.path,
                "route": route,
                "status": status_code,
                "elapsed_ms": round(elapsed * 1000.0, 2),
                "client_ip": request.client.host if request.client else None,
                "ok": ok,
            }
            _logger.info("access_log", extra=log)
            with suppress(Exception):
                get_http_server_request_duration_seconds().labels(
                    method=request.method, route=route, status=str(status_code)
                ).observe(elapsed)
