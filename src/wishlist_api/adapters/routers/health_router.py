# Copyright (c)
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    Expose liveness and readiness signals for container orchestrators.

Design:
    * ``/healthz`` never touches dependencies.
    * ``/readyz`` runs the probes registered on ``app.state.readiness_probes``
      (name → async callable) concurrently; any failure yields 503.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Literal

from fastapi import APIRouter, Request, Response, status
from pydantic import Field

from wishlist_api.adapters.schemas.http.base import BaseHTTPSchema
from wishlist_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)
router = APIRouter(tags=["Health"])

Probe = Callable[[], Awaitable[object]]


class LivenessResponse(BaseHTTPSchema):
    status: Literal["ok"] = "ok"
    service: str
    version: str | None = None


class CheckResult(BaseHTTPSchema):
    """Result of a single dependency check."""

    name: str = Field(..., examples=["store", "cache"])
    status: Literal["ok", "down"]
    detail: str | None = None
    duration_ms: float


class ReadinessResponse(BaseHTTPSchema):
    status: Literal["ok", "degraded"]
    checks: list[CheckResult] = Field(default_factory=list)


async def _run_probe(name: str, probe: Probe) -> CheckResult:
    started = time.perf_counter()
    try:
        await probe()
    except Exception as exc:
        logger.warning("readiness_probe_failed", extra={"probe": name, "error": str(exc)})
        return CheckResult(
            name=name,
            status="down",
            detail=type(exc).__name__,
            duration_ms=round((time.perf_counter() - started) * 1000.0, 2),
        )
    return CheckResult(
        name=name,
        status="ok",
        duration_ms=round((time.perf_counter() - started) * 1000.0, 2),
    )


@router.get("/healthz", response_model=LivenessResponse, summary="Liveness probe")
async def healthz(request: Request) -> LivenessResponse:
    settings = request.app.state.settings
    return LivenessResponse(service=settings.service_name, version=settings.service_version)


@router.get("/readyz", response_model=ReadinessResponse, summary="Readiness probe")
async def readyz(request: Request, response: Response) -> ReadinessResponse:
    probes: Mapping[str, Probe] = getattr(request.app.state, "readiness_probes", {})
    checks = list(await asyncio.gather(*(_run_probe(n, p) for n, p in sorted(probes.items()))))
    healthy = all(c.status == "ok" for c in checks)
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status="ok" if healthy else "degraded", checks=checks)
