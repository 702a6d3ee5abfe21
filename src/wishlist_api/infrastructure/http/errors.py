# src/wishlist_api/infrastructure/http/errors.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""HTTP error mapping for the wishlist API.

Every error response is rendered here and nowhere else:

* Typed :class:`DomainError` instances are matched once on their
  :class:`ErrorKind` to pick a status, and their internal message is
  translated through a fixed table of user-facing phrasings.
* Untyped exceptions are classified into a generic message; the exception
  type and text are logged and never returned.
* Request validation and framework HTTP errors share the same envelope.
"""

from __future__ import annotations

from typing import Any, Final

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from wishlist_api.domain.exceptions.base import DomainError, ErrorKind
from wishlist_api.infrastructure.logging.logger import get_json_logger

__all__ = [
    "USER_FACING_MESSAGES",
    "classify_exception",
    "error_envelope",
    "UnhandledErrorMiddleware",
    "install_exception_handlers",
    "status_for_kind",
    "user_facing_message",
]

logger = get_json_logger(__name__)

#: Internal phrasing → user-facing phrasing. Unmapped messages pass through.
USER_FACING_MESSAGES: Final[dict[str, str]] = {
    "Failed to fetch product details": "Unable to retrieve product information",
    "Product not found": "The requested product could not be found",
    "Invalid product data format": "Product information is incomplete",
    "Item already exists in wishlist": "This item is already in your wishlist",
    "Wishlist not found": "Your wishlist could not be found",
    "Item not found in wishlist": "The item was not found in your wishlist",
    "Product ID is required": "Please provide a valid product ID",
    "Failed to add item to cart": "Unable to add item to cart",
}


def status_for_kind(kind: ErrorKind) -> int:
    """Map an error kind to its HTTP status."""
    match kind:
        case ErrorKind.NOT_FOUND:
            return 404
        case ErrorKind.BAD_REQUEST:
            return 400
        case ErrorKind.UPSTREAM_UNAVAILABLE:
            return 502
        case ErrorKind.INTERNAL:
            return 500


def user_facing_message(message: str) -> str:
    """Translate an internal message; unknown messages pass through unchanged."""
    return USER_FACING_MESSAGES.get(message, message)


def classify_exception(exc: Exception) -> tuple[ErrorKind, str, str]:
    """Classify an untyped exception as ``(kind, code, generic message)``."""
    if isinstance(exc, SQLAlchemyError | RedisError):
        return ErrorKind.INTERNAL, "INTERNAL_ERROR", "Database operation failed"
    if isinstance(exc, httpx.TransportError):
        return ErrorKind.UPSTREAM_UNAVAILABLE, "UPSTREAM_UNAVAILABLE", (
            "Service temporarily unavailable"
        )
    return ErrorKind.INTERNAL, "INTERNAL_ERROR", "An unexpected error occurred"


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    """Build the canonical ``{"error": {...}}`` body."""
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def _log_error(request: Request, status: int, message: str, exc: Exception) -> None:
    fields = {
        "method": request.method,
        "path": request.url.path,
        "status": status,
        "error_type": type(exc).__name__,
        "root_error": str(exc),
    }
    if status >= 500:
        logger.error(message, extra=fields, exc_info=exc)
    else:
        logger.warning(message, extra=fields)


async def handle_domain_error(request: Request, exc: DomainError) -> Response:
    """Render a typed application error."""
    status = status_for_kind(exc.kind)
    message = user_facing_message(exc.message)
    _log_error(request, status, message, exc)
    payload = error_envelope(
        code=exc.code,
        http_status=status,
        message=message,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=status, content=payload)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    """Render a request-shape error (422)."""
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    """Render framework HTTP errors (404 for unknown routes, 405, ...)."""
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    """Render any untyped exception without leaking its detail."""
    kind, code, message = classify_exception(exc)
    status = status_for_kind(kind)
    _log_error(request, status, message, exc)
    payload = error_envelope(
        code=code,
        http_status=status,
        message=message,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=status, content=payload)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Render untyped exceptions that escaped the routers.

    Installed innermost so the response still passes through the request-id
    and access-log middleware.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unhandled_exception(request, exc)


def install_exception_handlers(app: FastAPI) -> None:
    """Register every handler on ``app``."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)
