# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Canonical APIRouter wrapper for versioned wishlist endpoints:
      - Versioned routing with stable prefixes (e.g., "/v1/wishlists").
      - Standard error response mapping using ErrorEnvelope.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from fastapi import APIRouter

from wishlist_api.adapters.schemas.http.envelopes import ErrorEnvelope
from wishlist_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


class BaseRouter(APIRouter):
    """Canonical router wrapper for versioned HTTP endpoints.

    Args:
        version: API version segment (e.g., "v1").
        resource: Plural resource segment (e.g., "wishlists").
        tags: Default tags applied to all routes mounted on this router.
        **kwargs: Additional APIRouter kwargs.
    """

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        tags: Sequence[TagType] | None = None,
        **kwargs: Any,
    ) -> None:
        prefix = f"/{version}/{resource}"
        super().__init__(prefix=prefix, tags=list(tags) if tags is not None else None, **kwargs)
        _LOGGER.debug("router_initialized", extra={"prefix": prefix, "tags": list(tags or [])})

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error response mapping for endpoints.

        Returns:
            Mapping from HTTP status code → OpenAPI response object with
            ErrorEnvelope as the model.
        """
        return {
            400: {"model": ErrorEnvelope, "description": "Bad request."},
            404: {"model": ErrorEnvelope, "description": "Not found."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
            502: {"model": ErrorEnvelope, "description": "Upstream service unavailable."},
        }
