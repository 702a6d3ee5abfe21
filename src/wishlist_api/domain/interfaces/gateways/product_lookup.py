# src/wishlist_api/domain/interfaces/gateways/product_lookup.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Product Lookup Gateway Protocol.

Synopsis:
    Domain-level Protocol (PEP 544) for the remote product catalog. The
    gateway is a thin contract: it reports a coarse status and the raw
    payload; parsing, validation, and caching belong to the application layer.

Layer:
    domain/interfaces/gateways
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class ProductLookupStatus(str, Enum):
    """Coarse outcome reported by the product catalog."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ProductLookupResponse:
    """Result of a product lookup.

    Attributes:
        status: Coarse outcome.
        raw_payload: Undecoded body text when the catalog returned one.
    """

    status: ProductLookupStatus
    raw_payload: str | None = None


class ProductLookupGateway(Protocol):
    """Abstraction over the remote product catalog."""

    async def get_product(self, product_id: str) -> ProductLookupResponse:
        """Look up a single product.

        Args:
            product_id: Catalog identifier.

        Returns:
            Status plus raw payload.

        Raises:
            UpstreamUnavailableError: The catalog is refusing traffic.
            Exception: Transport failures after retries are exhausted.
        """
        ...
