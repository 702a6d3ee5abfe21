"""Routers Package Export (Adapters Layer).

Purpose:
    Provide stable, explicit exports for the routers mounted by
    :func:`wishlist_api.main.create_app`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from .health_router import router as health
from .metrics_router import router as metrics
from .wishlist_router import router as wishlists

__all__ = ["health", "metrics", "wishlists"]
