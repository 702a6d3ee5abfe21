# src/wishlist_api/dependencies/wishlist.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""FastAPI dependency providers for the wishlist router."""

from __future__ import annotations

from fastapi import Request

from wishlist_api.application.services.wishlist_orchestrator import WishlistOrchestrator


def get_wishlist_orchestrator(request: Request) -> WishlistOrchestrator:
    """Return the orchestrator built during application startup.

    Raises:
        RuntimeError: The application lifespan has not run.
    """
    orchestrator: WishlistOrchestrator | None = getattr(
        request.app.state, "orchestrator", None
    )
    if orchestrator is None:
        raise RuntimeError("Wishlist orchestrator not initialized (lifespan not started)")
    return orchestrator
