# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Wishlist Router.

Summary:
    Per-user wishlist endpoints and the wishlist-to-cart transfer under
    `/v1/wishlists/{user_id}`. Errors are raised as domain exceptions and
    rendered by the application-wide handlers.

Layer:
    adapters/routers
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Body, Depends, Path, status

from wishlist_api.adapters.presenters.wishlist_presenter import WishlistPresenter
from wishlist_api.adapters.routers.base_router import BaseRouter
from wishlist_api.adapters.schemas.http.envelopes import SuccessEnvelope
from wishlist_api.adapters.schemas.http.wishlist import (
    AddItemRequest,
    TransferResultHTTP,
    WishlistHTTP,
)
from wishlist_api.application.services.wishlist_orchestrator import WishlistOrchestrator
from wishlist_api.dependencies.wishlist import get_wishlist_orchestrator

router = BaseRouter(version="v1", resource="wishlists", tags=["Wishlist"])
presenter = WishlistPresenter()

UserId = Annotated[str, Path(min_length=1, max_length=128, description="Wishlist owner.")]
Orchestrator = Annotated[WishlistOrchestrator, Depends(get_wishlist_orchestrator)]


@router.get(
    "/{user_id}",
    response_model=SuccessEnvelope[WishlistHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Get a user's wishlist",
)
async def get_wishlist(user_id: UserId, orchestrator: Orchestrator) -> SuccessEnvelope[WishlistHTTP]:
    return presenter.present_wishlist(await orchestrator.get_wishlist(user_id))


@router.post(
    "/{user_id}/items",
    response_model=SuccessEnvelope[WishlistHTTP],
    status_code=status.HTTP_201_CREATED,
    responses=BaseRouter.std_error_responses(),
    summary="Add a product to a user's wishlist",
)
async def add_item(
    user_id: UserId,
    body: Annotated[AddItemRequest, Body()],
    orchestrator: Orchestrator,
) -> SuccessEnvelope[WishlistHTTP]:
    """Add a product; the wishlist is created on first use."""
    wishlist = await orchestrator.add_item(user_id, body.product_id, body.quantity)
    return presenter.present_wishlist(wishlist)


@router.delete(
    "/{user_id}/items/{product_id}",
    response_model=SuccessEnvelope[WishlistHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Remove a product from a user's wishlist",
)
async def remove_item(
    user_id: UserId,
    product_id: Annotated[str, Path(min_length=1, max_length=128)],
    orchestrator: Orchestrator,
) -> SuccessEnvelope[WishlistHTTP]:
    return presenter.present_wishlist(await orchestrator.remove_item(user_id, product_id))


@router.delete(
    "/{user_id}/items",
    response_model=SuccessEnvelope[WishlistHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Remove every product from a user's wishlist",
)
async def clear_wishlist(
    user_id: UserId, orchestrator: Orchestrator
) -> SuccessEnvelope[WishlistHTTP]:
    return presenter.present_wishlist(await orchestrator.clear_wishlist(user_id))


@router.post(
    "/{user_id}/cart",
    response_model=SuccessEnvelope[TransferResultHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Move a wishlist item into the user's cart",
)
async def add_to_cart(
    user_id: UserId,
    body: Annotated[AddItemRequest, Body()],
    orchestrator: Orchestrator,
) -> SuccessEnvelope[TransferResultHTTP]:
    """Add the product to the cart, then remove it from the wishlist.

    The wishlist is left unchanged when the cart call fails or its response
    is rejected.
    """
    result = await orchestrator.add_to_cart(user_id, body.product_id, body.quantity)
    return presenter.present_transfer(result)
