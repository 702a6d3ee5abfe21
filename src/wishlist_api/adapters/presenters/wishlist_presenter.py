# Copyright (c)
# SPDX-License-Identifier: MIT
"""Presenter: Wishlist entities → HTTP SuccessEnvelope.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from wishlist_api.adapters.schemas.http.envelopes import SuccessEnvelope
from wishlist_api.adapters.schemas.http.wishlist import TransferResultHTTP, WishlistHTTP
from wishlist_api.domain.entities.cart import TransferResult
from wishlist_api.domain.entities.wishlist import Wishlist


class WishlistPresenter:
    """Render wishlist operation results into success envelopes."""

    def present_wishlist(self, wishlist: Wishlist) -> SuccessEnvelope[WishlistHTTP]:
        return SuccessEnvelope[WishlistHTTP](
            data=WishlistHTTP.model_validate(wishlist.to_document())
        )

    def present_transfer(self, result: TransferResult) -> SuccessEnvelope[TransferResultHTTP]:
        return SuccessEnvelope[TransferResultHTTP](
            data=TransferResultHTTP.model_validate(result.to_document())
        )
