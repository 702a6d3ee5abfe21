# Copyright (c)
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface. Re-exports the canonical
    envelopes and resource schemas used by routers and presenters.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from wishlist_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
)
from wishlist_api.adapters.schemas.http.wishlist import (
    AddItemRequest,
    TransferResultHTTP,
    WishlistHTTP,
    WishlistItemHTTP,
)

__all__ = [
    "AddItemRequest",
    "ErrorEnvelope",
    "ErrorObject",
    "SuccessEnvelope",
    "TransferResultHTTP",
    "WishlistHTTP",
    "WishlistItemHTTP",
]
