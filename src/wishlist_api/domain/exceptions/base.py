# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Base Domain Exceptions.

Summary:
    Canonical base class for domain/application exceptions plus the closed set
    of error kinds used to map them to HTTP exactly once at the boundary.

Layer:
    domain/exceptions
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed classification of application errors."""

    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base class for all domain/application exceptions.

    Subclasses pin ``kind`` and ``code``; ``message`` is the internal phrasing
    that the HTTP boundary translates to user-facing text.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = "DOMAIN_ERROR"
    default_message: str = "Domain error"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message or self.default_message)
        self.details: dict[str, Any] = details or {}

    @property
    def message(self) -> str:
        """Return the internal message carried by this error."""
        return str(self.args[0]) if self.args else self.default_message


class NotFoundError(DomainError):
    """A referenced resource does not exist."""

    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Not found"


class BadRequestError(DomainError):
    """The request cannot be satisfied as given."""

    kind = ErrorKind.BAD_REQUEST
    code = "BAD_REQUEST"
    default_message = "Bad request"


class UpstreamUnavailableError(DomainError):
    """A remote dependency is unreachable or refusing traffic."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    code = "UPSTREAM_UNAVAILABLE"
    default_message = "Service temporarily unavailable"


class InternalError(DomainError):
    """Unexpected failure inside this service."""

    kind = ErrorKind.INTERNAL
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"
