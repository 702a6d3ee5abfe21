# Copyright (c)
# SPDX-License-Identifier: MIT
"""Minimal async circuit breaker (in-memory).

State machine:
    - CLOSED -> count failures; when threshold reached, go OPEN.
    - OPEN   -> fail-fast until recovery timeout expires; then HALF-OPEN.
    - HALF-OPEN -> allow limited calls; on success -> CLOSED; on failure -> OPEN.

This is process-local. For distributed breakers, use a shared store.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from wishlist_api.domain.exceptions.base import UpstreamUnavailableError


@dataclass
class CircuitBreaker:
    """Simple circuit breaker suitable for HTTP client protection.

    Fail-fast rejections raise :class:`UpstreamUnavailableError`, which callers
    propagate unchanged.
    """

    name: str
    failure_threshold: int = 5
    recovery_timeout_s: float = 30.0
    half_open_max_calls: int = 1
    clock: Callable[[], float] = time.monotonic

    _state: str = "CLOSED"  # CLOSED|OPEN|HALF_OPEN
    _failures: int = 0
    _opened_at: float = 0.0
    _half_open_calls: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def state(self) -> str:
        return self._state

    def _trip(self) -> None:
        self._state = "OPEN"
        self._opened_at = self.clock()

    @asynccontextmanager
    async def guard(self) -> AsyncIterator[None]:
        """Guard an async call with the breaker.

        Raises:
            UpstreamUnavailableError: The circuit is open or the half-open
                trial budget is spent.
        """
        async with self._lock:
            if self._state == "OPEN":
                if self.clock() - self._opened_at >= self.recovery_timeout_s:
                    self._state = "HALF_OPEN"
                    self._half_open_calls = 0
                else:
                    raise UpstreamUnavailableError(details={"upstream": self.name})
            if self._state == "HALF_OPEN":
                if self._half_open_calls >= self.half_open_max_calls:
                    raise UpstreamUnavailableError(details={"upstream": self.name})
                self._half_open_calls += 1

        try:
            yield
        except Exception:
            async with self._lock:
                if self._state == "HALF_OPEN":
                    self._trip()
                else:
                    self._failures += 1
                    if self._failures >= self.failure_threshold:
                        self._trip()
            raise
        except BaseException:
            # Cancelled mid-call: a half-open trial re-opens so the slot is freed
            # after the next recovery window. No await, so it cannot be interrupted.
            if self._state == "HALF_OPEN":
                self._trip()
            raise
        else:
            async with self._lock:
                self._state = "CLOSED"
                self._failures = 0
