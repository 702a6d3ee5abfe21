# Copyright (c)
# SPDX-License-Identifier: MIT
"""Retry utilities (async) with jittered exponential backoff."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry attempts."""

    total: int  # number of retries (not counting the first attempt)
    base: float = 0.1  # base backoff seconds
    cap: float = 2.0  # max backoff seconds
    jitter: bool = True  # full jitter if True

    def backoff(self, attempt: int) -> float:
        """Seconds to sleep before retry number ``attempt + 1``."""
        delay = min(self.cap, self.base * (2**attempt))
        if self.jitter:
            delay = random.uniform(0, delay)  # noqa: S311
        return delay


async def retry_async[T](
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: Callable[[Exception | T], bool],
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Retry an async function with backoff until success or budget exhausted.

    Args:
        fn: Zero-arg async function to execute.
        policy: RetryPolicy defining count/backoff.
        retry_on: Predicate over a raised exception or a returned value; True
            means try again.
        sleep: Awaitable sleeper, injectable for tests.

    Returns:
        The return value of ``fn``. When the budget is exhausted on a
        retryable value, that last value is returned.

    Raises:
        The last exception if it is not retryable or retries are exhausted.
    """
    attempt = 0
    while True:
        try:
            result = await fn()
        except Exception as exc:  # noqa: BLE001
            if attempt >= policy.total or not retry_on(exc):
                raise
        else:
            if attempt >= policy.total or not retry_on(result):
                return result
        await sleep(policy.backoff(attempt))
        attempt += 1
