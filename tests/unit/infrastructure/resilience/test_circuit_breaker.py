# tests/unit/infrastructure/resilience/test_circuit_breaker.py
from __future__ import annotations

import asyncio

import pytest

from wishlist_api.domain.exceptions.base import UpstreamUnavailableError
from wishlist_api.infrastructure.resilience.circuit_breaker import CircuitBreaker


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


async def _fail(breaker: CircuitBreaker) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        async with breaker.guard():
            raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_success_keeps_circuit_closed() -> None:
    breaker = CircuitBreaker(name="svc", failure_threshold=2)

    async with breaker.guard():
        pass

    assert breaker.state == "CLOSED"
    assert breaker._failures == 0


@pytest.mark.asyncio
async def test_trips_open_and_fails_fast() -> None:
    breaker = CircuitBreaker(name="svc", failure_threshold=2, recovery_timeout_s=60.0)

    await _fail(breaker)
    assert breaker.state == "CLOSED"
    await _fail(breaker)
    assert breaker.state == "OPEN"

    called = False
    with pytest.raises(UpstreamUnavailableError) as ei:
        async with breaker.guard():
            called = True

    assert not called
    assert ei.value.details == {"upstream": "svc"}


@pytest.mark.asyncio
async def test_half_open_success_closes() -> None:
    clock = _Clock()
    breaker = CircuitBreaker(name="svc", failure_threshold=1, recovery_timeout_s=5.0, clock=clock)
    await _fail(breaker)
    assert breaker.state == "OPEN"

    clock.now = 5.0
    async with breaker.guard():
        assert breaker.state == "HALF_OPEN"

    assert breaker.state == "CLOSED"


@pytest.mark.asyncio
async def test_half_open_failure_reopens() -> None:
    clock = _Clock()
    breaker = CircuitBreaker(name="svc", failure_threshold=1, recovery_timeout_s=5.0, clock=clock)
    await _fail(breaker)

    clock.now = 6.0
    await _fail(breaker)

    assert breaker.state == "OPEN"
    with pytest.raises(UpstreamUnavailableError):
        async with breaker.guard():
            pass


@pytest.mark.asyncio
async def test_breakers_do_not_share_state() -> None:
    a = CircuitBreaker(name="a", failure_threshold=1)
    b = CircuitBreaker(name="b", failure_threshold=1)

    await _fail(a)

    assert a.state == "OPEN"
    assert b.state == "CLOSED"
    assert a._lock is not b._lock


@pytest.mark.asyncio
async def test_cancelled_half_open_trial_does_not_wedge_breaker() -> None:
    clock = _Clock()
    breaker = CircuitBreaker(name="cart", failure_threshold=1, recovery_timeout_s=5.0, clock=clock)
    await _fail(breaker)
    clock.now = 5.0

    entered = asyncio.Event()

    async def _trial() -> None:
        async with breaker.guard():
            entered.set()
            await asyncio.sleep(3600)

    task = asyncio.create_task(_trial())
    await entered.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert breaker.state == "OPEN"
    with pytest.raises(UpstreamUnavailableError):
        async with breaker.guard():
            pass

    clock.now = 10.0
    async with breaker.guard():
        assert breaker.state == "HALF_OPEN"
    assert breaker.state == "CLOSED"


@pytest.mark.asyncio
async def test_cancellation_while_closed_is_not_a_failure() -> None:
    breaker = CircuitBreaker(name="cart", failure_threshold=1)

    with pytest.raises(asyncio.CancelledError):
        async with breaker.guard():
            raise asyncio.CancelledError()

    assert breaker.state == "CLOSED"
    assert breaker._failures == 0
