from __future__ import annotations

import pytest
from conftest import FrozenClock

from tickerlens_api.infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitOpenError,
)


async def _fail(breaker: CircuitBreaker) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        async with breaker.guard("svc"):
            raise RuntimeError("boom")


async def _succeed(breaker: CircuitBreaker) -> None:
    async with breaker.guard("svc"):
        pass


def _breaker(clock: FrozenClock, threshold: int = 2) -> CircuitBreaker:
    return CircuitBreaker(
        failure_threshold=threshold,
        recovery_timeout_s=30.0,
        half_open_max_calls=1,
        monotonic=clock.monotonic,
    )


@pytest.mark.anyio
async def test_trips_open_after_consecutive_failures(frozen_clock: FrozenClock) -> None:
    breaker = _breaker(frozen_clock)
    await _fail(breaker)
    assert breaker.state == "CLOSED"
    await _fail(breaker)
    assert breaker.state == "OPEN"

    with pytest.raises(CircuitOpenError, match="circuit_open"):
        await _succeed(breaker)


@pytest.mark.anyio
async def test_success_resets_the_failure_count(frozen_clock: FrozenClock) -> None:
    breaker = _breaker(frozen_clock)
    await _fail(breaker)
    await _succeed(breaker)
    await _fail(breaker)
    assert breaker.state == "CLOSED"


@pytest.mark.anyio
async def test_half_open_trial_success_closes(frozen_clock: FrozenClock) -> None:
    breaker = _breaker(frozen_clock, threshold=1)
    await _fail(breaker)
    frozen_clock.advance(30.0)

    await _succeed(breaker)
    assert breaker.state == "CLOSED"


@pytest.mark.anyio
async def test_half_open_trial_failure_reopens(frozen_clock: FrozenClock) -> None:
    breaker = _breaker(frozen_clock, threshold=1)
    await _fail(breaker)
    frozen_clock.advance(31.0)

    await _fail(breaker)
    assert breaker.state == "OPEN"
    with pytest.raises(CircuitOpenError):
        await _succeed(breaker)


@pytest.mark.anyio
async def test_half_open_limits_concurrent_trials(frozen_clock: FrozenClock) -> None:
    breaker = _breaker(frozen_clock, threshold=1)
    await _fail(breaker)
    frozen_clock.advance(30.0)

    async with breaker.guard("svc"):
        assert breaker.state == "HALF_OPEN"
        with pytest.raises(CircuitOpenError, match="circuit_half_open_limit"):
            await _succeed(breaker)
    assert breaker.state == "CLOSED"


@pytest.mark.anyio
async def test_exceptions_rejected_by_trips_do_not_count(frozen_clock: FrozenClock) -> None:
    breaker = _breaker(frozen_clock, threshold=1)

    with pytest.raises(LookupError):
        async with breaker.guard("svc", trips=lambda exc: not isinstance(exc, LookupError)):
            raise LookupError("missing")
    assert breaker.state == "CLOSED"

    with pytest.raises(RuntimeError):
        async with breaker.guard("svc", trips=lambda exc: not isinstance(exc, LookupError)):
            raise RuntimeError("boom")
    assert breaker.state == "OPEN"
