from __future__ import annotations

import asyncio

import pytest
from conftest import FrozenClock

from tickerlens_api.infrastructure.resilience.rate_limiter import ProviderLimiter, TokenBucket


class _SleepingClock(FrozenClock):
    """Clock whose sleep advances monotonic time instead of waiting."""

    def __init__(self) -> None:
        super().__init__()
        self.slept: list[float] = []

    async def sleep(self, delay: float) -> None:
        self.slept.append(delay)
        self.advance(delay)


@pytest.mark.anyio
async def test_bucket_allows_a_burst_then_throttles() -> None:
    clock = _SleepingClock()
    bucket = TokenBucket(rate_per_s=2.0, burst=2, monotonic=clock.monotonic, sleep=clock.sleep)

    assert await bucket.acquire() == 0.0
    assert await bucket.acquire() == 0.0
    waited = await bucket.acquire()

    assert waited == pytest.approx(0.5)
    assert clock.slept == [pytest.approx(0.5)]


@pytest.mark.anyio
async def test_bucket_refills_over_time_up_to_capacity() -> None:
    clock = _SleepingClock()
    bucket = TokenBucket(rate_per_s=1.0, burst=3, monotonic=clock.monotonic, sleep=clock.sleep)
    for _ in range(3):
        await bucket.acquire()
    clock.advance(100.0)

    await bucket.acquire()
    assert bucket.tokens == pytest.approx(2.0)
    assert clock.slept == []


@pytest.mark.anyio
async def test_non_positive_rate_disables_throttling() -> None:
    clock = _SleepingClock()
    bucket = TokenBucket(rate_per_s=0, monotonic=clock.monotonic, sleep=clock.sleep)
    for _ in range(10):
        assert await bucket.acquire() == 0.0


@pytest.mark.anyio
async def test_limiter_caps_in_flight_calls() -> None:
    limiter = ProviderLimiter(name="test", max_concurrency=2, rate_per_s=0)
    peak = 0
    release = asyncio.Event()

    async def _call() -> None:
        nonlocal peak
        async with limiter.slot():
            peak = max(peak, limiter.in_flight)
            await release.wait()

    tasks = [asyncio.create_task(_call()) for _ in range(4)]
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert limiter.in_flight == 2
    release.set()
    await asyncio.gather(*tasks)

    assert peak == 2
    assert limiter.in_flight == 0


def test_limiter_rejects_zero_concurrency() -> None:
    with pytest.raises(ValueError):
        ProviderLimiter(name="test", max_concurrency=0, rate_per_s=1.0)
