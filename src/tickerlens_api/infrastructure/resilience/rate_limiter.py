# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Per-provider admission control (async).

A :class:`ProviderLimiter` combines a semaphore that caps in-flight calls with
a token bucket that caps the sustained call rate. One instance is owned by
each provider client, so every in-flight request in the process draws from
the same budget.

Example:
    limiter = ProviderLimiter(name="edgar", max_concurrency=4, rate_per_s=8.0)
    async with limiter.slot():
        resp = await http.get(url)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager, suppress

from tickerlens_api.infrastructure.observability.metrics import (
    get_provider_limiter_wait_seconds,
)


class TokenBucket:
    """Token bucket refilled continuously at ``rate_per_s`` up to ``burst`` tokens.

    A non-positive rate disables throttling.
    """

    def __init__(
        self,
        *,
        rate_per_s: float,
        burst: int | None = None,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._rate = float(rate_per_s)
        self._capacity = float(max(1, burst if burst is not None else int(max(1.0, rate_per_s))))
        self._tokens = self._capacity
        self._monotonic = monotonic
        self._sleep = sleep
        self._updated = monotonic()
        self._lock = asyncio.Lock()

    @property
    def tokens(self) -> float:
        """Return the token count as of the last refill."""
        return self._tokens

    def _refill(self) -> None:
        now = self._monotonic()
        elapsed = max(0.0, now - self._updated)
        self._tokens = min(self._capacity, self._tokens + elapsed * self._rate)
        self._updated = now

    async def acquire(self) -> float:
        """Take one token, sleeping until one is available.

        Returns:
            Seconds spent sleeping.
        """
        if self._rate <= 0:
            return 0.0
        waited = 0.0
        async with self._lock:
            while True:
                self._refill()
                if self._tokens >= 1.0:
                    self._tokens -= 1.0
                    return waited
                delay = (1.0 - self._tokens) / self._rate
                await self._sleep(delay)
                waited += delay


class ProviderLimiter:
    """Concurrency cap plus rate cap for one upstream provider."""

    def __init__(
        self,
        *,
        name: str,
        max_concurrency: int,
        rate_per_s: float,
        burst: int | None = None,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.name = name
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._bucket = TokenBucket(
            rate_per_s=rate_per_s, burst=burst, monotonic=monotonic, sleep=sleep
        )
        self._monotonic = monotonic
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Return the number of calls currently holding a slot."""
        return self._in_flight

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one concurrency slot and one rate token for the block."""
        started = self._monotonic()
        async with self._semaphore:
            throttled = await self._bucket.acquire()
            waited = max(self._monotonic() - started, throttled)
            with suppress(Exception):
                get_provider_limiter_wait_seconds().labels(provider=self.name).observe(waited)
            self._in_flight += 1
            try:
                yield
            finally:
                self._in_flight -= 1
