# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Minimal async circuit breaker (in-memory).

State machine:
    - CLOSED -> count failures; when threshold reached, go OPEN.
    - OPEN   -> fail-fast until recovery timeout expires; then HALF-OPEN.
    - HALF-OPEN -> allow limited calls; on success -> CLOSED; on failure -> OPEN.

One breaker is owned by each provider client, so state is shared by every
request in the process that talks to that provider.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


class CircuitOpenError(RuntimeError):
    """Raised when the breaker rejects a call without attempting it."""


@dataclass
class CircuitBreaker:
    """Simple circuit breaker suitable for HTTP client protection."""

    failure_threshold: int
    recovery_timeout_s: float
    half_open_max_calls: int
    monotonic: Callable[[], float] = time.monotonic

    _state: str = "CLOSED"  # CLOSED|OPEN|HALF_OPEN
    _failures: int = 0
    _opened_at: float = 0.0
    _half_open_calls: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def state(self) -> str:
        """Return the current state name."""
        return self._state

    def _trip(self) -> None:
        self._state = "OPEN"
        self._opened_at = self.monotonic()

    @asynccontextmanager
    async def guard(
        self, _key: str, *, trips: Callable[[Exception], bool] | None = None
    ) -> AsyncIterator[None]:
        """Guard an async call with the breaker.

        Args:
            _key: Name of the guarded dependency.
            trips: Decides whether an exception counts as a failure. An
                exception it rejects still propagates, but the call is
                recorded as a success. Every exception counts when omitted.

        Raises:
            CircuitOpenError: ``"circuit_open"`` while OPEN, or
                ``"circuit_half_open_limit"`` when HALF_OPEN trial calls are used up.
        """
        async with self._lock:
            if self._state == "OPEN":
                if self.monotonic() - self._opened_at >= self.recovery_timeout_s:
                    self._state = "HALF_OPEN"
                    self._half_open_calls = 0
                else:
                    raise CircuitOpenError("circuit_open")
            if self._state == "HALF_OPEN":
                if self._half_open_calls >= self.half_open_max_calls:
                    raise CircuitOpenError("circuit_half_open_limit")
                self._half_open_calls += 1

        try:
            yield
        except Exception as exc:
            if trips is None or trips(exc):
                await self._record_failure()
            else:
                await self._record_success()
            raise
        else:
            await self._record_success()

    async def _record_failure(self) -> None:
        async with self._lock:
            if self._state == "HALF_OPEN":
                self._trip()
            else:
                self._failures += 1
                if self._failures >= self.failure_threshold:
                    self._trip()

    async def _record_success(self) -> None:
        async with self._lock:
            self._state = "CLOSED"
            self._failures = 0
