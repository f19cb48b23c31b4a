# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Bounded async retry for upstream provider calls.

Provider clients retry transport failures, 429s and 5xx responses a small,
fixed number of times with a linear pause (``base``, ``2*base``, ...). When an
upstream says how long to wait (``Retry-After``), that hint replaces the
policy delay, still bounded by ``cap``. Exhausting the budget re-raises the
last error untouched so callers see the real failure.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many retries to make and how long to pause between them.

    Attributes:
        total: Retries after the first attempt.
        base: Pause unit in seconds.
        cap: Longest single pause in seconds.
        jitter: Draw each pause uniformly from ``[0, delay]``.
        linear: Grow pauses linearly; exponential (doubling) otherwise.
    """

    total: int
    base: float
    cap: float
    jitter: bool = True
    linear: bool = False

    @classmethod
    def linear_attempts(cls, attempts: int, *, base: float, cap: float = 5.0) -> RetryPolicy:
        """Policy for ``attempts`` tries in total with un-jittered linear pauses."""
        return cls(total=max(0, attempts - 1), base=base, cap=cap, jitter=False, linear=True)

    def delay(self, attempt: int) -> float:
        """Pause before retry number ``attempt`` (0-based), before jitter."""
        step = attempt + 1 if self.linear else 2**attempt
        return min(self.cap, self.base * step)


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: Callable[[Exception], bool],
    delay_hint: Callable[[Exception], float | None] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``fn`` until it succeeds, fails permanently, or the budget runs out.

    Args:
        fn: Zero-argument coroutine factory; called once per attempt.
        policy: Retry budget and pause schedule.
        retry_on: True when a failure is worth another attempt.
        delay_hint: Upstream-suggested pause for a failure, if it carries one.
        sleep: Awaitable sleep, injectable for tests.

    Raises:
        Exception: The last failure, when it is not retryable or no retries remain.
    """
    for attempt in range(policy.total + 1):
        try:
            return await fn()
        except Exception as exc:
            if attempt == policy.total or not retry_on(exc):
                raise
            pause = policy.delay(attempt)
            if policy.jitter:
                pause = random.uniform(0.0, pause)  # noqa: S311
            hinted = delay_hint(exc) if delay_hint is not None else None
            if hinted is not None:
                pause = min(policy.cap, hinted)
        await sleep(pause)
    raise AssertionError("unreachable")  # pragma: no cover
