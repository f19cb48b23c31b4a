# src/tickerlens_api/application/interfaces/clock.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Application Interface: Clock.

Synopsis:
    Time source injected into caches, the identity resolver and use cases that
    anchor windows at "today", so staleness and window behavior can be
    asserted deterministically.

Layer:
    application/interfaces
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Protocol


class Clock(Protocol):
    """Wall-clock and monotonic time source."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC datetime."""

    def monotonic(self) -> float:
        """Return a monotonic reading in seconds."""


def today_utc(clock: Clock) -> date:
    """Return the current UTC calendar date according to ``clock``."""
    return clock.now().astimezone(UTC).date()
