# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""System clock implementation of the application ``Clock`` port."""

from __future__ import annotations

import time
from datetime import UTC, datetime


class SystemClock:
    """Real wall-clock (UTC) and monotonic time."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)

    def monotonic(self) -> float:
        return time.monotonic()
