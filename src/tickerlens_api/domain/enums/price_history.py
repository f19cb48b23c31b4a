# src/tickerlens_api/domain/enums/price_history.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Price history enumerations.

Purpose:
    Logical ranges and bar intervals accepted by the price history endpoint,
    plus the provider-agnostic time span unit used to express bar
    granularity.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class PriceRange(str, Enum):
    """Logical look-back ranges for price history."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


class BarInterval(str, Enum):
    """Explicit bar intervals a caller may request.

    Attributes:
        M1: 1-minute bars.
        M15: 15-minute bars.
        H1: 1-hour bars.
        D1: 1-day bars.
    """

    M1 = "1m"
    M15 = "15m"
    H1 = "1h"
    D1 = "1d"

    @property
    def is_intraday(self) -> bool:
        """Return True for sub-daily intervals."""
        return self is not BarInterval.D1

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


class BarSpan(str, Enum):
    """Time unit of a single bar, in the vocabulary aggregate APIs use."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
