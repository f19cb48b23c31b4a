# src/tickerlens_api/domain/entities/price_bar.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Price Bars (Domain Entities).

Synopsis:
    Provider-agnostic price bars and the price history result that carries
    them, plus the bar plan a logical range/interval request maps to.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from tickerlens_api.domain.entities.base import BaseEntity
from tickerlens_api.domain.enums.price_history import BarInterval, BarSpan, PriceRange


@dataclass(frozen=True, slots=True)
class PriceBar(BaseEntity):
    """One bar.

    Attributes:
        timestamp: Bar start in epoch seconds (UTC).
        close: Close price (finite).
        volume: Traded volume, if reported.
        high: High price, if reported.
        low: Low price, if reported.
    """

    timestamp: int
    close: float
    volume: float | None = None
    high: float | None = None
    low: float | None = None


@dataclass(frozen=True, slots=True)
class Granularity(BaseEntity):
    """Bar size as ``unit_count`` x ``unit_span`` (e.g. 15 x minute)."""

    unit_count: int
    unit_span: BarSpan

    def __post_init__(self) -> None:
        if self.unit_count < 1:
            raise ValueError("unit_count must be >= 1")


@dataclass(frozen=True, slots=True)
class BarPlan(BaseEntity):
    """Provider-agnostic description of the bars to fetch.

    Attributes:
        range: Requested logical range.
        interval: Effective bar interval.
        granularity: Bar size derived from ``interval``.
        start: First calendar day of the window (inclusive).
        end: Last calendar day of the window (inclusive, "today").
    """

    range: PriceRange
    interval: BarInterval
    granularity: Granularity
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("start must not be after end")

    @property
    def window_days(self) -> int:
        """Return the window length in calendar days."""
        return (self.end - self.start).days


@dataclass(frozen=True, slots=True)
class PriceHistory(BaseEntity):
    """Price history result.

    Attributes:
        symbol: Upper-case ticker symbol.
        range: Requested logical range.
        interval: Interval of the returned bars (may be coarser than requested
            when only a daily provider could serve the request).
        source: Name of the provider that supplied the bars, if any.
        points: Bars ascending by timestamp.
    """

    symbol: str
    range: PriceRange
    interval: BarInterval
    source: str | None = None
    points: tuple[PriceBar, ...] = ()
