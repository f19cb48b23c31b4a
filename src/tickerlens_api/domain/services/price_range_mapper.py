# src/tickerlens_api/domain/services/price_range_mapper.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Price history range mapping.

Purpose:
    Translate a logical ``(range, interval?)`` request into a bar plan (bar
    granularity plus calendar window) and shape provider bars into a uniform,
    ascending point list.

Rules:
    * An explicit interval wins over the range's default granularity.
    * Defaults: 1D -> 1 minute, 1W -> 15 minutes, 1M -> 1 hour, longer -> 1 day.
    * Window: ``[today - days, today]`` with 1D=2, 1W=7, 1M=31, 6M=186,
      1Y=366, 5Y=1827 calendar days.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Final

from tickerlens_api.domain.entities.price_bar import BarPlan, Granularity, PriceBar
from tickerlens_api.domain.enums.price_history import BarInterval, BarSpan, PriceRange
from tickerlens_api.domain.exceptions.financials import InvalidInput

DEFAULT_RANGE: Final[PriceRange] = PriceRange.ONE_YEAR

GRANULARITY_BY_INTERVAL: Final[Mapping[BarInterval, Granularity]] = {
    BarInterval.M1: Granularity(1, BarSpan.MINUTE),
    BarInterval.M15: Granularity(15, BarSpan.MINUTE),
    BarInterval.H1: Granularity(1, BarSpan.HOUR),
    BarInterval.D1: Granularity(1, BarSpan.DAY),
}

DEFAULT_INTERVAL_BY_RANGE: Final[Mapping[PriceRange, BarInterval]] = {
    PriceRange.ONE_DAY: BarInterval.M1,
    PriceRange.ONE_WEEK: BarInterval.M15,
    PriceRange.ONE_MONTH: BarInterval.H1,
    PriceRange.SIX_MONTHS: BarInterval.D1,
    PriceRange.ONE_YEAR: BarInterval.D1,
    PriceRange.FIVE_YEARS: BarInterval.D1,
}

#: Unit-first spellings accepted alongside the canonical values.
INTERVAL_ALIASES: Final[Mapping[str, BarInterval]] = {
    "m1": BarInterval.M1,
    "m15": BarInterval.M15,
    "h1": BarInterval.H1,
    "d1": BarInterval.D1,
}

WINDOW_DAYS_BY_RANGE: Final[Mapping[PriceRange, int]] = {
    PriceRange.ONE_DAY: 2,
    PriceRange.ONE_WEEK: 7,
    PriceRange.ONE_MONTH: 31,
    PriceRange.SIX_MONTHS: 186,
    PriceRange.ONE_YEAR: 366,
    PriceRange.FIVE_YEARS: 1827,
}


def parse_range(raw: str | None, *, default: PriceRange = DEFAULT_RANGE) -> PriceRange:
    """Parse a caller-supplied range (case-insensitive, ``default`` when blank).

    Raises:
        InvalidInput: For values outside the enumerated set.
    """
    if raw is None or not raw.strip():
        return default
    try:
        return PriceRange(raw.strip().upper())
    except ValueError as exc:
        raise InvalidInput(
            "Unsupported range.",
            details={"param": "range", "value": raw, "allowed": [r.value for r in PriceRange]},
        ) from exc


def parse_interval(raw: str | None) -> BarInterval | None:
    """Parse an optional caller-supplied interval (case-insensitive).

    Both ``15m`` and the unit-first ``m15`` spelling are accepted.

    Raises:
        InvalidInput: For values outside the enumerated set.
    """
    if raw is None or not raw.strip():
        return None
    label = raw.strip().lower()
    if label in INTERVAL_ALIASES:
        return INTERVAL_ALIASES[label]
    try:
        return BarInterval(label)
    except ValueError as exc:
        raise InvalidInput(
            "Unsupported interval.",
            details={
                "param": "interval",
                "value": raw,
                "allowed": [i.value for i in BarInterval] + list(INTERVAL_ALIASES),
            },
        ) from exc


def window_for(range_: PriceRange, *, today: date) -> tuple[date, date]:
    """Return the inclusive calendar window ``range_`` covers, ending ``today``."""
    return today - timedelta(days=WINDOW_DAYS_BY_RANGE[range_]), today


def plan_bars(range_: PriceRange, interval: BarInterval | None, *, today: date) -> BarPlan:
    """Map a logical request to a concrete bar plan anchored at ``today``."""
    effective = interval or DEFAULT_INTERVAL_BY_RANGE[range_]
    start, end = window_for(range_, today=today)
    return BarPlan(
        range=range_,
        interval=effective,
        granularity=GRANULARITY_BY_INTERVAL[effective],
        start=start,
        end=end,
    )


def daily_plan(plan: BarPlan) -> BarPlan:
    """Return the same window at daily granularity."""
    if not plan.interval.is_intraday:
        return plan
    return BarPlan(
        range=plan.range,
        interval=BarInterval.D1,
        granularity=GRANULARITY_BY_INTERVAL[BarInterval.D1],
        start=plan.start,
        end=plan.end,
    )


def order_bars(bars: Iterable[PriceBar]) -> tuple[PriceBar, ...]:
    """Sort bars ascending by timestamp, keeping the last bar per timestamp."""
    by_ts: dict[int, PriceBar] = {}
    for bar in bars:
        by_ts[bar.timestamp] = bar
    return tuple(by_ts[ts] for ts in sorted(by_ts))


def summarize_year(bars: Iterable[PriceBar]) -> tuple[float | None, float | None, float | None]:
    """Derive ``(52w low, 52w high, average volume)`` from daily bars.

    Lows/highs fall back to the close when a bar does not report them. The
    average volume is rounded to a whole number of shares.
    """
    lows: list[float] = []
    highs: list[float] = []
    volumes: list[float] = []
    for bar in bars:
        lows.append(bar.low if bar.low is not None else bar.close)
        highs.append(bar.high if bar.high is not None else bar.close)
        if bar.volume is not None:
            volumes.append(bar.volume)
    low = min(lows) if lows else None
    high = max(highs) if highs else None
    avg_volume = float(round(sum(volumes) / len(volumes))) if volumes else None
    return low, high, avg_volume
