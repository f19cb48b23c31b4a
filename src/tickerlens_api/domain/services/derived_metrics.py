# src/tickerlens_api/domain/services/derived_metrics.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Derived metrics and insight text.

Purpose:
    Null-safe ratio, growth and per-date combination helpers, plus the short
    revenue/debt insight sentence attached to snapshots.

Invariants:
    A derived value is ``None`` whenever an operand is ``None``, the divisor
    is zero, or the result would not be finite. Nothing here raises for
    missing data.

Layer:
    domain/services
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Final

from tickerlens_api.domain.entities.series import NormalizedSeries, SeriesPoint

#: Relative debt change below which debt counts as "relatively flat".
MATERIAL_DEBT_CHANGE: Final[float] = 0.05


def safe_ratio(
    numerator: float | None,
    denominator: float | None,
    *,
    digits: int | None = None,
) -> float | None:
    """Return ``numerator / denominator`` or ``None``.

    Args:
        numerator: Dividend.
        denominator: Divisor.
        digits: Optional rounding precision.
    """
    if numerator is None or denominator is None or denominator == 0:
        return None
    result = numerator / denominator
    if not math.isfinite(result):
        return None
    return round(result, digits) if digits is not None else result


def growth(current: float | None, prior: float | None) -> float | None:
    """Return ``(current - prior) / prior`` or ``None``."""
    if current is None or prior is None or prior == 0:
        return None
    result = (current - prior) / prior
    return result if math.isfinite(result) else None


def combine_by_date(
    concept: str,
    left: NormalizedSeries,
    right: NormalizedSeries,
    op: Callable[[float, float], float | None],
) -> NormalizedSeries:
    """Combine two series point-wise on shared dates.

    A date contributes a point only when both values are present and ``op``
    returns a value.
    """
    right_values = right.as_mapping()
    points: list[SeriesPoint] = []
    for point in left.points:
        other = right_values.get(point.date)
        if point.value is None or other is None:
            continue
        value = op(point.value, other)
        if value is None:
            continue
        points.append(SeriesPoint(date=point.date, value=value))
    return NormalizedSeries(concept=concept, points=tuple(points))


def margin_series(
    concept: str, metric: NormalizedSeries, revenue: NormalizedSeries
) -> NormalizedSeries:
    """Return ``metric / revenue`` per shared date (4 dp)."""
    return combine_by_date(concept, metric, revenue, lambda m, r: safe_ratio(m, r, digits=4))


def difference_series(
    concept: str, minuend: NormalizedSeries, subtrahend: NormalizedSeries
) -> NormalizedSeries:
    """Return ``minuend - subtrahend`` per shared date."""
    return combine_by_date(concept, minuend, subtrahend, lambda a, b: a - b)


def _pct(value: float) -> str:
    return f"{abs(value) * 100:.1f}%"


def describe_revenue_trend(
    symbol: str,
    revenue_growth: float | None,
    debt_growth: float | None,
) -> str:
    """Return the one-sentence snapshot insight.

    Examples:
        ``"ACME's revenue grew 11.1% YoY while debt remained relatively flat."``
        ``"ACME fundamentals snapshot."``
    """
    if revenue_growth is None:
        return f"{symbol} fundamentals snapshot."

    direction = "grew" if revenue_growth >= 0 else "declined"
    sentence = f"{symbol}'s revenue {direction} {_pct(revenue_growth)} YoY"

    if debt_growth is not None:
        if abs(debt_growth) < MATERIAL_DEBT_CHANGE:
            sentence += " while debt remained relatively flat"
        elif debt_growth > 0:
            sentence += f" while debt rose {_pct(debt_growth)}"
        else:
            sentence += f" while debt fell {_pct(debt_growth)}"
    return sentence + "."
