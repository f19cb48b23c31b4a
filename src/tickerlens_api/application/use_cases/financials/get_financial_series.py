# src/tickerlens_api/application/use_cases/financials/get_financial_series.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: Get financial time series.

Synopsis:
    Resolves a symbol, normalizes the income, balance-sheet and cash-flow
    concepts from the structured-facts document, derives margin and free
    cash flow series, and keeps the newest ``periods`` points of each.

Responsibilities:
    * Validate ``periods`` (default 8, range 1..40).
    * Raise ``IdentityNotFound`` for unknown symbols.
    * Merge every series into one row per date, oldest first.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Final

from tickerlens_api.application.use_cases.financials.company_facts import (
    CompanyFactsFetcher,
    normalize_all,
)
from tickerlens_api.application.use_cases.identity.resolve_filer_identity import (
    FilerIdentityResolver,
)
from tickerlens_api.domain.entities.series import NormalizedSeries, period_sort_key
from tickerlens_api.domain.exceptions.financials import IdentityNotFound, InvalidInput
from tickerlens_api.domain.services.derived_metrics import difference_series, margin_series

DEFAULT_PERIODS: Final[int] = 8
MAX_PERIODS: Final[int] = 40

BASE_CONCEPTS: Final[tuple[str, ...]] = (
    "revenue",
    "net_income",
    "eps",
    "gross_profit",
    "operating_income",
    "liabilities",
    "equity",
    "operating_cash_flow",
    "capital_expenditure",
)


@dataclass(frozen=True)
class FinancialSeriesBundle:
    """Series bundle result.

    Attributes:
        symbol: Upper-case ticker symbol.
        filer_id: Zero-padded filer identifier.
        periods: Number of points kept per series.
        series: Concept name -> series (oldest to newest), in output order.
        rows: One mapping per date holding every metric reported on it.
    """

    symbol: str
    filer_id: str
    periods: int
    series: Mapping[str, NormalizedSeries] = field(default_factory=dict)
    rows: tuple[Mapping[str, float | str | None], ...] = ()


def merge_rows(series: Mapping[str, NormalizedSeries]) -> tuple[dict[str, float | str | None], ...]:
    """Merge series into ascending per-date rows; later series overwrite earlier keys."""
    by_date: dict[str, dict[str, float | str | None]] = {}
    for name, s in series.items():
        for point in s.points:
            row = by_date.setdefault(point.date, {"date": point.date})
            row[name] = point.value
    ordered = sorted(by_date, key=lambda d: period_sort_key(d) or date.min)
    return tuple(by_date[d] for d in ordered)


def validate_periods(raw: int | None) -> int:
    """Return ``raw`` or the default, rejecting values outside ``[1, MAX_PERIODS]``."""
    if raw is None:
        return DEFAULT_PERIODS
    if raw < 1 or raw > MAX_PERIODS:
        raise InvalidInput(
            f"Query parameter 'periods' must be between 1 and {MAX_PERIODS}.",
            details={"param": "periods", "value": raw},
        )
    return raw


class GetFinancialSeriesUseCase:
    """Build the normalized series bundle for one symbol."""

    def __init__(self, *, resolver: FilerIdentityResolver, facts: CompanyFactsFetcher) -> None:
        self._resolver = resolver
        self._facts = facts

    async def execute(self, symbol: str, *, periods: int | None = None) -> FinancialSeriesBundle:
        """Execute the use case.

        Raises:
            InvalidInput: For a malformed symbol or out-of-range ``periods``.
            IdentityNotFound: When the symbol cannot be resolved.
            UpstreamUnavailable: When the reference table cannot be loaded.
        """
        count = validate_periods(periods)
        identity = await self._resolver.resolve(symbol)
        if identity is None:
            raise IdentityNotFound(
                f"No filer found for symbol {symbol.strip().upper()}.",
                details={"symbol": symbol.strip().upper()},
            )

        facts = await self._facts.load(identity.filer_id)
        base = normalize_all(facts, BASE_CONCEPTS)
        revenue = base["revenue"]

        derived = {
            "gross_margin": margin_series("gross_margin", base["gross_profit"], revenue),
            "operating_margin": margin_series(
                "operating_margin", base["operating_income"], revenue
            ),
            "net_margin": margin_series("net_margin", base["net_income"], revenue),
            "free_cash_flow": difference_series(
                "free_cash_flow", base["operating_cash_flow"], base["capital_expenditure"]
            ),
        }

        series = {name: s.tail(count) for name, s in {**base, **derived}.items()}
        return FinancialSeriesBundle(
            symbol=identity.symbol,
            filer_id=identity.filer_id,
            periods=count,
            series=series,
            rows=merge_rows(series),
        )
