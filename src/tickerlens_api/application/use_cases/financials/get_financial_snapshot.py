# src/tickerlens_api/application/use_cases/financials/get_financial_snapshot.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: Get financial snapshot.

Synopsis:
    Assembles a flat, fully nullable point-in-time snapshot for one issuer
    from the structured-facts document and every configured market-data
    provider, then derives ratios and a one-sentence insight.

Responsibilities:
    * Resolve identity (``IdentityNotFound`` when unknown).
    * Fetch facts and market fields concurrently; a failed provider is
      logged and contributes nothing.
    * Resolve each market field independently across providers in
      preference order (price has its own order), recording provenance.
    * Derive the 52-week range and average volume from one year of daily
      bars when no provider supplies them.
    * Wrap unexpected faults in ``AggregationFailure``.

Notes:
    Nothing is persisted or cached at the snapshot level; the structure is
    recomputed per call.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Final

from tickerlens_api.application.interfaces.clock import Clock, today_utc
from tickerlens_api.application.interfaces.providers import BarSource, MarketDataSource
from tickerlens_api.application.use_cases.financials.company_facts import (
    CompanyFactsFetcher,
    normalize_all,
)
from tickerlens_api.application.use_cases.identity.resolve_filer_identity import (
    FilerIdentityResolver,
)
from tickerlens_api.domain.entities.filer_identity import FilerIdentity
from tickerlens_api.domain.entities.price_bar import PriceBar
from tickerlens_api.domain.entities.snapshot import (
    MARKET_FIELD_NAMES,
    FinancialSnapshot,
    MarketFields,
)
from tickerlens_api.domain.enums.price_history import BarInterval, PriceRange
from tickerlens_api.domain.exceptions.base import DomainError
from tickerlens_api.domain.exceptions.financials import AggregationFailure, IdentityNotFound
from tickerlens_api.domain.services.derived_metrics import (
    describe_revenue_trend,
    growth,
    safe_ratio,
)
from tickerlens_api.domain.services.fallback import first_success_async, merge_fields
from tickerlens_api.domain.services.price_range_mapper import daily_plan, plan_bars, summarize_year
from tickerlens_api.domain.services.series_normalizer import latest, previous
from tickerlens_api.infrastructure.logging.logger import get_json_logger
from tickerlens_api.infrastructure.observability.metrics import record_fallback

logger = get_json_logger(__name__)

FUNDAMENTAL_CONCEPTS: Final[tuple[str, ...]] = (
    "revenue",
    "net_income",
    "eps",
    "gross_profit",
    "operating_income",
    "liabilities",
    "equity",
    "dividend_per_share",
)

#: Fields that can be derived from a year of daily bars.
BAR_DERIVED_FIELDS: Final[tuple[str, ...]] = ("week52_low", "week52_high", "avg_volume")

DERIVED_SOURCE: Final[str] = "derived"


class GetFinancialSnapshotUseCase:
    """Aggregate a financial snapshot for one symbol."""

    def __init__(
        self,
        *,
        resolver: FilerIdentityResolver,
        facts: CompanyFactsFetcher,
        market_sources: Sequence[MarketDataSource],
        bar_sources: Sequence[BarSource],
        clock: Clock,
        price_order: Sequence[str] = ("polygon", "fmp"),
    ) -> None:
        """Initialize the use case.

        Args:
            resolver: Symbol -> filer identity resolver.
            facts: Structured-facts fetcher.
            market_sources: Market-data providers in field preference order.
            bar_sources: Bar providers used to derive year-range fields.
            clock: Time source anchoring the one-year bar window.
            price_order: Provider preference order for the price field.
        """
        self._resolver = resolver
        self._facts = facts
        self._market_sources = tuple(market_sources)
        self._bar_sources = tuple(bar_sources)
        self._clock = clock
        self._price_order = tuple(price_order)

    async def execute(self, symbol: str) -> FinancialSnapshot:
        """Execute the use case.

        Raises:
            InvalidInput: For a malformed symbol.
            IdentityNotFound: When the symbol cannot be resolved.
            UpstreamUnavailable: When the reference table cannot be loaded.
            AggregationFailure: On any unexpected fault while assembling.
        """
        identity = await self._resolver.resolve(symbol)
        if identity is None:
            ticker = symbol.strip().upper()
            raise IdentityNotFound(
                f"No filer found for symbol {ticker}.", details={"symbol": ticker}
            )
        try:
            return await self._assemble(identity)
        except DomainError:
            raise
        except Exception as exc:
            logger.exception("snapshot.aggregation_failed", extra={"symbol": identity.symbol})
            raise AggregationFailure(
                "Unable to assemble snapshot.", details={"symbol": identity.symbol}
            ) from exc

    # ------------------------------------------------------------------ #
    # Assembly
    # ------------------------------------------------------------------ #
    async def _load_market(self, symbol: str) -> list[tuple[str, MarketFields]]:
        results = await asyncio.gather(
            *(src.load_market_fields(symbol) for src in self._market_sources),
            return_exceptions=True,
        )
        records: list[tuple[str, MarketFields]] = []
        for src, result in zip(self._market_sources, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "snapshot.source_failed",
                    extra={
                        "provider": src.name,
                        "reason": getattr(result, "code", type(result).__name__),
                    },
                )
                result = MarketFields()
            records.append((src.name, result))
        return records

    async def _year_bars(self, symbol: str) -> tuple[str | None, list[PriceBar]]:
        today = today_utc(self._clock)
        plan = daily_plan(plan_bars(PriceRange.ONE_YEAR, BarInterval.D1, today=today))

        def _on_failure(name: str, exc: Exception) -> None:
            record_fallback("year_bars", name, "failed")
            logger.warning(
                "snapshot.source_failed",
                extra={"provider": name, "endpoint": "bars", "reason": getattr(exc, "code", "")},
            )

        outcome = await first_success_async(
            [(src.name, lambda src=src: src.fetch_bars(symbol, plan)) for src in self._bar_sources],
            on_failure=_on_failure,
        )
        return outcome.source, list(outcome.value or [])

    async def _assemble(self, identity: FilerIdentity) -> FinancialSnapshot:
        symbol = identity.symbol
        facts, market_records = await asyncio.gather(
            self._facts.load(identity.filer_id),
            self._load_market(symbol),
        )

        values, sources = merge_fields(
            market_records,
            MARKET_FIELD_NAMES,
            order_overrides={"price": self._price_order},
        )
        for name in MARKET_FIELD_NAMES:
            outcome = "hit" if name in sources else "exhausted"
            record_fallback("market_fields", sources.get(name, "none"), outcome)

        if any(values[name] is None for name in BAR_DERIVED_FIELDS) and self._bar_sources:
            bar_source, bars = await self._year_bars(symbol)
            low, high, avg_volume = summarize_year(bars)
            derived_values = {"week52_low": low, "week52_high": high, "avg_volume": avg_volume}
            for name, derived in derived_values.items():
                if values[name] is None and derived is not None:
                    values[name] = derived
                    sources[name] = f"{DERIVED_SOURCE}:{bar_source}"

        series = normalize_all(facts, FUNDAMENTAL_CONCEPTS)
        revenue = series["revenue"]
        liabilities = series["liabilities"]

        revenue_ttm = latest(revenue)
        net_income = latest(series["net_income"])
        eps = latest(series["eps"])
        total_debt = latest(liabilities)
        equity = latest(series["equity"])

        pe = safe_ratio(values["price"], eps, digits=2)
        if values["pe_ttm"] is None and pe is not None:
            values["pe_ttm"] = pe
            sources["pe_ttm"] = DERIVED_SOURCE

        revenue_growth = growth(revenue_ttm, previous(revenue))
        debt_growth = growth(total_debt, previous(liabilities))

        logger.info(
            "snapshot.assembled",
            extra={"symbol": symbol, "market_fields": len(sources), "facts": bool(facts)},
        )
        return FinancialSnapshot(
            symbol=symbol,
            filer_id=identity.filer_id,
            **values,
            revenue_ttm=revenue_ttm,
            net_income_ttm=net_income,
            eps_ttm=eps,
            gross_profit_ttm=latest(series["gross_profit"]),
            operating_income_ttm=latest(series["operating_income"]),
            total_debt=total_debt,
            equity=equity,
            dividend_per_share=latest(series["dividend_per_share"]),
            revenue_growth_yoy=revenue_growth,
            pe=pe,
            roe=safe_ratio(net_income, equity, digits=4),
            debt_to_equity=safe_ratio(total_debt, equity, digits=2),
            insight=describe_revenue_trend(symbol, revenue_growth, debt_growth),
            field_sources=dict(sources),
        )
