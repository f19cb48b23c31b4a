# src/tickerlens_api/application/use_cases/prices/get_price_history.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: Get price history.

Synopsis:
    Maps a logical ``(range, interval?)`` request to a bar plan anchored at
    today (UTC), then asks bar providers in preference order. A provider
    that only serves daily closes receives the same window at daily
    granularity. No configured provider means an empty result, not an error.
"""

from __future__ import annotations

from collections.abc import Sequence

from tickerlens_api.application.interfaces.clock import Clock, today_utc
from tickerlens_api.application.interfaces.providers import BarSource
from tickerlens_api.domain.entities.filer_identity import normalize_symbol
from tickerlens_api.domain.entities.price_bar import BarPlan, PriceBar, PriceHistory
from tickerlens_api.domain.services.fallback import first_success_async
from tickerlens_api.domain.services.price_range_mapper import (
    daily_plan,
    order_bars,
    parse_interval,
    parse_range,
    plan_bars,
)
from tickerlens_api.infrastructure.logging.logger import get_json_logger
from tickerlens_api.infrastructure.observability.metrics import record_fallback

logger = get_json_logger(__name__)


class GetPriceHistoryUseCase:
    """Fetch uniform, ascending price bars for one symbol."""

    def __init__(self, *, sources: Sequence[BarSource], clock: Clock) -> None:
        self._sources = tuple(sources)
        self._clock = clock

    def _plan_for(self, source: BarSource, plan: BarPlan) -> BarPlan:
        return plan if source.supports_intraday else daily_plan(plan)

    async def execute(
        self,
        symbol: str,
        *,
        range_: str | None = None,
        interval: str | None = None,
    ) -> PriceHistory:
        """Execute the use case.

        Raises:
            InvalidInput: For a malformed symbol, range or interval.
        """
        ticker = normalize_symbol(symbol)
        today = today_utc(self._clock)
        plan = plan_bars(parse_range(range_), parse_interval(interval), today=today)

        async def _fetch(source: BarSource) -> list[PriceBar]:
            return await source.fetch_bars(ticker, self._plan_for(source, plan))

        def _on_failure(name: str, exc: Exception) -> None:
            record_fallback("price_history", name, "failed")
            logger.warning(
                "prices.source_failed",
                extra={"provider": name, "reason": getattr(exc, "code", type(exc).__name__)},
            )

        outcome = await first_success_async(
            [(src.name, lambda src=src: _fetch(src)) for src in self._sources],
            on_failure=_on_failure,
        )
        if not outcome.found or outcome.source is None:
            logger.info("fallback.exhausted", extra={"chain": "price_history", "symbol": ticker})
            record_fallback("price_history", "none", "exhausted")
            return PriceHistory(symbol=ticker, range=plan.range, interval=plan.interval)

        record_fallback("price_history", outcome.source, "hit")
        winner = next(src for src in self._sources if src.name == outcome.source)
        return PriceHistory(
            symbol=ticker,
            range=plan.range,
            interval=self._plan_for(winner, plan).interval,
            source=outcome.source,
            points=order_bars(outcome.value or []),
        )
