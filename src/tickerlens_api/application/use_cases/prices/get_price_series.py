# src/tickerlens_api/application/use_cases/prices/get_price_series.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: Get price series with an events overlay.

Synopsis:
    Fetches price bars for a logical range (daily bars, except the one-day
    range which keeps its intraday default) and, concurrently, the events
    that fall inside the same window: regulatory filings with a document
    link, dividends and earnings reports. Each event carries the close of
    the nearest bar within five days.

Notes:
    * The default range is ``6M``.
    * Filing events come from the filing index restricted to annual and
      quarterly forms, one quarterly report per quarter, at most 50.
    * Every event source is optional: a failing or unconfigured provider
      contributes no events and the response is still a success.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import date
from itertools import chain
from typing import Final

from tickerlens_api.application.interfaces.clock import Clock, today_utc
from tickerlens_api.application.interfaces.providers import EventSource
from tickerlens_api.application.use_cases.filings.list_filings import ListFilingsUseCase
from tickerlens_api.application.use_cases.prices.get_price_history import (
    GetPriceHistoryUseCase,
)
from tickerlens_api.domain.entities.filer_identity import normalize_symbol
from tickerlens_api.domain.entities.market_event import MarketEvent, PriceSeries
from tickerlens_api.domain.enums.price_history import BarInterval, PriceRange
from tickerlens_api.domain.exceptions.financials import UpstreamUnavailable
from tickerlens_api.domain.services.event_overlay import filing_events, overlay_events
from tickerlens_api.domain.services.price_range_mapper import parse_range, window_for
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

SERIES_DEFAULT_RANGE: Final[PriceRange] = PriceRange.SIX_MONTHS
FILING_EVENT_FORMS: Final[tuple[str, ...]] = ("10-K", "10-Q", "20-F", "40-F")
FILING_EVENT_LIMIT: Final[int] = 50


class GetPriceSeriesUseCase:
    """Price bars plus the corporate events inside their window."""

    def __init__(
        self,
        *,
        prices: GetPriceHistoryUseCase,
        filings: ListFilingsUseCase,
        event_sources: Sequence[EventSource],
        clock: Clock,
    ) -> None:
        self._prices = prices
        self._filings = filings
        self._event_sources = tuple(event_sources)
        self._clock = clock

    async def _filing_events(self, ticker: str) -> list[MarketEvent]:
        try:
            index = await self._filings.execute(
                ticker,
                forms=FILING_EVENT_FORMS,
                limit=FILING_EVENT_LIMIT,
                latest_per_quarter=True,
            )
        except UpstreamUnavailable as exc:
            logger.warning("series.events_failed", extra={"provider": "sec", "reason": exc.code})
            return []
        return filing_events(index.filings)

    async def _provider_events(
        self, source: EventSource, ticker: str, start: date, end: date
    ) -> list[MarketEvent]:
        try:
            return await source.fetch_events(ticker, start=start, end=end)
        except UpstreamUnavailable as exc:
            logger.warning(
                "series.events_failed", extra={"provider": source.name, "reason": exc.code}
            )
            return []

    async def execute(self, symbol: str, *, range_: str | None = None) -> PriceSeries:
        """Execute the use case.

        Raises:
            InvalidInput: For a malformed symbol or an unknown range.
        """
        ticker = normalize_symbol(symbol)
        span = parse_range(range_, default=SERIES_DEFAULT_RANGE)
        interval = None if span is PriceRange.ONE_DAY else BarInterval.D1.value
        start, end = window_for(span, today=today_utc(self._clock))

        history, filed, *provided = await asyncio.gather(
            self._prices.execute(ticker, range_=span.value, interval=interval),
            self._filing_events(ticker),
            *(self._provider_events(src, ticker, start, end) for src in self._event_sources),
        )
        events = overlay_events(chain(filed, *provided), history.points, start=start, end=end)

        logger.info(
            "series.overlay",
            extra={"symbol": ticker, "bars": len(history.points), "events": len(events)},
        )
        return PriceSeries(
            symbol=ticker,
            range=span,
            interval=history.interval,
            start=start,
            end=end,
            price_source=history.source,
            points=history.points,
            events=events,
        )
