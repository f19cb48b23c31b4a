# src/tickerlens_api/adapters/gateways/polygon_gateway.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Adapter Gateway: Polygon -> previous close, reference data, bars, events, news.

* ``MarketDataSource``: price from the previous-session aggregate and market
  cap from the ticker reference record.
* ``BarSource``: aggregate bars at any granularity.
* ``EventSource``: dividends and earnings reports.
* ``NewsSource``: recent headlines.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from datetime import date
from typing import Any

from tickerlens_api.domain.entities.base import finite_or_none
from tickerlens_api.domain.entities.market_event import MarketEvent
from tickerlens_api.domain.entities.news import NewsItem
from tickerlens_api.domain.entities.price_bar import BarPlan, PriceBar
from tickerlens_api.domain.entities.snapshot import CompanyProfile, MarketFields
from tickerlens_api.domain.enums.market_event import EventKind
from tickerlens_api.domain.exceptions.financials import UpstreamUnavailable
from tickerlens_api.domain.services.event_overlay import (
    dividend_label,
    earnings_label,
    parse_day,
)
from tickerlens_api.infrastructure.external_apis.polygon.client import PolygonClient
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

Document = Mapping[str, Any] | None


def _text(doc: Document, key: str) -> str | None:
    if not doc:
        return None
    raw = doc.get(key)
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def aggregate_to_bar(row: Mapping[str, Any]) -> PriceBar | None:
    """Map one aggregate row (``t`` in ms, ``c``, ``v``, ``h``, ``l``) to a bar."""
    ts = finite_or_none(row.get("t"))
    close = finite_or_none(row.get("c"))
    if ts is None or close is None:
        return None
    return PriceBar(
        timestamp=int(ts // 1000),
        close=close,
        volume=finite_or_none(row.get("v")),
        high=finite_or_none(row.get("h")),
        low=finite_or_none(row.get("l")),
    )


class PolygonMarketGateway:
    """Polygon adapter implementing ``MarketDataSource``."""

    name = "polygon"

    def __init__(self, client: PolygonClient) -> None:
        self._client = client

    @property
    def configured(self) -> bool:
        """Return True when the provider has an access key."""
        return self._client.configured

    async def _safe(self, endpoint: str, factory: Callable[[], Awaitable[Document]]) -> Document:
        try:
            return await factory()
        except UpstreamUnavailable as exc:
            logger.warning(
                "gateway.subfetch_failed",
                extra={"provider": self.name, "endpoint": endpoint, "reason": exc.code},
            )
            return None

    async def load_market_fields(self, symbol: str) -> MarketFields:
        """Return the previous close and market cap, each independently nullable."""
        if not self.configured:
            return MarketFields()
        prev, details = await asyncio.gather(
            self._safe("previous_close", lambda: self._client.fetch_previous_close(symbol)),
            self._safe("ticker_details", lambda: self._client.fetch_ticker_details(symbol)),
        )
        return MarketFields(
            price=finite_or_none(prev.get("c")) if prev else None,
            market_cap=finite_or_none(details.get("market_cap")) if details else None,
        )

    async def load_profile(self, symbol: str) -> CompanyProfile:
        """Return descriptive fields from the ticker reference record."""
        if not self.configured:
            return CompanyProfile(symbol=symbol)
        doc = await self._safe("ticker_details", lambda: self._client.fetch_ticker_details(symbol))
        currency = _text(doc, "currency_name")
        return CompanyProfile(
            symbol=symbol,
            name=_text(doc, "name"),
            description=_text(doc, "description"),
            exchange=_text(doc, "primary_exchange"),
            industry=_text(doc, "sic_description"),
            website=_text(doc, "homepage_url"),
            currency=currency.upper() if currency else None,
        )


class PolygonBarGateway:
    """Polygon adapter implementing ``BarSource``."""

    name = "polygon"
    supports_intraday = True

    def __init__(self, client: PolygonClient) -> None:
        self._client = client

    @property
    def configured(self) -> bool:
        """Return True when the provider has an access key."""
        return self._client.configured

    async def fetch_bars(self, symbol: str, plan: BarPlan) -> list[PriceBar]:
        """Return aggregate bars for the plan's granularity and window.

        Raises:
            UpstreamUnavailable: When the aggregates endpoint fails.
        """
        if not self.configured:
            return []
        rows = await self._client.fetch_aggregates(
            symbol,
            multiplier=plan.granularity.unit_count,
            timespan=plan.granularity.unit_span.value,
            start=plan.start,
            end=plan.end,
        )
        bars = (aggregate_to_bar(row) for row in rows)
        return [bar for bar in bars if bar is not None]


def dividend_to_event(row: Mapping[str, Any]) -> MarketEvent | None:
    """Map a dividend record (``ex_dividend_date``, ``cash_amount``) to an event."""
    day = parse_day(row.get("ex_dividend_date"))
    if day is None:
        return None
    return MarketEvent(
        kind=EventKind.DIVIDEND,
        label=dividend_label(finite_or_none(row.get("cash_amount"))),
        date=day,
        source="polygon",
    )


def earnings_to_event(row: Mapping[str, Any]) -> MarketEvent | None:
    """Map an earnings record to an event dated by its report (else period) date."""
    day = (
        parse_day(row.get("reported_date"))
        or parse_day(row.get("period"))
        or parse_day(row.get("fiscal_period_end_date"))
    )
    if day is None:
        return None
    return MarketEvent(
        kind=EventKind.EARNING,
        label=earnings_label(row.get("fiscal_quarter"), row.get("fiscal_year")),
        date=day,
        source="polygon",
    )


def article_to_item(row: Mapping[str, Any]) -> NewsItem | None:
    """Map a news article record to a headline; untitled articles are dropped."""
    title = _text(row, "title")
    if title is None:
        return None
    publisher = row.get("publisher")
    return NewsItem(
        title=title,
        source=_text(publisher, "name") if isinstance(publisher, Mapping) else None,
        published_at=_text(row, "published_utc"),
        url=_text(row, "article_url"),
    )


class PolygonEventGateway:
    """Polygon adapter implementing ``EventSource`` (dividends and earnings)."""

    name = "polygon"

    def __init__(self, client: PolygonClient) -> None:
        self._client = client

    @property
    def configured(self) -> bool:
        """Return True when the provider has an access key."""
        return self._client.configured

    async def _rows(
        self, endpoint: str, factory: Callable[[], Awaitable[list[Mapping[str, Any]]]]
    ) -> list[Mapping[str, Any]]:
        try:
            return await factory()
        except UpstreamUnavailable as exc:
            logger.warning(
                "gateway.subfetch_failed",
                extra={"provider": self.name, "endpoint": endpoint, "reason": exc.code},
            )
            return []

    async def fetch_events(self, symbol: str, *, start: date, end: date) -> list[MarketEvent]:
        """Return dividend and earnings events dated within ``[start, end]``."""
        if not self.configured:
            return []
        dividends, earnings = await asyncio.gather(
            self._rows("dividends", lambda: self._client.fetch_dividends(symbol)),
            self._rows("earnings", lambda: self._client.fetch_earnings(symbol)),
        )
        events = [dividend_to_event(row) for row in dividends]
        events += [earnings_to_event(row) for row in earnings]
        return [e for e in events if e is not None and start <= e.date <= end]


class PolygonNewsGateway:
    """Polygon adapter implementing ``NewsSource``."""

    name = "polygon"

    def __init__(self, client: PolygonClient) -> None:
        self._client = client

    @property
    def configured(self) -> bool:
        """Return True when the provider has an access key."""
        return self._client.configured

    async def fetch_news(self, symbol: str, *, limit: int) -> list[NewsItem]:
        """Return up to ``limit`` headlines, newest first.

        Raises:
            UpstreamUnavailable: When the news endpoint fails.
        """
        if not self.configured:
            return []
        rows = await self._client.fetch_news(symbol, limit=limit)
        items = (article_to_item(row) for row in rows)
        return [item for item in items if item is not None][:limit]
