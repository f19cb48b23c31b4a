# src/tickerlens_api/adapters/presenters/market_presenter.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Presenters for the chart series with events and the news feed."""

from __future__ import annotations

from tickerlens_api.adapters.schemas.http.financials import PriceBarHTTP
from tickerlens_api.adapters.schemas.http.market import (
    MarketEventHTTP,
    NewsFeedHTTP,
    NewsItemHTTP,
    PriceSeriesHTTP,
)
from tickerlens_api.domain.entities.market_event import MarketEvent, PriceSeries
from tickerlens_api.domain.entities.news import NewsFeed
from tickerlens_api.domain.enums.market_event import EventKind


def _event(event: MarketEvent) -> MarketEventHTTP:
    return MarketEventHTTP(
        kind=event.kind.value,
        label=event.label,
        date=event.date,
        source=event.source,
        document_url=event.document_url,
        price_at_event=event.price_at_event,
    )


def present_price_series(series: PriceSeries) -> PriceSeriesHTTP:
    """Map a price series with events to its HTTP schema."""
    return PriceSeriesHTTP(
        symbol=series.symbol,
        range=series.range.value,
        interval=series.interval.value,
        start=series.start,
        end=series.end,
        price_source=series.price_source,
        points=[
            PriceBarHTTP(
                timestamp=bar.timestamp,
                close=bar.close,
                volume=bar.volume,
                high=bar.high,
                low=bar.low,
            )
            for bar in series.points
        ],
        events=[_event(event) for event in series.events],
        has_filings=series.has(EventKind.FILING),
        has_dividends=series.has(EventKind.DIVIDEND),
        has_earnings=series.has(EventKind.EARNING),
        event_sources=list(series.event_sources),
    )


def present_news(feed: NewsFeed) -> NewsFeedHTTP:
    """Map a news feed to its HTTP schema."""
    return NewsFeedHTTP(
        symbol=feed.symbol,
        limit=feed.limit,
        source=feed.source,
        items=[
            NewsItemHTTP(
                title=item.title,
                source=item.source,
                published_at=item.published_at,
                url=item.url,
                sentiment=item.sentiment,
            )
            for item in feed.items
        ],
    )
