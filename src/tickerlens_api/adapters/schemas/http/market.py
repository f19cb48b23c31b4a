# src/tickerlens_api/adapters/schemas/http/market.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""HTTP schemas for the chart series with events and the news feed."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from tickerlens_api.adapters.schemas.http.base import BaseHTTPSchema
from tickerlens_api.adapters.schemas.http.financials import PriceBarHTTP

__all__ = [
    "MarketEventHTTP",
    "NewsFeedHTTP",
    "NewsItemHTTP",
    "PriceSeriesHTTP",
]


class MarketEventHTTP(BaseHTTPSchema):
    """One event pinned to the chart."""

    kind: str
    label: str
    date: dt.date
    source: str
    document_url: str | None = None
    price_at_event: float | None = None


class PriceSeriesHTTP(BaseHTTPSchema):
    """Price bars for a range plus the events inside its window."""

    symbol: str
    range: str
    interval: str
    start: dt.date
    end: dt.date
    price_source: str | None = None
    points: list[PriceBarHTTP] = Field(default_factory=list)
    events: list[MarketEventHTTP] = Field(default_factory=list)
    has_filings: bool = False
    has_dividends: bool = False
    has_earnings: bool = False
    event_sources: list[str] = Field(default_factory=list)


class NewsItemHTTP(BaseHTTPSchema):
    """One headline."""

    title: str
    source: str | None = None
    published_at: str | None = None
    url: str | None = None
    sentiment: str


class NewsFeedHTTP(BaseHTTPSchema):
    """Latest headlines for one symbol."""

    symbol: str
    limit: int
    source: str | None = None
    items: list[NewsItemHTTP] = Field(default_factory=list)
