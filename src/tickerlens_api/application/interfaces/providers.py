# src/tickerlens_api/application/interfaces/providers.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Application Interfaces: upstream data sources.

Synopsis:
    Structural protocols the use cases depend on. Infrastructure clients and
    adapter gateways implement them; tests substitute in-memory fakes.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any, Protocol

from tickerlens_api.domain.entities.market_event import MarketEvent
from tickerlens_api.domain.entities.news import NewsItem
from tickerlens_api.domain.entities.price_bar import BarPlan, PriceBar
from tickerlens_api.domain.entities.snapshot import CompanyProfile, MarketFields


class FilerDataSource(Protocol):
    """Regulator data: ticker reference table, structured facts, submissions."""

    async def fetch_company_tickers(self) -> Mapping[str, Any]:
        """Return the bulk ticker reference dataset."""
        ...

    async def fetch_company_facts(self, filer_id: str) -> Mapping[str, Any]:
        """Return the full structured-facts document for a filer."""
        ...

    async def fetch_company_submissions(self, filer_id: str) -> Mapping[str, Any]:
        """Return the filing history document for a filer."""
        ...


class MarketDataSource(Protocol):
    """A market/reference data provider feeding snapshots and profiles.

    Implementations swallow their own sub-fetch failures and return partially
    filled records; an unconfigured provider returns empty records.
    """

    name: str

    async def load_market_fields(self, symbol: str) -> MarketFields:
        """Return whatever market fields the provider can supply."""
        ...

    async def load_profile(self, symbol: str) -> CompanyProfile:
        """Return whatever descriptive fields the provider can supply."""
        ...


class BarSource(Protocol):
    """A price bar provider.

    Attributes:
        name: Provider name used for provenance.
        supports_intraday: False for providers that only serve daily closes.
    """

    name: str
    supports_intraday: bool

    async def fetch_bars(self, symbol: str, plan: BarPlan) -> list[PriceBar]:
        """Return bars for ``plan`` (any order)."""
        ...


class EventSource(Protocol):
    """A provider of dated corporate events (dividends, earnings reports).

    Implementations swallow their own sub-fetch failures; an unconfigured
    provider returns no events.
    """

    name: str

    async def fetch_events(self, symbol: str, *, start: date, end: date) -> list[MarketEvent]:
        """Return events dated within ``[start, end]`` (any order)."""
        ...


class NewsSource(Protocol):
    """A provider of recent headlines."""

    name: str

    async def fetch_news(self, symbol: str, *, limit: int) -> list[NewsItem]:
        """Return up to ``limit`` headlines, newest first."""
        ...
