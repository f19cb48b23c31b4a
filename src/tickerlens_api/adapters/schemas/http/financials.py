# src/tickerlens_api/adapters/schemas/http/financials.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""HTTP schemas for snapshots, series, filings, price history and profiles.

Every scalar is nullable; absent values are emitted as ``null`` rather than
omitted so clients see a stable shape.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field

from tickerlens_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = [
    "CompanyProfileHTTP",
    "FilingHTTP",
    "FilingIndexHTTP",
    "FinancialSeriesHTTP",
    "FinancialSnapshotHTTP",
    "HealthHTTP",
    "PriceBarHTTP",
    "PriceHistoryHTTP",
    "SeriesPointHTTP",
]


class FinancialSnapshotHTTP(BaseHTTPSchema):
    """Flat point-in-time snapshot."""

    symbol: str
    filer_id: str
    price: float | None = None
    market_cap: float | None = None
    pe_ttm: float | None = None
    pe_forward: float | None = None
    beta: float | None = None
    dividend_yield: float | None = None
    avg_volume: float | None = None
    week52_low: float | None = None
    week52_high: float | None = None
    revenue_ttm: float | None = None
    net_income_ttm: float | None = None
    eps_ttm: float | None = None
    gross_profit_ttm: float | None = None
    operating_income_ttm: float | None = None
    total_debt: float | None = None
    equity: float | None = None
    dividend_per_share: float | None = None
    revenue_growth_yoy: float | None = None
    pe: float | None = None
    roe: float | None = None
    debt_to_equity: float | None = None
    insight: str = ""
    field_sources: dict[str, str] = Field(default_factory=dict)


class SeriesPointHTTP(BaseHTTPSchema):
    """One dated value."""

    date: str
    value: float | None = None


class FinancialSeriesHTTP(BaseHTTPSchema):
    """Series bundle; ``series`` and ``rows`` keys are camelCase metric names."""

    symbol: str
    filer_id: str
    periods: int
    series: dict[str, list[SeriesPointHTTP]] = Field(default_factory=dict)
    rows: list[dict[str, float | str | None]] = Field(default_factory=list)


class FilingHTTP(BaseHTTPSchema):
    """One filing header."""

    form: str
    filed_at: date
    report_date: date | None = None
    accession_number: str | None = None
    primary_document: str | None = None
    document_url: str | None = None
    category: str = "other"


class FilingIndexHTTP(BaseHTTPSchema):
    """Filing list; ``filerId`` is null for unresolved symbols."""

    symbol: str
    filer_id: str | None = None
    filings: list[FilingHTTP] = Field(default_factory=list)


class PriceBarHTTP(BaseHTTPSchema):
    """One bar (``timestamp`` in epoch seconds, UTC)."""

    timestamp: int
    close: float
    volume: float | None = None
    high: float | None = None
    low: float | None = None


class PriceHistoryHTTP(BaseHTTPSchema):
    """Ascending price bars for one symbol."""

    symbol: str
    range: str
    interval: str
    source: str | None = None
    points: list[PriceBarHTTP] = Field(default_factory=list)


class CompanyProfileHTTP(BaseHTTPSchema):
    """Descriptive company profile."""

    symbol: str
    name: str | None = None
    description: str | None = None
    exchange: str | None = None
    sector: str | None = None
    industry: str | None = None
    website: str | None = None
    currency: str | None = None
    field_sources: dict[str, str] = Field(default_factory=dict)


class HealthHTTP(BaseHTTPSchema):
    """Liveness plus provider configuration state."""

    status: str = "ok"
    providers: dict[str, bool] = Field(default_factory=dict)
