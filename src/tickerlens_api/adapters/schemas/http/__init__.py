# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface re-exported for routers and
    presenters. ``BaseHTTPSchema`` stays internal to this package.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from tickerlens_api.adapters.schemas.http.envelopes import ErrorEnvelope
from tickerlens_api.adapters.schemas.http.financials import (
    CompanyProfileHTTP,
    FilingHTTP,
    FilingIndexHTTP,
    FinancialSeriesHTTP,
    FinancialSnapshotHTTP,
    HealthHTTP,
    PriceBarHTTP,
    PriceHistoryHTTP,
    SeriesPointHTTP,
)
from tickerlens_api.adapters.schemas.http.market import (
    MarketEventHTTP,
    NewsFeedHTTP,
    NewsItemHTTP,
    PriceSeriesHTTP,
)

__all__ = [
    "CompanyProfileHTTP",
    "ErrorEnvelope",
    "FilingHTTP",
    "FilingIndexHTTP",
    "FinancialSeriesHTTP",
    "FinancialSnapshotHTTP",
    "HealthHTTP",
    "MarketEventHTTP",
    "NewsFeedHTTP",
    "NewsItemHTTP",
    "PriceBarHTTP",
    "PriceHistoryHTTP",
    "PriceSeriesHTTP",
    "SeriesPointHTTP",
]
