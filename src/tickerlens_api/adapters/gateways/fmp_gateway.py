# src/tickerlens_api/adapters/gateways/fmp_gateway.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Adapter Gateway: FMP -> market fields, company profile and daily closes.

This gateway sits on top of the FMP transport client and provides:

* ``MarketDataSource``: market fields and profile assembled from the
  profile, quote, ratios-ttm, ratios and key-metrics documents, fetched
  concurrently.
* ``BarSource``: daily closes only (``supports_intraday = False``).

Design principles:
    * An unconfigured provider contributes empty records without any I/O.
    * A failing sub-fetch is logged and treated as an absent document; its
      siblings are unaffected.
    * Per-field precedence across documents is expressed as ordered
      candidate lists resolved by ``first_success``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, date, datetime
from typing import Any

from tickerlens_api.domain.entities.base import finite_or_none
from tickerlens_api.domain.entities.price_bar import BarPlan, PriceBar
from tickerlens_api.domain.entities.snapshot import CompanyProfile, MarketFields
from tickerlens_api.domain.exceptions.financials import UpstreamUnavailable
from tickerlens_api.domain.services.derived_metrics import safe_ratio
from tickerlens_api.domain.services.fallback import first_success
from tickerlens_api.infrastructure.external_apis.fmp.client import FmpClient
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

Document = Mapping[str, Any] | None


def _num(doc: Document, key: str) -> Callable[[], float | None]:
    return lambda: finite_or_none(doc.get(key)) if doc else None


def _text(doc: Document, key: str) -> str | None:
    if not doc:
        return None
    raw = doc.get(key)
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def parse_year_range(raw: Any) -> tuple[float | None, float | None]:
    """Parse a ``"low-high"`` 52-week range string."""
    if not isinstance(raw, str) or "-" not in raw:
        return None, None
    low_raw, _, high_raw = raw.strip().partition("-")
    low, high = finite_or_none(low_raw), finite_or_none(high_raw)
    if low is None or high is None:
        return None, None
    return low, high


class FmpMarketGateway:
    """FMP adapter implementing ``MarketDataSource`` and ``BarSource``."""

    name = "fmp"
    supports_intraday = False

    def __init__(self, client: FmpClient) -> None:
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
        """Return market fields from FMP, each independently nullable."""
        if not self.configured:
            return MarketFields()

        profile, quote, ratios_ttm, ratios, key_metrics = await asyncio.gather(
            self._safe("profile", lambda: self._client.fetch_profile(symbol)),
            self._safe("quote", lambda: self._client.fetch_quote(symbol)),
            self._safe("ratios_ttm", lambda: self._client.fetch_ratios_ttm(symbol)),
            self._safe("ratios", lambda: self._client.fetch_ratios(symbol)),
            self._safe("key_metrics", lambda: self._client.fetch_key_metrics(symbol)),
        )

        price = first_success(
            [("quote.price", _num(quote, "price")), ("profile.price", _num(profile, "price"))]
        ).value
        market_cap = first_success(
            [
                ("quote.marketCap", _num(quote, "marketCap")),
                ("profile.mktCap", _num(profile, "mktCap")),
            ]
        ).value
        pe_ttm = first_success(
            [
                ("quote.pe", _num(quote, "pe")),
                ("ratiosTTM.priceEarningsRatioTTM", _num(ratios_ttm, "priceEarningsRatioTTM")),
                ("ratios.priceEarningsRatio", _num(ratios, "priceEarningsRatio")),
            ]
        ).value
        avg_volume = first_success(
            [
                ("quote.avgVolume", _num(quote, "avgVolume")),
                ("profile.volAvg", _num(profile, "volAvg")),
            ]
        ).value

        low, high = parse_year_range(profile.get("range") if profile else None)
        if low is None or high is None:
            low, high = _num(quote, "yearLow")(), _num(quote, "yearHigh")()

        return MarketFields(
            price=price,
            market_cap=market_cap,
            pe_ttm=pe_ttm,
            pe_forward=_num(key_metrics, "forwardPE")(),
            beta=_num(profile, "beta")(),
            dividend_yield=safe_ratio(_num(profile, "lastDiv")(), price),
            avg_volume=avg_volume,
            week52_low=low,
            week52_high=high,
        )

    async def load_profile(self, symbol: str) -> CompanyProfile:
        """Return descriptive fields from the FMP profile document."""
        if not self.configured:
            return CompanyProfile(symbol=symbol)
        doc = await self._safe("profile", lambda: self._client.fetch_profile(symbol))
        return CompanyProfile(
            symbol=symbol,
            name=_text(doc, "companyName"),
            description=_text(doc, "description"),
            exchange=_text(doc, "exchangeShortName"),
            sector=_text(doc, "sector"),
            industry=_text(doc, "industry"),
            website=_text(doc, "website"),
            currency=_text(doc, "currency"),
        )

    async def fetch_bars(self, symbol: str, plan: BarPlan) -> list[PriceBar]:
        """Return daily close bars inside the plan's window.

        Raises:
            UpstreamUnavailable: When the history endpoint fails.
        """
        if not self.configured:
            return []
        rows = await self._client.fetch_daily_closes(symbol, days=max(1, plan.window_days))
        bars: list[PriceBar] = []
        for row in rows:
            try:
                day = date.fromisoformat(str(row.get("date", ""))[:10])
            except ValueError:
                continue
            close = finite_or_none(row.get("close"))
            if close is None or day < plan.start or day > plan.end:
                continue
            midnight = datetime(day.year, day.month, day.day, tzinfo=UTC)
            bars.append(PriceBar(timestamp=int(midnight.timestamp()), close=close))
        return bars
