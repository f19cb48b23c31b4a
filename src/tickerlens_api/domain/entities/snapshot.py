# src/tickerlens_api/domain/entities/snapshot.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Snapshot (Domain Entities).

Synopsis:
    Point-in-time bundles of scalar market and fundamental fields for one
    issuer, plus the partial per-provider records they are assembled from.

Design:
    Every scalar is independently nullable. Absence of one field never
    blocks computation of another, and nothing here is persisted.

Layer:
    domain/entities
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Final

from tickerlens_api.domain.entities.base import BaseEntity

#: Market fields resolved field-by-field across providers, in output order.
MARKET_FIELD_NAMES: Final[tuple[str, ...]] = (
    "price",
    "market_cap",
    "pe_ttm",
    "pe_forward",
    "beta",
    "dividend_yield",
    "avg_volume",
    "week52_low",
    "week52_high",
)


@dataclass(frozen=True, slots=True)
class MarketFields(BaseEntity):
    """Market/reference values one provider was able to supply.

    A provider that is unconfigured or failed contributes an instance with
    every field left as ``None``.
    """

    price: float | None = None
    market_cap: float | None = None
    pe_ttm: float | None = None
    pe_forward: float | None = None
    beta: float | None = None
    dividend_yield: float | None = None
    avg_volume: float | None = None
    week52_low: float | None = None
    week52_high: float | None = None

    def get(self, name: str) -> float | None:
        """Return a field by name."""
        value: float | None = getattr(self, name)
        return value

    def is_empty(self) -> bool:
        """Return True when no field carries a value."""
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True, slots=True)
class CompanyProfile(BaseEntity):
    """Descriptive company profile fields."""

    symbol: str
    name: str | None = None
    description: str | None = None
    exchange: str | None = None
    sector: str | None = None
    industry: str | None = None
    website: str | None = None
    currency: str | None = None
    field_sources: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class FinancialSnapshot(BaseEntity):
    """Flat, fully nullable point-in-time snapshot for one issuer.

    Attributes:
        symbol: Upper-case ticker symbol.
        filer_id: Zero-padded filer identifier.
        price: Previous-period close.
        market_cap: Market capitalization.
        pe_ttm: Trailing P/E as reported by a provider, else derived.
        pe_forward: Forward P/E.
        beta: Beta.
        dividend_yield: Dividend yield (fraction, not percent).
        avg_volume: Average daily volume.
        week52_low: 52-week low.
        week52_high: 52-week high.
        revenue_ttm: Latest revenue value.
        net_income_ttm: Latest net income value.
        eps_ttm: Latest EPS value (diluted, else basic).
        gross_profit_ttm: Latest gross profit value.
        operating_income_ttm: Latest operating income value.
        total_debt: Latest total liabilities value.
        equity: Latest stockholders' equity value.
        dividend_per_share: Latest declared dividend per share.
        revenue_growth_yoy: Growth of latest vs. previous revenue.
        pe: Derived ``price / eps_ttm`` (2 dp).
        roe: Derived ``net_income_ttm / equity`` (4 dp).
        debt_to_equity: Derived ``total_debt / equity`` (2 dp).
        insight: Short textual insight.
        field_sources: Provenance of each market field (field -> source name).
    """

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
    field_sources: Mapping[str, str] = field(default_factory=dict)
