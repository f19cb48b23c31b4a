# src/tickerlens_api/adapters/presenters/financials_presenter.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Presenters: domain results -> HTTP schemas.

Purpose:
    Map use-case results onto transport schemas. Metric names that appear
    as dictionary keys (series names, row keys, provenance maps) are
    converted to camelCase here, matching the aliases of schema fields.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic.alias_generators import to_camel

from tickerlens_api.adapters.schemas.http.financials import (
    CompanyProfileHTTP,
    FilingHTTP,
    FilingIndexHTTP,
    FinancialSeriesHTTP,
    FinancialSnapshotHTTP,
    PriceBarHTTP,
    PriceHistoryHTTP,
    SeriesPointHTTP,
)
from tickerlens_api.application.use_cases.financials.get_financial_series import (
    FinancialSeriesBundle,
)
from tickerlens_api.domain.entities.filing import FilingIndex
from tickerlens_api.domain.entities.price_bar import PriceHistory
from tickerlens_api.domain.entities.snapshot import CompanyProfile, FinancialSnapshot


def _camel_keys(mapping: Mapping[str, Any]) -> dict[str, Any]:
    return {to_camel(key): value for key, value in mapping.items()}


def present_snapshot(snapshot: FinancialSnapshot) -> FinancialSnapshotHTTP:
    """Map a snapshot entity to its HTTP schema."""
    fields = {
        name: getattr(snapshot, name)
        for name in FinancialSnapshotHTTP.model_fields
        if name != "field_sources"
    }
    return FinancialSnapshotHTTP(**fields, field_sources=_camel_keys(snapshot.field_sources))


def present_series(bundle: FinancialSeriesBundle) -> FinancialSeriesHTTP:
    """Map a series bundle to its HTTP schema."""
    return FinancialSeriesHTTP(
        symbol=bundle.symbol,
        filer_id=bundle.filer_id,
        periods=bundle.periods,
        series={
            to_camel(name): [SeriesPointHTTP(date=p.date, value=p.value) for p in s.points]
            for name, s in bundle.series.items()
        },
        rows=[_camel_keys(row) for row in bundle.rows],
    )


def present_filings(index: FilingIndex) -> FilingIndexHTTP:
    """Map a filing index to its HTTP schema."""
    return FilingIndexHTTP(
        symbol=index.symbol,
        filer_id=index.filer_id,
        filings=[
            FilingHTTP(
                form=f.form,
                filed_at=f.filed_at,
                report_date=f.report_date,
                accession_number=f.accession_number,
                primary_document=f.primary_document,
                document_url=f.document_url,
                category=f.category.value,
            )
            for f in index.filings
        ],
    )


def present_price_history(history: PriceHistory) -> PriceHistoryHTTP:
    """Map a price history result to its HTTP schema."""
    return PriceHistoryHTTP(
        symbol=history.symbol,
        range=history.range.value,
        interval=history.interval.value,
        source=history.source,
        points=[
            PriceBarHTTP(
                timestamp=bar.timestamp,
                close=bar.close,
                volume=bar.volume,
                high=bar.high,
                low=bar.low,
            )
            for bar in history.points
        ],
    )


def present_profile(profile: CompanyProfile) -> CompanyProfileHTTP:
    """Map a company profile to its HTTP schema."""
    return CompanyProfileHTTP(
        symbol=profile.symbol,
        name=profile.name,
        description=profile.description,
        exchange=profile.exchange,
        sector=profile.sector,
        industry=profile.industry,
        website=profile.website,
        currency=profile.currency,
        field_sources=_camel_keys(profile.field_sources),
    )
