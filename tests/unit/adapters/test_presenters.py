from __future__ import annotations

from datetime import date

from tickerlens_api.adapters.presenters.financials_presenter import (
    present_filings,
    present_price_history,
    present_profile,
    present_series,
    present_snapshot,
)
from tickerlens_api.application.use_cases.financials.get_financial_series import (
    FinancialSeriesBundle,
)
from tickerlens_api.domain.entities.filing import FilingIndex, FilingRecord
from tickerlens_api.domain.entities.price_bar import PriceBar, PriceHistory
from tickerlens_api.domain.entities.series import NormalizedSeries, SeriesPoint
from tickerlens_api.domain.entities.snapshot import CompanyProfile, FinancialSnapshot
from tickerlens_api.domain.enums.filing import FormCategory
from tickerlens_api.domain.enums.price_history import BarInterval, PriceRange


def test_snapshot_uses_camel_case_and_keeps_nulls() -> None:
    snapshot = FinancialSnapshot(
        symbol="AAPL",
        filer_id="0000320193",
        price=190.0,
        week52_low=164.08,
        revenue_growth_yoy=-0.028,
        field_sources={"price": "polygon", "week52_low": "derived:polygon"},
    )
    body = present_snapshot(snapshot).model_dump_http()

    assert body["filerId"] == "0000320193"
    assert body["week52Low"] == 164.08
    assert body["revenueGrowthYoy"] == -0.028
    assert body["marketCap"] is None
    assert body["insight"] == ""
    assert body["fieldSources"] == {"price": "polygon", "week52Low": "derived:polygon"}


def test_series_keys_and_rows_are_camel_case() -> None:
    revenue = NormalizedSeries(
        concept="revenue",
        points=(SeriesPoint("2022-09-24", 1.0), SeriesPoint("2023-09-30", 2.0)),
    )
    margin = NormalizedSeries(concept="gross_margin", points=(SeriesPoint("2023-09-30", 0.44),))
    bundle = FinancialSeriesBundle(
        symbol="AAPL",
        filer_id="0000320193",
        periods=8,
        series={"revenue": revenue, "gross_margin": margin},
        rows=(
            {"date": "2022-09-24", "revenue": 1.0},
            {"date": "2023-09-30", "revenue": 2.0, "gross_margin": 0.44},
        ),
    )
    body = present_series(bundle).model_dump_http()

    assert list(body["series"]) == ["revenue", "grossMargin"]
    assert body["series"]["grossMargin"] == [{"date": "2023-09-30", "value": 0.44}]
    assert body["rows"][1] == {"date": "2023-09-30", "revenue": 2.0, "grossMargin": 0.44}


def test_filings_and_unresolved_index() -> None:
    record = FilingRecord(
        form="10-K",
        filed_at=date(2023, 11, 3),
        report_date=date(2023, 9, 30),
        accession_number="0000320193-23-000106",
        primary_document="aapl-20230930.htm",
        document_url="https://example.test/doc.htm",
        category=FormCategory.ANNUAL,
    )
    body = present_filings(
        FilingIndex(symbol="AAPL", filer_id="0000320193", filings=(record,))
    ).model_dump_http()
    assert body["filings"][0]["filedAt"] == "2023-11-03"
    assert body["filings"][0]["accessionNumber"] == "0000320193-23-000106"
    assert body["filings"][0]["category"] == "annual"

    empty = present_filings(FilingIndex(symbol="ZZZZ", filer_id=None)).model_dump_http()
    assert empty == {"symbol": "ZZZZ", "filerId": None, "filings": []}


def test_price_history_and_profile() -> None:
    history = PriceHistory(
        symbol="AAPL",
        range=PriceRange.ONE_WEEK,
        interval=BarInterval.M15,
        source="polygon",
        points=(PriceBar(1718236800, 214.24, volume=100.0),),
    )
    body = present_price_history(history).model_dump_http()
    assert body["range"] == "1W"
    assert body["interval"] == "15m"
    assert body["points"][0] == {
        "timestamp": 1718236800,
        "close": 214.24,
        "volume": 100.0,
        "high": None,
        "low": None,
    }

    profile = CompanyProfile(symbol="AAPL", name="Apple Inc.", field_sources={"name": "fmp"})
    assert present_profile(profile).model_dump_http()["fieldSources"] == {"name": "fmp"}
