from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from tickerlens_api.adapters.gateways.polygon_gateway import (
    PolygonBarGateway,
    PolygonEventGateway,
    PolygonMarketGateway,
    PolygonNewsGateway,
    aggregate_to_bar,
    article_to_item,
    dividend_to_event,
    earnings_to_event,
)
from tickerlens_api.domain.entities.price_bar import PriceBar
from tickerlens_api.domain.enums.market_event import EventKind
from tickerlens_api.domain.enums.price_history import BarInterval, PriceRange
from tickerlens_api.domain.exceptions.financials import UpstreamNotFound, UpstreamUnavailable
from tickerlens_api.domain.services.price_range_mapper import plan_bars


class _FakePolygonClient:
    def __init__(
        self,
        *,
        configured: bool = True,
        prev: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
        rows: list[dict[str, Any]] | None = None,
    ) -> None:
        self.configured = configured
        self._prev = prev
        self._details = details
        self._rows = rows or []
        self.aggregate_calls: list[dict[str, Any]] = []

    async def fetch_previous_close(self, symbol: str) -> dict[str, Any] | None:
        return self._prev

    async def fetch_ticker_details(self, symbol: str) -> dict[str, Any] | None:
        if self._details is None:
            raise UpstreamNotFound("unknown ticker")
        return self._details

    async def fetch_aggregates(self, symbol: str, **kwargs: Any) -> list[dict[str, Any]]:
        self.aggregate_calls.append(kwargs)
        return self._rows


def test_aggregate_row_mapping() -> None:
    bar = aggregate_to_bar({"t": 1718236800000, "c": 214.24, "v": 1.2e6, "h": 215, "l": 211.5})
    assert bar == PriceBar(timestamp=1718236800, close=214.24, volume=1.2e6, high=215.0, low=211.5)
    assert aggregate_to_bar({"t": 1, "c": None}) is None
    assert aggregate_to_bar({"c": 1.0}) is None


@pytest.mark.anyio
async def test_market_fields_from_previous_close_and_details() -> None:
    client = _FakePolygonClient(prev={"c": 212.49}, details={"market_cap": 3.26e12})
    fields = await PolygonMarketGateway(client).load_market_fields("AAPL")  # type: ignore[arg-type]
    assert fields.price == 212.49
    assert fields.market_cap == 3.26e12
    assert fields.beta is None


@pytest.mark.anyio
async def test_missing_reference_record_leaves_market_cap_null() -> None:
    client = _FakePolygonClient(prev={"c": 10.0}, details=None)
    fields = await PolygonMarketGateway(client).load_market_fields("ZZZZ")  # type: ignore[arg-type]
    assert fields.price == 10.0
    assert fields.market_cap is None


@pytest.mark.anyio
async def test_profile_from_reference_record() -> None:
    client = _FakePolygonClient(
        details={
            "name": "Apple Inc.",
            "primary_exchange": "XNAS",
            "sic_description": "ELECTRONIC COMPUTERS",
            "homepage_url": "https://www.apple.com",
            "currency_name": "usd",
        }
    )
    profile = await PolygonMarketGateway(client).load_profile("AAPL")  # type: ignore[arg-type]
    assert profile.exchange == "XNAS"
    assert profile.industry == "ELECTRONIC COMPUTERS"
    assert profile.currency == "USD"
    assert profile.sector is None


@pytest.mark.anyio
async def test_bars_request_uses_plan_granularity() -> None:
    client = _FakePolygonClient(rows=[{"t": 1000, "c": 1.0}, {"t": 2000}])
    plan = plan_bars(PriceRange.ONE_WEEK, BarInterval.M15, today=date(2024, 6, 14))

    bars = await PolygonBarGateway(client).fetch_bars("AAPL", plan)  # type: ignore[arg-type]

    assert bars == [PriceBar(timestamp=1, close=1.0)]
    assert client.aggregate_calls == [
        {
            "multiplier": 15,
            "timespan": "minute",
            "start": date(2024, 6, 7),
            "end": date(2024, 6, 14),
        }
    ]


@pytest.mark.anyio
async def test_unconfigured_bar_gateway_returns_nothing() -> None:
    client = _FakePolygonClient(configured=False, rows=[{"t": 1000, "c": 1.0}])
    plan = plan_bars(PriceRange.ONE_YEAR, None, today=date(2024, 6, 14))
    assert await PolygonBarGateway(client).fetch_bars("AAPL", plan) == []  # type: ignore[arg-type]
    assert client.aggregate_calls == []


class _FakeReferenceClient:
    def __init__(
        self,
        *,
        configured: bool = True,
        dividends: list[dict[str, Any]] | Exception | None = None,
        earnings: list[dict[str, Any]] | Exception | None = None,
        news: list[dict[str, Any]] | Exception | None = None,
    ) -> None:
        self.configured = configured
        self._docs = {"dividends": dividends, "earnings": earnings, "news": news}
        self.news_limits: list[int] = []

    def _answer(self, name: str) -> list[dict[str, Any]]:
        doc = self._docs[name]
        if isinstance(doc, Exception):
            raise doc
        return doc or []

    async def fetch_dividends(self, symbol: str) -> list[dict[str, Any]]:
        return self._answer("dividends")

    async def fetch_earnings(self, symbol: str) -> list[dict[str, Any]]:
        return self._answer("earnings")

    async def fetch_news(self, symbol: str, *, limit: int) -> list[dict[str, Any]]:
        self.news_limits.append(limit)
        return self._answer("news")


def test_reference_row_mapping() -> None:
    dividend = dividend_to_event({"ex_dividend_date": "2024-05-10", "cash_amount": 0.25})
    assert dividend is not None
    assert (dividend.kind, dividend.label, dividend.date) == (
        EventKind.DIVIDEND,
        "$0.25",
        date(2024, 5, 10),
    )
    assert dividend_to_event({"cash_amount": 0.25}) is None

    earning = earnings_to_event(
        {"period": "2024-03-30", "fiscal_quarter": 2, "fiscal_year": 2024}
    )
    assert earning is not None
    assert (earning.label, earning.date) == ("Q2 FY24", date(2024, 3, 30))
    reported = earnings_to_event({"reported_date": "2024-05-02", "period": "2024-03-30"})
    assert reported is not None
    assert (reported.label, reported.date) == ("Earnings", date(2024, 5, 2))

    item = article_to_item(
        {
            "title": "Apple beats",
            "publisher": {"name": "Reuters"},
            "published_utc": "2024-06-13T12:00:00Z",
            "article_url": "https://example.com/a",
        }
    )
    assert item is not None
    assert (item.title, item.source, item.sentiment) == ("Apple beats", "Reuters", "Neutral")
    assert article_to_item({"title": "  "}) is None


@pytest.mark.anyio
async def test_events_are_limited_to_the_window() -> None:
    client = _FakeReferenceClient(
        dividends=[
            {"ex_dividend_date": "2023-08-11", "cash_amount": 0.24},
            {"ex_dividend_date": "2024-05-10", "cash_amount": 0.25},
        ],
        earnings=[{"reported_date": "2024-05-02", "fiscal_quarter": 2, "fiscal_year": 2024}],
    )
    gateway = PolygonEventGateway(client)  # type: ignore[arg-type]

    events = await gateway.fetch_events("AAPL", start=date(2024, 1, 1), end=date(2024, 6, 14))

    assert [(e.kind, e.date) for e in events] == [
        (EventKind.DIVIDEND, date(2024, 5, 10)),
        (EventKind.EARNING, date(2024, 5, 2)),
    ]


@pytest.mark.anyio
async def test_a_failed_event_endpoint_contributes_nothing() -> None:
    client = _FakeReferenceClient(
        dividends=UpstreamUnavailable("down"),
        earnings=[{"reported_date": "2024-05-02"}],
    )
    gateway = PolygonEventGateway(client)  # type: ignore[arg-type]

    events = await gateway.fetch_events("AAPL", start=date(2024, 1, 1), end=date(2024, 6, 14))

    assert [e.kind for e in events] == [EventKind.EARNING]


@pytest.mark.anyio
async def test_unconfigured_reference_gateways_answer_empty() -> None:
    client = _FakeReferenceClient(configured=False, news=[{"title": "x"}])

    events = await PolygonEventGateway(client).fetch_events(  # type: ignore[arg-type]
        "AAPL", start=date(2024, 1, 1), end=date(2024, 6, 14)
    )
    news = await PolygonNewsGateway(client).fetch_news("AAPL", limit=4)  # type: ignore[arg-type]

    assert events == []
    assert news == []
    assert client.news_limits == []


@pytest.mark.anyio
async def test_news_is_capped_and_untitled_articles_skipped() -> None:
    client = _FakeReferenceClient(
        news=[{"title": "a"}, {"title": None}, {"title": "b"}, {"title": "c"}]
    )

    items = await PolygonNewsGateway(client).fetch_news("AAPL", limit=2)  # type: ignore[arg-type]

    assert [i.title for i in items] == ["a", "b"]
    assert client.news_limits == [2]
