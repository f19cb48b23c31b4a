from __future__ import annotations

from datetime import date

import httpx
import pytest
import respx

from tickerlens_api.domain.exceptions.financials import UpstreamNotConfigured, UpstreamNotFound
from tickerlens_api.infrastructure.external_apis.polygon.client import PolygonClient
from tickerlens_api.infrastructure.external_apis.polygon.settings import PolygonSettings
from tickerlens_api.infrastructure.resilience.retry import RetryPolicy

BASE = "https://api.polygon.io"


def _client(http: httpx.AsyncClient, api_key: str | None = "poly-key") -> PolygonClient:
    return PolygonClient(
        PolygonSettings(api_key=api_key),
        http=http,
        retry_policy=RetryPolicy.linear_attempts(1, base=0.0),
    )


@pytest.mark.asyncio
@respx.mock
async def test_previous_close_returns_the_first_result() -> None:
    route = respx.get(f"{BASE}/v2/aggs/ticker/AAPL/prev").mock(
        return_value=httpx.Response(200, json={"results": [{"c": 212.49, "t": 1}]})
    )
    async with httpx.AsyncClient() as http:
        assert await _client(http).fetch_previous_close("AAPL") == {"c": 212.49, "t": 1}

    params = route.calls.last.request.url.params
    assert params["apiKey"] == "poly-key"
    assert params["adjusted"] == "true"


@pytest.mark.asyncio
@respx.mock
async def test_previous_close_without_results_is_none() -> None:
    respx.get(f"{BASE}/v2/aggs/ticker/AAPL/prev").mock(
        return_value=httpx.Response(200, json={"resultsCount": 0})
    )
    async with httpx.AsyncClient() as http:
        assert await _client(http).fetch_previous_close("AAPL") is None


@pytest.mark.asyncio
@respx.mock
async def test_ticker_details_unwraps_results_and_maps_404() -> None:
    respx.get(f"{BASE}/v3/reference/tickers/AAPL").mock(
        return_value=httpx.Response(200, json={"results": {"name": "Apple Inc."}})
    )
    respx.get(f"{BASE}/v3/reference/tickers/ZZZZ").mock(return_value=httpx.Response(404))
    async with httpx.AsyncClient() as http:
        client = _client(http)
        assert await client.fetch_ticker_details("AAPL") == {"name": "Apple Inc."}
        with pytest.raises(UpstreamNotFound):
            await client.fetch_ticker_details("ZZZZ")


@pytest.mark.asyncio
@respx.mock
async def test_aggregates_path_encodes_the_plan() -> None:
    route = respx.get(f"{BASE}/v2/aggs/ticker/AAPL/range/15/minute/2024-06-07/2024-06-14").mock(
        return_value=httpx.Response(200, json={"results": [{"t": 1000, "c": 1.0}, "junk"]})
    )
    async with httpx.AsyncClient() as http:
        rows = await _client(http).fetch_aggregates(
            "AAPL",
            multiplier=15,
            timespan="minute",
            start=date(2024, 6, 7),
            end=date(2024, 6, 14),
        )

    assert rows == [{"t": 1000, "c": 1.0}]
    params = route.calls.last.request.url.params
    assert params["sort"] == "asc"
    assert params["limit"] == "50000"


@pytest.mark.asyncio
async def test_unconfigured_client_raises_not_configured() -> None:
    async with httpx.AsyncClient() as http:
        with pytest.raises(UpstreamNotConfigured):
            await _client(http, api_key=None).fetch_previous_close("AAPL")


@pytest.mark.asyncio
@respx.mock
async def test_reference_endpoints_filter_by_ticker() -> None:
    dividends = respx.get(f"{BASE}/v3/reference/dividends").mock(
        return_value=httpx.Response(
            200, json={"results": [{"ex_dividend_date": "2024-05-10", "cash_amount": 0.25}]}
        )
    )
    earnings = respx.get(f"{BASE}/v3/reference/earnings").mock(
        return_value=httpx.Response(200, json={"status": "OK"})
    )
    async with httpx.AsyncClient() as http:
        client = _client(http)
        assert await client.fetch_dividends("AAPL") == [
            {"ex_dividend_date": "2024-05-10", "cash_amount": 0.25}
        ]
        assert await client.fetch_earnings("AAPL") == []

    for route in (dividends, earnings):
        params = route.calls.last.request.url.params
        assert params["ticker"] == "AAPL"
        assert params["order"] == "asc"
        assert params["limit"] == "200"
        assert params["apiKey"] == "poly-key"


@pytest.mark.asyncio
@respx.mock
async def test_news_requests_newest_first_with_limit() -> None:
    route = respx.get(f"{BASE}/v2/reference/news").mock(
        return_value=httpx.Response(200, json={"results": [{"title": "Apple beats"}]})
    )
    async with httpx.AsyncClient() as http:
        rows = await _client(http).fetch_news("AAPL", limit=4)

    assert rows == [{"title": "Apple beats"}]
    params = route.calls.last.request.url.params
    assert params["order"] == "desc"
    assert params["limit"] == "4"
