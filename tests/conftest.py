# tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import Iterator, Mapping
from datetime import UTC, date, datetime
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tickerlens_api.config.settings import get_settings
from tickerlens_api.domain.entities.market_event import MarketEvent
from tickerlens_api.domain.entities.news import NewsItem
from tickerlens_api.domain.entities.price_bar import BarPlan, PriceBar
from tickerlens_api.domain.entities.snapshot import CompanyProfile, MarketFields

_ENV_KEYS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "ALLOWED_ORIGINS",
    "CACHE_BACKEND",
    "REDIS_URL",
    "FACTS_CACHE_TTL_S",
    "SUBMISSIONS_CACHE_TTL_S",
    "IDENTITY_TABLE_TTL_S",
    "FMP_API_KEY",
    "FMP_BASE_URL",
    "FMP_BASE",
    "POLYGON_API_KEY",
    "POLYGON_BASE_URL",
    "EDGAR_USER_AGENT",
    "SEC_USER_AGENT",
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from a known, key-less environment."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ENVIRONMENT", "test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FrozenClock:
    """Deterministic clock: fixed wall time, manually advanced monotonic time."""

    def __init__(self, now: datetime | None = None, monotonic: float = 1_000.0) -> None:
        self._now = now or datetime(2024, 6, 14, 15, 30, tzinfo=UTC)
        self._monotonic = monotonic

    def now(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._monotonic

    def advance(self, seconds: float) -> None:
        self._monotonic += seconds


@pytest.fixture
def frozen_clock() -> FrozenClock:
    return FrozenClock()


async def no_sleep(_: float) -> None:
    return None


def fact_rows(*pairs: tuple[str, float], form: str = "10-K") -> list[dict[str, Any]]:
    return [{"end": end, "val": val, "form": form} for end, val in pairs]


def company_facts(concepts: Mapping[str, Mapping[str, list[dict[str, Any]]]]) -> dict[str, Any]:
    """Build a structured-facts document: ``{tag: {unit: rows}}``."""
    return {
        "cik": 320193,
        "entityName": "Apple Inc.",
        "facts": {"us-gaap": {tag: {"units": dict(units)} for tag, units in concepts.items()}},
    }


@pytest.fixture
def ticker_table() -> dict[str, Any]:
    return {
        "0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."},
        "1": {"cik_str": 789019, "ticker": "MSFT", "title": "MICROSOFT CORP"},
        "2": {"cik_str": 999999, "ticker": "AAPL", "title": "Duplicate Row"},
        "3": {"cik_str": 1018724, "ticker": "amzn", "title": "AMAZON COM INC"},
    }


@pytest.fixture
def apple_facts() -> dict[str, Any]:
    return company_facts(
        {
            "Revenues": {
                "USD": fact_rows(("2022-09-24", 394_328e6), ("2023-09-30", 383_285e6)),
            },
            "NetIncomeLoss": {
                "USD": fact_rows(("2022-09-24", 99_803e6), ("2023-09-30", 96_995e6)),
            },
            "EarningsPerShareDiluted": {
                "USD/shares": fact_rows(("2022-09-24", 6.11), ("2023-09-30", 6.13)),
            },
            "GrossProfit": {
                "USD": fact_rows(("2022-09-24", 170_782e6), ("2023-09-30", 169_148e6)),
            },
            "OperatingIncomeLoss": {
                "USD": fact_rows(("2022-09-24", 119_437e6), ("2023-09-30", 114_301e6)),
            },
            "Liabilities": {
                "USD": fact_rows(("2022-09-24", 302_083e6), ("2023-09-30", 290_437e6)),
            },
            "StockholdersEquity": {
                "USD": fact_rows(("2022-09-24", 50_672e6), ("2023-09-30", 62_146e6)),
            },
            "NetCashProvidedByUsedInOperatingActivities": {
                "USD": fact_rows(("2022-09-24", 122_151e6), ("2023-09-30", 110_543e6)),
            },
            "PaymentsToAcquirePropertyPlantAndEquipment": {
                "USD": fact_rows(("2022-09-24", 10_708e6), ("2023-09-30", 10_959e6)),
            },
        }
    )


@pytest.fixture
def apple_submissions() -> dict[str, Any]:
    return {
        "cik": "320193",
        "name": "Apple Inc.",
        "filings": {
            "recent": {
                "form": ["8-K", "10-Q", "10-K", "4", "10-K/A"],
                "filingDate": [
                    "2024-05-02",
                    "2024-05-03",
                    "2023-11-03",
                    "2023-10-01",
                    "2023-01-15",
                ],
                "reportDate": ["2024-05-02", "2024-03-30", "2023-09-30", "", "2022-09-24"],
                "accessionNumber": [
                    "0000320193-24-000067",
                    "0000320193-24-000069",
                    "0000320193-23-000106",
                    "0000320193-23-000099",
                    "0000320193-23-000005",
                ],
                "primaryDocument": [
                    "aapl-20240502.htm",
                    "aapl-20240330.htm",
                    "aapl-20230930.htm",
                    "",
                    "aapl-20220924a.htm",
                ],
            }
        },
    }


class FakeFilerSource:
    """In-memory regulator data source counting calls per document."""

    def __init__(
        self,
        *,
        tickers: Mapping[str, Any] | None = None,
        facts: Mapping[str, Any] | None = None,
        submissions: Mapping[str, Any] | None = None,
        errors: Mapping[str, Exception] | None = None,
    ) -> None:
        self._docs = {"tickers": tickers or {}, "facts": facts, "submissions": submissions}
        self._errors = dict(errors or {})
        self.calls: dict[str, int] = {"tickers": 0, "facts": 0, "submissions": 0}

    def fail(self, document: str, exc: Exception | None) -> None:
        if exc is None:
            self._errors.pop(document, None)
        else:
            self._errors[document] = exc

    async def _get(self, document: str) -> Mapping[str, Any]:
        self.calls[document] += 1
        await asyncio.sleep(0)
        if document in self._errors:
            raise self._errors[document]
        return self._docs[document] or {}

    async def fetch_company_tickers(self) -> Mapping[str, Any]:
        return await self._get("tickers")

    async def fetch_company_facts(self, filer_id: str) -> Mapping[str, Any]:
        return await self._get("facts")

    async def fetch_company_submissions(self, filer_id: str) -> Mapping[str, Any]:
        return await self._get("submissions")


class FakeMarketSource:
    """Market data source returning canned records or raising."""

    def __init__(
        self,
        name: str,
        fields: MarketFields | None = None,
        profile: Mapping[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self._fields = fields or MarketFields()
        self._profile = dict(profile or {})
        self._error = error

    async def load_market_fields(self, symbol: str) -> MarketFields:
        if self._error is not None:
            raise self._error
        return self._fields

    async def load_profile(self, symbol: str) -> CompanyProfile:
        if self._error is not None:
            raise self._error
        return CompanyProfile(symbol=symbol, **self._profile)


class FakeBarSource:
    """Bar source recording the plans it was asked for."""

    def __init__(
        self,
        name: str,
        bars: list[PriceBar] | None = None,
        *,
        supports_intraday: bool = True,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.supports_intraday = supports_intraday
        self._bars = bars or []
        self._error = error
        self.plans: list[BarPlan] = []

    async def fetch_bars(self, symbol: str, plan: BarPlan) -> list[PriceBar]:
        self.plans.append(plan)
        if self._error is not None:
            raise self._error
        return list(self._bars)



class FakeEventSource:
    """Event source returning canned events or raising, recording windows."""

    def __init__(
        self, name: str, events: list[MarketEvent] | None = None, *, error: Exception | None = None
    ) -> None:
        self.name = name
        self._events = events or []
        self._error = error
        self.windows: list[tuple[date, date]] = []

    async def fetch_events(self, symbol: str, *, start: date, end: date) -> list[MarketEvent]:
        self.windows.append((start, end))
        if self._error is not None:
            raise self._error
        return list(self._events)


class FakeNewsSource:
    """News source returning canned headlines or raising, recording limits."""

    def __init__(
        self, name: str, items: list[NewsItem] | None = None, *, error: Exception | None = None
    ) -> None:
        self.name = name
        self._items = items or []
        self._error = error
        self.limits: list[int] = []

    async def fetch_news(self, symbol: str, *, limit: int) -> list[NewsItem]:
        self.limits.append(limit)
        if self._error is not None:
            raise self._error
        return list(self._items)

class UnavailableCache:
    """Cache backend whose every call fails, like an unreachable Redis."""

    def __init__(self) -> None:
        self.attempts = 0

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        self.attempts += 1
        raise ConnectionError("redis down")

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        self.attempts += 1
        raise ConnectionError("redis down")


# ---------------------------------------------------------------------------
# HTTP surface
# ---------------------------------------------------------------------------


class StubUseCase:
    """Use-case double: returns a canned result or raises, recording calls."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self._result = result
        self._error = error
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    async def execute(self, *args: Any, **kwargs: Any) -> Any:
        self.calls.append((args, kwargs))
        if self._error is not None:
            raise self._error
        return self._result


@pytest.fixture
def app() -> FastAPI:
    from tickerlens_api.main import create_app

    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
