# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Polygon transport client.

Endpoints:
    * fetch_previous_close: /v2/aggs/ticker/{S}/prev
    * fetch_ticker_details: /v3/reference/tickers/{S}
    * fetch_aggregates: /v2/aggs/ticker/{S}/range/{n}/{span}/{from}/{to}
    * fetch_dividends: /v3/reference/dividends?ticker={S}
    * fetch_earnings: /v3/reference/earnings?ticker={S}
    * fetch_news: /v2/reference/news?ticker={S}

Raises:
    UpstreamNotConfigured: From every call when no access key is configured.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx

from tickerlens_api.domain.exceptions.financials import UpstreamNotConfigured
from tickerlens_api.infrastructure.external_apis.base_client import ResilientJsonClient
from tickerlens_api.infrastructure.external_apis.polygon.settings import PolygonSettings
from tickerlens_api.infrastructure.resilience.circuit_breaker import CircuitBreaker
from tickerlens_api.infrastructure.resilience.rate_limiter import ProviderLimiter
from tickerlens_api.infrastructure.resilience.retry import RetryPolicy

AGGREGATES_LIMIT = 50_000
REFERENCE_LIMIT = 200


class PolygonClient(ResilientJsonClient):
    """Transport client for Polygon aggregates and reference data."""

    provider = "polygon"

    def __init__(
        self,
        settings: PolygonSettings,
        *,
        http: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
        limiter: ProviderLimiter | None = None,
    ) -> None:
        self._settings = settings
        super().__init__(
            base_url=settings.base_url,
            http=http,
            timeout_s=settings.timeout_s,
            retry_policy=retry_policy
            or RetryPolicy.linear_attempts(settings.max_attempts, base=settings.backoff_s),
            breaker=breaker,
            limiter=limiter
            or ProviderLimiter(
                name=self.provider,
                max_concurrency=settings.max_concurrency,
                rate_per_s=settings.rate_limit_rps,
            ),
        )

    @property
    def configured(self) -> bool:
        """Return True when an access key is configured."""
        return self._settings.configured

    def _params(self, **extra: Any) -> dict[str, Any]:
        if not self._settings.configured or self._settings.api_key is None:
            raise UpstreamNotConfigured(
                "polygon access key is not configured.", details={"provider": self.provider}
            )
        params: dict[str, Any] = dict(extra)
        params["apiKey"] = self._settings.api_key.get_secret_value()
        return params

    @staticmethod
    def _results(payload: Mapping[str, Any]) -> list[Mapping[str, Any]]:
        rows = payload.get("results")
        if not isinstance(rows, list):
            return []
        return [row for row in rows if isinstance(row, Mapping)]

    async def fetch_previous_close(self, symbol: str) -> Mapping[str, Any] | None:
        """Return the previous session's aggregate bar, if any."""
        payload = await self._get_json(
            f"/v2/aggs/ticker/{symbol}/prev",
            endpoint="previous_close",
            params=self._params(adjusted="true"),
        )
        rows = self._results(payload)
        return rows[0] if rows else None

    async def fetch_ticker_details(self, symbol: str) -> Mapping[str, Any] | None:
        """Return the ticker reference record, if any."""
        payload = await self._get_json(
            f"/v3/reference/tickers/{symbol}",
            endpoint="ticker_details",
            params=self._params(),
        )
        results = payload.get("results")
        return results if isinstance(results, Mapping) else None

    async def fetch_aggregates(
        self,
        symbol: str,
        *,
        multiplier: int,
        timespan: str,
        start: date,
        end: date,
    ) -> list[Mapping[str, Any]]:
        """Return aggregate bars ascending by start time."""
        path = (
            f"/v2/aggs/ticker/{symbol}/range/{multiplier}/{timespan}/"
            f"{start.isoformat()}/{end.isoformat()}"
        )
        payload = await self._get_json(
            path,
            endpoint="aggregates",
            params=self._params(adjusted="true", sort="asc", limit=AGGREGATES_LIMIT),
        )
        return self._results(payload)

    async def fetch_dividends(self, symbol: str) -> list[Mapping[str, Any]]:
        """Return dividend records, oldest first."""
        payload = await self._get_json(
            "/v3/reference/dividends",
            endpoint="dividends",
            params=self._params(ticker=symbol, limit=REFERENCE_LIMIT, order="asc"),
        )
        return self._results(payload)

    async def fetch_earnings(self, symbol: str) -> list[Mapping[str, Any]]:
        """Return earnings report records, oldest first."""
        payload = await self._get_json(
            "/v3/reference/earnings",
            endpoint="earnings",
            params=self._params(ticker=symbol, limit=REFERENCE_LIMIT, order="asc"),
        )
        return self._results(payload)

    async def fetch_news(self, symbol: str, *, limit: int) -> list[Mapping[str, Any]]:
        """Return up to ``limit`` news articles, newest first."""
        payload = await self._get_json(
            "/v2/reference/news",
            endpoint="news",
            params=self._params(ticker=symbol, order="desc", limit=limit),
        )
        return self._results(payload)
