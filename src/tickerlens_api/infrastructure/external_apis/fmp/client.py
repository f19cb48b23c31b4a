# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Financial Modeling Prep (FMP) transport client.

Most FMP endpoints answer with a JSON array holding one row per symbol (or
per period, newest first). The ``fetch_*`` helpers below return the first
row, or ``None`` when the array is empty.

Raises:
    UpstreamNotConfigured: From every call when no access key is configured.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from tickerlens_api.domain.exceptions.financials import UpstreamNotConfigured
from tickerlens_api.infrastructure.external_apis.base_client import ResilientJsonClient
from tickerlens_api.infrastructure.external_apis.fmp.settings import FmpSettings
from tickerlens_api.infrastructure.resilience.circuit_breaker import CircuitBreaker
from tickerlens_api.infrastructure.resilience.rate_limiter import ProviderLimiter
from tickerlens_api.infrastructure.resilience.retry import RetryPolicy


def _first_row(rows: list[Any]) -> Mapping[str, Any] | None:
    for row in rows:
        if isinstance(row, Mapping):
            return row
    return None


class FmpClient(ResilientJsonClient):
    """Transport client for FMP profile, quote, ratio and price endpoints."""

    provider = "fmp"

    def __init__(
        self,
        settings: FmpSettings,
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
                "fmp access key is not configured.", details={"provider": self.provider}
            )
        params: dict[str, Any] = dict(extra)
        params["apikey"] = self._settings.api_key.get_secret_value()
        return params

    async def _first(self, path: str, *, endpoint: str, **extra: Any) -> Mapping[str, Any] | None:
        rows = await self._get_json_list(path, endpoint=endpoint, params=self._params(**extra))
        return _first_row(rows)

    async def fetch_profile(self, symbol: str) -> Mapping[str, Any] | None:
        """Return the company profile row."""
        return await self._first(f"/v3/profile/{symbol}", endpoint="profile")

    async def fetch_quote(self, symbol: str) -> Mapping[str, Any] | None:
        """Return the latest quote row."""
        return await self._first(f"/v3/quote/{symbol}", endpoint="quote")

    async def fetch_ratios_ttm(self, symbol: str) -> Mapping[str, Any] | None:
        """Return the trailing-twelve-month ratios row."""
        return await self._first(f"/v3/ratios-ttm/{symbol}", endpoint="ratios_ttm")

    async def fetch_ratios(self, symbol: str) -> Mapping[str, Any] | None:
        """Return the most recent annual ratios row."""
        return await self._first(f"/v3/ratios/{symbol}", endpoint="ratios", limit=1)

    async def fetch_key_metrics(self, symbol: str) -> Mapping[str, Any] | None:
        """Return the most recent key-metrics row."""
        return await self._first(f"/v3/key-metrics/{symbol}", endpoint="key_metrics", limit=1)

    async def fetch_daily_closes(self, symbol: str, *, days: int) -> list[Mapping[str, Any]]:
        """Return up to ``days`` daily close rows (``{date, close}``), newest first."""
        payload = await self._get_json(
            f"/v3/historical-price-full/{symbol}",
            endpoint="historical_price_full",
            params=self._params(serietype="line", timeseries=days),
        )
        rows = payload.get("historical")
        if not isinstance(rows, list):
            return []
        return [row for row in rows if isinstance(row, Mapping)]
