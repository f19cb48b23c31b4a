# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""EDGAR Transport Client: resilient, instrumented, async.

Endpoints:
    * fetch_company_tickers: www.sec.gov/files/company_tickers.json
    * fetch_company_facts: api/xbrl/companyfacts/CIK##########.json
    * fetch_company_submissions: submissions/CIK##########.json

Notes:
    * Filer identifiers are normalized to 10-digit, zero-padded strings.
    * Caller-facing exceptions are always ``UpstreamUnavailable`` (or one of
      its refinements); httpx types never cross the boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from tickerlens_api.domain.entities.filer_identity import normalize_filer_id
from tickerlens_api.infrastructure.external_apis.base_client import ResilientJsonClient
from tickerlens_api.infrastructure.external_apis.edgar.settings import EdgarSettings
from tickerlens_api.infrastructure.resilience.circuit_breaker import CircuitBreaker
from tickerlens_api.infrastructure.resilience.rate_limiter import ProviderLimiter
from tickerlens_api.infrastructure.resilience.retry import RetryPolicy


class EdgarClient(ResilientJsonClient):
    """Transport client for SEC EDGAR reference, facts and submissions data."""

    provider = "edgar"

    def __init__(
        self,
        settings: EdgarSettings,
        *,
        http: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
        limiter: ProviderLimiter | None = None,
    ) -> None:
        """Initialize the client from settings.

        Args:
            settings: EDGAR settings.
            http: Optional shared ``httpx.AsyncClient``.
            retry_policy: Optional retry override (tests use zero backoff).
            breaker: Optional circuit breaker override.
            limiter: Optional limiter override.
        """
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
            default_headers={"User-Agent": settings.user_agent},
        )

    async def fetch_company_tickers(self) -> Mapping[str, Any]:
        """Fetch the bulk ticker reference table.

        The document maps arbitrary keys to ``{cik_str, ticker, title}`` rows
        in provider order.
        """
        return await self._get_json(
            "/files/company_tickers.json",
            endpoint="company_tickers",
            base_url=self._settings.www_base_url,
        )

    async def fetch_company_facts(self, filer_id: str) -> Mapping[str, Any]:
        """Fetch the full structured-facts document for a filer."""
        cik = normalize_filer_id(filer_id)
        return await self._get_json(
            f"/api/xbrl/companyfacts/CIK{cik}.json", endpoint="company_facts"
        )

    async def fetch_company_submissions(self, filer_id: str) -> Mapping[str, Any]:
        """Fetch the filing history document for a filer."""
        cik = normalize_filer_id(filer_id)
        return await self._get_json(f"/submissions/CIK{cik}.json", endpoint="company_submissions")
