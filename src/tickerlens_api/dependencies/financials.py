# src/tickerlens_api/dependencies/financials.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the financial data use cases.

Overview:
    :func:`build_container` assembles provider clients, gateways, the cache
    and every use case once per process (called from the lifespan
    bootstrap). FastAPI dependency providers read the container from
    ``app.state`` so tests can override either a single use case or the
    whole container.

Layer:
    dependencies

Design:
    * One client per provider, so each provider's limiter and breaker are
      shared by every in-flight request.
    * Market-field preference: FMP, then Polygon. Price preference:
      Polygon, then FMP. Bar preference: Polygon aggregates, then FMP
      daily closes. Events and news come from Polygon only.
    * Cache backend selected by ``CACHE_BACKEND``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import httpx
from fastapi import Depends, Request

from tickerlens_api.adapters.gateways.fmp_gateway import FmpMarketGateway
from tickerlens_api.adapters.gateways.polygon_gateway import (
    PolygonBarGateway,
    PolygonEventGateway,
    PolygonMarketGateway,
    PolygonNewsGateway,
)
from tickerlens_api.application.interfaces.cache_port import CachePort
from tickerlens_api.application.interfaces.clock import Clock
from tickerlens_api.application.use_cases.company.get_company_profile import (
    GetCompanyProfileUseCase,
)
from tickerlens_api.application.use_cases.filings.list_filings import ListFilingsUseCase
from tickerlens_api.application.use_cases.financials.company_facts import CompanyFactsFetcher
from tickerlens_api.application.use_cases.financials.get_financial_series import (
    GetFinancialSeriesUseCase,
)
from tickerlens_api.application.use_cases.financials.get_financial_snapshot import (
    GetFinancialSnapshotUseCase,
)
from tickerlens_api.application.use_cases.identity.resolve_filer_identity import (
    FilerIdentityResolver,
)
from tickerlens_api.application.use_cases.news.get_news import GetNewsUseCase
from tickerlens_api.application.use_cases.prices.get_price_history import (
    GetPriceHistoryUseCase,
)
from tickerlens_api.application.use_cases.prices.get_price_series import (
    GetPriceSeriesUseCase,
)
from tickerlens_api.config.settings import Settings
from tickerlens_api.infrastructure.caching.json_cache import RedisJsonCache
from tickerlens_api.infrastructure.caching.memory_cache import MemoryJsonCache
from tickerlens_api.infrastructure.clock import SystemClock
from tickerlens_api.infrastructure.external_apis.edgar.client import EdgarClient
from tickerlens_api.infrastructure.external_apis.edgar.settings import EdgarSettings
from tickerlens_api.infrastructure.external_apis.fmp.client import FmpClient
from tickerlens_api.infrastructure.external_apis.fmp.settings import FmpSettings
from tickerlens_api.infrastructure.external_apis.polygon.client import PolygonClient
from tickerlens_api.infrastructure.external_apis.polygon.settings import PolygonSettings
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass(frozen=True)
class ServiceContainer:
    """Process-wide graph of clients, gateways and use cases."""

    edgar: EdgarClient
    fmp: FmpClient
    polygon: PolygonClient
    cache: CachePort
    resolver: FilerIdentityResolver
    snapshot: GetFinancialSnapshotUseCase
    series: GetFinancialSeriesUseCase
    filings: ListFilingsUseCase
    prices: GetPriceHistoryUseCase
    price_series: GetPriceSeriesUseCase
    profile: GetCompanyProfileUseCase
    news: GetNewsUseCase

    def provider_status(self) -> dict[str, bool]:
        """Return which upstream providers are usable."""
        return {
            "edgar": True,
            "fmp": self.fmp.configured,
            "polygon": self.polygon.configured,
        }


def build_cache(settings: Settings, *, clock: Clock) -> CachePort:
    """Return the document cache selected by ``CACHE_BACKEND``."""
    if settings.cache_backend == "redis":
        return RedisJsonCache()
    return MemoryJsonCache(clock=clock)


def build_container(
    settings: Settings,
    *,
    http: httpx.AsyncClient,
    clock: Clock | None = None,
    edgar_settings: EdgarSettings | None = None,
    fmp_settings: FmpSettings | None = None,
    polygon_settings: PolygonSettings | None = None,
) -> ServiceContainer:
    """Wire clients, gateways and use cases.

    Args:
        settings: Process settings.
        http: Shared HTTP client used by every provider client.
        clock: Time source; the system clock if omitted.
        edgar_settings: EDGAR settings override (read from env if omitted).
        fmp_settings: FMP settings override (read from env if omitted).
        polygon_settings: Polygon settings override (read from env if omitted).

    Returns:
        ServiceContainer: Fully wired container.
    """
    clock = clock or SystemClock()
    edgar_settings = edgar_settings or EdgarSettings()
    fmp_settings = fmp_settings or FmpSettings()
    polygon_settings = polygon_settings or PolygonSettings()

    edgar = EdgarClient(edgar_settings, http=http)
    fmp = FmpClient(fmp_settings, http=http)
    polygon = PolygonClient(polygon_settings, http=http)
    cache = build_cache(settings, clock=clock)

    fmp_gateway = FmpMarketGateway(fmp)
    polygon_market = PolygonMarketGateway(polygon)
    polygon_bars = PolygonBarGateway(polygon)
    polygon_events = PolygonEventGateway(polygon)
    polygon_news = PolygonNewsGateway(polygon)

    resolver = FilerIdentityResolver(
        source=edgar, clock=clock, ttl_s=settings.identity_table_ttl_s
    )
    facts = CompanyFactsFetcher(source=edgar, cache=cache, ttl=settings.facts_cache_ttl_s)
    market_sources = (fmp_gateway, polygon_market)
    bar_sources = (polygon_bars, fmp_gateway)
    prices = GetPriceHistoryUseCase(sources=bar_sources, clock=clock)
    filings = ListFilingsUseCase(
        resolver=resolver,
        source=edgar,
        cache=cache,
        ttl=settings.submissions_cache_ttl_s,
        archives_base=edgar_settings.archives_base_url,
    )

    container = ServiceContainer(
        edgar=edgar,
        fmp=fmp,
        polygon=polygon,
        cache=cache,
        resolver=resolver,
        snapshot=GetFinancialSnapshotUseCase(
            resolver=resolver,
            facts=facts,
            market_sources=market_sources,
            bar_sources=bar_sources,
            clock=clock,
            price_order=("polygon", "fmp"),
        ),
        series=GetFinancialSeriesUseCase(resolver=resolver, facts=facts),
        filings=filings,
        prices=prices,
        price_series=GetPriceSeriesUseCase(
            prices=prices,
            filings=filings,
            event_sources=(polygon_events,),
            clock=clock,
        ),
        profile=GetCompanyProfileUseCase(sources=market_sources),
        news=GetNewsUseCase(sources=(polygon_news,)),
    )
    logger.info("container.built", extra={"providers": container.provider_status()})
    return container


# =============================================================================
# FastAPI dependency providers
# =============================================================================


def get_container(request: Request) -> ServiceContainer:
    """Return the container published by the lifespan bootstrap.

    Raises:
        RuntimeError: When the application was started without its lifespan.
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Service container not initialized; run the app with its lifespan.")
    return container


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]


def get_snapshot_use_case(container: ContainerDep) -> GetFinancialSnapshotUseCase:
    return container.snapshot


def get_series_use_case(container: ContainerDep) -> GetFinancialSeriesUseCase:
    return container.series


def get_filings_use_case(container: ContainerDep) -> ListFilingsUseCase:
    return container.filings


def get_price_history_use_case(container: ContainerDep) -> GetPriceHistoryUseCase:
    return container.prices


def get_price_series_use_case(container: ContainerDep) -> GetPriceSeriesUseCase:
    return container.price_series


def get_profile_use_case(container: ContainerDep) -> GetCompanyProfileUseCase:
    return container.profile


def get_news_use_case(container: ContainerDep) -> GetNewsUseCase:
    return container.news


def get_provider_status(container: ContainerDep) -> dict[str, bool]:
    return container.provider_status()
