# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose the top-level ``router`` that includes every feature router.
    This is the only place routers are registered; each route is mounted
    exactly once.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from tickerlens_api.adapters.routers.company_router import router as company_router
from tickerlens_api.adapters.routers.filings_router import router as filings_router
from tickerlens_api.adapters.routers.financials_router import router as financials_router
from tickerlens_api.adapters.routers.health_router import router as health_router
from tickerlens_api.adapters.routers.metrics_router import router as metrics_router
from tickerlens_api.adapters.routers.news_router import router as news_router
from tickerlens_api.adapters.routers.prices_router import router as prices_router

router = APIRouter()

# /health and /healthz.
router.include_router(health_router, tags=["Health"])

# /v1/financials/snapshot and /v1/financials/series.
router.include_router(financials_router)

# /v1/filings.
router.include_router(filings_router)

# /v1/prices/history and /v1/prices/series.
router.include_router(prices_router)

# /v1/company/profile.
router.include_router(company_router)

# /v1/news/by-symbol.
router.include_router(news_router)

# /metrics.
router.include_router(metrics_router)
