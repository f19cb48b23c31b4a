# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Financials Router.

Summary:
    ``/v1/financials/snapshot`` returns the flat point-in-time snapshot;
    ``/v1/financials/series`` returns the normalized per-period series bundle.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, status

from tickerlens_api.adapters.presenters.financials_presenter import (
    present_series,
    present_snapshot,
)
from tickerlens_api.adapters.routers.base_router import BaseRouter
from tickerlens_api.adapters.schemas.http.financials import (
    FinancialSeriesHTTP,
    FinancialSnapshotHTTP,
)
from tickerlens_api.application.use_cases.financials.get_financial_series import (
    GetFinancialSeriesUseCase,
)
from tickerlens_api.application.use_cases.financials.get_financial_snapshot import (
    GetFinancialSnapshotUseCase,
)
from tickerlens_api.dependencies.financials import get_series_use_case, get_snapshot_use_case

router = BaseRouter(resource="financials")


@router.get(
    "/snapshot",
    response_model=FinancialSnapshotHTTP,
    status_code=status.HTTP_200_OK,
    summary="Get a financial snapshot for one symbol",
)
async def get_snapshot(
    uc: Annotated[GetFinancialSnapshotUseCase, Depends(get_snapshot_use_case)],
    symbol: Annotated[str | None, Query(examples=["AAPL"])] = None,
) -> FinancialSnapshotHTTP:
    """Return market, fundamental and derived fields; every value is nullable."""
    snapshot = await uc.execute(symbol or "")
    return present_snapshot(snapshot)


@router.get(
    "/series",
    response_model=FinancialSeriesHTTP,
    status_code=status.HTTP_200_OK,
    summary="Get normalized financial time series for one symbol",
)
async def get_series(
    uc: Annotated[GetFinancialSeriesUseCase, Depends(get_series_use_case)],
    symbol: Annotated[str | None, Query(examples=["AAPL"])] = None,
    periods: Annotated[
        int | None, Query(description="Points per series, 1..40 (default 8).")
    ] = None,
) -> FinancialSeriesHTTP:
    """Return the newest ``periods`` points of each series, oldest first."""
    bundle = await uc.execute(symbol or "", periods=periods)
    return present_series(bundle)
