# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Prices Router.

Summary:
    ``/v1/prices/history`` returns ascending price bars for a logical range
    (``1D``, ``1W``, ``1M``, ``6M``, ``1Y``, ``5Y``) and optional interval
    (``1m``, ``15m``, ``1h``, ``1d``; ``m1``, ``m15``, ``h1``, ``d1`` are accepted
    too). ``/v1/prices/series`` adds the filing, dividend and earnings events
    that fall inside the range window, each priced at the nearest close.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, status

from tickerlens_api.adapters.presenters.financials_presenter import present_price_history
from tickerlens_api.adapters.presenters.market_presenter import present_price_series
from tickerlens_api.adapters.routers.base_router import BaseRouter
from tickerlens_api.adapters.schemas.http.financials import PriceHistoryHTTP
from tickerlens_api.adapters.schemas.http.market import PriceSeriesHTTP
from tickerlens_api.application.use_cases.prices.get_price_history import (
    GetPriceHistoryUseCase,
)
from tickerlens_api.application.use_cases.prices.get_price_series import (
    GetPriceSeriesUseCase,
)
from tickerlens_api.dependencies.financials import (
    get_price_history_use_case,
    get_price_series_use_case,
)

router = BaseRouter(resource="prices")


@router.get(
    "/history",
    response_model=PriceHistoryHTTP,
    status_code=status.HTTP_200_OK,
    summary="Get price history for one symbol",
)
async def get_price_history(
    uc: Annotated[GetPriceHistoryUseCase, Depends(get_price_history_use_case)],
    symbol: Annotated[str | None, Query(examples=["AAPL"])] = None,
    range_: Annotated[str | None, Query(alias="range", examples=["1Y"])] = None,
    interval: Annotated[str | None, Query(examples=["1d"])] = None,
) -> PriceHistoryHTTP:
    """Return bars from the first provider that has data; empty when none does."""
    history = await uc.execute(symbol or "", range_=range_, interval=interval)
    return present_price_history(history)


@router.get(
    "/series",
    response_model=PriceSeriesHTTP,
    status_code=status.HTTP_200_OK,
    summary="Get a price series with filing, dividend and earnings events",
)
async def get_price_series(
    uc: Annotated[GetPriceSeriesUseCase, Depends(get_price_series_use_case)],
    symbol: Annotated[str | None, Query(examples=["AAPL"])] = None,
    range_: Annotated[str | None, Query(alias="range", examples=["6M"])] = None,
) -> PriceSeriesHTTP:
    """Return bars for the range plus the events inside its window."""
    series = await uc.execute(symbol or "", range_=range_)
    return present_price_series(series)
