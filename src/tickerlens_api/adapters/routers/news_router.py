# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
News Router.

Summary:
    ``/v1/news/by-symbol`` returns the latest headlines for a symbol
    (``limit`` defaults to 4, clamped to 1..10). Provider failures yield an
    empty list.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, status

from tickerlens_api.adapters.presenters.market_presenter import present_news
from tickerlens_api.adapters.routers.base_router import BaseRouter
from tickerlens_api.adapters.schemas.http.market import NewsFeedHTTP
from tickerlens_api.application.use_cases.news.get_news import GetNewsUseCase
from tickerlens_api.dependencies.financials import get_news_use_case

router = BaseRouter(resource="news")


@router.get(
    "/by-symbol",
    response_model=NewsFeedHTTP,
    status_code=status.HTTP_200_OK,
    summary="Get recent headlines for one symbol",
)
async def get_news_by_symbol(
    uc: Annotated[GetNewsUseCase, Depends(get_news_use_case)],
    symbol: Annotated[str | None, Query(examples=["AAPL"])] = None,
    limit: Annotated[int | None, Query(examples=[4])] = None,
) -> NewsFeedHTTP:
    feed = await uc.execute(symbol or "", limit=limit)
    return present_news(feed)
