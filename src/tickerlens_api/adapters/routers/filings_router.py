# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Filings Router.

Summary:
    ``/v1/filings`` lists an issuer's recent regulatory filings, newest
    first, optionally filtered by form type. An unknown symbol is not an
    error: the body carries ``filerId: null`` and no filings.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, status

from tickerlens_api.adapters.presenters.financials_presenter import present_filings
from tickerlens_api.adapters.routers.base_router import BaseRouter
from tickerlens_api.adapters.schemas.http.financials import FilingIndexHTTP
from tickerlens_api.application.use_cases.filings.list_filings import ListFilingsUseCase
from tickerlens_api.dependencies.financials import get_filings_use_case

router = BaseRouter(resource="filings")


@router.get(
    "",
    response_model=FilingIndexHTTP,
    status_code=status.HTTP_200_OK,
    summary="List recent filings for one symbol",
)
async def list_filings(
    uc: Annotated[ListFilingsUseCase, Depends(get_filings_use_case)],
    symbol: Annotated[str | None, Query(examples=["AAPL"])] = None,
    forms: Annotated[
        str | None, Query(description="CSV of form types, e.g. 10-K,10-Q.")
    ] = None,
    limit: Annotated[
        int | None, Query(description="Maximum filings (default 20, clamped to 1..100).")
    ] = None,
    latest_per_quarter: Annotated[
        bool,
        Query(
            alias="latestPerQuarter",
            description="Keep one quarterly report per quarter, the latest filed.",
        ),
    ] = False,
) -> FilingIndexHTTP:
    """Return the filing index for ``symbol``."""
    index = await uc.execute(
        symbol or "", forms=forms, limit=limit, latest_per_quarter=latest_per_quarter
    )
    return present_filings(index)
