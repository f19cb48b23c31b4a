# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Company Router.

Summary:
    ``/v1/company/profile`` returns descriptive company fields merged across
    market-data providers, with per-field provenance.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, status

from tickerlens_api.adapters.presenters.financials_presenter import present_profile
from tickerlens_api.adapters.routers.base_router import BaseRouter
from tickerlens_api.adapters.schemas.http.financials import CompanyProfileHTTP
from tickerlens_api.application.use_cases.company.get_company_profile import (
    GetCompanyProfileUseCase,
)
from tickerlens_api.dependencies.financials import get_profile_use_case

router = BaseRouter(resource="company")


@router.get(
    "/profile",
    response_model=CompanyProfileHTTP,
    status_code=status.HTTP_200_OK,
    summary="Get the company profile for one symbol",
)
async def get_company_profile(
    uc: Annotated[GetCompanyProfileUseCase, Depends(get_profile_use_case)],
    symbol: Annotated[str | None, Query(examples=["AAPL"])] = None,
) -> CompanyProfileHTTP:
    profile = await uc.execute(symbol or "")
    return present_profile(profile)
