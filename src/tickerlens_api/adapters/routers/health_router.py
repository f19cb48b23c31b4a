# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    ``/healthz`` is plain liveness. ``/health`` additionally reports which
    upstream providers are configured; it performs no upstream I/O.
"""

from __future__ import annotations

import typing as t
from typing import Annotated

from fastapi import APIRouter, Depends

from tickerlens_api.adapters.schemas.http.base import BaseHTTPSchema
from tickerlens_api.adapters.schemas.http.financials import HealthHTTP
from tickerlens_api.dependencies.financials import get_provider_status

router = APIRouter()


class LivenessResponse(BaseHTTPSchema):
    """Liveness response indicating the process is running."""

    status: t.Literal["ok"] = "ok"


@router.get(
    "/healthz",
    response_model=LivenessResponse,
    summary="Liveness check",
    operation_id="health_liveness",
)
async def healthz() -> LivenessResponse:
    return LivenessResponse()


@router.get(
    "/health",
    response_model=HealthHTTP,
    summary="Liveness plus provider configuration",
    operation_id="health_providers",
)
async def health(
    providers: Annotated[dict[str, bool], Depends(get_provider_status)],
) -> HealthHTTP:
    """Return ``{status: "ok", providers: {edgar, fmp, polygon}}``."""
    return HealthHTTP(status="ok", providers=providers)
