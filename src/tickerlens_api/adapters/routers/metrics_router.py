# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

Upstream and fallback collectors are created lazily by the code that uses
them; this router touches the accessors first so every family shows up on
a cold scrape.

Layer:
    adapters/routers
"""

from __future__ import annotations

from contextlib import suppress

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from tickerlens_api.infrastructure.observability.metrics import ensure_registered

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_scrape() -> Response:
    """Expose Prometheus metrics in the text exposition format."""
    with suppress(Exception):
        ensure_registered()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
