# src/tickerlens_api/infrastructure/middleware/access_log.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Access Log Middleware.

Summary:
    One structured ``http.access`` line per request. The ticker symbol is
    echoed because it is the main dimension operators slice on; other query
    values are reduced to their parameter names.

Fields:
    method, route (matched template, falls back to the raw path), status,
    duration_ms, symbol, params, request_id, outcome (``ok`` / ``client_error``
    / ``server_error`` / ``raised``).

Notes:
    Scrape and health-check paths are skipped so they do not drown the log.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any, Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from tickerlens_api.infrastructure.logging.logger import get_json_logger

_logger: logging.Logger = get_json_logger(__name__)

QUIET_PATHS: Final[frozenset[str]] = frozenset({"/metrics", "/healthz"})


def _outcome(status: int | None) -> str:
    if status is None:
        return "raised"
    if status >= 500:
        return "server_error"
    if status >= 400:
        return "client_error"
    return "ok"


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured access logging middleware."""

    def __init__(self, app: ASGIApp, *, quiet_paths: Iterable[str] = QUIET_PATHS) -> None:
        super().__init__(app)
        self._quiet = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._quiet:
            return await call_next(request)

        started = time.perf_counter()
        status: int | None = None
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            outcome = _outcome(status)
            record: dict[str, Any] = {
                "method": request.method,
                "route": _route_template(request),
                "status": status if status is not None else 500,
                "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
                "symbol": (request.query_params.get("symbol") or "").upper() or None,
                "params": sorted(k for k in request.query_params if k != "symbol"),
                "request_id": getattr(request.state, "request_id", None),
                "outcome": outcome,
            }
            level = logging.WARNING if outcome in ("server_error", "raised") else logging.INFO
            _logger.log(level, "http.access", extra=record)
