# src/tickerlens_api/infrastructure/http/errors.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""HTTP error mapping.

Every non-2xx response body is a flat envelope::

    {"error": <code>, "message": <text>, "http_status": <int>,
     "details"?: {...}, "trace_id"?: <request id>}
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from tickerlens_api.domain.exceptions.base import DomainError
from tickerlens_api.domain.exceptions.financials import AggregationFailure
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def _trace_id(request: Request) -> str | None:
    state = getattr(request, "state", None)
    return getattr(state, "trace_id", None) or getattr(state, "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "error": code,
        "message": message,
        "http_status": http_status,
    }
    if details:
        body["details"] = details
    if trace_id is not None:
        body["trace_id"] = trace_id
    return body


async def handle_domain_error(request: Request, exc: Exception) -> Response:
    """Map a ``DomainError`` onto its declared status and code."""
    assert isinstance(exc, DomainError)
    if isinstance(exc, AggregationFailure):
        message = "Unable to assemble the requested resource."
        details = None
    else:
        message = exc.message or exc.code.replace("_", " ").capitalize()
        details = jsonable_encoder(exc.details) if exc.details else None
    if exc.http_status >= 500:
        logger.warning(
            "http.domain_error",
            extra={"code": exc.code, "status": exc.http_status, "path": request.url.path},
        )
    payload = error_envelope(
        code=exc.code,
        http_status=exc.http_status,
        message=message,
        details=details,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.http_status, content=payload)


async def handle_validation_error(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, RequestValidationError)
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_http_exception(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, HTTPException)
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception("http.unhandled_exception", extra={"path": request.url.path})
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)
