# src/tickerlens_api/infrastructure/middleware/request_id.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Request correlation middleware.

The ``X-Request-ID`` header is the one correlation id in TickerLens: it is
echoed on the response, used as ``trace_id`` in error envelopes, bound to
the logger context, and forwarded on every upstream provider call. Caller
values are kept only when they are short and made of header-safe
characters; anything else is replaced with a UUID4.
"""

from __future__ import annotations

import re
import uuid
from typing import Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from tickerlens_api.infrastructure.logging.logger import (
    clear_request_context,
    set_request_context,
)

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
MAX_REQUEST_ID_LENGTH: Final[int] = 128
_ALLOWED: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9\-_.:@]+")


def coerce_request_id(raw: str | None) -> str:
    """Return ``raw`` if it is a usable id, else a fresh UUID4 string."""
    if raw and len(raw) <= MAX_REQUEST_ID_LENGTH and _ALLOWED.fullmatch(raw):
        return raw
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id for the lifetime of one request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = coerce_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        request.state.trace_id = request_id
        set_request_context(request_id=request_id, trace_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
