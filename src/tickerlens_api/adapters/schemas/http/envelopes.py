# src/tickerlens_api/adapters/schemas/http/envelopes.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""HTTP Error Envelope (Adapters Layer).

Purpose:
    Flat, transport-facing error body shared by every endpoint:

        {"error": "NOT_FOUND", "message": "...", "http_status": 404,
         "details": {...}, "trace_id": "..."}

    Error codes are UPPER_SNAKE_CASE, stable across releases, and testable.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["ErrorEnvelope"]


class ErrorEnvelope(BaseModel):
    """Flat error body."""

    model_config = ConfigDict(
        title="ErrorEnvelope",
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "error": "NOT_FOUND",
                    "message": "No filer found for symbol ZZZZ.",
                    "http_status": 404,
                    "details": {"symbol": "ZZZZ"},
                    "trace_id": "req-123",
                }
            ]
        },
    )

    error: str = Field(..., description="Stable machine-readable error code.")
    message: str = Field(..., description="Human-readable message (safe for clients).")
    http_status: int = Field(..., description="Associated HTTP status.")
    details: dict[str, Any] | None = Field(default=None, description="Optional diagnostics.")
    trace_id: str | None = Field(default=None, description="Request correlation identifier.")
