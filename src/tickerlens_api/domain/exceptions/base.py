# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Root of the TickerLens error hierarchy.

Each subclass pins a wire ``code`` and an ``http_status``; the HTTP error
handlers read both straight off the exception, so raising the right subclass
is all a use case or gateway needs to do.
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all domain/application exceptions.

    Attributes:
        code: Stable machine-readable error code used in error envelopes.
        http_status: HTTP status the boundary maps this error to.
        message: Human-readable message (safe for clients).
        details: Optional machine-readable diagnostic payload.
    """

    code: str = "DOMAIN_ERROR"
    http_status: int = 500

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        # message only; details stay structured
        return self.message
