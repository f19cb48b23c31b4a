# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Domain exceptions package."""

from __future__ import annotations

from tickerlens_api.domain.exceptions.base import DomainError
from tickerlens_api.domain.exceptions.financials import (
    AggregationFailure,
    IdentityNotFound,
    InvalidInput,
    UpstreamNotConfigured,
    UpstreamNotFound,
    UpstreamPayloadError,
    UpstreamRejected,
    UpstreamUnavailable,
)

__all__ = [
    "AggregationFailure",
    "DomainError",
    "IdentityNotFound",
    "InvalidInput",
    "UpstreamNotConfigured",
    "UpstreamNotFound",
    "UpstreamPayloadError",
    "UpstreamRejected",
    "UpstreamUnavailable",
]
