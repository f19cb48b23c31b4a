# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""
Financial aggregation domain exceptions.

Purpose:
    Error taxonomy shared by identity resolution, fact/series normalization,
    snapshot aggregation, price history and filing index building.

Layer:
    domain

Notes:
    - ``InvalidInput`` is always a caller error.
    - ``IdentityNotFound`` is a legitimate empty result. Only endpoints that
      cannot produce anything without an identity surface it.
    - ``UpstreamUnavailable`` and its refinements are raised by provider
      clients. Use cases recover from them locally by falling back or by
      nulling the affected fields.
    - ``AggregationFailure`` wraps unexpected internal faults. Its message is
      redacted before it reaches the caller.
"""

from __future__ import annotations

from tickerlens_api.domain.exceptions.base import DomainError


class InvalidInput(DomainError):
    """Raised when a symbol or query parameter is missing or malformed."""

    code = "INVALID_INPUT"
    http_status = 400


class IdentityNotFound(DomainError):
    """Raised when a ticker symbol cannot be mapped to a filer identifier."""

    code = "NOT_FOUND"
    http_status = 404


class UpstreamUnavailable(DomainError):
    """Raised when an upstream provider call failed (after retries, if any)."""

    code = "UPSTREAM_UNAVAILABLE"
    http_status = 503
    retryable: bool = True


class UpstreamNotConfigured(UpstreamUnavailable):
    """Raised when a provider has no access key configured."""

    code = "UPSTREAM_NOT_CONFIGURED"
    retryable = False


class UpstreamNotFound(UpstreamUnavailable):
    """Raised when a provider answers 404 for the requested resource."""

    code = "UPSTREAM_NOT_FOUND"
    retryable = False


class UpstreamRejected(UpstreamUnavailable):
    """Raised when a provider rejects a request with a non-retryable 4xx."""

    code = "UPSTREAM_REJECTED"
    retryable = False


class UpstreamPayloadError(UpstreamUnavailable):
    """Raised when a provider response is not JSON or has an unexpected shape."""

    code = "UPSTREAM_PAYLOAD_ERROR"
    retryable = False


class AggregationFailure(DomainError):
    """Raised when assembling a result fails for an unexpected internal reason."""

    code = "AGGREGATION_FAILURE"
    http_status = 500
