# src/tickerlens_api/infrastructure/observability/metrics.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Prometheus metrics for upstream providers, caches and fallback chains.

Exports
-------
Collectors (names are part of the public contract and must remain stable):

* ``tickerlens_upstream_latency_seconds`` (Histogram)
* ``tickerlens_upstream_errors_total`` (Counter)
* ``tickerlens_upstream_http_status_total`` (Counter)
* ``tickerlens_upstream_retries_total`` (Counter)
* ``tickerlens_upstream_breaker_events_total`` (Counter)
* ``tickerlens_upstream_response_bytes`` (Histogram)
* ``tickerlens_provider_limiter_wait_seconds`` (Histogram)
* ``tickerlens_fallback_events_total`` (Counter)
* ``tickerlens_cache_operations_total`` (Counter)

Design
------
Collectors are created lazily against the *current* default registry
(:data:`prometheus_client.REGISTRY`). If a collector with the same name is
already registered it is reused, so module re-imports and tests that swap the
registry never trip ``Duplicated timeseries`` errors.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import suppress
from typing import TypeVar

import prometheus_client as prom
from prometheus_client import Counter, Histogram
from prometheus_client.registry import CollectorRegistry

_C = TypeVar("_C", Counter, Histogram)


def _get_or_create(
    kind: type[_C],
    name: str,
    doc: str,
    labelnames: Sequence[str] = (),
) -> _C:
    """Return a collector of ``kind`` bound to the current default registry.

    Args:
        kind: :class:`Counter` or :class:`Histogram`.
        name: Metric name.
        doc: Human-readable metric description.
        labelnames: Label names.

    Returns:
        The existing collector with that name, or a newly registered one.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})  # internal but stable
    existing = mapping.get(name)
    if isinstance(existing, kind):
        return existing
    try:
        return kind(name, doc, tuple(labelnames), registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            again = getattr(registry, "_names_to_collectors", {}).get(name)
            if isinstance(again, kind):
                return again
        raise


def get_upstream_latency_seconds() -> Histogram:
    """Return the upstream call latency histogram."""
    return _get_or_create(
        Histogram,
        "tickerlens_upstream_latency_seconds",
        "Latency of upstream provider calls including retries (seconds).",
        ("provider", "endpoint", "outcome"),
    )


def get_upstream_errors_total() -> Counter:
    """Return the upstream error counter."""
    return _get_or_create(
        Counter,
        "tickerlens_upstream_errors_total",
        "Upstream provider calls that ended in an error.",
        ("provider", "endpoint", "reason"),
    )


def get_upstream_http_status_total() -> Counter:
    """Return the upstream HTTP status counter."""
    return _get_or_create(
        Counter,
        "tickerlens_upstream_http_status_total",
        "HTTP status codes returned by upstream providers.",
        ("provider", "endpoint", "status_code"),
    )


def get_upstream_retries_total() -> Counter:
    """Return the upstream retry counter."""
    return _get_or_create(
        Counter,
        "tickerlens_upstream_retries_total",
        "Retries attempted against upstream providers.",
        ("provider", "endpoint", "reason"),
    )


def get_upstream_breaker_events_total() -> Counter:
    """Return the circuit-breaker rejection counter."""
    return _get_or_create(
        Counter,
        "tickerlens_upstream_breaker_events_total",
        "Calls rejected by a provider circuit breaker.",
        ("provider", "endpoint", "state"),
    )


def get_upstream_response_bytes() -> Histogram:
    """Return the upstream response-size histogram (bytes)."""
    return _get_or_create(
        Histogram,
        "tickerlens_upstream_response_bytes",
        "Response payload size from upstream providers (bytes).",
        ("provider", "endpoint"),
    )


def get_provider_limiter_wait_seconds() -> Histogram:
    """Return the limiter wait-time histogram."""
    return _get_or_create(
        Histogram,
        "tickerlens_provider_limiter_wait_seconds",
        "Time spent waiting for a provider concurrency slot or rate token (seconds).",
        ("provider",),
    )


def get_fallback_events_total() -> Counter:
    """Return the fallback-chain outcome counter."""
    return _get_or_create(
        Counter,
        "tickerlens_fallback_events_total",
        "Outcomes of candidates tried by provider fallback chains.",
        ("chain", "source", "outcome"),
    )


def get_cache_operations_total() -> Counter:
    """Return the cache operation counter."""
    return _get_or_create(
        Counter,
        "tickerlens_cache_operations_total",
        "Cache operations by backend, operation and hit/miss.",
        ("backend", "operation", "hit"),
    )


def record_fallback(chain: str, source: str, outcome: str) -> None:
    """Increment the fallback counter; never raises."""
    with suppress(Exception):
        get_fallback_events_total().labels(chain=chain, source=source, outcome=outcome).inc()


def record_cache_operation(backend: str, operation: str, *, hit: bool | None = None) -> None:
    """Increment the cache counter; never raises."""
    label = "n/a" if hit is None else ("true" if hit else "false")
    with suppress(Exception):
        get_cache_operations_total().labels(backend=backend, operation=operation, hit=label).inc()


def ensure_registered() -> None:
    """Create every collector so each family appears on a cold scrape."""
    for getter in (
        get_upstream_latency_seconds,
        get_upstream_errors_total,
        get_upstream_http_status_total,
        get_upstream_retries_total,
        get_upstream_breaker_events_total,
        get_upstream_response_bytes,
        get_provider_limiter_wait_seconds,
        get_fallback_events_total,
        get_cache_operations_total,
    ):
        getter()
