# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Resilient JSON transport shared by every upstream provider client.

Each provider client subclasses :class:`ResilientJsonClient` and gets:

* Async HTTP (httpx) with a bounded per-request timeout.
* Linear, bounded retries of retryable failures only.
* A circuit breaker (CLOSED -> OPEN -> HALF-OPEN).
* A per-provider limiter shared by all in-flight requests.
* Deterministic mapping to ``UpstreamUnavailable`` and its refinements.
* Prometheus metrics labelled by provider and logical endpoint.

Notes:
    * httpx types never cross this boundary; callers only see domain errors.
    * Query parameters (which may carry access keys) are never logged nor
      copied into error details.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from contextlib import suppress
from typing import Any, Final

import httpx

from tickerlens_api.domain.exceptions.financials import (
    UpstreamNotFound,
    UpstreamPayloadError,
    UpstreamRejected,
    UpstreamUnavailable,
)
from tickerlens_api.infrastructure.logging.logger import (
    get_json_logger,
    get_request_id,
    get_trace_id,
)
from tickerlens_api.infrastructure.observability.metrics import (
    get_upstream_breaker_events_total,
    get_upstream_errors_total,
    get_upstream_http_status_total,
    get_upstream_latency_seconds,
    get_upstream_response_bytes,
    get_upstream_retries_total,
)
from tickerlens_api.infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitOpenError,
)
from tickerlens_api.infrastructure.resilience.rate_limiter import ProviderLimiter
from tickerlens_api.infrastructure.resilience.retry import RetryPolicy, retry_async

logger = get_json_logger(__name__)

DEFAULT_TIMEOUT_S: Final[float] = 8.0
DEFAULT_MAX_ATTEMPTS: Final[int] = 3
DEFAULT_BACKOFF_S: Final[float] = 0.25
DEFAULT_MAX_BACKOFF_S: Final[float] = 2.0
DEFAULT_MAX_CONCURRENCY: Final[int] = 8
DEFAULT_RATE_LIMIT_RPS: Final[float] = 10.0


class ResilientJsonClient:
    """Base class for instrumented JSON-over-HTTP provider clients."""

    provider: str = "upstream"

    def __init__(
        self,
        *,
        base_url: str,
        http: httpx.AsyncClient | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        retry_policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
        limiter: ProviderLimiter | None = None,
        default_headers: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Provider base URL; paths are appended to it.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            timeout_s: Per-request timeout in seconds.
            retry_policy: Retry configuration; linear with three attempts if omitted.
            breaker: Circuit breaker; created if omitted.
            limiter: Per-provider limiter; created if omitted.
            default_headers: Headers sent with every request of this provider.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout_s)
        self._headers: dict[str, str] = {"Accept": "application/json"}
        self._headers.update(default_headers or {})

        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=self._timeout)

        self._retry = retry_policy or RetryPolicy.linear_attempts(
            DEFAULT_MAX_ATTEMPTS, base=DEFAULT_BACKOFF_S, cap=DEFAULT_MAX_BACKOFF_S
        )
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=5,
            recovery_timeout_s=30.0,
            half_open_max_calls=1,
        )
        self._limiter = limiter or ProviderLimiter(
            name=self.provider,
            max_concurrency=DEFAULT_MAX_CONCURRENCY,
            rate_per_s=DEFAULT_RATE_LIMIT_RPS,
        )

        # Metrics handles.
        self._latency = get_upstream_latency_seconds()
        self._errors = get_upstream_errors_total()
        self._status_total = get_upstream_http_status_total()
        self._resp_bytes = get_upstream_response_bytes()
        self._retries_total = get_upstream_retries_total()
        self._breaker_events_total = get_upstream_breaker_events_total()

    @property
    def breaker(self) -> CircuitBreaker:
        """Return the breaker guarding this provider."""
        return self._breaker

    @property
    def limiter(self) -> ProviderLimiter:
        """Return the limiter shared by every call to this provider."""
        return self._limiter

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Request pipeline
    # ------------------------------------------------------------------ #

    async def _get_json(
        self,
        path: str,
        *,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        base_url: str | None = None,
    ) -> Mapping[str, Any]:
        """GET ``path`` and return a JSON object.

        Raises:
            UpstreamNotFound: On 404.
            UpstreamRejected: On non-retryable 4xx.
            UpstreamUnavailable: On 429/5xx, transport failures or an open breaker.
            UpstreamPayloadError: On non-JSON or non-object payloads.
        """
        payload = await self._get_payload(path, endpoint=endpoint, params=params, base_url=base_url)
        if not isinstance(payload, Mapping):
            self._count_error(endpoint, "UpstreamPayloadError")
            raise UpstreamPayloadError(
                f"{self.provider} JSON response must be an object.",
                details={"provider": self.provider, "endpoint": endpoint, "path": path},
            )
        return payload

    async def _get_json_list(
        self,
        path: str,
        *,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[Any]:
        """GET ``path`` and return a JSON array.

        Raises:
            UpstreamPayloadError: On non-JSON or non-array payloads.
        """
        payload = await self._get_payload(path, endpoint=endpoint, params=params)
        if not isinstance(payload, list):
            self._count_error(endpoint, "UpstreamPayloadError")
            raise UpstreamPayloadError(
                f"{self.provider} JSON response must be an array.",
                details={"provider": self.provider, "endpoint": endpoint, "path": path},
            )
        return payload

    async def _get_payload(
        self,
        path: str,
        *,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        base_url: str | None = None,
    ) -> Any:
        url = f"{(base_url or self._base_url).rstrip('/')}{path}"

        headers = dict(self._headers)
        request_id = get_request_id()
        trace_id = get_trace_id()
        if request_id:
            headers.setdefault("X-Request-ID", request_id)
        if trace_id:
            headers.setdefault("x-trace-id", trace_id)

        async def _call() -> Any:
            return await self._perform_request(
                url=url, headers=headers, params=params, endpoint=endpoint, path=path
            )

        def _retry_predicate(exc: Exception) -> bool:
            retryable = isinstance(exc, UpstreamUnavailable) and exc.retryable
            if retryable:
                with suppress(Exception):
                    self._retries_total.labels(
                        self.provider, endpoint, getattr(exc, "code", type(exc).__name__)
                    ).inc()
            return retryable

        def _retry_after(exc: Exception) -> float | None:
            hint = getattr(exc, "details", {}).get("retry_after_s")
            return float(hint) if hint is not None else None

        start = time.perf_counter()
        error_reason: str | None = None
        try:
            return await retry_async(
                _call,
                policy=self._retry,
                retry_on=_retry_predicate,
                delay_hint=_retry_after,
            )
        except UpstreamUnavailable as exc:
            error_reason = type(exc).__name__
            logger.warning(
                "upstream.request_failed",
                extra={
                    "provider": self.provider,
                    "endpoint": endpoint,
                    "reason": exc.code,
                    "status": exc.details.get("status"),
                },
            )
            raise
        finally:
            elapsed = time.perf_counter() - start
            outcome = "error" if error_reason else "success"
            with suppress(Exception):
                self._latency.labels(
                    provider=self.provider, endpoint=endpoint, outcome=outcome
                ).observe(elapsed)
            if error_reason:
                self._count_error(endpoint, error_reason)

    async def _perform_request(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        params: Mapping[str, Any] | None,
        endpoint: str,
        path: str,
    ) -> Any:
        """Execute a single GET under limiter and breaker control.

        The response is decoded inside the breaker so 429 and 5xx answers count
        against the provider; 404s and other rejections do not.
        """
        try:
            async with self._limiter.slot(), self._breaker.guard(
                self.provider, trips=_trips_breaker
            ):
                response = await self._client.get(
                    url,
                    headers=headers,
                    params=dict(params) if params else None,
                    timeout=self._timeout,
                )
                return self._handle_response(response=response, endpoint=endpoint, path=path)
        except CircuitOpenError as cb_exc:
            with suppress(Exception):
                state = "open" if str(cb_exc) == "circuit_open" else "half_open"
                self._breaker_events_total.labels(self.provider, endpoint, state).inc()
            raise UpstreamUnavailable(
                f"{self.provider} circuit breaker is open.",
                details={"provider": self.provider, "endpoint": endpoint, "path": path},
            ) from cb_exc
        except httpx.RequestError as exc:
            raise UpstreamUnavailable(
                f"{self.provider} transport failure.",
                details={
                    "provider": self.provider,
                    "endpoint": endpoint,
                    "path": path,
                    "error": type(exc).__name__,
                },
            ) from exc

    def _handle_response(self, *, response: httpx.Response, endpoint: str, path: str) -> Any:
        """Map an HTTP response into a decoded JSON payload or domain error."""
        status = response.status_code
        with suppress(Exception):
            self._status_total.labels(self.provider, endpoint, str(status)).inc()

        details: dict[str, Any] = {
            "provider": self.provider,
            "endpoint": endpoint,
            "path": path,
            "status": status,
        }
        if status == 404:
            raise UpstreamNotFound(f"{self.provider} resource not found.", details=details)
        if status == 429:
            details["retry_after_s"] = self._parse_retry_after(response.headers.get("Retry-After"))
            raise UpstreamUnavailable(f"{self.provider} rate limited.", details=details)
        if 400 <= status < 500:
            raise UpstreamRejected(f"{self.provider} rejected the request.", details=details)
        if status >= 500:
            raise UpstreamUnavailable(f"{self.provider} upstream unavailable.", details=details)

        with suppress(Exception):
            length = response.headers.get("Content-Length")
            size = int(length) if length and length.isdigit() else len(response.content)
            self._resp_bytes.labels(self.provider, endpoint).observe(float(size))

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamPayloadError(
                f"{self.provider} response was not valid JSON.", details=details
            ) from exc

    def _count_error(self, endpoint: str, reason: str) -> None:
        with suppress(Exception):
            self._errors.labels(provider=self.provider, endpoint=endpoint, reason=reason).inc()

    @staticmethod
    def _parse_retry_after(val: str | None) -> float | None:
        """Parse HTTP Retry-After header (seconds form only)."""
        if not val:
            return None
        try:
            seconds = float(val)
        except (TypeError, ValueError):
            return None
        return max(0.0, seconds)


def _trips_breaker(exc: Exception) -> bool:
    """Transport failures and retryable upstream answers count as breaker failures."""
    if isinstance(exc, httpx.RequestError):
        return True
    return isinstance(exc, UpstreamUnavailable) and exc.retryable
