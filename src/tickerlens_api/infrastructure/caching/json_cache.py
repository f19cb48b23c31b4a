# src/tickerlens_api/infrastructure/caching/json_cache.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""JSON Cache (Redis-backed) and read-through helper.

Synopsis:
    Implements the application CachePort Protocol on top of the shared Redis
    client provided by ``infrastructure/caching/redis_client.py``, and the
    generic read-through helper the use cases wrap provider documents with.

Design:
    * Uses the global Redis client via ``get_redis_client()``.
    * Pure JSON (utf-8) serialization; no pickle.
    * Key policy: the namespace owns ``tickerlens:{vertical}:v1``; callers
      pass the resource-specific tail, e.g. ``companyfacts:0000320193``.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from tickerlens_api.application.interfaces.cache_port import CachePort
from tickerlens_api.infrastructure.caching.redis_client import get_redis_client
from tickerlens_api.infrastructure.logging.logger import get_json_logger
from tickerlens_api.infrastructure.observability.metrics import record_cache_operation

logger = get_json_logger(__name__)

__all__ = [
    "RedisJsonCache",
    "make_key",
    "read_through_json",
]


def make_key(*segments: str) -> str:
    """Build a resource tail key from simple segments joined with ``:``."""
    return ":".join(str(seg).strip(":") for seg in segments if seg != "")


async def read_through_json(
    cache: CachePort,
    key: str,
    *,
    ttl: int,
    loader: Callable[[], Awaitable[Mapping[str, Any] | None]],
) -> Mapping[str, Any] | None:
    """Generic read-through helper.

    With ``ttl <= 0`` the cache is bypassed entirely and ``loader`` runs on
    every call. A failing cache backend (Redis down, client not initialized)
    is logged and treated as a miss; the document still comes from ``loader``.

    Args:
        cache: CachePort implementation.
        key: Cache key (tail segment for namespaced caches).
        ttl: Time-to-live for new entries.
        loader: Async callable that fetches the value on a cache miss.

    Returns:
        The mapping returned from cache or loader, or ``None`` if loader
        returns ``None``.
    """
    if ttl <= 0:
        return await loader()

    try:
        cached = await cache.get_json(key)
    except Exception as exc:
        _log_backend_failure("get_json", key, exc)
        cached = None
    if cached is not None:
        return cached

    value = await loader()
    if value is not None:
        try:
            await cache.set_json(key, value, ttl=ttl)
        except Exception as exc:
            _log_backend_failure("set_json", key, exc)
    return value


def _log_backend_failure(op: str, key: str, exc: Exception) -> None:
    logger.warning(
        "cache.backend_error",
        extra={"op": op, "key": key, "error": type(exc).__name__, "detail": str(exc)},
    )


class RedisJsonCache(CachePort):
    """Redis-backed implementation of the CachePort Protocol."""

    def __init__(self, *, namespace: str = "tickerlens:financials:v1") -> None:
        """Initialize the cache adapter.

        Args:
            namespace: Prefix applied to all keys to avoid collisions.
        """
        self._ns = namespace

    def _k(self, key: str) -> str:
        key = key.lstrip(":")
        return f"{self._ns}:{key}"

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        """Get a JSON-serialized value by key.

        Returns:
            Deserialized mapping if present, else None.
        """
        redis = get_redis_client()
        raw = await redis.get(self._k(key))
        if raw is None:
            record_cache_operation("redis", "get_json", hit=False)
            return None
        record_cache_operation("redis", "get_json", hit=True)
        value = json.loads(raw)
        return value if isinstance(value, Mapping) else None

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        """Set a JSON-serialized value with TTL (``SET EX``)."""
        if ttl <= 0:
            return
        redis = get_redis_client()
        await redis.set(self._k(key), json.dumps(value), ex=ttl)
        record_cache_operation("redis", "set_json")
