# src/tickerlens_api/infrastructure/caching/redis_client.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Process-wide async Redis client backing ``CACHE_BACKEND=redis``.

The bootstrap lifespan owns the lifecycle: ``init_redis`` on startup,
``close_redis`` on shutdown. Connection URLs can embed credentials, so only
the host part is ever logged.
"""

from __future__ import annotations

from contextlib import suppress
from typing import Any, Protocol, cast, runtime_checkable
from urllib.parse import urlsplit

import redis.asyncio as aioredis

from tickerlens_api.config.settings import Settings
from tickerlens_api.infrastructure.logging.logger import get_json_logger

__all__ = [
    "RedisClient",
    "init_redis",
    "close_redis",
    "get_redis_client",
]

logger = get_json_logger(__name__)


@runtime_checkable
class RedisClient(Protocol):
    """The three commands the document cache needs."""

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any, *, ex: int | None = None) -> Any: ...

    async def close(self) -> None: ...


_client: RedisClient | None = None


def _create_aioredis_client(url: str, settings: Settings) -> RedisClient:
    timeout = settings.redis_socket_timeout_s
    client: Any = aioredis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        health_check_interval=30,
    )
    return cast(RedisClient, client)


def init_redis(settings: Settings) -> None:
    """Create the shared client once; later calls are no-ops.

    Raises:
        RuntimeError: If ``REDIS_URL`` is not configured.
    """
    global _client
    if _client is not None:
        return
    if not settings.redis_url:
        raise RuntimeError("REDIS_URL is required for the redis cache backend.")
    _client = _create_aioredis_client(settings.redis_url, settings)
    logger.info("redis.initialized", extra={"host": urlsplit(settings.redis_url).hostname})


async def close_redis() -> None:
    """Close and forget the shared client."""
    global _client
    client, _client = _client, None
    if client is None:
        return
    # The pool may already be torn down with the event loop.
    with suppress(RuntimeError):
        await client.close()
    logger.info("redis.closed")


def get_redis_client() -> RedisClient:
    """Return the shared client.

    Raises:
        RuntimeError: If ``init_redis`` has not run.
    """
    if _client is None:
        raise RuntimeError("Redis client is not initialized; is CACHE_BACKEND=redis?")
    return _client
