# src/tickerlens_api/dependencies/core/bootstrap.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (Redis, HTTP, provider clients).

This module owns the lifecycle of shared infrastructure used by the FastAPI
app. Configuration is read from Settings and all heavy lifting is delegated
to the infrastructure modules and :func:`build_container`.

The single public surface is :func:`bootstrap`, an async context manager
that yields a state object with the resolved Settings, the shared HTTP
client and the service container.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from fastapi import FastAPI

from tickerlens_api.config.settings import Settings, get_settings
from tickerlens_api.dependencies.financials import ServiceContainer, build_container
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    http_client: httpx.AsyncClient
    container: ServiceContainer


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and teardown shared infrastructure.

    Responsibilities:
        * Load application settings.
        * Initialize the Redis client when ``CACHE_BACKEND=redis``.
        * Create one shared HTTPX AsyncClient for every provider.
        * Build the service container and publish it on ``app.state``.
        * Ensure all of the above are shut down on exit, even on error.

    Args:
        app: FastAPI application instance.

    Yields:
        BootstrapState: Resolved settings, shared HTTP client and container.
    """
    settings: Settings = get_settings()
    logger.info("bootstrap.start", extra={"cache_backend": settings.cache_backend})

    # Imported here so tests can monkeypatch the module functions.
    import tickerlens_api.infrastructure.caching.redis_client as redis_client

    if settings.cache_backend == "redis":
        redis_client.init_redis(settings)

    http_client = httpx.AsyncClient(follow_redirects=True)
    container = build_container(settings, http=http_client)
    app.state.container = container

    state = BootstrapState(settings=settings, http_client=http_client, container=container)

    try:
        yield state
    finally:
        try:
            await http_client.aclose()
        except Exception:
            logger.exception("bootstrap.http_client_close_failed")

        if settings.cache_backend == "redis":
            try:
                await redis_client.close_redis()
            except Exception:
                logger.exception("bootstrap.redis_close_failed")

        logger.info("bootstrap.stop")
