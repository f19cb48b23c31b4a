# src/tickerlens_api/main.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""TickerLens ASGI application.

``create_app`` assembles the service: request-id and access-log middleware,
optional CORS, the error-envelope handlers, and the single router
aggregator. The lifespan delegates to :func:`bootstrap`, which owns the
shared httpx client, the optional Redis connection and the service
container.

Run locally with ``uvicorn tickerlens_api.main:create_app --factory``.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from tickerlens_api import __version__
from tickerlens_api.adapters.routers.api_router import router as api_router
from tickerlens_api.config.settings import Settings, get_settings
from tickerlens_api.dependencies.core.bootstrap import bootstrap
from tickerlens_api.domain.exceptions.base import DomainError
from tickerlens_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from tickerlens_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from tickerlens_api.infrastructure.middleware.access_log import AccessLogMiddleware
from tickerlens_api.infrastructure.middleware.request_id import RequestIdMiddleware

configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``get__v1_financials_snapshot``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and teardown shared infrastructure via the core bootstrap."""
    async with bootstrap(app) as state:
        app.state.settings = state.settings
        app.state.http_client = state.http_client
        yield


def _attach_middlewares(app: FastAPI, settings: Settings) -> None:
    """Attach core middleware.

    The last middleware added runs first, so the request id is assigned
    before the access log reads it back from ``request.state``.
    """
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials="*" not in settings.cors_allow_origins,
            allow_methods=["GET"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )


def _attach_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings: Settings = get_settings()
    service_version = settings.service_version or __version__

    app = FastAPI(
        title="TickerLens API",
        version=service_version,
        description="Financial data aggregation: snapshots, series, filings and prices.",
        lifespan=runtime_lifespan,
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
        generate_unique_id_function=_stable_operation_id,
    )

    _attach_exception_handlers(app)
    _attach_middlewares(app, settings)
    app.include_router(api_router)

    logger.info(
        "app.created",
        extra={
            "service": settings.service_name,
            "env": settings.environment.value,
            "version": service_version,
        },
    )
    return app


app: FastAPI = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "tickerlens_api.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8080")),
        reload=False,
    )
