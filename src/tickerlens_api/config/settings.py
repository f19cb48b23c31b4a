# src/tickerlens_api/config/settings.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""TickerLens Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated process-level configuration. Provider-specific knobs live
    next to each provider client (``EdgarSettings``, ``FmpSettings``,
    ``PolygonSettings``); this module owns everything else.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown keys.
    - Explicit `validation_alias` per environment variable.
    - Singleton accessor `get_settings()` with LRU cache.
    - Safe, structured logging (no secrets).
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed application configuration for TickerLens."""

    # ---------------------------
    # Core environment
    # ---------------------------
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )
    log_level: str | None = Field(
        default=None,
        description="Override log level (e.g., 'DEBUG', 'INFO').",
        validation_alias="LOG_LEVEL",
    )

    # ---------------------------
    # Service identity / docs
    # ---------------------------
    service_name: str = Field(
        default="tickerlens-api",
        description="Logical service name for logging.",
        validation_alias="SERVICE_NAME",
    )
    service_version: str | None = Field(
        default=None,
        description="Service version reported in the OpenAPI document.",
        validation_alias="SERVICE_VERSION",
    )
    docs_url: str | None = Field(
        default="/docs",
        description="Swagger UI docs URL. Set to None to disable interactive docs.",
        validation_alias="DOCS_URL",
    )
    openapi_url: str | None = Field(
        default="/openapi.json",
        description="OpenAPI JSON schema URL. Set to None to disable OpenAPI exposure.",
        validation_alias="OPENAPI_URL",
    )

    # Raw env for CORS; the parsed list is computed in a model validator.
    cors_allow_origins_raw: str | None = Field(
        default=None,
        description="Raw env for allowed CORS origins (comma-separated).",
        validation_alias="ALLOWED_ORIGINS",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins. Derived from ALLOWED_ORIGINS.",
    )

    # ---------------------------
    # Caching
    # ---------------------------
    cache_backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Backend for provider document caching.",
        validation_alias="CACHE_BACKEND",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL; required when CACHE_BACKEND=redis.",
        validation_alias="REDIS_URL",
    )
    redis_socket_timeout_s: float = Field(
        default=3.0,
        ge=0.1,
        le=60.0,
        description="Socket timeout in seconds for Redis commands.",
        validation_alias="REDIS_SOCKET_TIMEOUT_S",
    )
    facts_cache_ttl_s: int = Field(
        default=300,
        ge=0,
        le=24 * 60 * 60,
        description="TTL for structured-facts documents. 0 disables caching.",
        validation_alias="FACTS_CACHE_TTL_S",
    )
    submissions_cache_ttl_s: int = Field(
        default=900,
        ge=0,
        le=24 * 60 * 60,
        description="TTL for filing history documents. 0 disables caching.",
        validation_alias="SUBMISSIONS_CACHE_TTL_S",
    )
    identity_table_ttl_s: int | None = Field(
        default=None,
        ge=1,
        description=(
            "Refresh interval for the ticker reference table. Unset keeps the "
            "table for the process lifetime."
        ),
        validation_alias="IDENTITY_TABLE_TTL_S",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def _compute_cors_and_cache(self) -> Settings:
        """Compute the CORS list and validate the cache backend.

        Raises:
            ValueError: If CORS or cache invariants are violated.
        """
        raw = (self.cors_allow_origins_raw or "").strip()
        entries = [e.strip() for e in raw.split(",") if e.strip()] if raw else []
        if any(e == "*" for e in entries) and self.environment not in (
            Environment.DEVELOPMENT,
            Environment.TEST,
        ):
            raise ValueError(
                "'*' CORS origin is only allowed in development/test environments.",
            )
        self.cors_allow_origins = entries

        if self.cache_backend == "redis" and not self.redis_url:
            raise ValueError("CACHE_BACKEND=redis requires REDIS_URL.")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
        logger.info(
            "Settings initialized",
            extra={
                "environment": settings.environment.value,
                "cors_count": len(settings.cors_allow_origins),
                "cors_has_wildcard": any(o == "*" for o in settings.cors_allow_origins),
                "cache": {
                    "backend": settings.cache_backend,
                    "redis_url_set": bool(settings.redis_url),
                    "facts_ttl_s": settings.facts_cache_ttl_s,
                    "submissions_ttl_s": settings.submissions_cache_ttl_s,
                    "identity_ttl_s": settings.identity_table_ttl_s,
                },
                "docs": {
                    "docs_url": settings.docs_url,
                    "openapi_url": settings.openapi_url,
                },
            },
        )
        return settings
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
