# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Polygon client settings (``POLYGON_`` prefix)."""

from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class PolygonSettings(BaseSettings):
    """Configuration for the Polygon HTTP client."""

    api_key: SecretStr | None = Field(
        default=None,
        description="Polygon access key, sent as the ``apiKey`` query parameter.",
        validation_alias=AliasChoices("POLYGON_API_KEY"),
    )
    base_url: str = Field(
        "https://api.polygon.io",
        validation_alias=AliasChoices("POLYGON_BASE_URL"),
    )
    timeout_s: float = Field(8.0, gt=0, le=60.0)
    max_attempts: int = Field(3, ge=1, le=10)
    backoff_s: float = Field(0.25, ge=0)
    max_concurrency: int = Field(8, ge=1, le=64)
    rate_limit_rps: float = Field(5.0, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="POLYGON_",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def configured(self) -> bool:
        """Return True when an access key is present."""
        return self.api_key is not None and bool(self.api_key.get_secret_value().strip())
