# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Financial Modeling Prep (FMP) client settings.

Values are sourced from environment variables prefixed with ``FMP_``. A
missing ``FMP_API_KEY`` is a valid state: the provider is simply skipped.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FmpSettings(BaseSettings):
    """Configuration for the FMP HTTP client."""

    api_key: SecretStr | None = Field(
        default=None,
        description="FMP access key, sent as the ``apikey`` query parameter.",
        validation_alias=AliasChoices("FMP_API_KEY"),
    )
    base_url: str = Field(
        "https://financialmodelingprep.com/api",
        description="FMP API root (versioned paths are appended).",
        validation_alias=AliasChoices("FMP_BASE_URL", "FMP_BASE"),
    )
    timeout_s: float = Field(8.0, gt=0, le=60.0)
    max_attempts: int = Field(3, ge=1, le=10)
    backoff_s: float = Field(0.25, ge=0)
    max_concurrency: int = Field(8, ge=1, le=64)
    rate_limit_rps: float = Field(5.0, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="FMP_",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def configured(self) -> bool:
        """Return True when an access key is present."""
        return self.api_key is not None and bool(self.api_key.get_secret_value().strip())
