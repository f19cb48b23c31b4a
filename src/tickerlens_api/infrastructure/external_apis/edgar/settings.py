# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""EDGAR transport client settings.

Purpose:
    Pydantic-based configuration for the EDGAR HTTP client: base URLs, user
    agent, timeout, retry budget and per-process admission limits.

Layer:
    infrastructure

Notes:
    - Values are sourced from environment variables prefixed with ``EDGAR_``.
    - EDGAR requires no access key, so this provider is always configured.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EdgarSettings(BaseSettings):
    """Configuration for the EDGAR HTTP client.

    Environment variables (with ``model_config.env_prefix``):

    * ``EDGAR_BASE_URL``
    * ``EDGAR_WWW_BASE_URL``
    * ``EDGAR_USER_AGENT`` (or ``SEC_USER_AGENT``)
    * ``EDGAR_TIMEOUT_S``
    * ``EDGAR_MAX_ATTEMPTS``
    * ``EDGAR_BACKOFF_S``
    * ``EDGAR_MAX_CONCURRENCY``
    * ``EDGAR_RATE_LIMIT_RPS``
    """

    base_url: str = Field(
        "https://data.sec.gov",
        description="Base URL for the structured-facts and submissions APIs.",
    )
    www_base_url: str = Field(
        "https://www.sec.gov",
        description="Base URL hosting the ticker reference table and filing archives.",
    )
    user_agent: str = Field(
        "TickerLens/0.1 (contact@tickerlens.dev)",
        description=(
            "User agent string sent to EDGAR. Must follow SEC guidelines and "
            "include contact details."
        ),
        validation_alias=AliasChoices("EDGAR_USER_AGENT", "SEC_USER_AGENT"),
    )
    timeout_s: float = Field(
        8.0,
        gt=0,
        le=60.0,
        description="Per-request timeout in seconds.",
    )
    max_attempts: int = Field(
        3,
        ge=1,
        le=10,
        description="Attempts per call, including the first one.",
    )
    backoff_s: float = Field(
        0.25,
        ge=0,
        description="Linear backoff step between attempts in seconds.",
    )
    max_concurrency: int = Field(
        4,
        ge=1,
        le=64,
        description="Maximum in-flight EDGAR calls per process.",
    )
    rate_limit_rps: float = Field(
        8.0,
        ge=0,
        description="Sustained EDGAR call rate per process (SEC asks for <= 10/s).",
    )

    model_config = SettingsConfigDict(
        env_prefix="EDGAR_",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def archives_base_url(self) -> str:
        """Return the filing archives root."""
        return f"{self.www_base_url.rstrip('/')}/Archives/edgar/data"

    @property
    def configured(self) -> bool:
        """EDGAR needs no key; a user agent is enough."""
        return bool(self.user_agent.strip())
