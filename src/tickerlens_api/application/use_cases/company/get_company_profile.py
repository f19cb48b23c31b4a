# src/tickerlens_api/application/use_cases/company/get_company_profile.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: Get company profile.

Descriptive fields are resolved field by field across providers in
preference order; provenance is reported per field.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Final

from tickerlens_api.application.interfaces.providers import MarketDataSource
from tickerlens_api.domain.entities.filer_identity import normalize_symbol
from tickerlens_api.domain.entities.snapshot import CompanyProfile
from tickerlens_api.domain.services.fallback import merge_fields
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

PROFILE_FIELD_NAMES: Final[tuple[str, ...]] = (
    "name",
    "description",
    "exchange",
    "sector",
    "industry",
    "website",
    "currency",
)


class GetCompanyProfileUseCase:
    """Merge descriptive company fields across providers."""

    def __init__(self, *, sources: Sequence[MarketDataSource]) -> None:
        self._sources = tuple(sources)

    async def execute(self, symbol: str) -> CompanyProfile:
        """Execute the use case.

        Raises:
            InvalidInput: For a malformed symbol.
        """
        ticker = normalize_symbol(symbol)
        results = await asyncio.gather(
            *(src.load_profile(ticker) for src in self._sources), return_exceptions=True
        )
        records: list[tuple[str, CompanyProfile]] = []
        for src, result in zip(self._sources, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(
                    "profile.source_failed",
                    extra={"provider": src.name, "reason": getattr(result, "code", "")},
                )
                continue
            if isinstance(result, BaseException):
                raise result
            records.append((src.name, result))

        values, sources = merge_fields(records, PROFILE_FIELD_NAMES)
        return CompanyProfile(symbol=ticker, **values, field_sources=sources)
