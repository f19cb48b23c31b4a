# src/tickerlens_api/application/use_cases/financials/company_facts.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Structured-facts fetcher shared by the series and snapshot use cases.

The facts document is read through the cache for ``ttl`` seconds. When the
provider is unavailable the document is treated as empty, so every concept
normalizes to an empty series and dependent fields come out null.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tickerlens_api.application.interfaces.cache_port import CachePort
from tickerlens_api.application.interfaces.providers import FilerDataSource
from tickerlens_api.domain.entities.series import NormalizedSeries
from tickerlens_api.domain.exceptions.financials import UpstreamUnavailable
from tickerlens_api.domain.services.series_normalizer import CONCEPTS, normalize_concept
from tickerlens_api.infrastructure.caching.json_cache import make_key, read_through_json
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class CompanyFactsFetcher:
    """Cached access to per-filer structured-facts documents."""

    def __init__(self, *, source: FilerDataSource, cache: CachePort, ttl: int) -> None:
        self._source = source
        self._cache = cache
        self._ttl = ttl

    async def load(self, filer_id: str) -> Mapping[str, Any]:
        """Return the facts document for ``filer_id`` (empty when unavailable)."""
        try:
            doc = await read_through_json(
                self._cache,
                make_key("companyfacts", filer_id),
                ttl=self._ttl,
                loader=lambda: self._source.fetch_company_facts(filer_id),
            )
        except UpstreamUnavailable as exc:
            logger.warning(
                "facts.unavailable",
                extra={"filer_id": filer_id, "reason": exc.code},
            )
            return {}
        return doc or {}

    async def fetch_series(self, filer_id: str, concept: str) -> NormalizedSeries:
        """Return the normalized series for one named concept.

        Raises:
            KeyError: If ``concept`` is not a known concept name.
        """
        facts = await self.load(filer_id)
        return normalize_concept(facts, CONCEPTS[concept])


def normalize_all(facts: Mapping[str, Any], names: tuple[str, ...]) -> dict[str, NormalizedSeries]:
    """Normalize several concepts from one facts document."""
    return {name: normalize_concept(facts, CONCEPTS[name]) for name in names}
