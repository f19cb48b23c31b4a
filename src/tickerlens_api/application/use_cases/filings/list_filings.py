# src/tickerlens_api/application/use_cases/filings/list_filings.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: List an issuer's regulatory filings.

Synopsis:
    Resolves the symbol, reads the filing history document through the
    cache, and builds a filtered, capped filing index.

Notes:
    * An unresolved symbol yields ``filer_id=None`` and no filings; this is
      a normal result, not an error.
    * A filing history the provider does not have (404) yields no filings.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from tickerlens_api.application.interfaces.cache_port import CachePort
from tickerlens_api.application.interfaces.providers import FilerDataSource
from tickerlens_api.application.use_cases.identity.resolve_filer_identity import (
    FilerIdentityResolver,
)
from tickerlens_api.domain.entities.filer_identity import normalize_symbol
from tickerlens_api.domain.entities.filing import FilingIndex
from tickerlens_api.domain.exceptions.financials import UpstreamNotFound
from tickerlens_api.domain.services.filing_index import (
    build_filing_index,
    clamp_limit,
    parse_form_filter,
)
from tickerlens_api.infrastructure.caching.json_cache import make_key, read_through_json
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def recent_block(submissions: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the ``filings.recent`` parallel-array block (empty when absent)."""
    filings = submissions.get("filings")
    if not isinstance(filings, Mapping):
        return {}
    recent = filings.get("recent")
    return recent if isinstance(recent, Mapping) else {}


class ListFilingsUseCase:
    """Build a filing index for one symbol."""

    def __init__(
        self,
        *,
        resolver: FilerIdentityResolver,
        source: FilerDataSource,
        cache: CachePort,
        ttl: int,
        archives_base: str,
    ) -> None:
        self._resolver = resolver
        self._source = source
        self._cache = cache
        self._ttl = ttl
        self._archives_base = archives_base

    async def execute(
        self,
        symbol: str,
        *,
        forms: str | Iterable[str] | None = None,
        limit: int | None = None,
        latest_per_quarter: bool = False,
    ) -> FilingIndex:
        """Execute the use case.

        Args:
            symbol: Ticker symbol in any case.
            forms: CSV or iterable of form types; empty means all.
            limit: Maximum number of filings (default 20, clamped to 1..100).
            latest_per_quarter: Keep only the most recently filed quarterly
                report per reported quarter.

        Raises:
            InvalidInput: For a malformed symbol.
            UpstreamUnavailable: When the reference table or filing history
                could not be fetched after retries.
        """
        ticker = normalize_symbol(symbol)
        wanted = parse_form_filter(forms)
        cap = clamp_limit(limit)

        identity = await self._resolver.resolve(ticker)
        if identity is None:
            return FilingIndex(symbol=ticker, filer_id=None)

        try:
            submissions = await read_through_json(
                self._cache,
                make_key("submissions", identity.filer_id),
                ttl=self._ttl,
                loader=lambda: self._source.fetch_company_submissions(identity.filer_id),
            )
        except UpstreamNotFound:
            logger.info("filings.history_missing", extra={"filer_id": identity.filer_id})
            submissions = None

        records = build_filing_index(
            recent_block(submissions or {}),
            filer_number=identity.filer_number,
            forms=wanted,
            limit=cap,
            archives_base=self._archives_base,
            dedupe_quarters=latest_per_quarter,
        )
        return FilingIndex(symbol=ticker, filer_id=identity.filer_id, filings=records)
