# src/tickerlens_api/application/use_cases/identity/resolve_filer_identity.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Use case: Resolve a ticker symbol to a filer identity.

Synopsis:
    Loads the regulator's bulk ticker reference table once, indexes it by
    upper-case ticker, and answers lookups from memory.

Concurrency:
    The table is the only process-wide mutable state. It is built into a
    local dict under an ``asyncio.Lock`` (double-checked, so concurrent
    first callers trigger one load) and published with a single reference
    swap; readers never observe a partially built table.

Notes:
    * When several rows share a ticker, the first row in provider order wins.
    * An optional TTL (against the injected clock's monotonic reading)
      triggers a reload on the next lookup after expiry.
    * A failed load is not cached; the next lookup retries.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from tickerlens_api.application.interfaces.clock import Clock
from tickerlens_api.application.interfaces.providers import FilerDataSource
from tickerlens_api.domain.entities.filer_identity import (
    FilerIdentity,
    normalize_filer_id,
    normalize_symbol,
)
from tickerlens_api.domain.exceptions.financials import InvalidInput
from tickerlens_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def build_identity_table(payload: Mapping[str, Any]) -> dict[str, FilerIdentity]:
    """Index a ticker reference payload by upper-case ticker.

    Rows without a usable ticker or identifier are skipped.
    """
    rows = payload.values() if isinstance(payload, Mapping) else ()
    table: dict[str, FilerIdentity] = {}
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        ticker = str(row.get("ticker") or "").strip().upper()
        raw_cik = row.get("cik_str", row.get("cik"))
        if not ticker or raw_cik is None or ticker in table:
            continue
        try:
            filer_id = normalize_filer_id(raw_cik)
        except InvalidInput:
            continue
        title = row.get("title")
        table[ticker] = FilerIdentity(
            symbol=ticker,
            filer_id=filer_id,
            name=str(title).strip() if title else None,
        )
    return table


class FilerIdentityResolver:
    """Symbol -> filer identity lookup over a lazily loaded reference table."""

    def __init__(
        self,
        *,
        source: FilerDataSource,
        clock: Clock,
        ttl_s: float | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            source: Provider of the bulk ticker reference table.
            clock: Time source used for TTL evaluation.
            ttl_s: Table lifetime in seconds; ``None`` keeps it for the process lifetime.
        """
        self._source = source
        self._clock = clock
        self._ttl_s = ttl_s
        self._table: Mapping[str, FilerIdentity] | None = None
        self._loaded_at: float = 0.0
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        """Return True once a table has been published."""
        return self._table is not None

    def _fresh(self) -> bool:
        if self._table is None:
            return False
        if self._ttl_s is None:
            return True
        return self._clock.monotonic() - self._loaded_at < self._ttl_s

    async def _ensure_table(self) -> Mapping[str, FilerIdentity]:
        table = self._table
        if table is not None and self._fresh():
            return table
        async with self._lock:
            if self._table is not None and self._fresh():
                return self._table
            payload = await self._source.fetch_company_tickers()
            built = build_identity_table(payload)
            self._table = built
            self._loaded_at = self._clock.monotonic()
            logger.info("identity.table_loaded", extra={"entries": len(built)})
            return built

    async def resolve(self, symbol: str) -> FilerIdentity | None:
        """Return the identity for ``symbol`` (any case), or ``None``.

        Raises:
            InvalidInput: If the symbol is missing or malformed.
            UpstreamUnavailable: If the reference table could not be loaded.
        """
        ticker = normalize_symbol(symbol)
        table = await self._ensure_table()
        identity = table.get(ticker)
        if identity is None:
            logger.info("identity.not_found", extra={"symbol": ticker})
        return identity
