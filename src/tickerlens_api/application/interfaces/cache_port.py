# src/tickerlens_api/application/interfaces/cache_port.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Application Interface: Cache Port.

Synopsis:
    Minimal JSON cache behavior used by use cases. Enables swapping the
    in-memory cache for Redis (or anything else) without touching use cases.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class CachePort(Protocol):
    """JSON cache with TTL semantics.

    Implementations store JSON-serializable mappings and apply a TTL in
    seconds. A TTL ``<= 0`` means "do not cache".
    """

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        """Return the cached mapping for ``key``, or ``None`` on miss/expiry."""

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
