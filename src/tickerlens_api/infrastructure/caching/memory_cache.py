# src/tickerlens_api/infrastructure/caching/memory_cache.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""In-process JSON cache.

Synopsis:
    Dict-backed implementation of the application ``CachePort`` for single
    process deployments and tests. Expiry is evaluated against an injected
    clock's monotonic reading so TTL behavior is deterministic. Every write
    sweeps expired entries, so documents for filers nobody asks about again
    do not outlive their TTL by more than one write.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Mapping
from typing import Any

from tickerlens_api.application.interfaces.cache_port import CachePort
from tickerlens_api.application.interfaces.clock import Clock
from tickerlens_api.infrastructure.clock import SystemClock
from tickerlens_api.infrastructure.observability.metrics import record_cache_operation

__all__ = ["MemoryJsonCache"]


class MemoryJsonCache(CachePort):
    """Async-safe TTL cache storing deep copies of JSON mappings."""

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or SystemClock()
        self._data: dict[str, tuple[float, Mapping[str, Any]]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._data)

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        async with self._lock:
            entry = self._data.get(key)
            if entry is None:
                record_cache_operation("memory", "get_json", hit=False)
                return None
            expires_at, value = entry
            if self._clock.monotonic() >= expires_at:
                self._data.pop(key, None)
                record_cache_operation("memory", "get_json", hit=False)
                return None
        record_cache_operation("memory", "get_json", hit=True)
        return copy.deepcopy(value)

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        if ttl <= 0:
            return
        async with self._lock:
            now = self._clock.monotonic()
            self._sweep(now)
            self._data[key] = (now + ttl, copy.deepcopy(value))
        record_cache_operation("memory", "set_json")

    def _sweep(self, now: float) -> None:
        """Drop every expired entry; caller holds the lock."""
        expired = [k for k, (expires_at, _) in self._data.items() if now >= expires_at]
        for k in expired:
            del self._data[k]

    async def clear(self) -> None:
        """Drop every entry."""
        async with self._lock:
            self._data.clear()
