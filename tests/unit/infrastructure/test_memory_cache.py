from __future__ import annotations

import logging
from typing import Any

import pytest
from conftest import FrozenClock, UnavailableCache

from tickerlens_api.infrastructure.caching.json_cache import make_key, read_through_json
from tickerlens_api.infrastructure.caching.memory_cache import MemoryJsonCache


@pytest.mark.anyio
async def test_entries_expire_after_ttl(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)
    await cache.set_json("k", {"a": 1}, ttl=10)

    frozen_clock.advance(9)
    assert await cache.get_json("k") == {"a": 1}
    frozen_clock.advance(1)
    assert await cache.get_json("k") is None
    assert len(cache) == 0


@pytest.mark.anyio
async def test_values_are_isolated_copies(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)
    original: dict[str, Any] = {"rows": [1, 2]}
    await cache.set_json("k", original, ttl=10)
    original["rows"].append(3)

    cached = await cache.get_json("k")
    assert cached == {"rows": [1, 2]}


@pytest.mark.anyio
async def test_zero_ttl_is_not_stored_and_clear_empties(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)
    await cache.set_json("skip", {"a": 1}, ttl=0)
    await cache.set_json("keep", {"a": 1}, ttl=5)
    assert len(cache) == 1

    await cache.clear()
    assert len(cache) == 0


@pytest.mark.anyio
async def test_read_through_loads_once_per_ttl(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)
    calls = 0

    async def _loader() -> dict[str, Any]:
        nonlocal calls
        calls += 1
        return {"n": calls}

    first = await read_through_json(cache, "doc", ttl=60, loader=_loader)
    second = await read_through_json(cache, "doc", ttl=60, loader=_loader)
    assert first == second == {"n": 1}

    frozen_clock.advance(60)
    assert await read_through_json(cache, "doc", ttl=60, loader=_loader) == {"n": 2}


@pytest.mark.anyio
async def test_read_through_bypasses_cache_when_disabled(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)

    async def _loader() -> dict[str, Any]:
        return {"fresh": True}

    assert await read_through_json(cache, "doc", ttl=0, loader=_loader) == {"fresh": True}
    assert len(cache) == 0


@pytest.mark.anyio
async def test_read_through_does_not_cache_missing_documents(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)

    async def _loader() -> None:
        return None

    assert await read_through_json(cache, "doc", ttl=60, loader=_loader) is None
    assert len(cache) == 0


def test_make_key_joins_segments() -> None:
    assert make_key("companyfacts", "0000320193") == "companyfacts:0000320193"
    assert make_key(":tickers:", "", "all") == "tickers:all"


@pytest.mark.anyio
async def test_writes_sweep_expired_entries(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)
    for n in range(1000):
        await cache.set_json(f"facts:{n}", {"n": n}, ttl=300)
    assert len(cache) == 1000

    frozen_clock.advance(10_000)
    await cache.set_json("facts:fresh", {"n": -1}, ttl=300)

    assert len(cache) == 1
    assert await cache.get_json("facts:fresh") == {"n": -1}


@pytest.mark.anyio
async def test_writes_keep_live_entries(frozen_clock: FrozenClock) -> None:
    cache = MemoryJsonCache(clock=frozen_clock)
    await cache.set_json("short", {"a": 1}, ttl=10)
    await cache.set_json("long", {"b": 2}, ttl=100)

    frozen_clock.advance(50)
    await cache.set_json("new", {"c": 3}, ttl=10)

    assert len(cache) == 2
    assert await cache.get_json("long") == {"b": 2}


@pytest.mark.anyio
async def test_read_through_survives_backend_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    cache = UnavailableCache()
    calls = 0

    async def _loader() -> dict[str, Any]:
        nonlocal calls
        calls += 1
        return {"n": calls}

    with caplog.at_level(logging.WARNING, logger="tickerlens_api.infrastructure.caching"):
        assert await read_through_json(cache, "doc", ttl=60, loader=_loader) == {"n": 1}

    assert cache.attempts == 2
    events = [r for r in caplog.records if r.getMessage() == "cache.backend_error"]
    assert [getattr(r, "op", None) for r in events] == ["get_json", "set_json"]
    assert all(r.levelno == logging.WARNING for r in events)
