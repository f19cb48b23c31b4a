from __future__ import annotations

from typing import Any

import pytest
from conftest import FakeFilerSource, FrozenClock, UnavailableCache

from tickerlens_api.application.use_cases.financials.company_facts import CompanyFactsFetcher
from tickerlens_api.domain.exceptions.financials import UpstreamUnavailable
from tickerlens_api.infrastructure.caching.memory_cache import MemoryJsonCache


@pytest.mark.anyio
async def test_facts_are_read_through_the_cache(
    apple_facts: dict[str, Any], frozen_clock: FrozenClock
) -> None:
    source = FakeFilerSource(facts=apple_facts)
    cache = MemoryJsonCache(clock=frozen_clock)
    fetcher = CompanyFactsFetcher(source=source, cache=cache, ttl=300)

    first = await fetcher.load("0000320193")
    second = await fetcher.load("0000320193")

    assert first == second == apple_facts
    assert source.calls["facts"] == 1

    frozen_clock.advance(300)
    await fetcher.load("0000320193")
    assert source.calls["facts"] == 2


@pytest.mark.anyio
async def test_unavailable_provider_yields_an_empty_document(frozen_clock: FrozenClock) -> None:
    source = FakeFilerSource(errors={"facts": UpstreamUnavailable("down")})
    cache = MemoryJsonCache(clock=frozen_clock)
    fetcher = CompanyFactsFetcher(source=source, cache=cache, ttl=300)

    assert await fetcher.load("0000320193") == {}


@pytest.mark.anyio
async def test_fetch_series_normalizes_one_concept(
    apple_facts: dict[str, Any], frozen_clock: FrozenClock
) -> None:
    fetcher = CompanyFactsFetcher(
        source=FakeFilerSource(facts=apple_facts),
        cache=MemoryJsonCache(clock=frozen_clock),
        ttl=0,
    )
    series = await fetcher.fetch_series("0000320193", "eps")
    assert series.unit == "USD/shares"
    assert [p.value for p in series.points] == [6.11, 6.13]

    with pytest.raises(KeyError):
        await fetcher.fetch_series("0000320193", "unknown")


@pytest.mark.anyio
async def test_unreachable_cache_falls_through_to_the_provider(
    apple_facts: dict[str, Any],
) -> None:
    source = FakeFilerSource(facts=apple_facts)
    fetcher = CompanyFactsFetcher(source=source, cache=UnavailableCache(), ttl=300)

    assert await fetcher.load("0000320193") == apple_facts
    assert source.calls["facts"] == 1
