# src/tickerlens_api/domain/services/fallback.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""First-success fallback combinator.

Synopsis:
    Every preference chain in the engine (concept-tag aliases, unit aliases,
    observation date fields, market-data providers, bar providers) is modeled
    as an ordered list of named candidates and resolved by the same combinator:
    candidates are tried once each, in order, and the first one that yields an
    acceptable value wins.

Design:
    * Candidates are ``(name, thunk)`` pairs; thunks take no arguments.
    * The synchronous variant is for pure extractors and never swallows
      exceptions.
    * The asynchronous variant is for upstream sources. Failures of the types
      listed in ``swallow`` count as "no value from this source" and are not
      retried here; anything else propagates.
    * The outcome records which candidate won so callers can report provenance.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence, Sized
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from tickerlens_api.domain.exceptions.financials import UpstreamUnavailable

T = TypeVar("T")

Candidate = tuple[str, Callable[[], T | None]]
AsyncCandidate = tuple[str, Callable[[], Awaitable[T | None]]]


def is_present(value: Any) -> bool:
    """Default acceptance test: not ``None`` and not an empty collection.

    Numeric zero is a real value and is accepted.
    """
    if value is None:
        return False
    if isinstance(value, Sized) and not isinstance(value, (str, bytes)):
        return len(value) > 0
    if isinstance(value, str):
        return bool(value.strip())
    return True


@dataclass(frozen=True)
class FallbackOutcome(Generic[T]):
    """Result of resolving a candidate chain.

    Attributes:
        value: Winning value, or ``None`` when every candidate came up empty.
        source: Name of the winning candidate, if any.
        skipped: Names of candidates tried before the winner (or all of them).
        failures: Candidate name -> error code for swallowed failures.
    """

    value: T | None = None
    source: str | None = None
    skipped: tuple[str, ...] = ()
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        """Return True when some candidate produced an acceptable value."""
        return self.source is not None


def first_success(
    candidates: Iterable[Candidate[T]],
    *,
    accept: Callable[[Any], bool] = is_present,
) -> FallbackOutcome[T]:
    """Return the first candidate value accepted by ``accept``.

    Args:
        candidates: Ordered ``(name, thunk)`` pairs.
        accept: Predicate deciding whether a produced value counts.

    Returns:
        The outcome; ``value`` is ``None`` if nothing was accepted.
    """
    skipped: list[str] = []
    for name, thunk in candidates:
        value = thunk()
        if accept(value):
            return FallbackOutcome(value=value, source=name, skipped=tuple(skipped))
        skipped.append(name)
    return FallbackOutcome(skipped=tuple(skipped))


async def first_success_async(
    candidates: Iterable[AsyncCandidate[T]],
    *,
    accept: Callable[[Any], bool] = is_present,
    swallow: tuple[type[Exception], ...] = (UpstreamUnavailable,),
    on_failure: Callable[[str, Exception], None] | None = None,
) -> FallbackOutcome[T]:
    """Await candidates in order and return the first accepted value.

    Args:
        candidates: Ordered ``(name, coroutine factory)`` pairs.
        accept: Predicate deciding whether a produced value counts.
        swallow: Exception types treated as "no value from this source".
        on_failure: Optional hook invoked for each swallowed failure.

    Returns:
        The outcome, including swallowed failures keyed by candidate name.
    """
    skipped: list[str] = []
    failures: dict[str, str] = {}
    for name, factory in candidates:
        try:
            value = await factory()
        except swallow as exc:
            failures[name] = getattr(exc, "code", type(exc).__name__)
            if on_failure is not None:
                on_failure(name, exc)
            skipped.append(name)
            continue
        if accept(value):
            return FallbackOutcome(
                value=value, source=name, skipped=tuple(skipped), failures=failures
            )
        skipped.append(name)
    return FallbackOutcome(skipped=tuple(skipped), failures=failures)


def merge_fields(
    records: Sequence[tuple[str, Any]],
    names: Iterable[str],
    *,
    order_overrides: Mapping[str, Sequence[str]] | None = None,
) -> tuple[dict[str, Any], dict[str, str]]:
    """Resolve each named attribute independently across ordered records.

    Args:
        records: Ordered ``(source name, record)`` pairs; records expose the
            requested names as attributes.
        names: Attribute names to resolve.
        order_overrides: Per-attribute source order replacing the record order
            (sources not listed are not consulted for that attribute).

    Returns:
        ``(values, sources)``: attribute -> winning value (``None`` when
        every source came up empty), and attribute -> winning source name
        for the attributes that were found.
    """
    by_name = dict(records)
    default_order = [name for name, _ in records]
    overrides = order_overrides or {}
    values: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for attr in names:
        order = overrides.get(attr, default_order)
        outcome = first_success(
            (src, lambda src=src: getattr(by_name[src], attr, None))
            for src in order
            if src in by_name
        )
        values[attr] = outcome.value
        if outcome.source is not None:
            sources[attr] = outcome.source
    return values, sources
