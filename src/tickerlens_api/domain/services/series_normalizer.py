# src/tickerlens_api/domain/services/series_normalizer.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Series normalization over structured-facts documents.

Purpose:
    Turn the raw, unordered observations a structured-facts document reports
    for a concept into one ascending, de-duplicated, type-safe series.

Design:
    * A logical concept is a :class:`ConceptSpec`: an ordered tuple of
      concept-tag aliases and an ordered tuple of acceptable unit buckets.
      The first (tag, unit) pair with any observations wins.
    * Observation dates come from an ordered list of named extractors
      (period end first, then report date, fiscal year and generic date).
    * Values are coerced to finite floats or ``None``.
    * Points are stable-sorted by resolved date; when several observations
      share a date, the later one overwrites the earlier one.
    * All chains are resolved by :func:`first_success`.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from itertools import product
from typing import Any, Final

from tickerlens_api.domain.entities.base import finite_or_none
from tickerlens_api.domain.entities.series import (
    NormalizedSeries,
    RawObservation,
    SeriesPoint,
    period_sort_key,
)
from tickerlens_api.domain.services.fallback import first_success

DEFAULT_TAXONOMY: Final[str] = "us-gaap"

CURRENCY_UNITS: Final[tuple[str, ...]] = ("USD", "USDm", "USDMillions")
PER_SHARE_UNITS: Final[tuple[str, ...]] = ("USD/shares", "USD")


@dataclass(frozen=True, slots=True)
class ConceptSpec:
    """Ordered alias lists describing one logical concept."""

    name: str
    tags: tuple[str, ...]
    units: tuple[str, ...] = ("USD",)


CONCEPTS: Final[Mapping[str, ConceptSpec]] = {
    definition.name: definition
    for definition in (
        ConceptSpec(
            "revenue",
            ("Revenues", "RevenueFromContractWithCustomerExcludingAssessedTax"),
            CURRENCY_UNITS,
        ),
        ConceptSpec("net_income", ("NetIncomeLoss",), CURRENCY_UNITS),
        ConceptSpec("eps", ("EarningsPerShareDiluted", "EarningsPerShareBasic"), PER_SHARE_UNITS),
        ConceptSpec("gross_profit", ("GrossProfit",)),
        ConceptSpec("operating_income", ("OperatingIncomeLoss",)),
        ConceptSpec("liabilities", ("Liabilities",)),
        ConceptSpec("equity", ("StockholdersEquity",)),
        ConceptSpec(
            "dividend_per_share", ("CommonStockDividendsPerShareDeclared",), PER_SHARE_UNITS
        ),
        ConceptSpec("operating_cash_flow", ("NetCashProvidedByUsedInOperatingActivities",)),
        ConceptSpec("capital_expenditure", ("PaymentsToAcquirePropertyPlantAndEquipment",)),
    )
}


def _text_field(key: str) -> Callable[[Mapping[str, Any]], str | None]:
    def _extract(obs: Mapping[str, Any]) -> str | None:
        raw = obs.get(key)
        if raw is None or isinstance(raw, bool):
            return None
        text = str(raw).strip()
        return text if text and period_sort_key(text) is not None else None

    return _extract


#: Date-bearing fields in preference order.
DATE_EXTRACTORS: Final[tuple[tuple[str, Callable[[Mapping[str, Any]], str | None]], ...]] = (
    ("end", _text_field("end")),
    ("endDate", _text_field("endDate")),
    ("filed", _text_field("filed")),
    ("fy", _text_field("fy")),
    ("date", _text_field("date")),
)

#: Value-bearing fields in preference order.
VALUE_FIELDS: Final[tuple[str, ...]] = ("val", "value")


def resolve_date(obs: Mapping[str, Any]) -> str | None:
    """Return the first usable date label of an observation."""
    outcome = first_success((name, lambda fn=fn: fn(obs)) for name, fn in DATE_EXTRACTORS)
    return outcome.value


def resolve_value(obs: Mapping[str, Any]) -> float | None:
    """Return the first finite value of an observation."""
    outcome = first_success(
        (key, lambda key=key: finite_or_none(obs.get(key))) for key in VALUE_FIELDS
    )
    return outcome.value


def to_raw_observation(obs: Mapping[str, Any]) -> RawObservation:
    """Map one provider observation to a :class:`RawObservation`."""
    return RawObservation(period_end=resolve_date(obs), value=resolve_value(obs))


def _unit_bucket(
    facts: Mapping[str, Any], taxonomy: str, tag: str, unit: str
) -> list[Mapping[str, Any]] | None:
    namespace = facts.get("facts")
    if not isinstance(namespace, Mapping):
        return None
    concepts = namespace.get(taxonomy)
    if not isinstance(concepts, Mapping):
        return None
    concept = concepts.get(tag)
    if not isinstance(concept, Mapping):
        return None
    units = concept.get("units")
    if not isinstance(units, Mapping):
        return None
    bucket = units.get(unit)
    if not isinstance(bucket, list):
        return None
    return [row for row in bucket if isinstance(row, Mapping)]


def select_observations(
    facts: Mapping[str, Any],
    definition: ConceptSpec,
    *,
    taxonomy: str = DEFAULT_TAXONOMY,
) -> tuple[str | None, str | None, list[Mapping[str, Any]]]:
    """Pick the observations for a concept from a structured-facts document.

    Tags are tried in priority order and, within a tag, units in priority
    order. The first pair with any observations wins.

    Returns:
        ``(tag, unit, observations)``; ``(None, None, [])`` when nothing matched.
    """
    outcome = first_success(
        (
            f"{tag}:{unit}",
            lambda tag=tag, unit=unit: _unit_bucket(facts, taxonomy, tag, unit),
        )
        for tag, unit in product(definition.tags, definition.units)
    )
    if not outcome.found or outcome.source is None:
        return None, None, []
    tag, unit = outcome.source.split(":", 1)
    return tag, unit, list(outcome.value or [])


def build_series(
    concept: str,
    observations: Iterable[RawObservation],
    *,
    tag: str | None = None,
    unit: str | None = None,
) -> NormalizedSeries:
    """Build a normalized series from raw observations.

    Undated observations are dropped. Remaining ones are stable-sorted by
    resolved date (ties keep their original order) and collapsed to one point
    per date, the later observation overwriting the earlier one.
    """
    dated: list[tuple[date, RawObservation]] = []
    for obs in observations:
        if obs.period_end is None:
            continue
        key = period_sort_key(obs.period_end)
        if key is None:
            continue
        dated.append((key, obs))

    dated.sort(key=lambda pair: pair[0])

    by_date: dict[date, SeriesPoint] = {}
    for key, obs in dated:
        by_date[key] = SeriesPoint(date=obs.period_end or "", value=obs.value)

    return NormalizedSeries(concept=concept, points=tuple(by_date.values()), tag=tag, unit=unit)


def normalize_concept(
    facts: Mapping[str, Any],
    definition: ConceptSpec,
    *,
    taxonomy: str = DEFAULT_TAXONOMY,
) -> NormalizedSeries:
    """Select and normalize the series for one concept (empty when absent)."""
    tag, unit, rows = select_observations(facts, definition, taxonomy=taxonomy)
    return build_series(definition.name, (to_raw_observation(r) for r in rows), tag=tag, unit=unit)


def latest(series: NormalizedSeries | Sequence[SeriesPoint]) -> float | None:
    """Return the value of the newest point, or ``None``."""
    points = series.points if isinstance(series, NormalizedSeries) else series
    return points[-1].value if points else None


def previous(series: NormalizedSeries | Sequence[SeriesPoint]) -> float | None:
    """Return the value of the second-newest point, or ``None``."""
    points = series.points if isinstance(series, NormalizedSeries) else series
    return points[-2].value if len(points) >= 2 else None
