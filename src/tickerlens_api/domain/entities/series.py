# src/tickerlens_api/domain/entities/series.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Time Series (Domain Entities).

Synopsis:
    Raw fact observations and the normalized, strictly ascending series built
    from them.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from tickerlens_api.domain.entities.base import BaseEntity


def period_sort_key(raw: str) -> date | None:
    """Parse a period label into a sortable date.

    Accepts ISO dates (``2023-12-31``), ISO datetimes (the date part is used)
    and bare fiscal years (``2023`` maps to January 1st of that year).

    Returns:
        The parsed date, or ``None`` when the label carries no usable date.
    """
    text = raw.strip()
    if len(text) == 4 and text.isdigit():
        return date(int(text), 1, 1)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class RawObservation(BaseEntity):
    """One reported value before normalization.

    Attributes:
        period_end: Resolved date label, or ``None`` when no date field exists.
        value: Finite numeric value, or ``None``.
    """

    period_end: str | None
    value: float | None


@dataclass(frozen=True, slots=True)
class SeriesPoint(BaseEntity):
    """A dated value in a normalized series."""

    date: str
    value: float | None


@dataclass(frozen=True, slots=True)
class NormalizedSeries(BaseEntity):
    """Ascending, de-duplicated series for one logical concept.

    Attributes:
        concept: Logical concept name (e.g. ``"revenue"``).
        points: Points strictly ascending by date, one per distinct date.
        tag: Concept tag the points were sourced from, if any.
        unit: Unit bucket the points were sourced from, if any.
    """

    concept: str
    points: tuple[SeriesPoint, ...] = ()
    tag: str | None = None
    unit: str | None = None

    def __post_init__(self) -> None:
        previous: date | None = None
        for point in self.points:
            key = period_sort_key(point.date)
            if key is None:
                raise ValueError(f"undated point in series {self.concept!r}")
            if previous is not None and key <= previous:
                raise ValueError(f"series {self.concept!r} is not strictly ascending")
            previous = key

    def __len__(self) -> int:
        return len(self.points)

    def tail(self, count: int) -> NormalizedSeries:
        """Return a copy holding only the newest ``count`` points."""
        if count <= 0:
            return NormalizedSeries(concept=self.concept, tag=self.tag, unit=self.unit)
        return NormalizedSeries(
            concept=self.concept,
            points=self.points[-count:],
            tag=self.tag,
            unit=self.unit,
        )

    def as_mapping(self) -> dict[str, float | None]:
        """Return ``{date: value}`` preserving ascending order."""
        return {p.date: p.value for p in self.points}
