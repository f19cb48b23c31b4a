# src/tickerlens_api/domain/entities/market_event.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Market Events and Price Series (Domain Entities).

Synopsis:
    Dated corporate events (filings, ex-dividend dates, earnings reports) and
    the chart payload that carries them next to a range of price bars.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from tickerlens_api.domain.entities.base import BaseEntity
from tickerlens_api.domain.entities.price_bar import PriceBar
from tickerlens_api.domain.enums.market_event import EventKind
from tickerlens_api.domain.enums.price_history import BarInterval, PriceRange


@dataclass(frozen=True, slots=True)
class MarketEvent(BaseEntity):
    """One event on the chart.

    Attributes:
        kind: Filing, dividend or earnings report.
        label: Short display text (``"10-Q"``, ``"$0.24"``, ``"Q2 FY24"``).
        date: Calendar day the event is pinned to.
        source: Provider the event came from.
        document_url: Link to the filing document, filings only.
        price_at_event: Close of the nearest bar within five days, if any.
    """

    kind: EventKind
    label: str
    date: date
    source: str
    document_url: str | None = None
    price_at_event: float | None = None

    def __post_init__(self) -> None:
        if self.kind is EventKind.FILING and not self.document_url:
            raise ValueError("filing events require a document_url")

    def priced(self, close: float | None) -> MarketEvent:
        """Return a copy carrying ``close`` as the price at the event."""
        return replace(self, price_at_event=close)


@dataclass(frozen=True, slots=True)
class PriceSeries(BaseEntity):
    """Price bars for a range with the events that fall inside it.

    Attributes:
        symbol: Upper-case ticker symbol.
        range: Requested logical range.
        interval: Interval of the returned bars.
        start: First calendar day of the window.
        end: Last calendar day of the window.
        price_source: Provider of the bars, if any.
        points: Bars ascending by timestamp.
        events: Events inside the window, ascending by date.
    """

    symbol: str
    range: PriceRange
    interval: BarInterval
    start: date
    end: date
    price_source: str | None = None
    points: tuple[PriceBar, ...] = ()
    events: tuple[MarketEvent, ...] = ()

    def has(self, kind: EventKind) -> bool:
        """Return True when at least one event of ``kind`` is present."""
        return any(event.kind is kind for event in self.events)

    @property
    def event_sources(self) -> tuple[str, ...]:
        """Return the distinct event providers in order of first appearance."""
        return tuple(dict.fromkeys(event.source for event in self.events))
