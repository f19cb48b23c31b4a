# src/tickerlens_api/domain/services/event_overlay.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Event overlay for price charts.

Purpose:
    Turn filings and provider event rows into dated chart events, keep the
    ones inside the chart window, and pin each to the close of the nearest
    bar.

Rules:
    * A filing event needs a document link and is dated by its report date,
      else its filing date.
    * Dividend labels are the cash amount (``"$0.24"``, ``"$?"`` when
      unknown); earnings labels are ``"Q{n} FY{yy}"`` or ``"Earnings"``.
    * ``price_at_event`` is the close of the bar nearest to the event's UTC
      midnight, provided that bar is at most five calendar days away.
    * Events are ordered by date; same-day events keep their input order.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime
from typing import Final

from tickerlens_api.domain.entities.filing import FilingRecord
from tickerlens_api.domain.entities.market_event import MarketEvent
from tickerlens_api.domain.entities.price_bar import PriceBar
from tickerlens_api.domain.enums.market_event import EventKind

MAX_PRICE_GAP_DAYS: Final[float] = 5.0
SECONDS_PER_DAY: Final[int] = 86_400
FILINGS_SOURCE: Final[str] = "sec"


def parse_day(raw: object) -> date | None:
    """Parse the calendar day of an ISO date or timestamp string."""
    if not isinstance(raw, str) or len(raw.strip()) < 10:
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def dividend_label(cash_amount: float | None) -> str:
    return f"${cash_amount:.2f}" if cash_amount is not None else "$?"


def earnings_label(fiscal_quarter: object, fiscal_year: object) -> str:
    quarter = f"Q{fiscal_quarter} " if fiscal_quarter else ""
    year = f"FY{str(fiscal_year)[-2:]}" if fiscal_year else ""
    return f"{quarter}{year}".strip() or "Earnings"


def filing_events(records: Iterable[FilingRecord]) -> list[MarketEvent]:
    """Map filings that carry a document link to filing events."""
    return [
        MarketEvent(
            kind=EventKind.FILING,
            label=record.form,
            date=record.report_date or record.filed_at,
            source=FILINGS_SOURCE,
            document_url=record.document_url,
        )
        for record in records
        if record.document_url
    ]


def nearest_close(day: date, bars: Sequence[PriceBar]) -> float | None:
    """Return the close of the bar nearest to ``day``, within five days."""
    anchor = datetime(day.year, day.month, day.day, tzinfo=UTC).timestamp()
    best: PriceBar | None = None
    best_gap = float("inf")
    for bar in bars:
        gap = abs(bar.timestamp - anchor) / SECONDS_PER_DAY
        if gap < best_gap:
            best, best_gap = bar, gap
    if best is None or best_gap > MAX_PRICE_GAP_DAYS:
        return None
    return best.close


def overlay_events(
    events: Iterable[MarketEvent],
    bars: Sequence[PriceBar],
    *,
    start: date,
    end: date,
) -> tuple[MarketEvent, ...]:
    """Keep events inside ``[start, end]``, order them and attach prices."""
    inside = sorted((e for e in events if start <= e.date <= end), key=lambda e: e.date)
    return tuple(event.priced(nearest_close(event.date, bars)) for event in inside)
