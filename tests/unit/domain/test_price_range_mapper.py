from __future__ import annotations

from datetime import date

import pytest

from tickerlens_api.domain.entities.price_bar import PriceBar
from tickerlens_api.domain.enums.price_history import BarInterval, BarSpan, PriceRange
from tickerlens_api.domain.exceptions.financials import InvalidInput
from tickerlens_api.domain.services.price_range_mapper import (
    daily_plan,
    order_bars,
    parse_interval,
    parse_range,
    plan_bars,
    summarize_year,
)

TODAY = date(2024, 6, 14)


def test_one_day_defaults_to_minute_bars_over_two_days() -> None:
    plan = plan_bars(PriceRange.ONE_DAY, None, today=TODAY)
    assert plan.interval is BarInterval.M1
    assert (plan.granularity.unit_count, plan.granularity.unit_span) == (1, BarSpan.MINUTE)
    assert plan.window_days == 2
    assert plan.end == TODAY


@pytest.mark.parametrize(
    ("range_", "interval", "count", "span", "days"),
    [
        (PriceRange.ONE_WEEK, BarInterval.M15, 15, BarSpan.MINUTE, 7),
        (PriceRange.ONE_MONTH, BarInterval.H1, 1, BarSpan.HOUR, 31),
        (PriceRange.SIX_MONTHS, BarInterval.D1, 1, BarSpan.DAY, 186),
        (PriceRange.ONE_YEAR, BarInterval.D1, 1, BarSpan.DAY, 366),
        (PriceRange.FIVE_YEARS, BarInterval.D1, 1, BarSpan.DAY, 1827),
    ],
)
def test_range_defaults(
    range_: PriceRange, interval: BarInterval, count: int, span: BarSpan, days: int
) -> None:
    plan = plan_bars(range_, None, today=TODAY)
    assert plan.interval is interval
    assert (plan.granularity.unit_count, plan.granularity.unit_span) == (count, span)
    assert plan.window_days == days


def test_explicit_interval_wins_over_range_default() -> None:
    plan = plan_bars(PriceRange.FIVE_YEARS, BarInterval.H1, today=TODAY)
    assert plan.granularity.unit_span is BarSpan.HOUR
    assert plan.window_days == 1827


def test_parsing_is_case_insensitive_with_a_one_year_default() -> None:
    assert parse_range(None) is PriceRange.ONE_YEAR
    assert parse_range(" 5y ") is PriceRange.FIVE_YEARS
    assert parse_interval(None) is None
    assert parse_interval("15M") is BarInterval.M15


def test_unknown_range_or_interval_is_invalid_input() -> None:
    with pytest.raises(InvalidInput) as ei:
        parse_range("2Y")
    assert ei.value.details["param"] == "range"
    with pytest.raises(InvalidInput):
        parse_interval("5m")


def test_daily_plan_keeps_the_window() -> None:
    intraday = plan_bars(PriceRange.ONE_WEEK, None, today=TODAY)
    daily = daily_plan(intraday)
    assert daily.interval is BarInterval.D1
    assert (daily.start, daily.end) == (intraday.start, intraday.end)
    assert daily_plan(daily) is daily


def test_order_bars_sorts_ascending_and_keeps_last_duplicate() -> None:
    bars = [PriceBar(300, 3.0), PriceBar(100, 1.0), PriceBar(300, 3.5), PriceBar(200, 2.0)]
    ordered = order_bars(bars)
    assert [b.timestamp for b in ordered] == [100, 200, 300]
    assert ordered[-1].close == 3.5


def test_summarize_year_uses_close_when_high_low_missing() -> None:
    bars = [
        PriceBar(1, close=10.0, volume=100, high=12.0, low=9.0),
        PriceBar(2, close=15.0, volume=201),
        PriceBar(3, close=8.5),
    ]
    assert summarize_year(bars) == (8.5, 15.0, 150.0)
    assert summarize_year([]) == (None, None, None)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("m1", BarInterval.M1),
        ("M15", BarInterval.M15),
        ("h1", BarInterval.H1),
        (" d1 ", BarInterval.D1),
    ],
)
def test_unit_first_interval_spellings(raw: str, expected: BarInterval) -> None:
    assert parse_interval(raw) is expected
