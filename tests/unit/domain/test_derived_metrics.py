from __future__ import annotations

import pytest

from tickerlens_api.domain.entities.series import NormalizedSeries, SeriesPoint
from tickerlens_api.domain.services.derived_metrics import (
    describe_revenue_trend,
    difference_series,
    growth,
    margin_series,
    safe_ratio,
)


def _series(name: str, *pairs: tuple[str, float | None]) -> NormalizedSeries:
    return NormalizedSeries(concept=name, points=tuple(SeriesPoint(d, v) for d, v in pairs))


def test_safe_ratio_is_null_safe() -> None:
    assert safe_ratio(10, 4) == 2.5
    assert safe_ratio(1, 3, digits=2) == 0.33
    assert safe_ratio(None, 3) is None
    assert safe_ratio(3, None) is None
    assert safe_ratio(3, 0) is None


def test_growth() -> None:
    assert growth(110, 100) == pytest.approx(0.1)
    assert growth(90, 100) == pytest.approx(-0.1)
    assert growth(100, 0) is None
    assert growth(None, 100) is None


def test_margin_series_uses_shared_dates_with_nonzero_revenue() -> None:
    metric = _series("gp", ("2021", 40.0), ("2022", 50.0), ("2023", 60.0))
    revenue = _series("rev", ("2022", 100.0), ("2023", 0.0))
    margin = margin_series("gross_margin", metric, revenue)
    assert [(p.date, p.value) for p in margin.points] == [("2022", 0.5)]


def test_difference_series_skips_missing_operands() -> None:
    ocf = _series("ocf", ("2022", 100.0), ("2023", None))
    capex = _series("capex", ("2022", 30.0), ("2023", 10.0))
    fcf = difference_series("free_cash_flow", ocf, capex)
    assert [(p.date, p.value) for p in fcf.points] == [("2022", 70.0)]


@pytest.mark.parametrize(
    ("revenue_growth", "debt_growth", "expected"),
    [
        (0.111, 0.01, "ACME's revenue grew 11.1% YoY while debt remained relatively flat."),
        (0.2, 0.125, "ACME's revenue grew 20.0% YoY while debt rose 12.5%."),
        (-0.05, -0.3, "ACME's revenue declined 5.0% YoY while debt fell 30.0%."),
        (0.0, None, "ACME's revenue grew 0.0% YoY."),
        (None, 0.5, "ACME fundamentals snapshot."),
    ],
)
def test_insight_sentence(
    revenue_growth: float | None, debt_growth: float | None, expected: str
) -> None:
    assert describe_revenue_trend("ACME", revenue_growth, debt_growth) == expected
