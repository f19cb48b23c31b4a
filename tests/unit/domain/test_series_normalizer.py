from __future__ import annotations

import math
from typing import Any

from tickerlens_api.domain.entities.series import NormalizedSeries, SeriesPoint
from tickerlens_api.domain.services.series_normalizer import (
    CONCEPTS,
    latest,
    normalize_concept,
    previous,
    resolve_date,
)


def _facts(concepts: dict[str, dict[str, list[dict[str, Any]]]]) -> dict[str, Any]:
    return {"facts": {"us-gaap": {tag: {"units": units} for tag, units in concepts.items()}}}


def test_first_tag_with_observations_wins() -> None:
    facts = _facts(
        {
            "Revenues": {"USD": [{"end": "2023-12-31", "val": 10}]},
            "RevenueFromContractWithCustomerExcludingAssessedTax": {
                "USD": [{"end": "2023-12-31", "val": 99}]
            },
        }
    )
    series = normalize_concept(facts, CONCEPTS["revenue"])
    assert series.tag == "Revenues"
    assert [p.value for p in series.points] == [10.0]


def test_falls_back_to_alias_tag_when_primary_is_absent() -> None:
    facts = _facts(
        {
            "RevenueFromContractWithCustomerExcludingAssessedTax": {
                "USD": [{"end": "2023-12-31", "val": 99}]
            }
        }
    )
    series = normalize_concept(facts, CONCEPTS["revenue"])
    assert series.tag == "RevenueFromContractWithCustomerExcludingAssessedTax"
    assert series.unit == "USD"


def test_eps_prefers_per_share_unit_then_plain_currency() -> None:
    facts = _facts({"EarningsPerShareDiluted": {"USD": [{"end": "2023-12-31", "val": 6.1}]}})
    series = normalize_concept(facts, CONCEPTS["eps"])
    assert series.unit == "USD"
    assert latest(series) == 6.1

    facts = _facts(
        {
            "EarningsPerShareDiluted": {
                "USD/shares": [{"end": "2023-12-31", "val": 6.13}],
                "USD": [{"end": "2023-12-31", "val": 1.0}],
            }
        }
    )
    assert latest(normalize_concept(facts, CONCEPTS["eps"])) == 6.13


def test_points_are_ascending_and_deduplicated_with_later_winning() -> None:
    facts = _facts(
        {
            "NetIncomeLoss": {
                "USD": [
                    {"end": "2023-12-31", "val": 3},
                    {"end": "2021-12-31", "val": 1},
                    {"end": "2022-12-31", "val": 2},
                    {"end": "2023-12-31", "val": 4},
                ]
            }
        }
    )
    series = normalize_concept(facts, CONCEPTS["net_income"])
    assert [p.date for p in series.points] == ["2021-12-31", "2022-12-31", "2023-12-31"]
    assert series.points[-1].value == 4.0


def test_date_resolution_order_and_undated_rows() -> None:
    assert resolve_date({"end": "2023-06-30", "filed": "2023-08-01"}) == "2023-06-30"
    assert resolve_date({"filed": "2023-08-01", "fy": 2023}) == "2023-08-01"
    assert resolve_date({"fy": 2023}) == "2023"
    assert resolve_date({"frame": "CY2023"}) is None

    facts = _facts(
        {
            "Liabilities": {
                "USD": [{"val": 5}, {"fy": 2022, "val": 7}, {"end": "2023-03-31", "val": 8}]
            }
        }
    )
    series = normalize_concept(facts, CONCEPTS["liabilities"])
    assert [(p.date, p.value) for p in series.points] == [("2022", 7.0), ("2023-03-31", 8.0)]


def test_non_finite_and_non_numeric_values_become_none() -> None:
    facts = _facts(
        {
            "GrossProfit": {
                "USD": [
                    {"end": "2021-12-31", "val": "n/a"},
                    {"end": "2022-12-31", "val": math.inf},
                    {"end": "2023-12-31", "value": "1,250"},
                ]
            }
        }
    )
    series = normalize_concept(facts, CONCEPTS["gross_profit"])
    assert [p.value for p in series.points] == [None, None, 1250.0]


def test_missing_concept_yields_empty_series() -> None:
    series = normalize_concept({"facts": {}}, CONCEPTS["equity"])
    assert series.points == ()
    assert series.tag is None
    assert latest(series) is None
    assert previous(series) is None


def test_latest_and_previous() -> None:
    series = NormalizedSeries(
        concept="revenue",
        points=(SeriesPoint("2022-12-31", 90.0), SeriesPoint("2023-12-31", 100.0)),
    )
    assert latest(series) == 100.0
    assert previous(series) == 90.0
    assert series.tail(1).points == (SeriesPoint("2023-12-31", 100.0),)


def test_every_form_is_kept_and_provider_order_settles_shared_dates() -> None:
    facts = _facts(
        {
            "Revenues": {
                "USD": [
                    {"end": "2023-12-31", "val": 100, "form": "10-K", "filed": "2024-02-01"},
                    {"end": "2023-09-30", "val": 90, "form": "10-Q", "filed": "2023-11-01"},
                    {"end": "2023-12-31", "val": 101, "form": "8-K", "filed": "2024-01-15"},
                ]
            }
        }
    )
    series = normalize_concept(facts, CONCEPTS["revenue"])

    assert [p.date for p in series.points] == ["2023-09-30", "2023-12-31"]
    assert [p.value for p in series.points] == [90.0, 101.0]
