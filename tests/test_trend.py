"""Tests for the trend listing."""
from datetime import date

from covid_query.trend import trend


def test_trend_sorted_by_country_then_date(make_combined):
    """Output is ordered by country, then date."""
    rows = [
        make_combined("B", date(2021, 1, 2), 100, 1),
        make_combined("A", date(2021, 1, 3), 100, 3),
        make_combined("B", date(2021, 1, 1), 100, 2),
        make_combined("A", date(2021, 1, 1), 100, 4),
    ]
    out = trend(rows)
    assert [(r.country, r.date.day) for r in out] == [("A", 1), ("A", 3), ("B", 1), ("B", 2)]
    assert [r.death_percentage for r in out] == [4.0, 3.0, 2.0, 1.0]


def test_trend_keeps_every_row_including_anomalies(make_combined):
    """No filtering: zero cases and deaths above cases both appear."""
    rows = [
        make_combined("A", date(2021, 1, 1), 0, 0),
        make_combined("A", date(2021, 1, 2), 10, 30),
    ]
    out = trend(rows)
    assert [r.death_percentage for r in out] == [None, 300.0]


def test_trend_country_filter(make_combined):
    """Optional country filter restricts output."""
    rows = [make_combined("A", date(2021, 1, 1)), make_combined("B", date(2021, 1, 1))]
    assert [r.country for r in trend(rows, countries=["B"])] == ["B"]
    assert trend([]) == []


def test_trend_single_country_string(make_combined):
    """A bare country name is one country, not a set of letters."""
    rows = [make_combined("India", date(2021, 1, 1)), make_combined("Chile", date(2021, 1, 1))]
    assert [r.country for r in trend(rows, countries="India")] == ["India"]
