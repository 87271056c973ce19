"""Tests for the per-country top death percentage ranking."""
from datetime import date

import pytest

from covid_query.ranker import top_death_percentage

D1 = date(2021, 1, 1)
D2 = date(2021, 1, 2)
D3 = date(2021, 1, 3)


@pytest.fixture
def rows(make_combined):
    return [
        make_combined("A", D2, 3000, 150),   # 5.0, later tie
        make_combined("A", D1, 2000, 100),   # 5.0, earliest
        make_combined("A", D3, 500, 100),    # too few cases
        make_combined("B", D1, 1500, 2000),  # deaths above cases
        make_combined("B", D2, 1500, 30),    # 2.0
        make_combined("C", D1, 1200, 120),   # 10.0
        make_combined("D", D1, 4000, 200),   # 5.0, ties with A
    ]


def test_one_row_per_country_sorted_descending(rows):
    """Each country's peak, highest first."""
    out = top_death_percentage(rows, min_cases=1000, limit=10)
    assert [(r.country, r.death_percentage) for r in out] == [("C", 10.0), ("A", 5.0), ("D", 5.0), ("B", 2.0)]
    assert all(r.rank == 1 for r in out)


def test_ties_pick_earliest_date(rows):
    """Within a country the earliest of equal peaks wins."""
    out = top_death_percentage(rows, min_cases=1000, limit=10)
    a = next(r for r in out if r.country == "A")
    assert a.date == D1
    assert a.total_cases == 2000


def test_filter_excludes_small_and_insane_rows(rows):
    """Rows at or below min_cases or with deaths above cases are never ranked."""
    out = top_death_percentage(rows, min_cases=1000, limit=10)
    for r in out:
        assert r.total_cases > 1000
        assert r.total_deaths <= r.total_cases
    b = next(r for r in out if r.country == "B")
    assert b.date == D2


def test_limit(rows):
    """Only the first `limit` countries are returned."""
    out = top_death_percentage(rows, min_cases=1000, limit=2)
    assert [r.country for r in out] == ["C", "A"]
    assert top_death_percentage(rows, min_cases=1000, limit=0) == []
    with pytest.raises(ValueError):
        top_death_percentage(rows, limit=-1)


def test_fewer_countries_than_limit(make_combined):
    """A single record is a valid top-1 for its country."""
    out = top_death_percentage([make_combined("Z", D1, 2000, 20)], min_cases=1000, limit=10)
    assert len(out) == 1
    assert out[0].death_percentage == 1.0


def test_recomputes_instead_of_trusting_row(make_combined):
    """A missing or wrong stored percentage does not change the ranking."""
    out = top_death_percentage([make_combined("A", D1, 2000, 100, death_percentage=None),
                                make_combined("B", D1, 2000, 20, death_percentage=99.0)])
    assert [(r.country, r.death_percentage) for r in out] == [("A", 5.0), ("B", 1.0)]


def test_min_cases_boundary_is_exclusive(make_combined):
    """Exactly min_cases does not qualify."""
    assert top_death_percentage([make_combined("A", D1, 1000, 10)], min_cases=1000) == []


def test_zero_case_rows_rank_last(make_combined):
    """With a negative threshold, absent percentages sort last."""
    out = top_death_percentage([make_combined("A", D1, 0, 0), make_combined("B", D1, 10, 1)], min_cases=-1)
    assert [(r.country, r.death_percentage) for r in out] == [("B", 10.0), ("A", None)]
