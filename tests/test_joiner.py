"""Tests for the cases/vaccinations join."""
from datetime import date

from covid_query.joiner import COMBINED_FIELDS, combine, combine_frame
from covid_query.records import CaseRecord, VaccinationRecord

D1 = date(2021, 1, 1)


def test_combine_computes_both_ratios():
    """1000 cases with 50 deaths and 500 of 1000 vaccinated."""
    out = combine([CaseRecord("A", D1, 1000, 50)],
                  [VaccinationRecord("A", D1, people_fully_vaccinated=500, population=1000)])
    assert len(out) == 1
    assert out[0].death_percentage == 5.0
    assert out[0].full_vaccination_rate == 50.0


def test_zero_cases_gives_absent_death_percentage():
    """Zero cases is not an error and not zero."""
    out = combine([CaseRecord("B", D1, 0, 0)],
                  [VaccinationRecord("B", D1, people_fully_vaccinated=10, population=100)])
    assert out[0].death_percentage is None
    assert out[0].full_vaccination_rate == 10.0


def test_absent_or_zero_population_gives_absent_rate():
    """Missing population or fully-vaccinated count yields None."""
    out = combine(
        [CaseRecord("A", D1, 10, 1), CaseRecord("B", D1, 10, 1), CaseRecord("C", D1, 10, 1)],
        [VaccinationRecord("A", D1, people_fully_vaccinated=5, population=0),
         VaccinationRecord("B", D1, people_fully_vaccinated=5),
         VaccinationRecord("C", D1, population=100)],
    )
    assert [r.full_vaccination_rate for r in out] == [None, None, None]


def test_inner_join_drops_unmatched_keys(cases, vaccinations):
    """Keys in only one table produce no row."""
    out = combine(cases, vaccinations)
    keys = {(r.country, r.date) for r in out}
    assert keys == {("A", date(2021, 1, 1)), ("A", date(2021, 1, 2)), ("B", date(2021, 1, 1))}
    assert len(out) <= min(len(cases), len(vaccinations))


def test_same_country_different_date_does_not_match():
    """Both key columns must match."""
    out = combine([CaseRecord("A", D1, 10, 1)],
                  [VaccinationRecord("A", date(2021, 1, 2), population=10)])
    assert out == []


def test_vaccination_columns_pass_through(cases, vaccinations):
    """Raw vaccination fields are carried unchanged."""
    row = next(r for r in combine(cases, vaccinations) if r.date == date(2021, 1, 2))
    assert row.total_vaccinations == 1500
    assert row.people_vaccinated == 900
    assert row.people_fully_vaccinated == 600
    assert row.reproduction_rate == 0.85
    assert row.death_percentage == 7.5
    assert row.full_vaccination_rate == 60.0


def test_combine_is_idempotent(cases, vaccinations):
    """Same inputs give the same rows."""
    assert combine(cases, vaccinations) == combine(cases, vaccinations)


def test_anomalous_rows_pass_through():
    """More deaths than cases is not corrected by the join."""
    out = combine([CaseRecord("A", D1, 10, 20)], [VaccinationRecord("A", D1)])
    assert out[0].death_percentage == 200.0


def test_combine_empty_inputs():
    """Empty inputs give an empty frame with the full schema."""
    frame = combine_frame([], [])
    assert len(frame) == 0
    assert frame.columns == COMBINED_FIELDS
