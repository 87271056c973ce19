"""Shared fixtures: a small cases/vaccinations pair and a combined-row factory."""
from datetime import date

import pytest

from covid_query.records import CaseRecord, CombinedRecord, VaccinationRecord
from covid_query.store import RecordStore

D1 = date(2021, 1, 1)
D2 = date(2021, 1, 2)
D3 = date(2021, 1, 3)


@pytest.fixture
def cases():
    return [
        CaseRecord("A", D1, 1000, 50),
        CaseRecord("A", D2, 2000, 150),
        CaseRecord("B", D1, 0, 0),
        CaseRecord("C", D1, 5000, 100),
    ]


@pytest.fixture
def vaccinations():
    return [
        VaccinationRecord("A", D1, people_fully_vaccinated=500, population=1000),
        VaccinationRecord("A", D2, total_vaccinations=1500, people_vaccinated=900,
                          people_fully_vaccinated=600, population=1000, reproduction_rate=0.85),
        VaccinationRecord("B", D1, people_fully_vaccinated=100, population=1000),
        VaccinationRecord("D", D1, people_fully_vaccinated=100, population=1000),
    ]


@pytest.fixture
def store(cases, vaccinations):
    return RecordStore.from_records(cases, vaccinations)


@pytest.fixture
def make_combined():
    """Factory for CombinedRecord rows with only the fields a test cares about."""
    def _make(country, day, total_cases=10000, total_deaths=0, death_percentage=None,
              full_vaccination_rate=None, **extra):
        values = dict(
            country=country,
            date=day,
            total_cases=total_cases,
            total_deaths=total_deaths,
            death_percentage=death_percentage,
            total_vaccinations=None,
            people_vaccinated=None,
            people_fully_vaccinated=None,
            full_vaccination_rate=full_vaccination_rate,
            reproduction_rate=None,
        )
        values.update(extra)
        return CombinedRecord(**values)

    return _make
