"""Equality join of cases and vaccinations with the two derived ratios."""
import logging
from typing import Any, List, Sequence, Union

from .dataframe import DataFrame
from .metrics import death_percentage, full_vaccination_rate
from .records import CASE_FIELDS, VACCINATION_FIELDS, CaseRecord, CombinedRecord, VaccinationRecord

logger = logging.getLogger(__name__)

JOIN_KEYS = ['country', 'date']

COMBINED_FIELDS = [
    'country', 'date', 'total_cases', 'total_deaths', 'death_percentage',
    'total_vaccinations', 'people_vaccinated', 'people_fully_vaccinated',
    'full_vaccination_rate', 'reproduction_rate',
]


def _frame(records: Union[DataFrame, Sequence[Any]], columns) -> DataFrame:
    if isinstance(records, DataFrame):
        return records
    if not records:
        return DataFrame.empty(columns)
    return DataFrame.from_records(list(records), columns)


def combine_frame(cases: Union[DataFrame, Sequence[CaseRecord]],
                  vaccinations: Union[DataFrame, Sequence[VaccinationRecord]]) -> DataFrame:
    """Inner join on (country, date) and add the derived columns.

    Keys present in only one table produce no row. Output follows the order
    of the cases table.
    """
    left = _frame(cases, CASE_FIELDS)
    right = _frame(vaccinations, VACCINATION_FIELDS)
    joined = left.join(right, on=JOIN_KEYS, how='inner')

    deaths_pct = [death_percentage(d, c) for d, c in zip(joined['total_deaths'], joined['total_cases'])]
    vax_rate = [full_vaccination_rate(p, pop)
                for p, pop in zip(joined['people_fully_vaccinated'], joined['population'])]

    combined = joined.with_column('death_percentage', deaths_pct)
    combined = combined.with_column('full_vaccination_rate', vax_rate)
    logger.debug("Joined %d cases x %d vaccinations -> %d rows", len(left), len(right), len(combined))
    return combined.select(COMBINED_FIELDS)


def combine(cases: Sequence[CaseRecord], vaccinations: Sequence[VaccinationRecord]) -> List[CombinedRecord]:
    return combine_frame(cases, vaccinations).to_records(CombinedRecord)
