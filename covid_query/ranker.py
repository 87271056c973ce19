"""Highest death percentage per country, then the top N countries.

Only rows with ``total_cases > min_cases`` and ``total_deaths <= total_cases``
are ranked. Within a country the earliest date wins a tie; across countries
ties are broken by country name.
"""
import logging
from typing import List, Sequence

from .dataframe import DataFrame
from .metrics import death_percentage
from .records import RANKED_FIELDS, TREND_FIELDS, CombinedRecord, RankedRecord

logger = logging.getLogger(__name__)

DEFAULT_MIN_CASES = 1000
DEFAULT_LIMIT = 10


def _qualifies(row, min_cases: int) -> bool:
    cases = row['total_cases']
    deaths = row['total_deaths']
    if cases is None or deaths is None:
        return False
    return cases > min_cases and deaths <= cases


def top_death_percentage_frame(combined: DataFrame, min_cases: int = DEFAULT_MIN_CASES,
                               limit: int = DEFAULT_LIMIT) -> DataFrame:
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    candidates = combined.where(lambda row: _qualifies(row, min_cases))
    if len(candidates) == 0:
        return DataFrame.empty(RANKED_FIELDS)

    # never trust a death_percentage already on the row
    pct = [death_percentage(d, c) for d, c in zip(candidates['total_deaths'], candidates['total_cases'])]
    candidates = candidates.select(list(TREND_FIELDS[:-1])).with_column('death_percentage', pct)

    best = candidates.groupby('country').top(
        by=['death_percentage', 'date'], n=1, ascending=[False, True],
    )
    ranked = best.sort_values(['death_percentage', 'country'], ascending=[False, True])
    logger.debug("Ranked %d qualifying rows across %d countries", len(candidates), len(best))
    return ranked.head(limit).select(list(RANKED_FIELDS))


def top_death_percentage(combined: Sequence[CombinedRecord], min_cases: int = DEFAULT_MIN_CASES,
                         limit: int = DEFAULT_LIMIT) -> List[RankedRecord]:
    frame = DataFrame.from_records(list(combined), list(TREND_FIELDS[:-1])) if combined \
        else DataFrame.empty(TREND_FIELDS[:-1])
    return top_death_percentage_frame(frame, min_cases, limit).to_records(RankedRecord)
