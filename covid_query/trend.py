from typing import Iterable, List, Optional, Sequence

from .dataframe import DataFrame
from .metrics import death_percentage
from .records import TREND_FIELDS, CombinedRecord, TrendRecord


def trend_frame(combined: DataFrame, countries: Optional[Iterable[str]] = None) -> DataFrame:
    """Death percentage over time, ordered by country then date."""
    frame = combined
    if isinstance(countries, str):
        countries = [countries]
    if countries is not None:
        wanted = set(countries)
        frame = frame.filter([c in wanted for c in frame['country']])

    # recomputed from the counts, like the ranking query does
    pct = [death_percentage(d, c) for d, c in zip(frame['total_deaths'], frame['total_cases'])]
    frame = frame.select(list(TREND_FIELDS[:-1])).with_column('death_percentage', pct)
    return frame.sort_values(['country', 'date'])


def trend(combined: Sequence[CombinedRecord], countries: Optional[Iterable[str]] = None) -> List[TrendRecord]:
    frame = DataFrame.from_records(list(combined), list(TREND_FIELDS)) if combined else DataFrame.empty(TREND_FIELDS)
    return trend_frame(frame, countries).to_records(TrendRecord)
