import logging
from decimal import Decimal
from typing import List, Sequence

from .dataframe import DataFrame
from .metrics import exact_mean, round_half_up
from .records import AGGREGATE_FIELDS, AggregateRecord, CombinedRecord

logger = logging.getLogger(__name__)

DEFAULT_MIN_AVG_VACCINATION_RATE = 20.0


def aggregate_frame(combined: DataFrame,
                    min_avg_vaccination_rate: float = DEFAULT_MIN_AVG_VACCINATION_RATE) -> DataFrame:
    """Per-country averages of death percentage and full vaccination rate.

    Absent values are left out of both sum and count. Means are exact
    decimals; a country is kept only when its unrounded average vaccination
    rate is above the threshold, so a country with no vaccination rate at all
    is always dropped. Sorted by average death percentage, highest first.
    """
    grouped = combined.groupby('country').agg({
        'death_percentage': [exact_mean],
        'full_vaccination_rate': [exact_mean],
    })

    threshold = Decimal(repr(min_avg_vaccination_rate))
    avg_vax = grouped['exact_mean_full_vaccination_rate']
    kept = grouped.filter([v is not None and v > threshold for v in avg_vax])

    out = DataFrame({
        'country': kept['country'],
        'avg_death_percentage': [round_half_up(v) for v in kept['exact_mean_death_percentage']],
        'avg_full_vaccination_rate': [round_half_up(v) for v in kept['exact_mean_full_vaccination_rate']],
    })
    logger.debug("Kept %d of %d countries above %.2f%% average full vaccination",
                 len(out), len(grouped), min_avg_vaccination_rate)
    return out.sort_values(['avg_death_percentage', 'country'], ascending=[False, True])


def aggregate(combined: Sequence[CombinedRecord],
              min_avg_vaccination_rate: float = DEFAULT_MIN_AVG_VACCINATION_RATE) -> List[AggregateRecord]:
    columns = ['country', 'death_percentage', 'full_vaccination_rate']
    frame = DataFrame.from_records(list(combined), columns) if combined else DataFrame.empty(columns)
    return aggregate_frame(frame, min_avg_vaccination_rate).select(list(AGGREGATE_FIELDS)).to_records(AggregateRecord)
