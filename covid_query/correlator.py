"""Pearson correlation between death percentage and full vaccination rate."""
import logging
import math
from typing import List, Sequence, Tuple

from .dataframe import DataFrame
from .records import CombinedRecord, CorrelationResult

logger = logging.getLogger(__name__)

DEFAULT_MIN_CASES = 1000


def pearson(pairs: Sequence[Tuple[float, float]]) -> CorrelationResult:
    """Population Pearson coefficient (normalised by N, like SQL ``corr``).

    Undefined for fewer than two pairs or when either side is constant.
    """
    n = len(pairs)
    if n < 2:
        return CorrelationResult(value=None, pairs=n, reason=CorrelationResult.INSUFFICIENT_PAIRS)

    # a constant column must be caught before float means blur it
    if len({x for x, _ in pairs}) < 2 or len({y for _, y in pairs}) < 2:
        return CorrelationResult(value=None, pairs=n, reason=CorrelationResult.ZERO_VARIANCE)

    mean_x = math.fsum(x for x, _ in pairs) / n
    mean_y = math.fsum(y for _, y in pairs) / n
    sxx = math.fsum((x - mean_x) ** 2 for x, _ in pairs)
    syy = math.fsum((y - mean_y) ** 2 for _, y in pairs)
    sxy = math.fsum((x - mean_x) * (y - mean_y) for x, y in pairs)

    if sxx == 0 or syy == 0:
        return CorrelationResult(value=None, pairs=n, reason=CorrelationResult.ZERO_VARIANCE)

    r = sxy / math.sqrt(sxx * syy)
    # float error can push |r| a hair past 1
    return CorrelationResult(value=max(-1.0, min(1.0, r)), pairs=n)


def _present_pairs(frame: DataFrame, col1: str, col2: str) -> List[Tuple[float, float]]:
    return [(x, y) for x, y in zip(frame[col1], frame[col2]) if x is not None and y is not None]


def correlate_frame(combined: DataFrame, min_cases: int = DEFAULT_MIN_CASES,
                    x: str = 'death_percentage', y: str = 'full_vaccination_rate') -> CorrelationResult:
    subset = combined.filter([c is not None and c > min_cases for c in combined['total_cases']])
    result = pearson(_present_pairs(subset, x, y))
    if not result.is_defined:
        logger.info("Correlation of %s and %s undefined: %s (%d pairs)", x, y, result.reason, result.pairs)
    return result


def correlate(combined: Sequence[CombinedRecord], min_cases: int = DEFAULT_MIN_CASES) -> CorrelationResult:
    columns = ['total_cases', 'death_percentage', 'full_vaccination_rate']
    frame = DataFrame.from_records(list(combined), columns) if combined else DataFrame.empty(columns)
    return correlate_frame(frame, min_cases)