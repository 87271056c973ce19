"""Descriptive and correlational statistics over joined COVID-19 case and vaccination data."""

from .aggregator import aggregate
from .correlator import correlate, pearson
from .dataframe import DataFrame
from .joiner import combine
from .queries import CovidQueries, QueryReport
from .ranker import top_death_percentage
from .records import (
    AggregateRecord,
    CaseRecord,
    CombinedRecord,
    CorrelationResult,
    RankedRecord,
    RejectedRecord,
    TrendRecord,
    VaccinationRecord,
)
from .store import MissingColumnsError, RecordStore
from .trend import trend

__all__ = [
    "AggregateRecord",
    "CaseRecord",
    "CombinedRecord",
    "CorrelationResult",
    "CovidQueries",
    "DataFrame",
    "MissingColumnsError",
    "QueryReport",
    "RankedRecord",
    "RecordStore",
    "RejectedRecord",
    "TrendRecord",
    "VaccinationRecord",
    "aggregate",
    "combine",
    "correlate",
    "pearson",
    "top_death_percentage",
    "trend",
]
