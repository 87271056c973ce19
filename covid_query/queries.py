"""Query facade over a RecordStore.

The combined table is built once per facade and shared read-only by the
trend, ranking, aggregate and correlation queries.
"""
import logging
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .aggregator import aggregate_frame
from .config import Config, config as default_config
from .correlator import correlate_frame
from .dataframe import DataFrame
from .joiner import combine_frame
from .ranker import top_death_percentage_frame
from .records import (
    AGGREGATE_FIELDS,
    AggregateRecord,
    CombinedRecord,
    CorrelationResult,
    RankedRecord,
    RejectedRecord,
    TrendRecord,
)
from .store import RecordStore
from .trend import trend_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryReport:
    trend: List[TrendRecord]
    top_death_percentage: List[RankedRecord]
    aggregate: List[AggregateRecord]
    correlation: CorrelationResult
    rejected: Tuple[RejectedRecord, ...]


class CovidQueries:
    def __init__(self, store: RecordStore, settings: Optional[Config] = None):
        self.store = store
        self.settings = settings or default_config
        self._combined: Optional[DataFrame] = None

    @classmethod
    def from_config(cls, settings: Optional[Config] = None) -> 'CovidQueries':
        settings = settings or default_config
        settings.validate()
        store = RecordStore.from_csv(settings.cases_path, settings.vaccinations_path,
                                     separator=settings.CSV_SEPARATOR)
        return cls(store, settings)

    @property
    def rejected(self) -> Tuple[RejectedRecord, ...]:
        return self.store.rejected

    @property
    def combined_frame(self) -> DataFrame:
        if self._combined is None:
            start = time.perf_counter()
            self._combined = combine_frame(self.store.cases_frame(), self.store.vaccinations_frame())
            logger.info("Combined table: %d rows in %.1f ms",
                        len(self._combined), (time.perf_counter() - start) * 1000)
        return self._combined

    def combine(self) -> List[CombinedRecord]:
        return self.combined_frame.to_records(CombinedRecord)

    def trend(self, countries: Optional[Iterable[str]] = None) -> List[TrendRecord]:
        return trend_frame(self.combined_frame, countries).to_records(TrendRecord)

    def top_death_percentage(self, min_cases: Optional[int] = None,
                             limit: Optional[int] = None) -> List[RankedRecord]:
        min_cases = self.settings.MIN_CASES if min_cases is None else min_cases
        limit = self.settings.TOP_LIMIT if limit is None else limit
        return top_death_percentage_frame(self.combined_frame, min_cases, limit).to_records(RankedRecord)

    def aggregate(self, min_avg_vaccination_rate: Optional[float] = None) -> List[AggregateRecord]:
        if min_avg_vaccination_rate is None:
            min_avg_vaccination_rate = self.settings.MIN_AVG_VACCINATION_RATE
        frame = aggregate_frame(self.combined_frame, min_avg_vaccination_rate)
        return frame.select(list(AGGREGATE_FIELDS)).to_records(AggregateRecord)

    def correlate(self, min_cases: Optional[int] = None) -> CorrelationResult:
        min_cases = self.settings.MIN_CASES if min_cases is None else min_cases
        return correlate_frame(self.combined_frame, min_cases)

    def report(self) -> QueryReport:
        """Run every query with the configured defaults."""
        return QueryReport(
            trend=self.trend(),
            top_death_percentage=self.top_death_percentage(),
            aggregate=self.aggregate(),
            correlation=self.correlate(),
            rejected=self.rejected,
        )
