"""Record types flowing through the query layer.

Absent values are always ``None``, never a sentinel number.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

CASE_FIELDS = ('country', 'date', 'total_cases', 'total_deaths')
VACCINATION_FIELDS = (
    'country', 'date', 'total_vaccinations', 'people_vaccinated',
    'people_fully_vaccinated', 'population', 'reproduction_rate',
)
TREND_FIELDS = ('country', 'date', 'total_cases', 'total_deaths', 'death_percentage')
AGGREGATE_FIELDS = ('country', 'avg_death_percentage', 'avg_full_vaccination_rate')
RANKED_FIELDS = TREND_FIELDS + ('rank',)


@dataclass(frozen=True)
class CaseRecord:
    country: str
    date: date
    total_cases: int
    total_deaths: int

    @property
    def key(self) -> Tuple[str, date]:
        return (self.country, self.date)


@dataclass(frozen=True)
class VaccinationRecord:
    country: str
    date: date
    total_vaccinations: Optional[int] = None
    people_vaccinated: Optional[int] = None
    people_fully_vaccinated: Optional[int] = None
    population: Optional[int] = None
    reproduction_rate: Optional[float] = None

    @property
    def key(self) -> Tuple[str, date]:
        return (self.country, self.date)


@dataclass(frozen=True)
class CombinedRecord:
    country: str
    date: date
    total_cases: int
    total_deaths: int
    death_percentage: Optional[float]
    total_vaccinations: Optional[int]
    people_vaccinated: Optional[int]
    people_fully_vaccinated: Optional[int]
    full_vaccination_rate: Optional[float]
    reproduction_rate: Optional[float]


@dataclass(frozen=True)
class TrendRecord:
    country: str
    date: date
    total_cases: int
    total_deaths: int
    death_percentage: Optional[float]


@dataclass(frozen=True)
class RankedRecord:
    country: str
    date: date
    total_cases: int
    total_deaths: int
    death_percentage: Optional[float]
    # position within the country; always 1 for top-per-country results
    rank: int = 1


@dataclass(frozen=True)
class AggregateRecord:
    country: str
    avg_death_percentage: Optional[float]
    avg_full_vaccination_rate: Optional[float]


@dataclass(frozen=True)
class RejectedRecord:
    table: str
    index: int
    reason: str
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CorrelationResult:
    """Pearson coefficient plus a diagnostic channel.

    ``value`` is None when the coefficient is undefined; ``reason`` then says
    why (``insufficient_pairs`` or ``zero_variance``).
    """
    value: Optional[float]
    pairs: int
    reason: Optional[str] = None

    INSUFFICIENT_PAIRS = 'insufficient_pairs'
    ZERO_VARIANCE = 'zero_variance'

    @property
    def is_defined(self) -> bool:
        return self.value is not None

    def __float__(self) -> float:
        if self.value is None:
            raise ValueError(f"Correlation is undefined ({self.reason}, {self.pairs} pairs)")
        return self.value


@dataclass
class LoadResult:
    records: List[Any]
    rejected: List[RejectedRecord]

    @property
    def ok(self) -> bool:
        return not self.rejected
