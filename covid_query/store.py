"""Record Store: the two validated input tables.

Malformed rows are rejected one at a time and kept on ``rejected``; a bad row
never fails the whole load.
"""
import logging
from dataclasses import asdict, is_dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .csv_parser import custom_csv_parser, parse_date, to_float_or_none, to_int_or_none
from .dataframe import DataFrame
from .records import (
    CASE_FIELDS,
    VACCINATION_FIELDS,
    CaseRecord,
    LoadResult,
    RejectedRecord,
    VaccinationRecord,
)

logger = logging.getLogger(__name__)

CASES_TABLE = 'cases'
VACCINATIONS_TABLE = 'vaccinations'

# OWID exports call the country column "location"
COLUMN_ALIASES = {'location': 'country'}


class MissingColumnsError(ValueError):
    def __init__(self, path: Path, missing: List[str]):
        self.path = path
        self.missing = missing
        super().__init__(f"{path.name} is missing required columns: {', '.join(missing)}")


def _as_mapping(raw: Any) -> Dict[str, Any]:
    if is_dataclass(raw) and not isinstance(raw, type):
        return asdict(raw)
    if isinstance(raw, dict):
        return raw
    raise TypeError(f"Expected a record or mapping, got {type(raw).__name__}")


def _country(raw: Dict[str, Any]) -> Optional[str]:
    value = raw.get('country')
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def _count(raw: Dict[str, Any], name: str, required: bool) -> Tuple[Optional[int], Optional[str]]:
    value = raw.get(name)
    if value is None:
        return None, (f"missing {name}" if required else None)
    number = to_int_or_none(value)
    if number is None:
        return None, f"{name} is not an integer: {value!r}"
    if number < 0:
        return None, f"{name} is negative: {number}"
    return number, None


def parse_case(raw: Any) -> Tuple[Optional[CaseRecord], Optional[str]]:
    """Validate one cases row. Returns ``(record, None)`` or ``(None, reason)``."""
    row = _as_mapping(raw)
    country = _country(row)
    if country is None:
        return None, "missing country"
    day = parse_date(row.get('date'))
    if day is None:
        return None, f"invalid date: {row.get('date')!r}"

    counts = {}
    for name in ('total_cases', 'total_deaths'):
        counts[name], reason = _count(row, name, required=True)
        if reason:
            return None, reason

    return CaseRecord(country=country, date=day, **counts), None


def parse_vaccination(raw: Any) -> Tuple[Optional[VaccinationRecord], Optional[str]]:
    """Validate one vaccinations row; only country and date are required."""
    row = _as_mapping(raw)
    country = _country(row)
    if country is None:
        return None, "missing country"
    day = parse_date(row.get('date'))
    if day is None:
        return None, f"invalid date: {row.get('date')!r}"

    counts = {}
    for name in ('total_vaccinations', 'people_vaccinated', 'people_fully_vaccinated', 'population'):
        counts[name], reason = _count(row, name, required=False)
        if reason:
            return None, reason

    rate = row.get('reproduction_rate')
    reproduction_rate = to_float_or_none(rate)
    if rate is not None and reproduction_rate is None:
        return None, f"reproduction_rate is not a number: {rate!r}"

    return VaccinationRecord(country=country, date=day, reproduction_rate=reproduction_rate, **counts), None


def _load_table(table: str, rows: Iterable[Any], parser) -> LoadResult:
    records = []
    rejected = []
    seen = set()
    for index, raw in enumerate(rows):
        record, reason = parser(raw)
        if record is not None and record.key in seen:
            record, reason = None, f"duplicate key {record.country!r} {record.date.isoformat()}"
        if record is None:
            rejected.append(RejectedRecord(table=table, index=index, reason=reason, raw=dict(_as_mapping(raw))))
            continue
        seen.add(record.key)
        records.append(record)

    if rejected:
        logger.warning("Rejected %d of %d %s rows (first: row %d, %s)",
                       len(rejected), len(records) + len(rejected), table,
                       rejected[0].index, rejected[0].reason)
    logger.info("Loaded %d %s records", len(records), table)
    return LoadResult(records=records, rejected=rejected)


def load_cases(rows: Iterable[Any]) -> LoadResult:
    return _load_table(CASES_TABLE, rows, parse_case)


def load_vaccinations(rows: Iterable[Any]) -> LoadResult:
    return _load_table(VACCINATIONS_TABLE, rows, parse_vaccination)


def read_csv_rows(path: Union[str, Path], required: Iterable[str], separator: str = ',') -> List[Dict[str, Any]]:
    """Parse a CSV file into row dicts, applying column aliases."""
    path = Path(path)
    data = custom_csv_parser(path, separator=separator, date_columns=('date',))
    for alias, name in COLUMN_ALIASES.items():
        if alias in data and name not in data:
            data[name] = data.pop(alias)

    missing = sorted(set(required) - set(data))
    if missing:
        raise MissingColumnsError(path, missing)
    return DataFrame(data).rows()


class RecordStore:
    """Immutable holder for the cases and vaccinations tables."""

    def __init__(self, cases: LoadResult, vaccinations: LoadResult):
        self._cases = tuple(cases.records)
        self._vaccinations = tuple(vaccinations.records)
        self._rejected = tuple(cases.rejected) + tuple(vaccinations.rejected)

    @classmethod
    def from_records(cls, cases: Iterable[Any], vaccinations: Iterable[Any]) -> 'RecordStore':
        return cls(load_cases(cases), load_vaccinations(vaccinations))

    @classmethod
    def from_csv(cls, cases_path: Union[str, Path], vaccinations_path: Union[str, Path],
                 separator: str = ',') -> 'RecordStore':
        case_rows = read_csv_rows(cases_path, CASE_FIELDS, separator)
        # vaccination measures are optional columns
        vax_rows = read_csv_rows(vaccinations_path, ('country', 'date'), separator)
        return cls.from_records(case_rows, vax_rows)

    @property
    def cases(self) -> Tuple[CaseRecord, ...]:
        return self._cases

    @property
    def vaccinations(self) -> Tuple[VaccinationRecord, ...]:
        return self._vaccinations

    @property
    def rejected(self) -> Tuple[RejectedRecord, ...]:
        return self._rejected

    def cases_frame(self) -> DataFrame:
        return DataFrame.from_records(self._cases, CASE_FIELDS)

    def vaccinations_frame(self) -> DataFrame:
        return DataFrame.from_records(self._vaccinations, VACCINATION_FIELDS)

    def countries(self) -> List[str]:
        vax = {v.country for v in self._vaccinations}
        return sorted({c.country for c in self._cases if c.country in vax})

    def date_range(self) -> Optional[Tuple[date, date]]:
        dates = [c.date for c in self._cases]
        if not dates:
            return None
        return min(dates), max(dates)

    def __repr__(self) -> str:
        return (f"<RecordStore: {len(self._cases):,} cases, {len(self._vaccinations):,} vaccinations, "
                f"{len(self._rejected)} rejected>")
