import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Any, Optional, Union, Iterable, Sequence

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def try_convert_type(value: str) -> Union[int, float, None, str]:
    # Try to convert string to int or float, return None if empty or nan/inf
    if value == '':
        return None
    try:
        return int(value)
    except ValueError:
        try:
            number = float(value)
        except ValueError:
            return value
        return number if math.isfinite(number) else None


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.strptime(value.strip()[:10], DATE_FORMAT).date()
    except ValueError:
        return None


def _split_csv_line(line: str, sep: str = ',') -> List[str]:
    # Split CSV line handling quotes and escaped quotes
    out = []
    cur = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                cur.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue
        if ch == sep and not in_quotes:
            out.append(''.join(cur))
            cur = []
            i += 1
            continue
        cur.append(ch)
        i += 1

    out.append(''.join(cur))
    return out


def custom_csv_parser(
    file_path: Union[str, Path],
    separator: str = ',',
    date_columns: Iterable[str] = (),
) -> Dict[str, List[Any]]:
    """Parse a delimited text file into column-major lists.

    Cells are coerced with ``try_convert_type``; columns named in
    ``date_columns`` are parsed as ISO dates instead (None when unparseable).
    Short rows are padded with None and long rows truncated to the header.
    """
    path = Path(file_path) if not isinstance(file_path, Path) else file_path

    if not path.exists():
        raise FileNotFoundError(f"File {path} not found")

    if path.stat().st_size == 0:
        return {}

    date_cols = set(date_columns)
    data = {}
    with open(path, 'r', newline='', encoding='utf-8') as f:
        header_line = f.readline().rstrip('\r\n').lstrip('\ufeff')
        headers = [h.strip() for h in _split_csv_line(header_line, separator)]
        for h in headers:
            data[h] = []

        short_rows = 0
        for raw in f:
            line = raw.rstrip('\r\n')
            if not line:
                continue
            values = _split_csv_line(line, separator)

            if len(values) < len(headers):
                short_rows += 1
                values += [''] * (len(headers) - len(values))

            if len(values) > len(headers):
                values = values[:len(headers)]

            for i, h in enumerate(headers):
                if h in date_cols:
                    data[h].append(parse_date(values[i]))
                else:
                    data[h].append(try_convert_type(values[i]))

    if short_rows:
        logger.debug("%s: padded %d short rows", path.name, short_rows)
    return data


def _format_cell(value: Any, separator: str) -> str:
    if value is None:
        return ''
    if isinstance(value, date):
        text = value.strftime(DATE_FORMAT)
    else:
        text = str(value)
    if separator in text or '"' in text or '\n' in text:
        text = '"' + text.replace('"', '""') + '"'
    return text


def to_csv_text(rows: Sequence[Any], columns: Sequence[str], separator: str = ',') -> str:
    """Render result rows (dataclasses or mappings) as delimited text.

    Absent values are written as empty cells, the same way they are read.
    """
    lines = [separator.join(columns)]
    for row in rows:
        if isinstance(row, dict):
            values = [row.get(c) for c in columns]
        else:
            values = [getattr(row, c) for c in columns]
        lines.append(separator.join(_format_cell(v, separator) for v in values))
    return '\n'.join(lines) + '\n'


def write_csv(
    rows: Sequence[Any],
    file_path: Union[str, Path],
    columns: Sequence[str],
    separator: str = ',',
) -> Path:
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', newline='', encoding='utf-8') as f:
        f.write(to_csv_text(rows, columns, separator))
    logger.info("Wrote %d rows to %s", len(rows), path)
    return path


def to_float_or_none(x: Any) -> Optional[float]:
    # Convert to float or return None; nan and inf count as absent
    try:
        number = float(x)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_int_or_none(x: Any) -> Optional[int]:
    # Whole floats such as 1000.0 are accepted, fractional ones are not
    if isinstance(x, bool) or x is None:
        return None
    if isinstance(x, int):
        return x
    if isinstance(x, float) and x.is_integer():
        return int(x)
    return None
