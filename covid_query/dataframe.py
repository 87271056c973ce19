from dataclasses import fields, is_dataclass
from typing import List, Dict, Any, Tuple, Optional, Callable, Union, Sequence, Type

AGG_FUNCTIONS = ('count', 'sum', 'avg', 'min', 'max')


def _null_last_key(col: List[Any], descending: bool) -> Callable[[int], Tuple[bool, Any]]:
    # None always sorts after real values, whichever direction is requested
    if descending:
        return lambda i: (col[i] is not None, col[i])
    return lambda i: (col[i] is None, col[i])


def _agg_name(fn: Union[str, Callable]) -> str:
    return fn if isinstance(fn, str) else fn.__name__


class GroupBy:
    def __init__(self, df: 'DataFrame', keys: List[str]):
        if not keys:
            raise ValueError("Must provide at least one key for grouping.")

        missing = [k for k in keys if k not in df.columns]
        if missing:
            raise KeyError(f"GroupBy keys not found: {missing}. Available: {df.columns}")

        self.df = df
        self.keys = keys
        self.groups: Dict[tuple, List[int]] = {}

        n = df._num_rows
        key_cols = [df._data[k] for k in keys]

        for i in range(n):
            kt = tuple(col[i] for col in key_cols)
            self.groups.setdefault(kt, []).append(i)

    def __len__(self) -> int:
        return len(self.groups)

    def agg(self, spec: Dict[str, List[Union[str, Callable[[List[Any]], Any]]]]) -> 'DataFrame':
        """Aggregate each group; output columns are named ``{fn}_{column}``.

        A callable receives the group's values, None included, and its
        column is named after the function.

        Only numeric, non-None values take part in sum/avg/min/max, so an
        all-None group yields None rather than 0. ``count`` counts the
        non-None values, like SQL ``COUNT(column)``.
        """
        out_cols = {k: [] for k in self.keys}
        agg_cols = {}

        for val_col, funs in spec.items():
            if val_col not in self.df._data:
                raise KeyError(f"Aggregation column '{val_col}' not found. Available: {self.df.columns}")
            for fn in funs:
                if not callable(fn) and fn not in AGG_FUNCTIONS:
                    raise ValueError(f"Unsupported aggregation function: {fn}")
                agg_cols[f"{_agg_name(fn)}_{val_col}"] = []

        for kt, idxs in self.groups.items():
            for j, k in enumerate(self.keys):
                out_cols[k].append(kt[j])

            for val_col, funs in spec.items():
                vals = [self.df._data[val_col][i] for i in idxs]
                nums = [v for v in vals if isinstance(v, (int, float)) and not isinstance(v, bool)]

                for fn in funs:
                    col_name = f"{_agg_name(fn)}_{val_col}"

                    if callable(fn):
                        agg_cols[col_name].append(fn(vals))
                    elif fn == 'count':
                        agg_cols[col_name].append(len(nums))
                    elif not nums:
                        agg_cols[col_name].append(None)
                    elif fn == 'sum':
                        agg_cols[col_name].append(sum(nums))
                    elif fn == 'avg':
                        agg_cols[col_name].append(sum(nums) / len(nums))
                    elif fn == 'min':
                        agg_cols[col_name].append(min(nums))
                    elif fn == 'max':
                        agg_cols[col_name].append(max(nums))

        out_cols.update(agg_cols)
        return DataFrame(out_cols)

    def top(self, by: Union[str, List[str]], n: int = 1,
            ascending: Union[bool, List[bool]] = False) -> 'DataFrame':
        """Keep the first ``n`` rows of every group under the given ordering.

        Equivalent to ``ROW_NUMBER() OVER (PARTITION BY keys ORDER BY by) <= n``.
        Rows with equal sort keys keep their original relative order. The
        result has a ``rank`` column (1-based) and groups appear in first-seen
        order.
        """
        if n < 1:
            raise ValueError(f"n must be at least 1, got {n}")

        keep: List[int] = []
        ranks: List[int] = []
        for idxs in self.groups.values():
            ordered = self.df._order(idxs, by, ascending)
            for r, i in enumerate(ordered[:n], start=1):
                keep.append(i)
                ranks.append(r)

        out = self.df._take(keep)
        return out.with_column('rank', ranks)


class DataFrame:
    def __init__(self, data: Dict[str, List[Any]]):
        if not isinstance(data, dict):
            raise TypeError(f"Input must be a dictionary, got {type(data).__name__}")

        self._data = data
        self._length = len(next(iter(data.values()))) if data else 0
        self._num_rows = self._length
        self._num_cols = len(self._data) if self._data else 0

        if data:
            if not all(isinstance(v, list) for v in data.values()):
                raise TypeError("Input data must be a dictionary of lists.")
            if not all(len(v) == self._length for v in data.values()):
                raise ValueError(f"All lists must have the same length. Found lengths: {[len(v) for v in data.values()]}")

    @classmethod
    def empty(cls, columns: Sequence[str]) -> 'DataFrame':
        return cls({c: [] for c in columns})

    @classmethod
    def from_records(cls, records: Sequence[Any], columns: Optional[Sequence[str]] = None) -> 'DataFrame':
        """Build a column-major frame from dataclass instances or dicts."""
        if columns is None:
            if records and is_dataclass(records[0]):
                columns = [f.name for f in fields(records[0])]
            elif records and isinstance(records[0], dict):
                columns = list(records[0].keys())
            else:
                return cls({})

        data = {c: [] for c in columns}
        for rec in records:
            for c in columns:
                data[c].append(rec.get(c) if isinstance(rec, dict) else getattr(rec, c))
        return cls(data)

    @property
    def columns(self) -> List[str]:
        return list(self._data.keys())

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._length, len(self.columns))

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"<DataFrame: {self._num_rows:,} rows x {self._num_cols} columns>"

    def __str__(self) -> str:
        if not self._data:
            return "Empty DataFrame"
        headers = list(self.columns)[:5]
        rows = []
        for i in range(min(5, self._num_rows)):
            row = [str(self._data[h][i])[:15] for h in headers]
            rows.append(" | ".join(row))
        return "Columns: " + ", ".join(headers) + "\n" + "\n".join(rows)

    def __getitem__(self, item):
        if isinstance(item, str):
            if item in self._data:
                return self._data[item]
            raise KeyError(f"Column '{item}' not found")
        elif isinstance(item, list):
            return self.select(item)
        raise TypeError("Invalid argument type. Use string for single column or list for multiple columns.")

    def _take(self, indices: Sequence[int]) -> 'DataFrame':
        return DataFrame({col: [vals[i] for i in indices] for col, vals in self._data.items()})

    def _order(self, indices: Sequence[int], by: Union[str, List[str]],
               ascending: Union[bool, List[bool]]) -> List[int]:
        keys = [by] if isinstance(by, str) else list(by)
        missing = [k for k in keys if k not in self._data]
        if missing:
            raise KeyError(f"Sort keys not found: {missing}. Available: {self.columns}")

        directions = [ascending] * len(keys) if isinstance(ascending, bool) else list(ascending)
        if len(directions) != len(keys):
            raise ValueError(f"Got {len(directions)} sort directions for {len(keys)} keys.")

        # Stable sorts applied from the least to the most significant key
        ordered = list(indices)
        for key, asc in reversed(list(zip(keys, directions))):
            ordered.sort(key=_null_last_key(self._data[key], not asc), reverse=not asc)
        return ordered

    def select(self, columns: List[str]) -> 'DataFrame':
        if not isinstance(columns, list):
            raise TypeError(f"columns must be a list, got {type(columns).__name__}")
        if len(columns) == 0:
            raise ValueError("Cannot select zero columns. Provide at least one column name.")

        missing = [c for c in columns if c not in self._data]
        if missing:
            raise KeyError(f"Columns {missing} not found in DataFrame. Available columns: {self.columns}")

        return DataFrame({c: self._data[c][:] for c in columns})

    def filter(self, condition: List[bool]) -> 'DataFrame':
        if not isinstance(condition, list):
            raise TypeError(f"condition must be a list, got {type(condition).__name__}")

        if len(condition) != self._length:
            raise ValueError(
                f"Condition list length ({len(condition)}) must match DataFrame length ({self._length})."
            )

        if not all(isinstance(c, (bool, int)) for c in condition):
            raise TypeError("Condition list must contain only boolean values.")

        return self._take([i for i, c in enumerate(condition) if c])

    def where(self, predicate: Callable[[Dict[str, Any]], bool]) -> 'DataFrame':
        # Row-wise predicate over dict rows, for conditions spanning columns
        return self.filter([bool(predicate(row)) for row in self.rows()])

    def sort_values(self, by: Union[str, List[str]],
                    ascending: Union[bool, List[bool]] = True) -> 'DataFrame':
        return self._take(self._order(range(self._length), by, ascending))

    def head(self, n: int = 5) -> 'DataFrame':
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        return self._take(range(min(n, self._length)))

    def with_column(self, name: str, values: List[Any]) -> 'DataFrame':
        if self._data and len(values) != self._length:
            raise ValueError(f"Column '{name}' has {len(values)} values, expected {self._length}.")
        new_data = {c: v[:] for c, v in self._data.items()}
        new_data[name] = list(values)
        return DataFrame(new_data)

    def groupby(self, keys: Union[str, List[str]]) -> 'GroupBy':
        if isinstance(keys, str):
            keys = [keys]
        elif not isinstance(keys, list):
            raise TypeError(f"keys must be a string or list, got {type(keys).__name__}")

        return GroupBy(self, keys)

    def join(self, other: 'DataFrame', on: Union[str, Sequence[str]], how: str = 'inner',
             right_prefix: str = 'r_') -> 'DataFrame':
        """Hash join on one or more equally named key columns.

        Key columns appear once in the output. Right-hand columns whose name
        collides with a left-hand column are prefixed with ``right_prefix``.
        Rows whose key contains None never match.
        """
        keys = [on] if isinstance(on, str) else list(on)
        if not keys:
            raise ValueError("Must provide at least one join key.")

        for k in keys:
            if k not in self.columns:
                raise KeyError(f"Left join key '{k}' not found in left DataFrame.")
            if k not in other.columns:
                raise KeyError(f"Right join key '{k}' not found in right DataFrame.")

        if how not in ('inner', 'left'):
            raise NotImplementedError(f"Join type '{how}' not supported. Use 'inner' or 'left'.")

        right_map: Dict[tuple, List[int]] = {}
        right_keys = [other._data[k] for k in keys]
        for j in range(other._num_rows):
            rk = tuple(col[j] for col in right_keys)
            if None not in rk:
                right_map.setdefault(rk, []).append(j)

        right_cols = [c for c in other.columns if c not in keys]
        renamed = {c: (right_prefix + c if c in self._data else c) for c in right_cols}

        out = {c: [] for c in self.columns}
        for c in right_cols:
            out[renamed[c]] = []

        left_keys = [self._data[k] for k in keys]
        for i in range(self._num_rows):
            lk = tuple(col[i] for col in left_keys)
            matches = right_map.get(lk) if None not in lk else None
            if matches:
                for j in matches:
                    for c in self.columns:
                        out[c].append(self._data[c][i])
                    for c in right_cols:
                        out[renamed[c]].append(other._data[c][j])
            elif how == 'left':
                for c in self.columns:
                    out[c].append(self._data[c][i])
                for c in right_cols:
                    out[renamed[c]].append(None)

        return DataFrame(out)

    def rows(self) -> List[Dict[str, Any]]:
        cols = self.columns
        return [{c: self._data[c][i] for c in cols} for i in range(self._length)]

    def to_records(self, record_type: Type[Any]) -> List[Any]:
        names = [f.name for f in fields(record_type)]
        return [record_type(**{n: row.get(n) for n in names}) for row in self.rows()]
