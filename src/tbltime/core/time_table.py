#!/usr/bin/env python
"""Time-indexed tables.

A :class:`TimeTable` is a pandas DataFrame with a designated time index column
and optional grouping columns. The index column is named explicitly, so the
same formula works whether the column is called ``date``, ``index`` or
anything else.

Example:
    >>> df = pd.DataFrame({
    ...     "symbol": ["FB", "FB", "AMZN", "AMZN"],
    ...     "date": pd.to_datetime(["2013-01-02", "2014-06-03", "2013-01-02", "2015-02-01"]),
    ...     "adjusted": [28.0, 62.9, 257.3, 364.5],
    ... })
    >>> fang = as_tbl_time(df, "date").group_by("symbol")
    >>> fang.filter_time("2013 ~ 2014")      # rows in 2013 and 2014
    >>> fang["~2014"]                        # only 2014
    >>> fang["2013 ~ 2016", ["date", "adjusted"]]
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from datetime import tzinfo
from typing import Any

import numpy as np
import pandas as pd

from tbltime.utils.config import DEFAULT_INDEX_NAME
from tbltime.utils.exceptions import NotATimeTableError
from tbltime.utils.loguru_setup import logger
from tbltime.utils.time.filtering import filter_dataframe_by_time
from tbltime.utils.time.formula import is_time_formula
from tbltime.utils.time.index_class import IndexClass, detect_index_class, get_index_time_zone

__all__ = [
    "TimeTable",
    "as_tbl_time",
    "filter_time",
]


def _as_label_list(columns: Any) -> list:
    if isinstance(columns, (str, int, np.integer)) or not isinstance(columns, (Sequence, pd.Index, np.ndarray)):
        return [columns]
    return list(columns)


def _is_boolean_mask(key: Any) -> bool:
    if isinstance(key, (pd.Series, np.ndarray)):
        return pd.api.types.is_bool_dtype(key.dtype)
    if isinstance(key, list) and key:
        return all(isinstance(k, (bool, np.bool_)) for k in key)
    return False


class TimeTable:
    """A DataFrame with a time index column and optional grouping columns.

    Args:
        data: The underlying DataFrame; it is never modified
        index: Name of the time index column
        groups: Columns partitioning the rows for grouped operations

    Raises:
        KeyError: If the index or a grouping column is missing
        UnsupportedIndexClassError: If the index column has no time strategy
    """

    def __init__(self, data: pd.DataFrame, index: str = DEFAULT_INDEX_NAME, groups: Sequence[str] | None = None) -> None:
        if not isinstance(data, pd.DataFrame):
            raise TypeError(f"TimeTable data must be a pandas DataFrame, got {type(data).__name__}")
        if index not in data.columns:
            raise KeyError(f"Index column '{index}' not found in columns {list(data.columns)}")

        groups = [] if groups is None else _as_label_list(groups)
        missing = [g for g in groups if g not in data.columns]
        if missing:
            raise KeyError(f"Grouping columns {missing} not found in columns {list(data.columns)}")

        self._index_class = detect_index_class(data[index])
        self._data = data
        self._index = index
        self._groups = tuple(groups)

    # ── properties ───────────────────────────────────────────────────────

    @property
    def data(self) -> pd.DataFrame:
        return self._data

    @property
    def index_name(self) -> str:
        return self._index

    @property
    def index(self) -> pd.Series:
        """The time index column."""
        return self._data[self._index]

    @property
    def groups(self) -> tuple[str, ...]:
        return self._groups

    @property
    def is_grouped(self) -> bool:
        return bool(self._groups)

    @property
    def index_class(self) -> IndexClass:
        return self._index_class

    @property
    def index_time_zone(self) -> tzinfo | None:
        return get_index_time_zone(self.index)

    @property
    def columns(self) -> pd.Index:
        return self._data.columns

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        tz = self.index_time_zone
        header = f"# A TimeTable: {len(self._data)} x {self._data.shape[1]}\n# Index: {self._index} [{self._index_class}"
        header += f", {tz}]" if tz is not None else "]"
        if self._groups:
            header += f"\n# Groups: {', '.join(map(str, self._groups))}"
        return f"{header}\n{self._data!r}"

    # ── grouping ─────────────────────────────────────────────────────────

    def group_by(self, *columns: str) -> TimeTable:
        """Return a copy grouped by ``columns`` (replacing any existing groups)."""
        missing = [c for c in columns if c not in self._data.columns]
        if missing:
            raise KeyError(f"Grouping columns {missing} not found in columns {list(self._data.columns)}")
        return self._derive(self._data, columns)

    def ungroup(self) -> TimeTable:
        return self._derive(self._data, ())

    # ── selection ────────────────────────────────────────────────────────

    def _derive(self, df: pd.DataFrame, groups: Sequence[str] | None = None) -> TimeTable:
        # Rows of the same index column; the class stays known even with no rows left
        table = copy.copy(self)
        table._data = df
        if groups is not None:
            table._groups = tuple(groups)
        return table

    def _reconstruct(self, df: pd.DataFrame) -> TimeTable | pd.DataFrame:
        # Keep the time class only while the index column survives
        if self._index not in df.columns:
            logger.debug(f"Index column '{self._index}' dropped; returning a plain DataFrame")
            return df
        return self._derive(df, [g for g in self._groups if g in df.columns])

    def filter_time(self, time_formula: Any) -> TimeTable:
        """Keep the rows whose index lies within ``time_formula``; see :func:`filter_time`."""
        filtered = filter_dataframe_by_time(self._data, self._index, time_formula, self._groups)
        return self._derive(filtered)

    def select_rows(self, rows: Any) -> TimeTable:
        """Select rows by position: integers, a boolean mask or a slice."""
        if isinstance(rows, slice):
            return self._derive(self._data.iloc[rows])
        if isinstance(rows, pd.Series):
            rows = rows.to_numpy()
        positions = np.atleast_1d(np.asarray(rows))
        if pd.api.types.is_bool_dtype(positions.dtype) and len(positions) != len(self._data):
            raise IndexError(f"Boolean row mask has length {len(positions)}, expected {len(self._data)}")
        return self._derive(self._data.iloc[positions])

    def select_columns(self, columns: Any) -> TimeTable | pd.DataFrame:
        """Select columns by label; drops to a plain DataFrame without the index column."""
        return self._reconstruct(self._data[_as_label_list(columns)])

    def __getitem__(self, key: Any) -> TimeTable | pd.DataFrame:
        """Subset by time formula, rows and/or columns.

        - ``tbl["2013 ~ 2015"]`` / ``tbl[TimeFormula(...)]``: time filter
        - ``tbl[formula_or_rows, columns]``: rows first, then columns
        - ``tbl[mask]`` or ``tbl[1:5]``: rows, as with ``DataFrame.__getitem__``
        - ``tbl["col"]`` or ``tbl[["a", "b"]]``: columns

        Use ``slice(None)`` (``tbl[:, cols]``) to keep all rows.
        """
        if isinstance(key, tuple) and len(key) == 2:
            rows, columns = key
            result = self._select(rows)
            return result.select_columns(columns)
        if is_time_formula(key):
            return self.filter_time(key)
        if isinstance(key, slice) or _is_boolean_mask(key):
            return self.select_rows(key)
        return self.select_columns(key)

    def _select(self, rows: Any) -> TimeTable:
        if is_time_formula(rows):
            return self.filter_time(rows)
        if isinstance(rows, slice) and rows == slice(None):
            return self
        return self.select_rows(rows)


def as_tbl_time(data: pd.DataFrame, index: str = DEFAULT_INDEX_NAME, groups: Sequence[str] | None = None) -> TimeTable:
    """Attach a time index column (and optionally groups) to a DataFrame."""
    return TimeTable(data, index, groups)


def filter_time(table: TimeTable, time_formula: Any) -> TimeTable:
    """Succinctly filter a TimeTable by its index.

    The formula is written ``from ~ to``; each side is ``'YYYY-MM-DD HH:MM:SS'``
    or any shorthand of it:

    * Year: ``'2013' ~ '2015'``
    * Month: ``'2013-01' ~ '2016-06'``
    * Day: ``'2013-01-05' ~ '2016-06-04'``
    * Second: ``'2013-01-05 10:22:15' ~ '2018-06-03 12:14:22'``
    * Mixed: ``'2013' ~ '2016-06'``
    * One-sided, only dates in March 2015: ``~'2015-03'``
    * Keywords: ``'start' ~ '2015'``, ``'2014' ~ 'end'``

    The ``from`` side expands to the first instant of its period, the ``to``
    side to the last one, so ``~'2015'`` means
    ``2015-01-01 00:00:00 ~ 2015-12-31 23:59:59`` for a datetime index.
    Time-of-day indexes take ``HH:MM:SS`` shorthand instead (``~'12'`` is
    every second of the 12th hour).

    Grouped tables resolve the formula within each group, so ``'start'`` is
    the first instant of every group.

    Args:
        table: The TimeTable to filter
        time_formula: ``"from ~ to"`` string, ``(from, to)`` pair or TimeFormula

    Returns:
        TimeTable: Same columns and groups, only the rows in range

    Raises:
        NotATimeTableError: If ``table`` is not a TimeTable
    """
    if not isinstance(table, TimeTable):
        raise NotATimeTableError(table)
    return table.filter_time(time_formula)
