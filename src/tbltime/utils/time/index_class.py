#!/usr/bin/env python
"""Detection of the semantic class of a time index.

Every operation in tbltime dispatches on one of a small closed set of index
classes. This module inspects a column (or a scalar) once and returns the
matching :class:`IndexClass`, together with helpers for the class-specific
conversion of a full instant back into the index's native value.
"""

from __future__ import annotations

import enum
from datetime import date, datetime, time, tzinfo
from typing import Any

import pandas as pd

from tbltime.utils.exceptions import UnsupportedIndexClassError

__all__ = [
    "IndexClass",
    "detect_index_class",
    "get_index_time_zone",
    "period_freqstr",
    "to_native",
]


class IndexClass(str, enum.Enum):
    """Semantic class of a time index column."""

    DATETIME = "datetime"
    DATE = "date"
    TIME_OF_DAY = "time_of_day"
    YEAR_MONTH = "year_month"
    YEAR_QUARTER = "year_quarter"

    def __str__(self) -> str:
        return self.value

    @property
    def has_calendar(self) -> bool:
        """Whether values of this class carry a calendar date."""
        return self is not IndexClass.TIME_OF_DAY

    @classmethod
    def from_name(cls, name: str | IndexClass) -> IndexClass:
        """Look up an index class by value (``"datetime"``) or member name."""
        if isinstance(name, IndexClass):
            return name
        key = str(name).strip().lower()
        aliases = {"hms": cls.TIME_OF_DAY, "yearmon": cls.YEAR_MONTH, "yearqtr": cls.YEAR_QUARTER}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError as e:
            raise UnsupportedIndexClassError(name) from e


def _period_class(freqstr: str, original: Any) -> IndexClass:
    # Period frequency strings look like "M", "Q-DEC", "2M"...
    base = freqstr.split("-")[0].lstrip("0123456789").upper()
    if base in ("M", "ME"):
        return IndexClass.YEAR_MONTH
    if base in ("Q", "QE"):
        return IndexClass.YEAR_QUARTER
    raise UnsupportedIndexClassError(original)


def period_freqstr(values: Any) -> str | None:
    """Period frequency of a period column (``"M"``, ``"Q-DEC"``), or None.

    ``PeriodDtype.freq.freqstr`` is the offset alias on recent pandas
    (``"ME"``, ``"QE-DEC"``), which ``pd.Period`` does not accept; a Period
    built from the same offset reports the period alias instead.
    """
    dtype = getattr(values, "dtype", values)
    if not isinstance(dtype, pd.PeriodDtype):
        return None
    return pd.Period("2000-01-01", freq=dtype.freq).freqstr


def _first_valid(values: pd.Series | pd.Index) -> Any:
    non_null = values.dropna()
    if len(non_null) == 0:
        return None
    return non_null.iloc[0] if isinstance(non_null, pd.Series) else non_null[0]


def _scalar_class(value: Any) -> IndexClass:
    # datetime is a subclass of date, so it must be checked first
    if isinstance(value, (pd.Timestamp, datetime)):
        return IndexClass.DATETIME
    if isinstance(value, date):
        return IndexClass.DATE
    if isinstance(value, time):
        return IndexClass.TIME_OF_DAY
    if isinstance(value, pd.Period):
        return _period_class(value.freqstr, f"Period[{value.freqstr}]")
    raise UnsupportedIndexClassError(type(value).__name__)


def detect_index_class(values: Any) -> IndexClass:
    """Detect the index class of a column or a scalar.

    Args:
        values: ``pd.Series``, ``pd.Index`` or a scalar time value

    Returns:
        IndexClass: The semantic class used for dispatch

    Raises:
        UnsupportedIndexClassError: If no strategy exists for the type
    """
    if not isinstance(values, (pd.Series, pd.Index)):
        return _scalar_class(values)

    dtype = values.dtype
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return IndexClass.DATETIME
    if isinstance(dtype, pd.PeriodDtype):
        return _period_class(period_freqstr(values), dtype)
    if pd.api.types.is_object_dtype(dtype):
        first = _first_valid(values)
        if first is None:
            raise UnsupportedIndexClassError(f"{dtype} (no non-null values)")
        first_class = _scalar_class(first)
        # Mixed object columns cannot be compared reliably
        if first_class is IndexClass.DATETIME:
            raise UnsupportedIndexClassError("object column of datetime values; convert with pd.to_datetime()")
        return first_class
    raise UnsupportedIndexClassError(dtype)


def get_index_time_zone(values: Any) -> tzinfo | None:
    """Return the time zone stored on a datetime column, or None."""
    if isinstance(values, (pd.Series, pd.Index)):
        dtype = values.dtype
        if isinstance(dtype, pd.DatetimeTZDtype):
            return dtype.tz
        if pd.api.types.is_object_dtype(dtype):
            first = _first_valid(values)
            if isinstance(first, time):
                return first.tzinfo
        return None
    return getattr(values, "tzinfo", None)


def to_native(instant: datetime, index_class: IndexClass, tz: tzinfo | None, freqstr: str | None = None) -> Any:
    """Convert a full instant into the index's native value.

    Args:
        instant: Timezone-aware datetime (usually a pendulum DateTime)
        index_class: Target index class
        tz: Time zone of the index, ``None`` for naive datetime indexes
        freqstr: Period frequency for year-month/year-quarter indexes

    Returns:
        ``pd.Timestamp``, ``datetime.date``, ``datetime.time`` or ``pd.Period``
    """
    if index_class is IndexClass.DATETIME:
        ts = pd.Timestamp(instant)
        if tz is None:
            return ts.tz_localize(None)
        return ts.tz_convert(tz)
    if index_class is IndexClass.DATE:
        return date(instant.year, instant.month, instant.day)
    if index_class is IndexClass.TIME_OF_DAY:
        return time(instant.hour, instant.minute, instant.second, instant.microsecond, tzinfo=tz)
    if index_class is IndexClass.YEAR_MONTH:
        return pd.Period(year=instant.year, month=instant.month, freq=freqstr or "M")
    if index_class is IndexClass.YEAR_QUARTER:
        return pd.Period(year=instant.year, month=instant.month, freq=freqstr or "Q")
    raise UnsupportedIndexClassError(index_class)
