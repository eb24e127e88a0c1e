#!/usr/bin/env python
"""Flooring of time index values to a unit boundary.

``floor_index`` is a thin wrapper around pendulum's ``start_of`` that also
understands the compressed index classes:

- datetimes and dates are floored directly;
- times of day are lifted onto 1970-01-01 (keeping their zone), floored and
  turned back into times;
- year-month and year-quarter periods are floored through their first day and
  converted back into a period of the same frequency.

Units are whatever ``start_of`` accepts (``second`` ... ``year``); the plural
spelling (``"days"``) is also accepted. Anything else is rejected by pendulum.
"""

from collections.abc import Callable
from datetime import date, datetime, time
from typing import Any

import pandas as pd

from tbltime.utils.config import DEFAULT_FLOOR_UNIT, TIME_OF_DAY_ANCHOR
from tbltime.utils.time.expansion import pendulum_instant, start_of_unit
from tbltime.utils.time.index_class import IndexClass, detect_index_class

__all__ = [
    "floor_index",
]


def _pendulum_unit(unit: str) -> str:
    unit = unit.strip().lower()
    # "seconds" -> "second"; pendulum validates the rest
    if unit.endswith("s") and len(unit) > 1:
        unit = unit[:-1]
    return unit


def _floor_datetime(value: datetime, unit: str) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    floored = start_of_unit(pendulum_instant(ts.to_pydatetime(warn=False), ts.tzinfo), unit)
    result = pd.Timestamp(floored)
    if ts.tzinfo is None:
        return result.tz_localize(None)
    return result.tz_convert(ts.tzinfo)


def _floor_date(value: date, unit: str) -> date:
    floored = _floor_datetime(datetime(value.year, value.month, value.day), unit)
    return floored.date()


def _floor_time(value: time, unit: str) -> time:
    lifted = datetime.combine(TIME_OF_DAY_ANCHOR, value.replace(tzinfo=None))
    floored = start_of_unit(pendulum_instant(lifted, value.tzinfo), unit)
    return time(floored.hour, floored.minute, floored.second, floored.microsecond, tzinfo=value.tzinfo)


def _floor_period(value: pd.Period, unit: str) -> pd.Period:
    first_day = value.start_time.date()
    floored = _floor_date(first_day, unit)
    return pd.Period(floored, freq=value.freqstr)


_FLOOR_STRATEGIES: dict[IndexClass, Callable[[Any, str], Any]] = {
    IndexClass.DATETIME: _floor_datetime,
    IndexClass.DATE: _floor_date,
    IndexClass.TIME_OF_DAY: _floor_time,
    IndexClass.YEAR_MONTH: _floor_period,
    IndexClass.YEAR_QUARTER: _floor_period,
}


def floor_index(x: Any, unit: str = DEFAULT_FLOOR_UNIT) -> Any:
    """Floor a time value, Series or Index to a unit boundary.

    Args:
        x: Scalar time value, ``pd.Series`` or ``pd.Index`` of a supported class
        unit: ``"second"``, ``"minute"``, ``"hour"``, ``"day"``, ``"week"``,
            ``"month"``, ``"year"`` (plural forms accepted)

    Returns:
        The floored value(s) in the same type and class as ``x``

    Raises:
        UnsupportedIndexClassError: If ``x`` is not a supported time class
        ValueError: If pendulum does not know the unit

    Example:
        >>> floor_index(pd.Timestamp("2015-06-17 10:22:15"), "month")
        Timestamp('2015-06-01 00:00:00')
        >>> floor_index(time(12, 34, 56), "hour")
        datetime.time(12, 0)
    """
    index_class = detect_index_class(x)
    strategy = _FLOOR_STRATEGIES[index_class]
    pendulum_unit = _pendulum_unit(unit)

    if not isinstance(x, (pd.Series, pd.Index)):
        return strategy(x, pendulum_unit)

    def floor_one(value: Any) -> Any:
        if pd.isna(value):
            return value
        return strategy(value, pendulum_unit)

    floored = [floor_one(value) for value in x]
    if isinstance(x, pd.Series):
        return pd.Series(floored, index=x.index, name=x.name, dtype=x.dtype)
    return pd.Index(floored, name=x.name, dtype=x.dtype)
