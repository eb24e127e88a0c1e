#!/usr/bin/env python
"""Regular time series generation.

``create_series`` builds a single-column :class:`TimeTable` whose index steps
through a time formula at a fixed period:

    >>> create_series("2013 ~ 2013-03", "1 month")
    # A TimeTable: 3 x 1
    # Index: date [datetime, UTC]
                           date
    0 2013-01-01 00:00:00+00:00
    1 2013-02-01 00:00:00+00:00
    2 2013-03-01 00:00:00+00:00

The formula is expanded exactly as :func:`filter_time` expands it, so a
series created from a formula is always selected in full by the same formula.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pandas as pd

from tbltime.core.time_table import TimeTable
from tbltime.utils.config import DEFAULT_INDEX_NAME, DEFAULT_TIMEZONE, TIME_OF_DAY_ANCHOR
from tbltime.utils.exceptions import InvalidFormulaError
from tbltime.utils.loguru_setup import logger
from tbltime.utils.period import PeriodSpec, parse_period
from tbltime.utils.time.expansion import assert_from_before_to, expand
from tbltime.utils.time.formula import TokenKind, as_time_formula, parse_time_formula
from tbltime.utils.time.index_class import IndexClass

__all__ = [
    "create_series",
]

_PERIOD_FREQUENCIES = {IndexClass.YEAR_MONTH: "M", IndexClass.YEAR_QUARTER: "Q"}


def _generate(start: Any, end: Any, spec: PeriodSpec, index_class: IndexClass, freqstr: str | None) -> pd.Series:
    if index_class is IndexClass.DATETIME:
        return pd.Series(pd.date_range(start, end, freq=spec.to_offset()))

    if index_class is IndexClass.DATE:
        stamps = pd.date_range(pd.Timestamp(start), pd.Timestamp(end), freq=spec.to_offset())
        return pd.Series([ts.date() for ts in stamps], dtype=object).drop_duplicates()

    if index_class is IndexClass.TIME_OF_DAY:
        # Calendar units have no meaning within a single day
        step = spec.to_timedelta()
        stamps = pd.date_range(
            datetime.combine(TIME_OF_DAY_ANCHOR, start),
            datetime.combine(TIME_OF_DAY_ANCHOR, end),
            freq=step,
        )
        return pd.Series([ts.time() for ts in stamps], dtype=object)

    stamps = pd.date_range(start.start_time, end.start_time, freq=spec.to_offset())
    return pd.Series(stamps.to_period(freqstr)).drop_duplicates()


def create_series(
    time_formula: Any,
    period: str | PeriodSpec = "1 day",
    tz: str | None = DEFAULT_TIMEZONE,
    index_class: str | IndexClass = IndexClass.DATETIME,
    index_name: str = DEFAULT_INDEX_NAME,
) -> TimeTable:
    """Create a regularly spaced TimeTable spanning a time formula.

    Args:
        time_formula: ``"from ~ to"`` string, ``(from, to)`` pair or TimeFormula;
            ``'start'``/``'end'`` are not allowed since there is no data yet
        period: Step between values, e.g. ``"1 day"``, ``"15 minutes"``, ``"quarterly"``
        tz: Zone of a datetime index; ``None`` creates a naive index
        index_class: ``"datetime"``, ``"date"``, ``"time_of_day"``, ``"year_month"``
            or ``"year_quarter"``
        index_name: Name of the generated index column

    Returns:
        TimeTable: One column named ``index_name``, sorted ascending

    Raises:
        InvalidFormulaError: If the formula uses ``'start'`` or ``'end'``
        InvalidPeriodError: If the period cannot be parsed, or is a calendar
            period for a time-of-day index
        InvalidRangeError: If ``from`` is after ``to``

    Example:
        >>> create_series("2016-01-01 ~ 2016-01-01 00:02", "1 minute", tz=None).data
                         date
        0 2016-01-01 00:00:00
        1 2016-01-01 00:01:00
        2 2016-01-01 00:02:00
    """
    index_class = IndexClass.from_name(index_class)
    spec = period if isinstance(period, PeriodSpec) else parse_period(period)
    formula = as_time_formula(time_formula)
    freqstr = _PERIOD_FREQUENCIES.get(index_class)

    from_token, to_token = parse_time_formula(index_class, formula, freqstr)
    if TokenKind.KEYWORD in (from_token.kind, to_token.kind):
        raise InvalidFormulaError(formula, "'start' and 'end' need existing index values")

    # Only datetime indexes carry a zone
    zone = tz if index_class is IndexClass.DATETIME else None
    start = expand(from_token, "from", index_class, zone, freqstr)
    end = expand(to_token, "to", index_class, zone, freqstr)
    assert_from_before_to(start, end)

    values = _generate(start, end, spec, index_class, freqstr)
    logger.debug(f"Created {len(values)} {index_class} values from {start} to {end} every {spec}")

    data = pd.DataFrame({index_name: values.reset_index(drop=True)})
    return TimeTable(data, index_name)
