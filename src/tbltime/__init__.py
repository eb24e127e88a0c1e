"""tbltime - Time-aware tables on top of pandas.

This package makes a pandas DataFrame aware of its time index so that it can
be filtered with short, readable time formulas instead of hand-written
timestamp comparisons.

Key Features:
- **Time formulas**: ``"2013 ~ 2015"``, ``"~2015-03"``, ``"'start' ~ '2014'"``
- **Shorthand expansion**: each side expands to its whole year, month, day...
- **Grouped filtering**: ``'start'``/``'end'`` resolve within each group
- **Index classes**: datetimes, dates, times of day, year-month and year-quarter periods
- **Flooring**: snap index values to a unit boundary with ``floor_index``

Quick Start:
    >>> import pandas as pd
    >>> from tbltime import as_tbl_time, filter_time
    >>>
    >>> df = pd.DataFrame({"date": pd.date_range("2013-01-01", "2016-12-31", freq="D")})
    >>> tbl = as_tbl_time(df, index="date")
    >>> len(filter_time(tbl, "2014 ~ 2015"))
    730
    >>> len(tbl["~2015-03"])
    31
"""

__version__ = "0.1.0"

# Lazy imports to keep ``import tbltime`` cheap
def __getattr__(name):
    """Lazy import for main package exports."""
    if name in ("TimeTable", "as_tbl_time", "filter_time"):
        from .core import time_table
        return getattr(time_table, name)
    if name == "create_series":
        from .core.series import create_series
        return create_series
    if name == "TimeFormula":
        from .utils.time.formula import TimeFormula
        return TimeFormula
    if name == "IndexClass":
        from .utils.time.index_class import IndexClass
        return IndexClass
    if name == "floor_index":
        from .utils.time.floor import floor_index
        return floor_index
    if name in ("PeriodSpec", "PeriodUnit", "parse_period"):
        from .utils import period
        return getattr(period, name)
    if name in _EXCEPTIONS:
        from .utils import exceptions
        return getattr(exceptions, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


_EXCEPTIONS = (
    "InvalidFormulaError",
    "InvalidPeriodError",
    "InvalidRangeError",
    "NotATimeTableError",
    "TbltimeError",
    "UnparsableTimeStringError",
    "UnsupportedIndexClassError",
)

__all__ = [
    "IndexClass",
    "InvalidFormulaError",
    "InvalidPeriodError",
    "InvalidRangeError",
    "NotATimeTableError",
    "PeriodSpec",
    "PeriodUnit",
    "TbltimeError",
    "TimeFormula",
    "TimeTable",
    "UnparsableTimeStringError",
    "UnsupportedIndexClassError",
    "as_tbl_time",
    "create_series",
    "filter_time",
    "floor_index",
    "parse_period",
]
