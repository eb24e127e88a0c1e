#!/usr/bin/env python
"""DataFrame time-based filtering utilities.

This module applies a time formula to a DataFrame column. Filtering happens in
two phases:

1. The rows are split into groups (a single implicit group when the frame is
   not grouped).
2. Each group resolves the formula against its own index values, so
   ``'start'``/``'end'`` mean the first/last instant *of that group*, and then
   keeps the rows inside the inclusive range.

Row order, row labels and columns of the input are preserved.
"""

from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

from tbltime.utils.config import FEATURE_FLAGS
from tbltime.utils.loguru_setup import logger
from tbltime.utils.time.expansion import resolve_range
from tbltime.utils.time.formula import TimeToken, parse_time_formula
from tbltime.utils.time.index_class import IndexClass, detect_index_class, get_index_time_zone, period_freqstr

__all__ = [
    "filter_dataframe_by_time",
    "sorted_range_search",
]


def sorted_range_search(values: pd.Series, start: Any, end: Any) -> np.ndarray:
    """Boolean mask of the values inside ``[start, end]`` (inclusive on both ends).

    When the values are sorted ascending the bounds are located by binary
    search; otherwise every value is compared.

    Args:
        values: Index values of one group
        start: Resolved lower bound
        end: Resolved upper bound

    Returns:
        np.ndarray: Boolean mask aligned with ``values``
    """
    if FEATURE_FLAGS.USE_SORTED_SEARCH and values.is_monotonic_increasing:
        lo = values.searchsorted(start, side="left")
        hi = values.searchsorted(end, side="right")
        mask = np.zeros(len(values), dtype=bool)
        mask[lo:hi] = True
        return mask

    return ((values >= start) & (values <= end)).to_numpy(dtype=bool)


def _group_mask(
    values: pd.Series,
    tokens: tuple[TimeToken, TimeToken],
    index_class: IndexClass,
    tz: Any,
    freqstr: str | None,
) -> np.ndarray:
    # Missing index values never match and take no part in start/end
    present = values.notna().to_numpy()
    mask = np.zeros(len(values), dtype=bool)
    if not present.any():
        return mask
    values = values[present]
    start, end = resolve_range(tokens, index_class, values, tz, freqstr)
    mask[present] = sorted_range_search(values, start, end)
    return mask


def filter_dataframe_by_time(
    df: pd.DataFrame,
    time_column: str,
    time_formula: Any,
    groups: Sequence[str] = (),
) -> pd.DataFrame:
    """Filter a DataFrame by a time formula over one of its columns.

    Args:
        df: DataFrame to filter
        time_column: Name of the time index column
        time_formula: ``"from ~ to"`` string, ``(from, to)`` pair or TimeFormula
        groups: Columns whose groups resolve ``'start'``/``'end'`` independently

    Returns:
        pd.DataFrame: The rows whose index value lies inside the resolved range

    Raises:
        UnparsableTimeStringError: If a formula side cannot be parsed
        InvalidRangeError: If ``from`` resolves after ``to`` in any group
        UnsupportedIndexClassError: If the column's type is not a supported time class

    Example:
        >>> df = pd.DataFrame({"date": pd.date_range("2013-01-01", "2016-12-31", freq="D")})
        >>> filtered = filter_dataframe_by_time(df, "date", "2014 ~ 2015")
        >>> len(filtered)
        730
    """
    if df.empty:
        return df.copy()

    values = df[time_column]
    index_class = detect_index_class(values)
    tz = get_index_time_zone(values)
    freqstr = period_freqstr(values)

    # Parsing does not depend on the data; resolution happens per group below
    tokens = parse_time_formula(index_class, time_formula, freqstr)

    logger.debug(f"Filtering {len(df)} rows on '{time_column}' ({index_class}, tz={tz})")

    if not groups:
        mask = _group_mask(values, tokens, index_class, tz, freqstr)
    else:
        mask = np.zeros(len(df), dtype=bool)
        grouped = df.groupby(list(groups), sort=False, dropna=False)
        for key, positions in grouped.indices.items():
            logger.debug(f"Resolving group {key!r} ({len(positions)} rows)")
            mask[positions] = _group_mask(values.iloc[positions], tokens, index_class, tz, freqstr)

    filtered_df = df[mask]

    if filtered_df.empty:
        logger.warning(f"No rows of '{time_column}' fall within time formula {time_formula!s}")
    else:
        logger.debug(f"After filtering: {len(filtered_df)} of {len(df)} rows")

    return filtered_df
