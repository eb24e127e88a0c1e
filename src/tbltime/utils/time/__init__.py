#!/usr/bin/env python
"""Time utilities package for time-indexed tables.

This package provides the time handling split into focused modules:
- index_class: Detection of the semantic class of an index column
- formula: Parsing of ``from ~ to`` time formulas into tokens
- expansion: Expansion of tokens into inclusive native bounds
- filtering: DataFrame filtering by a time formula, group by group
- floor: Flooring of index values to unit boundaries
"""

from tbltime.utils.time.expansion import (
    ResolvedRange,
    assert_from_before_to,
    expand,
    resolve_range,
)
from tbltime.utils.time.filtering import (
    filter_dataframe_by_time,
    sorted_range_search,
)
from tbltime.utils.time.floor import (
    floor_index,
)
from tbltime.utils.time.formula import (
    TimeFormula,
    TimeToken,
    TokenKind,
    as_time_formula,
    is_time_formula,
    parse_time_formula,
    parse_time_string,
)
from tbltime.utils.time.index_class import (
    IndexClass,
    detect_index_class,
    get_index_time_zone,
    period_freqstr,
)

__all__ = [
    "IndexClass",
    "ResolvedRange",
    "TimeFormula",
    "TimeToken",
    "TokenKind",
    "as_time_formula",
    "assert_from_before_to",
    "detect_index_class",
    "expand",
    "filter_dataframe_by_time",
    "floor_index",
    "get_index_time_zone",
    "is_time_formula",
    "parse_time_formula",
    "parse_time_string",
    "period_freqstr",
    "resolve_range",
    "sorted_range_search",
]
