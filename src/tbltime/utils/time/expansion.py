#!/usr/bin/env python
"""Expansion of parsed formula sides into concrete range bounds.

The ``from`` side of a formula expands to the earliest instant of its
precision window and the ``to`` side to the latest one, truncated to whole
seconds::

    '2015'     from -> 2015-01-01 00:00:00    to -> 2015-12-31 23:59:59
    '2015-02'  from -> 2015-02-01 00:00:00    to -> 2015-02-28 23:59:59
    '12'       from -> 12:00:00               to -> 12:59:59   (time of day)

Fully specified timestamps are used exactly as given. All arithmetic is done
with pendulum in the index's own zone; naive indexes are treated as UTC and get
naive bounds back.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Literal

import attrs
import pandas as pd
import pendulum

from tbltime.utils.config import DEFAULT_TIMEZONE, END_KEYWORD, START_KEYWORD, TIME_OF_DAY_ANCHOR
from tbltime.utils.exceptions import InvalidFormulaError, InvalidRangeError
from tbltime.utils.loguru_setup import logger
from tbltime.utils.time.formula import TimeToken, TokenKind
from tbltime.utils.time.index_class import IndexClass, to_native

Side = Literal["from", "to"]

__all__ = [
    "ResolvedRange",
    "assert_from_before_to",
    "expand",
    "resolve_range",
    "start_of_unit",
]


@attrs.frozen
class ResolvedRange:
    """Inclusive ``[start, end]`` bounds in the index's native representation."""

    start: Any
    end: Any

    def __iter__(self):
        return iter((self.start, self.end))


def start_of_unit(instant: pendulum.DateTime, unit: str) -> pendulum.DateTime:
    """pendulum ``start_of`` that also understands ``"quarter"``."""
    if unit == "quarter":
        first_month = 3 * ((instant.month - 1) // 3) + 1
        return instant.set(month=first_month, day=1).start_of("month")
    return instant.start_of(unit)


def _end_of(instant: pendulum.DateTime, unit: str) -> pendulum.DateTime:
    if unit == "quarter":
        last_month = 3 * ((instant.month - 1) // 3) + 3
        instant = instant.set(month=last_month, day=1)
        unit = "month"
    # Bounds are whole seconds: 23:59:59, not 23:59:59.999999
    return instant.end_of(unit).replace(microsecond=0)


def _instant(token: TimeToken, tz: tzinfo | None) -> pendulum.DateTime:
    fields = token.fields
    zone = token.tzinfo or tz or DEFAULT_TIMEZONE
    instant = pendulum.datetime(
        fields.get("year", TIME_OF_DAY_ANCHOR.year),
        fields.get("month", TIME_OF_DAY_ANCHOR.month),
        fields.get("day", TIME_OF_DAY_ANCHOR.day),
        fields.get("hour", 0),
        fields.get("minute", 0),
        fields.get("second", 0),
        fields.get("microsecond", 0),
        tz=zone,
    )
    if token.tzinfo is not None:
        # Literal carried its own zone; move it onto the index's clock
        instant = instant.in_timezone(tz or DEFAULT_TIMEZONE)
    return instant


def expand(
    token: TimeToken,
    side: Side,
    index_class: IndexClass,
    tz: tzinfo | None = None,
    freqstr: str | None = None,
) -> Any:
    """Expand a parsed token into a native bound.

    Args:
        token: A ``PARSED`` or ``LITERAL`` token from the formula parser
        side: ``"from"`` for the earliest instant of the window, ``"to"`` for the latest
        index_class: Class of the index being filtered
        tz: Time zone stored on the index (``None`` for naive indexes)
        freqstr: Period frequency for year-month/year-quarter indexes

    Returns:
        The bound as ``pd.Timestamp``, ``date``, ``time`` or ``pd.Period``
    """
    if token.kind is TokenKind.LITERAL:
        return _native_literal(token.value, index_class, tz)
    if token.kind is TokenKind.KEYWORD:
        raise InvalidFormulaError(token.value, "keywords resolve against index values and cannot be expanded")

    instant = _instant(token, tz)
    if token.precision != "second":
        instant = start_of_unit(instant, token.precision) if side == "from" else _end_of(instant, token.precision)
    return to_native(instant, index_class, tz, freqstr)


def _native_literal(value: Any, index_class: IndexClass, tz: tzinfo | None) -> Any:
    if index_class is not IndexClass.DATETIME:
        return value
    # Line the literal up with the index zone so the comparison is defined
    ts = pd.Timestamp(value)
    if tz is None:
        return ts.tz_convert(DEFAULT_TIMEZONE).tz_localize(None) if ts.tzinfo is not None else ts
    return ts.tz_localize(tz) if ts.tzinfo is None else ts.tz_convert(tz)


def assert_from_before_to(start: Any, end: Any) -> None:
    """Raise InvalidRangeError when ``start`` lies strictly after ``end``."""
    if start > end:
        raise InvalidRangeError(start, end)


def resolve_range(
    tokens: tuple[TimeToken, TimeToken],
    index_class: IndexClass,
    values: pd.Series,
    tz: tzinfo | None = None,
    freqstr: str | None = None,
) -> ResolvedRange:
    """Resolve a pair of formula tokens against the index values of one group.

    Keywords are looked up lazily: the minimum/maximum of ``values`` is only
    computed when ``'start'``/``'end'`` is actually used, and missing values are
    ignored.

    Raises:
        InvalidRangeError: If the resolved ``from`` is after the resolved ``to``
    """

    def resolve(token: TimeToken, side: Side) -> Any:
        if token.kind is TokenKind.KEYWORD:
            if token.value == START_KEYWORD:
                return values.dropna().min()
            if token.value == END_KEYWORD:
                return values.dropna().max()
        return expand(token, side, index_class, tz, freqstr)

    from_token, to_token = tokens
    start = resolve(from_token, "from")
    end = resolve(to_token, "to")

    assert_from_before_to(start, end)
    logger.debug(f"Resolved time formula to [{start}, {end}]")
    return ResolvedRange(start, end)


def pendulum_instant(value: datetime, tz: tzinfo | None = None) -> pendulum.DateTime:
    """Lift a datetime (naive values are read in ``tz`` or UTC) into pendulum."""
    return pendulum.instance(value, tz=tz or DEFAULT_TIMEZONE)
