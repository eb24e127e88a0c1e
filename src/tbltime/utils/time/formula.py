#!/usr/bin/env python
"""Time formula parsing.

A time formula describes a range over a time index as ``from ~ to``. Each side
is either a shorthand string whose precision decides how far it expands
(``'2013'`` is the whole year, ``'2013-06'`` the whole month...), one of the
keywords ``'start'``/``'end'``, or a literal time value.

Examples (for a datetime index)::

    "2013 ~ 2015"                -> 2013-01-01 00:00:00 .. 2015-12-31 23:59:59
    "~ 2015-03"                  -> 2015-03-01 00:00:00 .. 2015-03-31 23:59:59
    "'start' ~ '2014'"           -> first index value  .. 2014-12-31 23:59:59
    TimeFormula("2014", date(2014, 6, 1))

Time-of-day indexes parse their sides as ``HH``, ``HH:MM`` or ``HH:MM:SS``.

Parsing only classifies and splits the sides into tokens. Keywords are
resolved later, against the data of the group being filtered.
"""

from __future__ import annotations

import enum
import re
from datetime import date, datetime, time
from typing import Any

import attrs
import pandas as pd

from tbltime.utils.config import FORMULA_KEYWORDS, FORMULA_QUOTE_CHARS, FORMULA_SEPARATOR
from tbltime.utils.exceptions import InvalidFormulaError, UnparsableTimeStringError
from tbltime.utils.loguru_setup import logger
from tbltime.utils.time.index_class import IndexClass

__all__ = [
    "TimeFormula",
    "TimeToken",
    "TokenKind",
    "as_time_formula",
    "is_time_formula",
    "parse_time_formula",
    "parse_time_string",
]

# Calendar strings, most precise first
_FULL_TIMESTAMP_PATTERN = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})[ T]+"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,6}))?)?"
)
_CALENDAR_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("second", _FULL_TIMESTAMP_PATTERN),
    ("day", re.compile(r"(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})")),
    ("month", re.compile(r"(?P<year>\d{4})-(?P<month>\d{1,2})")),
    ("year", re.compile(r"(?P<year>\d{4})")),
]
_TIME_OF_DAY_PATTERN = re.compile(r"(?P<hour>\d{1,2})(?::(?P<minute>\d{2})(?::(?P<second>\d{2}))?)?")

# Precision implied by the frequency of a pandas Period literal
_PERIOD_PRECISION = {"Y": "year", "A": "year", "Q": "quarter", "M": "month", "W": "week", "D": "day", "B": "day"}


class TokenKind(enum.Enum):
    """How a formula side is resolved."""

    KEYWORD = "keyword"  # 'start' / 'end', resolved against the data
    LITERAL = "literal"  # already of the index's native type
    PARSED = "parsed"  # calendar components expanded to the precision window


@attrs.frozen
class TimeToken:
    """One side of a parsed time formula.

    Attributes:
        kind: Resolution strategy for the side
        value: Keyword string or native literal; ``None`` for parsed sides
        precision: Precision window of a parsed side (``"year"`` ... ``"second"``)
        fields: Calendar components of a parsed side (year, month, ... microsecond)
        tzinfo: Explicit zone carried by a datetime literal, if any
    """

    kind: TokenKind
    value: Any = None
    precision: str | None = None
    fields: dict[str, int] = attrs.field(factory=dict)
    tzinfo: Any = None


def _strip_side(side: str) -> str:
    side = side.strip()
    if len(side) >= 2 and side[0] == side[-1] and side[0] in FORMULA_QUOTE_CHARS:
        side = side[1:-1].strip()
    return side


@attrs.frozen
class TimeFormula:
    """A ``from ~ to`` range expression; ``lhs=None`` makes it one-sided.

    Example:
        >>> TimeFormula.parse("'2013' ~ '2015-06'")
        TimeFormula(lhs='2013', rhs='2015-06')
        >>> TimeFormula.parse("~2015").is_one_sided
        True
    """

    lhs: Any
    rhs: Any

    def __attrs_post_init__(self) -> None:
        if self.rhs is None or (isinstance(self.rhs, str) and not self.rhs.strip()):
            raise InvalidFormulaError(self, "the right-hand side of a time formula is required")

    @property
    def is_one_sided(self) -> bool:
        return self.lhs is None

    @classmethod
    def one_sided(cls, rhs: Any) -> TimeFormula:
        return cls(None, rhs)

    @classmethod
    def parse(cls, text: str) -> TimeFormula:
        """Parse ``"lhs ~ rhs"`` or ``"~ rhs"`` into a TimeFormula."""
        parts = text.split(FORMULA_SEPARATOR)
        if len(parts) != 2:
            raise InvalidFormulaError(text, f"expected exactly one '{FORMULA_SEPARATOR}'")
        lhs, rhs = (_strip_side(p) for p in parts)
        if not rhs:
            raise InvalidFormulaError(text, "the right-hand side of a time formula is required")
        return cls(lhs or None, rhs)

    def __str__(self) -> str:
        def show(side: Any) -> str:
            return f"'{side}'" if isinstance(side, str) else str(side)

        if self.is_one_sided:
            return f"~{show(self.rhs)}"
        return f"{show(self.lhs)} ~ {show(self.rhs)}"


def is_time_formula(obj: Any) -> bool:
    """Return True if ``obj`` should be read as a time formula by a subset selector."""
    return isinstance(obj, TimeFormula) or (isinstance(obj, str) and FORMULA_SEPARATOR in obj)


def as_time_formula(obj: Any) -> TimeFormula:
    """Coerce a TimeFormula, a formula string or a ``(from, to)`` pair into a TimeFormula."""
    if isinstance(obj, TimeFormula):
        return obj
    if isinstance(obj, str):
        return TimeFormula.parse(obj)
    if isinstance(obj, tuple) and len(obj) == 2:
        lhs, rhs = obj
        if isinstance(lhs, str):
            lhs = _strip_side(lhs) or None
        if isinstance(rhs, str):
            rhs = _strip_side(rhs)
        return TimeFormula(lhs, rhs)
    raise InvalidFormulaError(obj)


def _int_fields(match: re.Match) -> dict[str, int]:
    fields = {k: int(v) for k, v in match.groupdict().items() if v is not None and k != "fraction"}
    fraction = match.groupdict().get("fraction")
    if fraction:
        fields["microsecond"] = int(fraction.ljust(6, "0"))
    return fields


def parse_time_string(text: str, index_class: IndexClass) -> TimeToken:
    """Classify a shorthand time string by precision.

    Args:
        text: Formula side such as ``"2013"``, ``"2013-06-01 10:15"`` or ``"12:30"``
        index_class: Class of the index the formula will be applied to

    Returns:
        TimeToken: A parsed token carrying its precision window

    Raises:
        UnparsableTimeStringError: If the string matches no precision pattern
            or names an impossible date/time
    """
    text = text.strip()

    if index_class is IndexClass.TIME_OF_DAY:
        match = _TIME_OF_DAY_PATTERN.fullmatch(text)
        if match is None:
            raise UnparsableTimeStringError(text, index_class)
        fields = _int_fields(match)
        precision = "second" if "second" in fields else "minute" if "minute" in fields else "hour"
        try:
            time(fields["hour"], fields.get("minute", 0), fields.get("second", 0))
        except ValueError as e:
            raise UnparsableTimeStringError(text, index_class) from e
        return TimeToken(TokenKind.PARSED, precision=precision, fields=fields)

    for precision, pattern in _CALENDAR_PATTERNS:
        match = pattern.fullmatch(text)
        if match is None:
            continue
        fields = _int_fields(match)
        try:
            datetime(
                fields["year"],
                fields.get("month", 1),
                fields.get("day", 1),
                fields.get("hour", 0),
                fields.get("minute", 0),
                fields.get("second", 0),
            )
        except ValueError as e:
            raise UnparsableTimeStringError(text, index_class) from e
        return TimeToken(TokenKind.PARSED, precision=precision, fields=fields)

    raise UnparsableTimeStringError(text, index_class)


def _is_native(value: Any, index_class: IndexClass, freqstr: str | None) -> bool:
    if index_class is IndexClass.DATETIME:
        return isinstance(value, (pd.Timestamp, datetime))
    if index_class is IndexClass.DATE:
        return isinstance(value, date) and not isinstance(value, datetime)
    if index_class is IndexClass.TIME_OF_DAY:
        return isinstance(value, time)
    return isinstance(value, pd.Period) and (freqstr is None or value.freqstr == freqstr)


def _literal_token(value: Any, index_class: IndexClass, freqstr: str | None) -> TimeToken:
    """Turn a non-string side into a token, expanding it when it is not native."""
    if _is_native(value, index_class, freqstr):
        return TimeToken(TokenKind.LITERAL, value=value)

    if isinstance(value, pd.Period):
        base = value.freqstr.split("-")[0].lstrip("0123456789").upper()[:1]
        precision = _PERIOD_PRECISION.get(base)
        if precision is None or not index_class.has_calendar:
            raise UnparsableTimeStringError(value, index_class)
        start = value.start_time
        return TimeToken(
            TokenKind.PARSED,
            precision=precision,
            fields={"year": start.year, "month": start.month, "day": start.day},
        )

    if isinstance(value, datetime):
        fields = {
            "hour": value.hour,
            "minute": value.minute,
            "second": value.second,
            "microsecond": value.microsecond,
        }
        if index_class.has_calendar:
            fields.update(year=value.year, month=value.month, day=value.day)
        return TimeToken(TokenKind.PARSED, precision="second", fields=fields, tzinfo=value.tzinfo)

    if isinstance(value, date) and index_class.has_calendar:
        return TimeToken(
            TokenKind.PARSED,
            precision="day",
            fields={"year": value.year, "month": value.month, "day": value.day},
        )

    raise UnparsableTimeStringError(value, index_class)


def _parse_side(side: Any, index_class: IndexClass, freqstr: str | None) -> TimeToken:
    if isinstance(side, str):
        side = _strip_side(side)
        if side in FORMULA_KEYWORDS:
            return TimeToken(TokenKind.KEYWORD, value=side)
        return parse_time_string(side, index_class)
    return _literal_token(side, index_class, freqstr)


def parse_time_formula(
    index_class: IndexClass,
    time_formula: Any,
    freqstr: str | None = None,
) -> tuple[TimeToken, TimeToken]:
    """Split a time formula into unresolved ``from``/``to`` tokens.

    Args:
        index_class: Class of the index being filtered
        time_formula: Anything accepted by :func:`as_time_formula`
        freqstr: Period frequency of year-month/year-quarter indexes

    Returns:
        tuple: ``(from_token, to_token)``; a one-sided formula yields the
        right-hand side twice
    """
    formula = as_time_formula(time_formula)
    rhs = _parse_side(formula.rhs, index_class, freqstr)
    lhs = rhs if formula.is_one_sided else _parse_side(formula.lhs, index_class, freqstr)
    logger.debug(f"Parsed time formula {formula} for {index_class} index: {lhs.kind.value} ~ {rhs.kind.value}")
    return lhs, rhs
