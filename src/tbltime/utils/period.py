#!/usr/bin/env python
"""
Period strings for time-based grouping.

A period string such as ``"2 day"``, ``"yearly"`` or ``"15 M"`` describes how
often a time index should be bucketed. This module turns it into an immutable
:class:`PeriodSpec` (frequency + unit) that downstream grouping code can hand
straight to pandas.

Parsing Rules:
--------------
1. The string is trimmed and split on whitespace into an optional numeric
   prefix and a unit token. A missing prefix means a frequency of 1.
2. The prefix must be a positive integer.
3. The unit token is matched case-insensitively against a table of aliases,
   except for the single letters ``m`` (month) and ``M`` (minute).
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import ClassVar

import pandas as pd
from pandas.tseries.frequencies import to_offset

from tbltime.utils.exceptions import InvalidPeriodError
from tbltime.utils.loguru_setup import logger

PERIOD_SPLIT_PATTERN = re.compile(r"\s+")
FREQUENCY_PATTERN = re.compile(r"\d+")

__all__ = [
    "PeriodSpec",
    "PeriodUnit",
    "parse_period",
    "validate_period_format",
]


class PeriodUnit(str, enum.Enum):
    """Calendar and clock units a period can be expressed in."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"

    def __str__(self) -> str:
        return self.value

    @property
    def is_fixed_width(self) -> bool:
        """Whether every period of this unit has the same length."""
        return self not in (PeriodUnit.YEAR, PeriodUnit.QUARTER, PeriodUnit.MONTH)

    @classmethod
    def from_alias(cls, alias: str) -> PeriodUnit:
        """Convert a unit alias (``"days"``, ``"Q"``, ``"M"``...) to a PeriodUnit.

        Raises:
            InvalidPeriodError: If the alias is not recognized
        """
        # The only case-sensitive pair
        if alias == "m":
            return cls.MONTH
        if alias == "M":
            return cls.MINUTE

        try:
            return _UNIT_ALIASES[alias.lower()]
        except KeyError as exc:
            raise InvalidPeriodError(alias, f"unknown unit '{alias}'") from exc


_UNIT_ALIASES: dict[str, PeriodUnit] = {
    # year
    "year": PeriodUnit.YEAR,
    "years": PeriodUnit.YEAR,
    "yearly": PeriodUnit.YEAR,
    "annual": PeriodUnit.YEAR,
    "annually": PeriodUnit.YEAR,
    "yr": PeriodUnit.YEAR,
    "yrs": PeriodUnit.YEAR,
    "y": PeriodUnit.YEAR,
    # quarter
    "quarter": PeriodUnit.QUARTER,
    "quarters": PeriodUnit.QUARTER,
    "quarterly": PeriodUnit.QUARTER,
    "qtr": PeriodUnit.QUARTER,
    "qtrs": PeriodUnit.QUARTER,
    "q": PeriodUnit.QUARTER,
    # month
    "month": PeriodUnit.MONTH,
    "months": PeriodUnit.MONTH,
    "monthly": PeriodUnit.MONTH,
    "mon": PeriodUnit.MONTH,
    "mons": PeriodUnit.MONTH,
    "mo": PeriodUnit.MONTH,
    # week
    "week": PeriodUnit.WEEK,
    "weeks": PeriodUnit.WEEK,
    "weekly": PeriodUnit.WEEK,
    "wk": PeriodUnit.WEEK,
    "wks": PeriodUnit.WEEK,
    "w": PeriodUnit.WEEK,
    # day
    "day": PeriodUnit.DAY,
    "days": PeriodUnit.DAY,
    "daily": PeriodUnit.DAY,
    "d": PeriodUnit.DAY,
    # hour
    "hour": PeriodUnit.HOUR,
    "hours": PeriodUnit.HOUR,
    "hourly": PeriodUnit.HOUR,
    "hr": PeriodUnit.HOUR,
    "hrs": PeriodUnit.HOUR,
    "h": PeriodUnit.HOUR,
    # minute
    "minute": PeriodUnit.MINUTE,
    "minutes": PeriodUnit.MINUTE,
    "min": PeriodUnit.MINUTE,
    "mins": PeriodUnit.MINUTE,
    # second
    "second": PeriodUnit.SECOND,
    "seconds": PeriodUnit.SECOND,
    "sec": PeriodUnit.SECOND,
    "secs": PeriodUnit.SECOND,
    "s": PeriodUnit.SECOND,
}


@dataclass(frozen=True)
class PeriodSpec:
    """Immutable frequency/unit pair parsed from a period string."""

    frequency: int
    unit: PeriodUnit

    MIN_FREQUENCY: ClassVar[int] = 1

    def __post_init__(self):
        """Validate frequency after initialization."""
        if isinstance(self.frequency, bool) or not isinstance(self.frequency, int):
            raise InvalidPeriodError(
                self.frequency, f"frequency must be an integer, got {type(self.frequency).__name__}"
            )
        if self.frequency < self.MIN_FREQUENCY:
            raise InvalidPeriodError(self.frequency, f"frequency must be a positive integer, got {self.frequency}")
        if not isinstance(self.unit, PeriodUnit):
            raise InvalidPeriodError(self.unit, "unit must be a PeriodUnit")

    @classmethod
    def from_string(cls, period: str) -> PeriodSpec:
        """Create a PeriodSpec from a ``"N unit"`` string."""
        if not isinstance(period, str):
            raise InvalidPeriodError(period, "period must be a string such as '1 day'")

        parts = PERIOD_SPLIT_PATTERN.split(period.strip())
        if parts == [""]:
            raise InvalidPeriodError(period, "period string cannot be empty")
        if len(parts) > 2:
            raise InvalidPeriodError(period, "too many elements; the correct format is 'num period' such as '1 day'")

        if len(parts) == 1:
            frequency_str, unit_str = "1", parts[0]
        else:
            frequency_str, unit_str = parts

        if not FREQUENCY_PATTERN.fullmatch(frequency_str):
            raise InvalidPeriodError(period, f"frequency '{frequency_str}' is not a positive integer")
        frequency = int(frequency_str)
        if frequency < cls.MIN_FREQUENCY:
            raise InvalidPeriodError(period, f"frequency must be a positive integer, got {frequency}")

        try:
            unit = PeriodUnit.from_alias(unit_str)
        except InvalidPeriodError as e:
            raise InvalidPeriodError(period, f"unknown unit '{unit_str}'") from e

        return cls(frequency=frequency, unit=unit)

    def to_offset(self) -> pd.DateOffset:
        """Convert to a pandas offset stepping by this period (``2 day`` -> ``2D``).

        Calendar units become relative offsets (``DateOffset(months=3)`` for a
        quarter) so a sequence keeps its day of month instead of snapping to
        month starts.
        """
        if self.unit is PeriodUnit.YEAR:
            return pd.DateOffset(years=self.frequency)
        if self.unit is PeriodUnit.QUARTER:
            return pd.DateOffset(months=3 * self.frequency)
        if self.unit is PeriodUnit.MONTH:
            return pd.DateOffset(months=self.frequency)
        return to_offset(self.to_timedelta())

    def to_timedelta(self) -> pd.Timedelta:
        """Convert to a pandas Timedelta.

        Returns:
            pd.Timedelta: Fixed-width duration of the period.

        Raises:
            InvalidPeriodError: If the unit is a calendar unit with variable length.
        """
        if not self.unit.is_fixed_width:
            raise InvalidPeriodError(str(self), f"'{self.unit}' has no fixed duration")
        return pd.Timedelta(**{f"{self.unit.value}s": self.frequency})

    def __str__(self) -> str:
        return f"{self.frequency} {self.unit.value}"


@lru_cache(maxsize=128)
def parse_period(period: str) -> PeriodSpec:
    """Parse a period string into a :class:`PeriodSpec`.

    Args:
        period: String such as ``"2 day"``, ``"yearly"``, ``"1 M"`` (minute)
            or ``"1 m"`` (month)

    Returns:
        PeriodSpec: Parsed frequency and unit

    Raises:
        InvalidPeriodError: If the unit is unknown or the frequency is not a
            positive integer

    Example:
        >>> parse_period("2 day")
        PeriodSpec(frequency=2, unit=<PeriodUnit.DAY: 'day'>)
        >>> parse_period("yearly").unit
        <PeriodUnit.YEAR: 'year'>
    """
    spec = PeriodSpec.from_string(period)
    logger.debug(f"Parsed period {period!r} -> {spec}")
    return spec


def validate_period_format(period: str) -> bool:
    """Return True if ``period`` parses as a period string."""
    try:
        PeriodSpec.from_string(period)
        return True
    except InvalidPeriodError:
        return False
