#!/usr/bin/env python3
"""Custom exceptions for time formula parsing, range filtering and periods.

Every error derives from :class:`TbltimeError` so callers can catch the whole
family at once, and additionally from the builtin it specializes
(``ValueError`` or ``TypeError``) so generic handlers keep working.
"""

from typing import Any

from tbltime.utils.config import TEXT_PREVIEW_LENGTH
from tbltime.utils.loguru_setup import logger


def _preview(value: Any) -> str:
    text = repr(value)
    if len(text) > TEXT_PREVIEW_LENGTH:
        return text[: TEXT_PREVIEW_LENGTH - 3] + "..."
    return text


class TbltimeError(Exception):
    """Base exception for all tbltime errors."""

    def __init__(self, message="tbltime error occurred") -> None:
        """Initialize TbltimeError with an error message.

        Args:
            message: Error description.
        """
        self.message = message
        super().__init__(self.message)
        logger.debug(f"{type(self).__name__}: {message}")


class NotATimeTableError(TbltimeError, TypeError):
    """Raised when a time filter is applied to an object without a time index."""

    def __init__(self, obj: Any) -> None:
        self.obj_type = type(obj).__name__
        super().__init__(f"Object of type `{self.obj_type}` is not a TimeTable; use as_tbl_time() to attach a time index.")


class UnparsableTimeStringError(TbltimeError, ValueError):
    """Raised when a formula side matches no recognized precision pattern."""

    def __init__(self, value: Any, index_class: Any) -> None:
        self.value = value
        self.index_class = index_class
        expected = "HH, HH:MM or HH:MM:SS" if getattr(index_class, "value", index_class) == "time_of_day" else (
            "YYYY, YYYY-MM, YYYY-MM-DD or YYYY-MM-DD HH:MM[:SS]"
        )
        super().__init__(
            f"Cannot parse {_preview(value)} for a `{getattr(index_class, 'value', index_class)}` index. "
            f"Expected {expected}."
        )


class InvalidRangeError(TbltimeError, ValueError):
    """Raised when the resolved ``from`` instant lies after the resolved ``to`` instant."""

    def __init__(self, start: Any, end: Any) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Time formula `from` ({start}) is after `to` ({end}).")


class InvalidPeriodError(TbltimeError, ValueError):
    """Raised for period strings with an unknown unit or a non-positive frequency."""

    def __init__(self, period: Any, reason: str) -> None:
        self.period = period
        super().__init__(f"Invalid period {_preview(period)}: {reason}")


class UnsupportedIndexClassError(TbltimeError, TypeError):
    """Raised when an index column's type has no parsing/floor strategy."""

    def __init__(self, index_type: Any) -> None:
        self.index_type = index_type
        super().__init__(
            f"Unsupported time index class `{index_type}`. Supported: datetime64, datetime.date, "
            "datetime.time, period[M] and period[Q]."
        )


class InvalidFormulaError(TbltimeError, ValueError):
    """Raised when an object cannot be read as a ``from ~ to`` time formula."""

    def __init__(self, formula: Any, reason: str = "expected 'from ~ to' or '~ to'") -> None:
        self.formula = formula
        super().__init__(f"Invalid time formula {_preview(formula)}: {reason}")
