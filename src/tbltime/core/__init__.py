"""Core time table functionality."""

from .series import create_series
from .time_table import TimeTable, as_tbl_time, filter_time

__all__ = ["TimeTable", "as_tbl_time", "create_series", "filter_time"]
