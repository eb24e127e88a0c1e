#!/usr/bin/env python
"""Tests for flooring index values to unit boundaries."""

from datetime import date, time, timezone

import pandas as pd
import pytest

from tbltime.utils.exceptions import UnsupportedIndexClassError
from tbltime.utils.time.floor import floor_index


class TestFloorScalars:
    @pytest.mark.parametrize(
        "unit,expected",
        [
            ("seconds", "2015-06-17 10:22:15"),
            ("minute", "2015-06-17 10:22:00"),
            ("hours", "2015-06-17 10:00:00"),
            ("day", "2015-06-17 00:00:00"),
            ("week", "2015-06-15 00:00:00"),
            ("month", "2015-06-01 00:00:00"),
            ("quarters", "2015-04-01 00:00:00"),
            ("year", "2015-01-01 00:00:00"),
        ],
    )
    def test_naive_timestamp(self, unit, expected):
        assert floor_index(pd.Timestamp("2015-06-17 10:22:15.250"), unit) == pd.Timestamp(expected)

    def test_default_unit_is_seconds(self):
        assert floor_index(pd.Timestamp("2015-06-17 10:22:15.250")) == pd.Timestamp("2015-06-17 10:22:15")

    def test_aware_timestamp_floors_in_its_zone(self):
        value = pd.Timestamp("2015-06-17 22:30", tz="America/New_York")
        result = floor_index(value, "day")

        assert result == pd.Timestamp("2015-06-17 00:00", tz="America/New_York")
        assert str(result.tz) == "America/New_York"

    def test_naive_stays_naive(self):
        assert floor_index(pd.Timestamp("2015-06-17 10:22"), "day").tzinfo is None

    def test_date(self):
        assert floor_index(date(2015, 6, 17), "month") == date(2015, 6, 1)
        assert floor_index(date(2015, 6, 17), "year") == date(2015, 1, 1)

    def test_time_of_day(self):
        assert floor_index(time(12, 34, 56), "hour") == time(12, 0)
        assert floor_index(time(12, 34, 56), "minute") == time(12, 34)

    def test_time_of_day_keeps_zone(self):
        result = floor_index(time(12, 34, tzinfo=timezone.utc), "hour")
        assert result == time(12, 0, tzinfo=timezone.utc)
        assert result.tzinfo is timezone.utc

    def test_year_month(self):
        assert floor_index(pd.Period("2015-06", "M"), "year") == pd.Period("2015-01", "M")

    def test_year_quarter(self):
        assert floor_index(pd.Period("2015Q3"), "year") == pd.Period("2015Q1")

    def test_invalid_unit(self):
        with pytest.raises(ValueError):
            floor_index(pd.Timestamp("2015-06-17"), "fortnight")

    def test_unsupported_value(self):
        with pytest.raises(UnsupportedIndexClassError):
            floor_index(42, "day")


class TestFloorCollections:
    def test_series_keeps_dtype_index_and_name(self):
        values = pd.Series(
            pd.to_datetime(["2015-06-17 10:22", "2015-07-01 00:00", "2016-02-29 23:59"]),
            index=[10, 20, 30],
            name="date",
        )
        result = floor_index(values, "month")

        assert result.dtype == values.dtype
        assert list(result.index) == [10, 20, 30]
        assert result.name == "date"
        assert list(result) == [pd.Timestamp("2015-06-01"), pd.Timestamp("2015-07-01"), pd.Timestamp("2016-02-01")]

    def test_missing_values_pass_through(self):
        values = pd.Series(pd.to_datetime(["2015-06-17 10:22", None]))
        result = floor_index(values, "day")

        assert result.iloc[0] == pd.Timestamp("2015-06-17")
        assert pd.isna(result.iloc[1])

    def test_aware_index(self):
        values = pd.date_range("2015-01-01 05:00", periods=3, freq="13h", tz="UTC", name="stamp")
        result = floor_index(values, "day")

        assert isinstance(result, pd.Index)
        assert result.name == "stamp"
        assert list(result) == [
            pd.Timestamp("2015-01-01", tz="UTC"),
            pd.Timestamp("2015-01-01", tz="UTC"),
            pd.Timestamp("2015-01-02", tz="UTC"),
        ]

    def test_period_series(self, month_df):
        result = floor_index(month_df["month"], "year")

        assert isinstance(result.dtype, pd.PeriodDtype)
        assert result.nunique() == 4

    def test_time_series(self, time_df):
        result = floor_index(time_df["clock"], "hour")
        assert result.nunique() == 24


@pytest.mark.parametrize(
    "value",
    [
        pd.Timestamp("2015-06-17 10:22:15"),
        pd.Timestamp("2015-06-17 10:22:15", tz="Europe/Paris"),
        date(2015, 6, 17),
        time(10, 22, 15),
        pd.Period("2015-06", "M"),
        pd.Period("2015Q2"),
    ],
)
@pytest.mark.parametrize("unit", ["second", "minute", "hour", "day", "month", "year"])
def test_floor_is_idempotent(value, unit):
    """Flooring an already floored value changes nothing."""
    once = floor_index(value, unit)
    assert floor_index(once, unit) == once


@pytest.mark.parametrize(
    "value",
    [
        pd.Timestamp("2015-06-17 10:22:15"),
        pd.Timestamp("2015-06-17 10:22:15", tz="Asia/Kolkata"),
        date(2015, 6, 17),
        time(10, 22, 15),
        time(10, 22, 15, tzinfo=timezone.utc),
        pd.Period("2015-06", "M"),
        pd.Period("2015Q2"),
    ],
)
def test_second_precision_values_floor_to_themselves(value):
    assert floor_index(value, "second") == value
