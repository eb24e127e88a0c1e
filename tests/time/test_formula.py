#!/usr/bin/env python
"""Tests for time formula parsing."""

from datetime import date, datetime, time, timezone

import pandas as pd
import pytest

from tbltime.utils.exceptions import InvalidFormulaError, UnparsableTimeStringError
from tbltime.utils.time.formula import (
    TimeFormula,
    TokenKind,
    as_time_formula,
    is_time_formula,
    parse_time_formula,
    parse_time_string,
)
from tbltime.utils.time.index_class import IndexClass


class TestTimeFormula:
    """Construction and parsing of ``from ~ to`` expressions."""

    def test_parse_two_sided(self):
        assert TimeFormula.parse("'2013' ~ '2015-06'") == TimeFormula("2013", "2015-06")

    def test_parse_unquoted_and_double_quoted(self):
        assert TimeFormula.parse('2013 ~ "2015"') == TimeFormula("2013", "2015")

    def test_parse_one_sided(self):
        formula = TimeFormula.parse("~ '2015'")

        assert formula.is_one_sided
        assert formula == TimeFormula.one_sided("2015")

    def test_parse_keywords(self):
        formula = TimeFormula.parse("'start' ~ 'end'")
        assert (formula.lhs, formula.rhs) == ("start", "end")

    @pytest.mark.parametrize("text", ["2013", "2013 ~ 2014 ~ 2015", "2013 ~", "2013 ~ ''"])
    def test_malformed_formula(self, text):
        with pytest.raises(InvalidFormulaError):
            TimeFormula.parse(text)

    def test_rhs_required(self):
        with pytest.raises(InvalidFormulaError):
            TimeFormula("2013", None)

    def test_str(self):
        assert str(TimeFormula("2013", "2015")) == "'2013' ~ '2015'"
        assert str(TimeFormula.one_sided("2015")) == "~'2015'"

    def test_as_time_formula(self):
        assert as_time_formula("2013 ~ 2015") == TimeFormula("2013", "2015")
        assert as_time_formula(("'2013'", "2015")) == TimeFormula("2013", "2015")
        assert as_time_formula(("", "2015")).is_one_sided

        formula = TimeFormula("2013", "2015")
        assert as_time_formula(formula) is formula

    def test_as_time_formula_rejects_other_objects(self):
        with pytest.raises(InvalidFormulaError):
            as_time_formula(2015)

    def test_is_time_formula(self):
        assert is_time_formula("2013 ~ 2015")
        assert is_time_formula("~2015")
        assert is_time_formula(TimeFormula.one_sided("2015"))
        assert not is_time_formula("date")
        assert not is_time_formula(["date"])


class TestParseTimeString:
    """Precision detection of shorthand strings."""

    @pytest.mark.parametrize(
        "text,precision",
        [
            ("2013", "year"),
            ("2013-06", "month"),
            ("2013-6", "month"),
            ("2013-06-01", "day"),
            ("2013-06-01 10:15", "second"),
            ("2013-06-01 10:15:30", "second"),
            ("2013-06-01T10:15:30.5", "second"),
        ],
    )
    def test_calendar_precision(self, text, precision):
        token = parse_time_string(text, IndexClass.DATETIME)

        assert token.kind is TokenKind.PARSED
        assert token.precision == precision

    def test_calendar_fields(self):
        token = parse_time_string("2013-06-01 10:15:30.5", IndexClass.DATETIME)
        assert token.fields == {
            "year": 2013,
            "month": 6,
            "day": 1,
            "hour": 10,
            "minute": 15,
            "second": 30,
            "microsecond": 500000,
        }

    @pytest.mark.parametrize(
        "text,precision",
        [("12", "hour"), ("12:30", "minute"), ("12:30:15", "second"), ("7", "hour")],
    )
    def test_time_of_day_precision(self, text, precision):
        assert parse_time_string(text, IndexClass.TIME_OF_DAY).precision == precision

    @pytest.mark.parametrize("text", ["abc", "2013/01/01", "2013-13", "2013-02-30", "13-01-01", "2013-01-01 25:00"])
    def test_unparsable_calendar_string(self, text):
        with pytest.raises(UnparsableTimeStringError) as excinfo:
            parse_time_string(text, IndexClass.DATETIME)
        assert "YYYY" in str(excinfo.value)

    @pytest.mark.parametrize("text", ["25", "12:60", "2013-01", "noon"])
    def test_unparsable_time_of_day_string(self, text):
        with pytest.raises(UnparsableTimeStringError) as excinfo:
            parse_time_string(text, IndexClass.TIME_OF_DAY)
        assert "HH:MM" in str(excinfo.value)


class TestParseTimeFormula:
    """Tokenizing whole formulas against an index class."""

    def test_one_sided_duplicates_rhs(self):
        lhs, rhs = parse_time_formula(IndexClass.DATETIME, "~2015")
        assert lhs == rhs

    def test_one_sided_matches_explicit_range(self):
        assert parse_time_formula(IndexClass.DATETIME, "~2015") == parse_time_formula(
            IndexClass.DATETIME, "2015 ~ 2015"
        )

    def test_keywords(self):
        lhs, rhs = parse_time_formula(IndexClass.DATETIME, "'start' ~ '2014'")

        assert lhs.kind is TokenKind.KEYWORD
        assert lhs.value == "start"
        assert rhs.kind is TokenKind.PARSED

    def test_native_literal(self):
        ts = pd.Timestamp("2014-03-01 12:00")
        lhs, _ = parse_time_formula(IndexClass.DATETIME, TimeFormula(ts, "2015"))

        assert lhs.kind is TokenKind.LITERAL
        assert lhs.value == ts

    def test_date_literal_on_datetime_index_has_day_precision(self):
        lhs, _ = parse_time_formula(IndexClass.DATETIME, TimeFormula(date(2014, 3, 1), "2015"))

        assert lhs.kind is TokenKind.PARSED
        assert lhs.precision == "day"

    def test_datetime_literal_keeps_zone(self):
        moment = datetime(2014, 3, 1, 12, tzinfo=timezone.utc)
        lhs, _ = parse_time_formula(IndexClass.DATE, TimeFormula(moment, "2015"))

        assert lhs.precision == "second"
        assert lhs.tzinfo is timezone.utc

    def test_period_literal_precision(self):
        lhs, rhs = parse_time_formula(IndexClass.DATETIME, TimeFormula(pd.Period("2014Q2"), pd.Period("2015-03", "M")))

        assert lhs.precision == "quarter"
        assert rhs.precision == "month"

    def test_native_period_literal(self):
        lhs, _ = parse_time_formula(IndexClass.YEAR_MONTH, TimeFormula(pd.Period("2014-03", "M"), "2015"), "M")
        assert lhs.kind is TokenKind.LITERAL

    def test_time_literal(self):
        _, rhs = parse_time_formula(IndexClass.TIME_OF_DAY, TimeFormula("10", time(11, 30)))
        assert rhs.kind is TokenKind.LITERAL

    def test_date_literal_rejected_for_time_of_day(self):
        with pytest.raises(UnparsableTimeStringError):
            parse_time_formula(IndexClass.TIME_OF_DAY, TimeFormula(date(2014, 1, 1), "12"))

    def test_unparsable_side(self):
        with pytest.raises(UnparsableTimeStringError):
            parse_time_formula(IndexClass.DATETIME, "2013 ~ someday")
