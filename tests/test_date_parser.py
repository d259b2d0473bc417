"""Tests for date parsing and date range helpers."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta

from bizledger.utils.date_parser import (
    get_date_range,
    month_bounds,
    parse_date,
    parse_iso_date,
    trailing_month_starts,
    validate_time,
)

REFERENCE = date(2024, 3, 15)  # a Friday


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_relative_dates():
    """Test parsing today, yesterday and tomorrow."""
    today = date.today()
    assert parse_date("today") == today
    assert parse_date(" Yesterday ") == today - timedelta(days=1)
    assert parse_date("tomorrow") == today + timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month' as the first day of last month."""
    expected = (date.today() - relativedelta(months=1)).replace(day=1)
    assert parse_date("last month") == expected


def test_parse_this_week_is_monday():
    """Test parsing 'this week'."""
    result = parse_date("this week")
    assert result.weekday() == 0
    assert date.today() - result < timedelta(days=7)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


class TestParseIsoDate:
    def test_valid(self):
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize(
        "value", ["2024-2-29", "2023-02-29", "20240229", "", None, "2024-02-29T00:00", "2024-W01-1", "2024-060"]
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_iso_date(value)


class TestValidateTime:
    @pytest.mark.parametrize("value", ["00:00", "09:05", "23:59"])
    def test_valid(self, value):
        assert validate_time(value) == value

    @pytest.mark.parametrize("value", ["24:00", "9:05", "12:60", "noon", ""])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            validate_time(value)


def test_month_bounds():
    """Test first and last day of a month, including leap February."""
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(date(2023, 12, 31)) == (date(2023, 12, 1), date(2023, 12, 31))


def test_trailing_month_starts_cross_year():
    """Test trailing months are oldest first and include the current month."""
    assert trailing_month_starts(date(2024, 2, 29), 3) == [
        date(2023, 12, 1),
        date(2024, 1, 1),
        date(2024, 2, 1),
    ]


@pytest.mark.parametrize(
    "period, expected",
    [
        ("today", (REFERENCE, REFERENCE)),
        ("this-week", (date(2024, 3, 11), REFERENCE)),
        ("this-month", (date(2024, 3, 1), REFERENCE)),
        ("this-year", (date(2024, 1, 1), REFERENCE)),
        ("last-week", (date(2024, 3, 4), date(2024, 3, 10))),
        ("last-month", (date(2024, 2, 1), date(2024, 2, 29))),
        ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
    ],
)
def test_get_date_range(period, expected):
    """Test every supported period against a fixed reference date."""
    assert get_date_range(period, REFERENCE) == expected


def test_get_date_range_last_month_in_january():
    """Test last-month crosses the year boundary."""
    assert get_date_range("last-month", date(2024, 1, 10)) == (date(2023, 12, 1), date(2023, 12, 31))


def test_get_date_range_defaults_to_today():
    """Test the reference date defaults to today."""
    today = date.today()
    assert get_date_range("this-month") == (today.replace(day=1), today)


def test_get_date_range_invalid_period():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("invalid-period")
