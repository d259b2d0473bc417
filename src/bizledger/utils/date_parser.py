"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_iso_date(date_str: str) -> date:
    """Parse a strict zero-padded ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the string is not a valid ISO calendar date
    """
    if not isinstance(date_str, str) or not _ISO_DATE_PATTERN.match(date_str):
        raise ValueError(f"Expected a YYYY-MM-DD date, got {date_str!r}")
    return date.fromisoformat(date_str)


def validate_time(time_str: str) -> str:
    """Validate an ``HH:MM`` time string and return it unchanged.

    Raises:
        ValueError: If the string is not a 24-hour HH:MM time
    """
    if not isinstance(time_str, str) or not _TIME_PATTERN.match(time_str):
        raise ValueError(f"Expected an HH:MM time, got {time_str!r}")
    return time_str


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of the month containing ``day``."""
    start = day.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def trailing_month_starts(today: date, count: int) -> list[date]:
    """Return the first day of the ``count`` months ending with today's month.

    The list is ordered oldest first and always includes the current month.
    """
    current = today.replace(day=1)
    return [current - relativedelta(months=offset) for offset in range(count - 1, -1, -1)]


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Periods that contain today end on today; past periods end on their last
    calendar day.

    Args:
        period: Period string (today, this-week, this-month, this-year,
            last-week, last-month, last-year)
        today: Reference date, defaults to the current local date

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "today":
        return (today, today)

    elif period == "this-week":
        return (today - timedelta(days=today.weekday()), today)

    elif period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    elif period == "last-month":
        return month_bounds(today - relativedelta(months=1))

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: today, this-week, this-month, "
            "this-year, last-week, last-month, last-year"
        )
