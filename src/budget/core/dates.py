#!/usr/bin/env python3
"""
Calendar Date Helpers

Dates at every public boundary are ISO "YYYY-MM-DD" strings so that plain
string comparison gives chronological order. These helpers convert to and
from datetime.date for arithmetic and always work on local calendar fields.
"""

import calendar
from datetime import date, datetime, timedelta


def parse_iso_date(value: str | date) -> date:
    """
    Parse an ISO "YYYY-MM-DD" string.

    Args:
        value: ISO date string (a date is returned unchanged)

    Returns:
        date object

    Raises:
        ValueError: If the string is not a valid ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def format_iso_date(value: date | datetime) -> str:
    """
    Format as YYYY-MM-DD using the local calendar fields.

    A timezone-aware datetime is first converted to the local zone so that a
    timestamp late in the evening does not shift to the next (UTC) day.

    Args:
        value: date, naive datetime or aware datetime

    Returns:
        ISO date string
    """
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month (month is 1-12)."""
    return calendar.monthrange(year, month)[1]


def last_day_of_month(year: int, month: int) -> date:
    """Last calendar day of a month."""
    return date(year, month, days_in_month(year, month))


def clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, moving day back to the month's last day when it overflows."""
    return date(year, month, min(day, days_in_month(year, month)))


def add_days(iso_date: str, days: int) -> str:
    """Shift an ISO date by a number of days."""
    return (parse_iso_date(iso_date) + timedelta(days=days)).isoformat()


def calendar_day_distance(first: str, second: str) -> int:
    """Absolute number of calendar days between two ISO dates."""
    return abs((parse_iso_date(first) - parse_iso_date(second)).days)


def iter_days(start: str, end: str):
    """Yield every ISO date from start to end inclusive."""
    current = parse_iso_date(start)
    last = parse_iso_date(end)
    while current <= last:
        yield current.isoformat()
        current += timedelta(days=1)


def month_key(iso_date: str) -> str:
    """YYYY-MM month key of an ISO date."""
    return iso_date[:7]


def get_months_between(start_date: str, end_date: str) -> list[str]:
    """
    Every calendar month overlapping [start_date, end_date], inclusive.

    Works at month granularity: a mid-month start still includes that month.

    Args:
        start_date: ISO start date
        end_date: ISO end date

    Returns:
        Ordered list of "YYYY-MM" strings, empty when end_date < start_date

    Example:
        get_months_between("2025-11-15", "2026-02-01") -> ["2025-11", "2025-12", "2026-01", "2026-02"]
    """
    start = parse_iso_date(start_date)
    end = parse_iso_date(end_date)
    if end < start:
        return []

    months: list[str] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append(f"{year:04d}-{month:02d}")
        month += 1
        if month > 12:
            month = 1
            year += 1
    return months
