"""Canonical week and month window helpers.

Week boundaries are Monday-Sunday (ISO week).
"""

import calendar
from datetime import date, datetime, timedelta

from session_timeline.core.errors import ParseError


def week_start(d: date) -> date:
    """Return Monday of the calendar week containing d."""
    return d - timedelta(days=d.weekday())


def week_end(d: date) -> date:
    """Return Sunday of the calendar week containing d."""
    return week_start(d) + timedelta(days=6)


def month_start(d: date) -> date:
    """Return the first day of the month containing d."""
    return d.replace(day=1)


def month_end(d: date) -> date:
    """Return the last day of the month containing d."""
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def add_months(d: date, months: int) -> date:
    """Shift d by a number of months, clamping the day to the target month length."""
    month_index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(month_index, 12)
    day = min(d.day, calendar.monthrange(year, month + 1)[1])
    return date(year, month + 1, day)


def same_month(a: date, b: date) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def parse_date(value: date | datetime | str) -> date:
    """Parse a calendar date from a date, datetime or ``YYYY-MM-DD`` string.

    Raises:
        ParseError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError as e:
            raise ParseError(value, f"Invalid date (expected YYYY-MM-DD): {value!r}") from e
    raise ParseError(value, f"Unsupported date value: {value!r}")
