"""Time-of-day parsing and span resolution for session records.

Every consumer (classifier, day layout, cell rollups) resolves a session's
start/end through ``resolve_span`` so the overnight rule is applied the same
way everywhere: when the naive end is at or before the naive start, the end is
the same time-of-day on the following calendar day.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from session_timeline.core.errors import ParseError
from session_timeline.utils.calendar import parse_date

MINUTES_PER_DAY = 24 * 60

_TIME_OF_DAY = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


@dataclass(frozen=True)
class Span:
    """Resolved absolute span of a session.

    Attributes:
        start: Start instant
        end: End instant (strictly after start)
        overflows_to_next_day: True when the end was moved onto the next day
    """

    start: datetime
    end: datetime
    overflows_to_next_day: bool

    @property
    def duration_minutes(self) -> int:
        return duration_minutes(self)


def parse_time_of_day(value: str) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into a time.

    Raises:
        ParseError: If the string does not match either format or is out of range
    """
    if not isinstance(value, str):
        raise ParseError(value, f"Time of day must be a string, got {type(value).__name__}")
    match = _TIME_OF_DAY.match(value.strip())
    if match is None:
        raise ParseError(value, f"Invalid time of day (expected HH:MM or HH:MM:SS): {value!r}")
    hour, minute, second = (int(part) if part else 0 for part in match.groups())
    try:
        return time(hour, minute, second)
    except ValueError as e:
        raise ParseError(value, f"Time of day out of range: {value!r}") from e


def to_instant(day: date | str, time_of_day: str, tz: tzinfo | None = None) -> datetime:
    """Combine a calendar date and a time-of-day string into an instant.

    Args:
        day: Calendar date (date or ``YYYY-MM-DD``)
        time_of_day: ``HH:MM`` or ``HH:MM:SS``
        tz: Optional timezone; None yields a naive wall-clock instant

    Raises:
        ParseError: If either part cannot be parsed
    """
    instant = datetime.combine(parse_date(day), parse_time_of_day(time_of_day))
    if tz is not None:
        instant = instant.replace(tzinfo=tz)
    return instant


def resolve_span(day: date | str, start_time: str, end_time: str, tz: tzinfo | None = None) -> Span:
    """Resolve a session's start/end strings into an absolute span.

    Raises:
        ParseError: If the date or either time cannot be parsed
    """
    start = to_instant(day, start_time, tz)
    end = to_instant(day, end_time, tz)
    overflows = end <= start
    if overflows:
        end = datetime.combine(end.date() + timedelta(days=1), end.timetz())
    return Span(start=start, end=end, overflows_to_next_day=overflows)


def duration_minutes(span: Span) -> int:
    """Duration of a span rounded to the nearest minute (never negative)."""
    seconds = (span.end - span.start).total_seconds()
    return max(0, math.floor(seconds / 60 + 0.5))


def minutes_since_midnight(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute


def format_hhmm(instant: datetime | time) -> str:
    return f"{instant.hour:02d}:{instant.minute:02d}"
