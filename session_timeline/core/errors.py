"""Error types for the session timeline engine.

Per-session problems (unparsable times) are recovered by skipping the record;
navigation problems are raised to the caller and leave view state untouched.
"""

from datetime import datetime


class TimelineError(Exception):
    """Base exception for timeline engine errors."""

    pass


class ParseError(TimelineError, ValueError):
    """Raised when a date or time-of-day string cannot be parsed.

    Attributes:
        value: The offending input
    """

    def __init__(self, value: object, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"Cannot parse time value: {value!r}")


class InvalidSessionTimeError(TimelineError):
    """Raised when a session's date/start/end do not form a valid span.

    The batch classifier catches this, logs it and excludes the session from
    every derived collection.

    Attributes:
        session_id: ID of the offending session (None if it has none)
        reason: Human-readable cause
    """

    def __init__(self, session_id: str | None, reason: str) -> None:
        self.session_id = session_id
        self.reason = reason
        super().__init__(f"Session '{session_id}' has an invalid time: {reason}")


class NavigationError(TimelineError, ValueError):
    """Raised when a navigation request is invalid (bad date, granularity, direction)."""

    pass


class ClockSkewDetectedError(TimelineError):
    """Raised when a clock reading moves backward relative to the previous tick.

    Attributes:
        previous: Last accepted instant
        current: Rejected instant
    """

    def __init__(self, previous: datetime, current: datetime) -> None:
        self.previous = previous
        self.current = current
        super().__init__(f"Clock moved backward from {previous.isoformat()} to {current.isoformat()}")
