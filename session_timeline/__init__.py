"""Session timeline engine.

Classifies time-boxed booking sessions against a ticking clock, groups them by
date and participant, lays them out on a 24-hour day grid (overnight spans
included), decorates dates with availability, and keeps month/week/day view
navigation in sync with a companion mini calendar.
"""

from session_timeline.calendar.availability import AvailabilityDecoration, AvailabilitySets
from session_timeline.calendar.navigation import DateRange, Granularity, ViewNavigationController, ViewState
from session_timeline.core.clock import Clock, ClockReading
from session_timeline.core.errors import (
    ClockSkewDetectedError,
    InvalidSessionTimeError,
    NavigationError,
    ParseError,
    TimelineError,
)
from session_timeline.core.events import DateSelected, EventBus, SessionActivated, ViewRangeChanged
from session_timeline.engine import TimelineEngine, TimelineSnapshot
from session_timeline.sessions.types import ClassifiedSession, InvalidSessionRecord, Session, TemporalState
from session_timeline.timeline.layout import DayLayout, LayoutBlock

__all__ = [
    "AvailabilityDecoration",
    "AvailabilitySets",
    "ClassifiedSession",
    "Clock",
    "ClockReading",
    "ClockSkewDetectedError",
    "DateRange",
    "DateSelected",
    "DayLayout",
    "EventBus",
    "Granularity",
    "InvalidSessionRecord",
    "InvalidSessionTimeError",
    "LayoutBlock",
    "NavigationError",
    "ParseError",
    "Session",
    "SessionActivated",
    "TemporalState",
    "TimelineEngine",
    "TimelineError",
    "TimelineSnapshot",
    "ViewNavigationController",
    "ViewRangeChanged",
    "ViewState",
]
