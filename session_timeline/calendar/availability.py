"""Availability and absence decorations per calendar date.

This is a pure lookup over four date sets. It knows nothing about sessions:
when a date also has sessions the host shows the session-status dot instead,
but that choice belongs to rendering, not here.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from session_timeline.config.settings import settings
from session_timeline.utils.calendar import parse_date


class AvailabilityDecoration(str, Enum):
    """Mutually exclusive date decoration.

    Precedence: APPROVED_ABSENCE > PENDING_ABSENCE > UNAVAILABLE > AVAILABLE > NONE
    """

    APPROVED_ABSENCE = "approved_absence"
    PENDING_ABSENCE = "pending_absence"
    UNAVAILABLE = "unavailable"
    AVAILABLE = "available"
    NONE = "none"


class AvailabilitySets(BaseModel):
    """The four date sets returned by the availability/absence provider.

    Sets may overlap; precedence resolves the overlap. ISO date strings are
    accepted and parsed.
    """

    model_config = ConfigDict(frozen=True)

    approved_absence: frozenset[date] = Field(default_factory=frozenset)
    pending_absence: frozenset[date] = Field(default_factory=frozenset)
    unavailable: frozenset[date] = Field(default_factory=frozenset)
    available: frozenset[date] = Field(default_factory=frozenset)

    @field_validator("approved_absence", "pending_absence", "unavailable", "available", mode="before")
    @classmethod
    def _parse_dates(cls, value: object) -> object:
        if value is None:
            return frozenset()
        if isinstance(value, (str, bytes)):
            raise ValueError("Expected a collection of dates, not a single string")
        if isinstance(value, Iterable):
            return frozenset(parse_date(item) for item in value)
        return value


def decorate(day: date, sets: AvailabilitySets) -> AvailabilityDecoration:
    """Decoration for one date by fixed precedence."""
    if day in sets.approved_absence:
        return AvailabilityDecoration.APPROVED_ABSENCE
    if day in sets.pending_absence:
        return AvailabilityDecoration.PENDING_ABSENCE
    if day in sets.unavailable:
        return AvailabilityDecoration.UNAVAILABLE
    if day in sets.available:
        return AvailabilityDecoration.AVAILABLE
    return AvailabilityDecoration.NONE


def decorate_range(start: date, end: date, sets: AvailabilitySets) -> dict[date, AvailabilityDecoration]:
    """Decorations for every date in [start, end], in date order."""
    if end < start:
        raise ValueError(f"Range end {end} is before start {start}")
    days = (end - start).days + 1
    return {start + timedelta(days=offset): decorate(start + timedelta(days=offset), sets) for offset in range(days)}


def is_editable_for_availability(day: date, now: datetime, lead_hours: int | None = None) -> bool:
    """Whether a date's availability may still be toggled.

    Only dates whose start of day lies strictly more than ``lead_hours`` after
    ``now`` are editable: no same-day or past edits.
    """
    lead = lead_hours if lead_hours is not None else settings.availability_edit_lead_hours
    day_start = datetime.combine(day, datetime.min.time(), tzinfo=now.tzinfo)
    return day_start > now + timedelta(hours=lead)
