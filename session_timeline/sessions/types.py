"""Session input records and their classified, engine-owned counterparts.

Sessions are handed to the engine by an external provider and are never
mutated. Classification produces new ``ClassifiedSession`` instances on every
clock tick.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LifecycleStatus = Literal["scheduled", "completed", "cancelled", "no_show", "rescheduled"]

PENDING_CONFIRMATION = "pending_confirmation"
# Spelling used by the booking backend's trainer assignment column
LEGACY_PENDING_CONFIRMATION = "pending_trainer_confirmation"


def is_pending_confirmation(assignment_status: str | None) -> bool:
    return assignment_status in (PENDING_CONFIRMATION, LEGACY_PENDING_CONFIRMATION)


class TemporalState(str, Enum):
    """Position of a session relative to the current instant.

    Exactly one holds at any instant:
    - UPCOMING: now < start
    - ONGOING: start <= now < end
    - PAST: now >= end
    """

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    PAST = "past"


class Session(BaseModel):
    """A single scheduled activity block for one participant.

    Attributes:
        id: Session (schedule) identifier
        participant_id: Participant identifier
        participant_name: Display name of the participant
        date: Calendar day the session starts on
        start_time: Start time of day (HH:MM or HH:MM:SS)
        end_time: End time of day; at or before start_time means it ends the next day
        activities: Ordered activity names (may be empty)
        lifecycle_status: Booking lifecycle status
        assignment_status: Optional assignment status (pending_confirmation when the
            participant-side actor must accept or decline)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    participant_id: str
    participant_name: str = ""
    date: date_type
    start_time: str
    end_time: str
    activities: tuple[str, ...] = Field(default_factory=tuple)
    lifecycle_status: LifecycleStatus = "scheduled"
    assignment_status: str | None = None

    @field_validator("id", "participant_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        """Normalize integer/UUID ids to str."""
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("activities", mode="before")
    @classmethod
    def _coerce_activities(cls, value: object) -> object:
        if value is None:
            return ()
        return value


class ClassifiedSession(Session):
    """Session plus its derived temporal state and status flags.

    ``temporal_state``, ``is_cancelled`` and ``needs_confirmation`` are orthogonal:
    a cancelled session is still upcoming, ongoing or past.

    Attributes:
        temporal_state: Upcoming, ongoing or past at the classification instant
        is_cancelled: lifecycle_status == "cancelled"
        needs_confirmation: assignment is pending confirmation
        starts_at: Resolved start instant
        ends_at: Resolved end instant (next day for overnight sessions)
        overflows_to_next_day: True for overnight sessions
    """

    temporal_state: TemporalState
    is_cancelled: bool
    needs_confirmation: bool
    starts_at: datetime
    ends_at: datetime
    overflows_to_next_day: bool

    @property
    def is_upcoming(self) -> bool:
        return self.temporal_state is TemporalState.UPCOMING

    @property
    def is_ongoing(self) -> bool:
        return self.temporal_state is TemporalState.ONGOING

    @property
    def is_past(self) -> bool:
        return self.temporal_state is TemporalState.PAST


class InvalidSessionRecord(BaseModel):
    """Batch-level warning for a session excluded from derived output.

    ``participant_id`` and ``date`` are kept when they could be read so the
    record honours the participant filter and per-day excluded counts.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str | None
    participant_id: str | None = None
    date: date_type | None = None
    reason: str
