"""Display tags, month/week cell rollups and session statistics.

Renderers switch on ``SessionTone`` and the cell summaries here rather than
re-deriving status from timestamps or raw status strings.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

from session_timeline.sessions.grouping import DayGroup, ParticipantGroup
from session_timeline.sessions.types import ClassifiedSession
from session_timeline.utils.time_math import format_hhmm


class SessionTone(str, Enum):
    """Single display tag per session.

    Precedence: CANCELLED > NEEDS_CONFIRMATION > ONGOING > UPCOMING > PAST
    """

    CANCELLED = "cancelled"
    NEEDS_CONFIRMATION = "needs_confirmation"
    ONGOING = "ongoing"
    UPCOMING = "upcoming"
    PAST = "past"


def status_tone(session: ClassifiedSession) -> SessionTone:
    if session.is_cancelled:
        return SessionTone.CANCELLED
    if session.needs_confirmation:
        return SessionTone.NEEDS_CONFIRMATION
    if session.is_ongoing:
        return SessionTone.ONGOING
    if session.is_upcoming:
        return SessionTone.UPCOMING
    return SessionTone.PAST


class ParticipantCellSummary(BaseModel):
    """One participant's rollup inside a month or week cell.

    Attributes:
        participant_id: Participant identifier
        participant_name: Display name
        first_session_id: ID of the first session in grouped order
        start_time: First session's start time formatted HH:MM
        activities: Unique activity names in first-seen order
        session_count: Number of sessions that day
        has_ongoing: Any session is ongoing
        is_all_past: Every session is past
        needs_confirmation: Any session awaits confirmation
        tone: Tone of the first session
    """

    model_config = ConfigDict(frozen=True)

    participant_id: str
    participant_name: str
    first_session_id: str
    start_time: str
    activities: tuple[str, ...]
    session_count: int
    has_ongoing: bool
    is_all_past: bool
    needs_confirmation: bool
    tone: SessionTone


def summarize_participant_cell(group: ParticipantGroup) -> ParticipantCellSummary:
    sessions = group.sessions
    if not sessions:
        raise ValueError(f"Participant group {group.participant_id} has no sessions")
    first = sessions[0]

    activities: list[str] = []
    for session in sessions:
        for activity in session.activities:
            if activity not in activities:
                activities.append(activity)

    has_ongoing = any(s.is_ongoing for s in sessions)
    has_upcoming = any(s.is_upcoming for s in sessions)
    return ParticipantCellSummary(
        participant_id=group.participant_id,
        participant_name=group.participant_name,
        first_session_id=first.id,
        start_time=format_hhmm(first.starts_at),
        activities=tuple(activities),
        session_count=len(sessions),
        has_ongoing=has_ongoing,
        is_all_past=all(s.is_past for s in sessions) and not has_ongoing and not has_upcoming,
        needs_confirmation=any(s.needs_confirmation for s in sessions),
        tone=status_tone(first),
    )


def summarize_day_cells(day_group: DayGroup) -> list[ParticipantCellSummary]:
    return [summarize_participant_cell(group) for group in day_group.participants]


class SessionStats(BaseModel):
    """Counters shown above the calendar.

    Attributes:
        total: All classified sessions
        completed: Past sessions with lifecycle status completed
        scheduled: Upcoming sessions with lifecycle status scheduled
        ongoing: Sessions in progress
    """

    model_config = ConfigDict(frozen=True)

    total: int = 0
    completed: int = 0
    scheduled: int = 0
    ongoing: int = 0


def compute_stats(sessions: Sequence[ClassifiedSession]) -> SessionStats:
    return SessionStats(
        total=len(sessions),
        completed=sum(1 for s in sessions if s.is_past and s.lifecycle_status == "completed"),
        scheduled=sum(1 for s in sessions if s.is_upcoming and s.lifecycle_status == "scheduled"),
        ongoing=sum(1 for s in sessions if s.is_ongoing),
    )
