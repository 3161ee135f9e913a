"""Date and participant grouping of classified sessions.

Ordering is part of the contract: dates ascend, sessions within a date sort by
start time with ties kept in input order, and participants appear in the order
they are first seen. Recomputing from the same input never reorders anything.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date as date_type
from datetime import time

from pydantic import BaseModel, ConfigDict

from session_timeline.sessions.types import ClassifiedSession
from session_timeline.utils.time_math import parse_time_of_day


class ParticipantGroup(BaseModel):
    """Sessions of one participant on one day, in grouped order."""

    model_config = ConfigDict(frozen=True)

    participant_id: str
    participant_name: str
    sessions: tuple[ClassifiedSession, ...]


class DayGroup(BaseModel):
    """All sessions of one day plus their per-participant split."""

    model_config = ConfigDict(frozen=True)

    date: date_type
    sessions: tuple[ClassifiedSession, ...]
    participants: tuple[ParticipantGroup, ...]

    def participant(self, participant_id: str) -> ParticipantGroup | None:
        for group in self.participants:
            if group.participant_id == participant_id:
                return group
        return None


def _start_key(session: ClassifiedSession) -> tuple[date_type, time]:
    # Classified sessions always carry a parsable start time
    return session.date, parse_time_of_day(session.start_time)


def sort_sessions(sessions: Iterable[ClassifiedSession]) -> list[ClassifiedSession]:
    """Sort ascending by (date, start time); Python's sort keeps ties in input order."""
    return sorted(sessions, key=_start_key)


def group_by_date(sessions: Iterable[ClassifiedSession]) -> dict[date_type, list[ClassifiedSession]]:
    """Group sessions by calendar date.

    Returns:
        Dict keyed by date in ascending order; each list sorted by start time,
        equal (date, start time) pairs in original input order
    """
    grouped: dict[date_type, list[ClassifiedSession]] = {}
    for session in sort_sessions(sessions):
        grouped.setdefault(session.date, []).append(session)
    return grouped


def group_by_participant(sessions: Sequence[ClassifiedSession]) -> dict[str, list[ClassifiedSession]]:
    """Group one day's sessions by participant, in first-seen participant order."""
    grouped: dict[str, list[ClassifiedSession]] = {}
    for session in sessions:
        grouped.setdefault(session.participant_id, []).append(session)
    return grouped


def build_day_groups(sessions: Iterable[ClassifiedSession]) -> list[DayGroup]:
    """Group by date, then by participant within each date."""
    day_groups: list[DayGroup] = []
    for day, day_sessions in group_by_date(sessions).items():
        participants = tuple(
            ParticipantGroup(
                participant_id=participant_id,
                participant_name=participant_sessions[0].participant_name,
                sessions=tuple(participant_sessions),
            )
            for participant_id, participant_sessions in group_by_participant(day_sessions).items()
        )
        day_groups.append(DayGroup(date=day, sessions=tuple(day_sessions), participants=participants))
    return day_groups
