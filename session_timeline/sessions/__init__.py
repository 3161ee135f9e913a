"""Sessions module - classification, filtering, grouping and rollups.

This module provides:
- Session input records and their classified counterparts
- Pure temporal classification against a clock reading
- Stable date/participant grouping
- Participant and activity-type filters
- Status tones, cell rollups and statistics
"""

from session_timeline.sessions.classifier import ClassificationResult, classify_batch, classify_session
from session_timeline.sessions.grouping import DayGroup, ParticipantGroup, group_by_date, group_by_participant
from session_timeline.sessions.summary import SessionStats, SessionTone, status_tone
from session_timeline.sessions.types import ClassifiedSession, Session, TemporalState

__all__ = [
    "ClassificationResult",
    "ClassifiedSession",
    "DayGroup",
    "ParticipantGroup",
    "Session",
    "SessionStats",
    "SessionTone",
    "TemporalState",
    "classify_batch",
    "classify_session",
    "group_by_date",
    "group_by_participant",
    "status_tone",
]
