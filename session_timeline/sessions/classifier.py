"""Temporal classification of sessions against a clock reading.

The classifier is pure: the same (now, session) pair always yields an equal
``ClassifiedSession``, so a whole dataset can be reclassified on every clock
tick without drift. Invalid records are skipped and reported, never fatal to
the batch.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any

from loguru import logger
from pydantic import ValidationError

from session_timeline.core.clock import ClockReading
from session_timeline.core.errors import InvalidSessionTimeError, ParseError
from session_timeline.sessions.types import (
    ClassifiedSession,
    InvalidSessionRecord,
    Session,
    TemporalState,
    is_pending_confirmation,
)
from session_timeline.utils.calendar import parse_date
from session_timeline.utils.time_math import resolve_span


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one full dataset at one instant.

    Attributes:
        now: Instant the batch was classified at, expressed in the session zone
        sessions: Classified sessions in input order
        invalid: Records excluded from derived output
    """

    now: datetime
    sessions: tuple[ClassifiedSession, ...]
    invalid: tuple[InvalidSessionRecord, ...]

    @property
    def invalid_count(self) -> int:
        return len(self.invalid)


def _now_of(reading: ClockReading | datetime) -> datetime:
    if isinstance(reading, ClockReading):
        return reading.now
    return reading


def align_now(now: datetime, tz: tzinfo | None) -> datetime:
    """Express ``now`` in the zone session date/times are read in.

    Without an explicit zone ``now`` is returned unchanged (naive stays naive).
    With one, a naive ``now`` is taken to be in that zone and an aware one is
    converted to it, so its wall-clock fields match the session grid.
    """
    if tz is None:
        return now
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def _align(now: datetime, tz: tzinfo | None) -> tuple[datetime, tzinfo | None]:
    aligned = align_now(now, tz)
    return aligned, aligned.tzinfo if tz is None else tz


def temporal_state_at(now: datetime, start: datetime, end: datetime) -> TemporalState:
    """Classify an instant against a half-open span [start, end)."""
    if now < start:
        return TemporalState.UPCOMING
    if now < end:
        return TemporalState.ONGOING
    return TemporalState.PAST


def classify_session(
    reading: ClockReading | datetime,
    session: Session,
    tz: tzinfo | None = None,
) -> ClassifiedSession:
    """Classify a single session.

    Args:
        reading: Current clock reading (or a bare instant)
        session: Session to classify
        tz: Optional zone the session's date/times are expressed in

    Returns:
        ClassifiedSession carrying the resolved span and status flags

    Raises:
        InvalidSessionTimeError: If the session's date/time cannot be resolved
    """
    now, session_tz = _align(_now_of(reading), tz)
    try:
        span = resolve_span(session.date, session.start_time, session.end_time, session_tz)
    except ParseError as e:
        raise InvalidSessionTimeError(session.id, str(e)) from e

    return ClassifiedSession(
        **session.model_dump(),
        temporal_state=temporal_state_at(now, span.start, span.end),
        is_cancelled=session.lifecycle_status == "cancelled",
        needs_confirmation=is_pending_confirmation(session.assignment_status),
        starts_at=span.start,
        ends_at=span.end,
        overflows_to_next_day=span.overflows_to_next_day,
    )


def _record_date(record: object) -> date | None:
    """Best-effort date of a rejected record, so per-day diagnostics can count it."""
    if not isinstance(record, Mapping):
        return None
    value = record.get("date")
    if value is None:
        return None
    try:
        return parse_date(value)
    except ParseError:
        return None


def coerce_sessions(
    records: Iterable[Session | Mapping[str, Any]],
) -> tuple[list[Session], list[InvalidSessionRecord]]:
    """Validate raw provider records into Session models.

    Records that fail validation (missing fields, unparsable date) are
    reported as invalid instead of aborting the load.
    """
    sessions: list[Session] = []
    invalid: list[InvalidSessionRecord] = []
    for record in records:
        if isinstance(record, Session):
            sessions.append(record)
            continue
        try:
            sessions.append(Session.model_validate(record))
        except ValidationError as e:
            session_id = record.get("id") if isinstance(record, Mapping) else None
            participant_id = record.get("participant_id") if isinstance(record, Mapping) else None
            reason = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
            logger.warning(
                f"[CLASSIFIER] Skipping invalid session record: {reason}",
                session_id=session_id,
            )
            invalid.append(
                InvalidSessionRecord(
                    session_id=None if session_id is None else str(session_id),
                    participant_id=None if participant_id is None else str(participant_id),
                    date=_record_date(record),
                    reason=reason,
                )
            )
    return sessions, invalid


def classify_batch(
    reading: ClockReading | datetime,
    sessions: Iterable[Session],
    tz: tzinfo | None = None,
) -> ClassificationResult:
    """Classify a full dataset atomically at one instant.

    Sessions with an unparsable date/time are excluded and reported in
    ``ClassificationResult.invalid``; the rest keep their input order.
    """
    now = align_now(_now_of(reading), tz)
    classified: list[ClassifiedSession] = []
    invalid: list[InvalidSessionRecord] = []

    for session in sessions:
        try:
            classified.append(classify_session(now, session, tz))
        except InvalidSessionTimeError as e:
            logger.warning(
                f"[CLASSIFIER] Excluding session with invalid time: {e.reason}",
                session_id=e.session_id,
                date=str(session.date),
            )
            invalid.append(
                InvalidSessionRecord(
                    session_id=e.session_id,
                    participant_id=session.participant_id,
                    date=session.date,
                    reason=e.reason,
                )
            )

    logger.debug(
        f"Classified {len(classified)} sessions",
        now=now.isoformat(),
        invalid_count=len(invalid),
        ongoing_count=sum(1 for s in classified if s.is_ongoing),
    )
    return ClassificationResult(now=now, sessions=tuple(classified), invalid=tuple(invalid))
