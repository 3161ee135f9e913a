"""Tests for display tones, cell rollups and stats."""

from datetime import datetime

import pytest

from session_timeline.sessions.classifier import classify_batch, classify_session
from session_timeline.sessions.grouping import ParticipantGroup, build_day_groups
from session_timeline.sessions.summary import (
    SessionTone,
    compute_stats,
    status_tone,
    summarize_day_cells,
    summarize_participant_cell,
)

NOW = datetime(2024, 6, 10, 9, 45)


class TestStatusTone:
    """Tone precedence: cancelled, confirmation, ongoing, upcoming, past."""

    def test_cancelled_wins(self, make_session):
        session = make_session(lifecycle_status="cancelled", assignment_status="pending_confirmation")
        assert status_tone(classify_session(NOW, session)) is SessionTone.CANCELLED

    def test_needs_confirmation_beats_ongoing(self, make_session):
        session = make_session(assignment_status="pending_confirmation")
        assert status_tone(classify_session(NOW, session)) is SessionTone.NEEDS_CONFIRMATION

    @pytest.mark.parametrize(
        ("start", "end", "tone"),
        [
            ("09:00", "10:30", SessionTone.ONGOING),
            ("11:00", "12:00", SessionTone.UPCOMING),
            ("07:00", "08:00", SessionTone.PAST),
        ],
    )
    def test_temporal_tones(self, make_session, start, end, tone):
        session = make_session(start_time=start, end_time=end)
        assert status_tone(classify_session(NOW, session)) is tone


class TestParticipantCell:
    def test_rollup(self, make_session):
        sessions = classify_batch(
            NOW,
            [
                make_session(id="a", start_time="07:00", end_time="08:00", activities=("Art", "Swimming")),
                make_session(id="b", start_time="09:00", end_time="10:00", activities=("Swimming", "Football")),
                make_session(id="c", start_time="12:00", end_time="13:00", assignment_status="pending_confirmation"),
            ],
        ).sessions
        (day,) = build_day_groups(sessions)
        (summary,) = summarize_day_cells(day)

        assert summary.first_session_id == "a"
        assert summary.start_time == "07:00"
        assert summary.activities == ("Art", "Swimming", "Football")
        assert summary.session_count == 3
        assert summary.has_ongoing is True
        assert summary.is_all_past is False
        assert summary.needs_confirmation is True
        assert summary.tone is SessionTone.PAST

    def test_all_past(self, make_session):
        sessions = classify_batch(NOW, [make_session(start_time="06:00", end_time="07:00")]).sessions
        (day,) = build_day_groups(sessions)
        assert summarize_day_cells(day)[0].is_all_past is True

    def test_empty_group_rejected(self):
        with pytest.raises(ValueError):
            summarize_participant_cell(ParticipantGroup(participant_id="p1", participant_name="Ava", sessions=()))


def test_compute_stats(make_session):
    sessions = classify_batch(
        NOW,
        [
            make_session(start_time="06:00", end_time="07:00", lifecycle_status="completed"),
            make_session(start_time="07:00", end_time="08:00", lifecycle_status="cancelled"),
            make_session(start_time="09:00", end_time="10:00"),
            make_session(start_time="11:00", end_time="12:00"),
            make_session(start_time="12:00", end_time="13:00", lifecycle_status="cancelled"),
        ],
    ).sessions
    stats = compute_stats(sessions)
    assert stats.total == 5
    assert stats.completed == 1
    assert stats.scheduled == 1
    assert stats.ongoing == 1
