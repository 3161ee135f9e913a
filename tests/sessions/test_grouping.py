"""Tests for date and participant grouping."""

from datetime import date, datetime

from session_timeline.sessions.classifier import classify_batch
from session_timeline.sessions.grouping import (
    build_day_groups,
    group_by_date,
    group_by_participant,
    sort_sessions,
)

NOW = datetime(2024, 6, 10, 9, 45)


def _classify(sessions):
    return list(classify_batch(NOW, sessions).sessions)


class TestGroupByDate:
    """Tests for date ordering and stable start-time ties."""

    def test_ties_keep_input_order(self, make_session):
        """Equal start times on one date stay in the order they were given."""
        a = make_session(id="A", start_time="10:00", end_time="11:00")
        b = make_session(id="B", start_time="09:00", end_time="10:00")
        c = make_session(id="C", start_time="10:00", end_time="10:30")
        grouped = group_by_date(_classify([a, b, c]))
        assert [s.id for s in grouped[date(2024, 6, 10)]] == ["B", "A", "C"]

    def test_dates_ascend(self, make_session):
        sessions = _classify(
            [
                make_session(id="late", date=date(2024, 6, 12)),
                make_session(id="early", date=date(2024, 6, 9)),
                make_session(id="mid", date=date(2024, 6, 10)),
            ]
        )
        assert list(group_by_date(sessions)) == [date(2024, 6, 9), date(2024, 6, 10), date(2024, 6, 12)]

    def test_seconds_sort_after_minutes(self, make_session):
        sessions = _classify(
            [
                make_session(id="b", start_time="09:00:30", end_time="10:00"),
                make_session(id="a", start_time="09:00", end_time="10:00"),
            ]
        )
        assert [s.id for s in sort_sessions(sessions)] == ["a", "b"]

    def test_overnight_session_grouped_under_start_date(self, make_session):
        grouped = group_by_date(_classify([make_session(start_time="23:00", end_time="01:00")]))
        assert list(grouped) == [date(2024, 6, 10)]

    def test_regrouping_is_stable(self, make_session):
        sessions = _classify([make_session(start_time="10:00", end_time="11:00") for _ in range(5)])
        first = [s.id for s in group_by_date(sessions)[date(2024, 6, 10)]]
        second = [s.id for s in group_by_date(sessions)[date(2024, 6, 10)]]
        assert first == second == [s.id for s in sessions]


class TestGroupByParticipant:
    def test_first_seen_order(self, make_session):
        sessions = _classify(
            [
                make_session(participant_id="p2", participant_name="Ben"),
                make_session(participant_id="p1", participant_name="Ava"),
                make_session(participant_id="p2", participant_name="Ben"),
            ]
        )
        grouped = group_by_participant(sessions)
        assert list(grouped) == ["p2", "p1"]
        assert len(grouped["p2"]) == 2


class TestBuildDayGroups:
    def test_day_group_structure(self, make_session):
        sessions = _classify(
            [
                make_session(id="x", participant_id="p2", participant_name="Ben", start_time="11:00", end_time="12:00"),
                make_session(id="y", participant_id="p1", participant_name="Ava", start_time="08:00", end_time="09:00"),
                make_session(id="z", participant_id="p2", participant_name="Ben", date=date(2024, 6, 11)),
            ]
        )
        groups = build_day_groups(sessions)

        assert [g.date for g in groups] == [date(2024, 6, 10), date(2024, 6, 11)]
        first_day = groups[0]
        assert [s.id for s in first_day.sessions] == ["y", "x"]
        # Participant order follows the sorted sessions of the day
        assert [p.participant_id for p in first_day.participants] == ["p1", "p2"]
        assert first_day.participant("p2").participant_name == "Ben"
        assert first_day.participant("missing") is None

    def test_empty_input(self):
        assert build_day_groups([]) == []
