"""Tests for participant and activity-type filters."""

from session_timeline.sessions.filters import ActivityFilter, activity_types, filter_by_participants


class TestFilterByParticipants:
    def test_empty_filter_keeps_everything(self, make_session):
        sessions = [make_session(participant_id="p1"), make_session(participant_id="p2")]
        assert filter_by_participants(sessions, []) == sessions
        assert filter_by_participants(sessions, None) == sessions

    def test_keeps_only_visible(self, make_session):
        sessions = [make_session(participant_id="1"), make_session(participant_id="2"), make_session(participant_id="1")]
        kept = filter_by_participants(sessions, [1])
        assert [s.id for s in kept] == [sessions[0].id, sessions[2].id]


def test_activity_types_sorted_and_unique(make_session):
    sessions = [
        make_session(activities=("Swimming", "Art")),
        make_session(activities=("Art",)),
        make_session(activities=()),
    ]
    assert activity_types(sessions) == ["Art", "Swimming"]


class TestActivityFilter:
    """Tests for the session-type checkbox state."""

    def test_all_types_start_enabled(self):
        activity_filter = ActivityFilter(["Art", "Swimming"])
        assert activity_filter.enabled_types == frozenset({"Art", "Swimming"})
        assert activity_filter.is_enabled("Art")

    def test_toggle_returns_new_state(self):
        activity_filter = ActivityFilter(["Art"])
        assert activity_filter.toggle("Art") is False
        assert not activity_filter.is_enabled("Art")
        assert activity_filter.toggle("Art") is True

    def test_reset_only_when_types_change(self):
        activity_filter = ActivityFilter(["Art", "Swimming"])
        activity_filter.toggle("Art")

        assert activity_filter.reset(["Art", "Swimming"]) is False
        assert not activity_filter.is_enabled("Art")

        assert activity_filter.reset(["Art", "Football"]) is True
        assert activity_filter.enabled_types == frozenset({"Art", "Football"})
        assert activity_filter.known_types == ("Art", "Football")

    def test_apply_hides_sessions_with_only_disabled_types(self, make_session):
        art = make_session(activities=("Art",))
        mixed = make_session(activities=("Art", "Swimming"))
        bare = make_session(activities=())
        activity_filter = ActivityFilter(["Art", "Swimming"])
        activity_filter.toggle("Art")

        assert activity_filter.apply([art, mixed, bare]) == [mixed, bare]
