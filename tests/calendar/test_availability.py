"""Tests for availability decorations and editability."""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from session_timeline.calendar.availability import (
    AvailabilityDecoration,
    AvailabilitySets,
    decorate,
    decorate_range,
    is_editable_for_availability,
)

D = date(2024, 6, 10)


class TestDecorate:
    """Precedence: approved absence, pending absence, unavailable, available."""

    def test_approved_absence_beats_everything(self):
        sets = AvailabilitySets(approved_absence={D}, pending_absence={D}, unavailable={D}, available={D})
        assert decorate(D, sets) is AvailabilityDecoration.APPROVED_ABSENCE

    def test_pending_absence_beats_availability(self):
        sets = AvailabilitySets(pending_absence={D}, unavailable={D}, available={D})
        assert decorate(D, sets) is AvailabilityDecoration.PENDING_ABSENCE

    def test_unavailable_beats_available(self):
        sets = AvailabilitySets(unavailable={D}, available={D})
        assert decorate(D, sets) is AvailabilityDecoration.UNAVAILABLE

    def test_available(self):
        assert decorate(D, AvailabilitySets(available={D})) is AvailabilityDecoration.AVAILABLE

    def test_none(self):
        assert decorate(D, AvailabilitySets()) is AvailabilityDecoration.NONE


class TestAvailabilitySets:
    def test_parses_iso_strings(self):
        sets = AvailabilitySets(available=["2024-06-10", "2024-06-11"], unavailable=None)
        assert sets.available == frozenset({date(2024, 6, 10), date(2024, 6, 11)})
        assert sets.unavailable == frozenset()

    def test_rejects_single_string(self):
        with pytest.raises(ValidationError):
            AvailabilitySets(available="2024-06-10")

    def test_rejects_bad_date(self):
        with pytest.raises(ValidationError):
            AvailabilitySets(available=["2024-06-31"])


class TestDecorateRange:
    def test_every_date_in_order(self):
        sets = AvailabilitySets(approved_absence={date(2024, 6, 11)}, available={date(2024, 6, 12)})
        result = decorate_range(date(2024, 6, 10), date(2024, 6, 12), sets)
        assert list(result) == [date(2024, 6, 10), date(2024, 6, 11), date(2024, 6, 12)]
        assert list(result.values()) == [
            AvailabilityDecoration.NONE,
            AvailabilityDecoration.APPROVED_ABSENCE,
            AvailabilityDecoration.AVAILABLE,
        ]

    def test_single_day(self):
        assert len(decorate_range(D, D, AvailabilitySets())) == 1

    def test_reversed_range(self):
        with pytest.raises(ValueError):
            decorate_range(D, D - timedelta(days=1), AvailabilitySets())


class TestEditability:
    """Only dates starting more than the lead time from now may be edited."""

    def test_today_and_past_not_editable(self):
        now = datetime(2024, 6, 10, 9, 0)
        assert not is_editable_for_availability(date(2024, 6, 10), now, lead_hours=24)
        assert not is_editable_for_availability(date(2024, 6, 9), now, lead_hours=24)

    def test_tomorrow_within_lead_not_editable(self):
        now = datetime(2024, 6, 10, 9, 0)
        assert not is_editable_for_availability(date(2024, 6, 11), now, lead_hours=24)

    def test_day_after_tomorrow_editable(self):
        now = datetime(2024, 6, 10, 9, 0)
        assert is_editable_for_availability(date(2024, 6, 12), now, lead_hours=24)

    def test_exact_boundary_not_editable(self):
        now = datetime(2024, 6, 10, 0, 0)
        assert not is_editable_for_availability(date(2024, 6, 11), now, lead_hours=24)

    def test_aware_now(self):
        now = datetime(2024, 6, 10, 9, 0, tzinfo=timezone.utc)
        assert is_editable_for_availability(date(2024, 6, 12), now, lead_hours=24)
