"""Session timeline engine: the query surface a host UI binds to.

The engine is handed full session and availability windows by external
providers and derives view models synchronously. Every recompute runs
filter -> classify -> group -> layout over the whole dataset and swaps in one
immutable ``TimelineSnapshot``, so no reader ever sees a half-classified tick.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from loguru import logger

from session_timeline.calendar.availability import (
    AvailabilityDecoration,
    AvailabilitySets,
    decorate,
    decorate_range,
    is_editable_for_availability,
)
from session_timeline.calendar.navigation import (
    DateRange,
    Direction,
    Granularity,
    ViewNavigationController,
    ViewState,
    week_range_dates,
)
from session_timeline.config.settings import Settings
from session_timeline.config.settings import settings as default_settings
from session_timeline.core.clock import Clock, ClockReading
from session_timeline.core.events import DateSelected, EventBus, SessionActivated, ViewRangeChanged
from session_timeline.sessions.classifier import align_now, classify_batch, coerce_sessions
from session_timeline.sessions.filters import ActivityFilter, activity_types, filter_by_participants
from session_timeline.sessions.grouping import DayGroup, build_day_groups
from session_timeline.sessions.summary import (
    ParticipantCellSummary,
    SessionStats,
    compute_stats,
    summarize_day_cells,
)
from session_timeline.sessions.types import ClassifiedSession, InvalidSessionRecord, Session
from session_timeline.timeline.layout import DayLayout, HourRow, hour_rows, layout_day
from session_timeline.utils.calendar import parse_date


@dataclass(frozen=True)
class TimelineSnapshot:
    """All derived state for one clock instant.

    Attributes:
        now: Instant the snapshot was classified at
        sessions: Visible classified sessions, input order
        day_groups: Date/participant grouping of ``sessions``
        layouts: Day layout for every date that has sessions
        invalid: Records excluded for invalid dates/times
    """

    now: datetime
    sessions: tuple[ClassifiedSession, ...] = ()
    day_groups: tuple[DayGroup, ...] = ()
    layouts: Mapping[date, DayLayout] = field(default_factory=dict)
    invalid: tuple[InvalidSessionRecord, ...] = ()

    def excluded_on(self, day: date) -> int:
        return sum(1 for record in self.invalid if record.date == day)


class TimelineEngine:
    """Derives classified, grouped and laid-out sessions for a calendar UI.

    Usage:
        engine = TimelineEngine()
        engine.load(sessions, availability=sets)
        dispose = engine.attach_clock()   # reclassify on every tick
        engine.jump_to_date("2024-06-12", force_day_view=True)
        layout = engine.get_layout_for("2024-06-12")
        dispose()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Clock | None = None,
        bus: EventBus | None = None,
        today_fn: Callable[[], date] | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._tz = self._settings.tzinfo
        self._clock = clock or Clock(interval_seconds=self._settings.tick_interval_seconds, tz=self._tz)
        self._bus = bus or EventBus()
        self._today_fn = today_fn or self._clock_today
        self._navigation = ViewNavigationController(self._bus, self._today_fn)

        self._sessions: tuple[Session, ...] = ()
        self._load_invalid: tuple[InvalidSessionRecord, ...] = ()
        self._availability = AvailabilitySets()
        self._participant_filter: frozenset[str] = frozenset()
        self._activity_filter = ActivityFilter()
        self._snapshot: TimelineSnapshot | None = None
        self._clock_disposer: Callable[[], None] | None = None

    # Wiring

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def clock(self) -> Clock:
        return self._clock

    def _clock_today(self) -> date:
        # "Today" is the calendar day in the session zone, not the clock's zone
        return align_now(self._clock.now(), self._tz).date()

    def attach_clock(self) -> Callable[[], None]:
        """Reclassify on every clock tick until the returned disposer is called."""
        if self._clock_disposer is None:
            self._clock_disposer = self._clock.subscribe(self._on_tick)
        return self.close

    def close(self) -> None:
        """Release the clock subscription (idempotent)."""
        if self._clock_disposer is not None:
            self._clock_disposer()
            self._clock_disposer = None
            logger.debug("[ENGINE] Clock subscription released")

    def _on_tick(self, reading: ClockReading) -> None:
        self.recompute(reading.now)

    def on_session_activated(self, handler: Callable[[SessionActivated], None]) -> Callable[[], None]:
        return self._bus.subscribe(SessionActivated, handler)

    def on_date_selected(self, handler: Callable[[DateSelected], None]) -> Callable[[], None]:
        return self._bus.subscribe(DateSelected, handler)

    def on_view_range_changed(self, handler: Callable[[ViewRangeChanged], None]) -> Callable[[], None]:
        return self._bus.subscribe(ViewRangeChanged, handler)

    # Inputs

    def load(
        self,
        sessions: Iterable[Session | Mapping[str, Any]],
        availability: AvailabilitySets | Mapping[str, Any] | None = None,
        participant_filter: Iterable[str | int] | None = None,
        now: datetime | None = None,
    ) -> TimelineSnapshot:
        """Replace the session window (and optionally availability/filter) and recompute.

        Args:
            sessions: Session models or raw provider mappings
            availability: The four availability/absence date sets
            participant_filter: Visible participant IDs (empty shows everyone)
            now: Classification instant (defaults to the clock)
        """
        valid, invalid = coerce_sessions(sessions)
        self._sessions = tuple(valid)
        self._load_invalid = tuple(invalid)
        if availability is not None:
            self.set_availability(availability)
        if participant_filter is not None:
            self._participant_filter = frozenset(str(pid) for pid in participant_filter)
        return self.recompute(now)

    def set_availability(self, availability: AvailabilitySets | Mapping[str, Any]) -> None:
        if isinstance(availability, AvailabilitySets):
            self._availability = availability
        else:
            self._availability = AvailabilitySets.model_validate(availability)

    def set_participant_filter(self, participant_ids: Iterable[str | int] | None) -> TimelineSnapshot:
        self._participant_filter = frozenset(str(pid) for pid in participant_ids or ())
        return self.recompute(self._last_now())

    def toggle_activity_type(self, activity_type: str) -> TimelineSnapshot:
        self._activity_filter.toggle(activity_type)
        return self.recompute(self._last_now())

    @property
    def activity_types(self) -> tuple[str, ...]:
        return self._activity_filter.known_types

    @property
    def enabled_activity_types(self) -> frozenset[str]:
        return self._activity_filter.enabled_types

    # Recompute

    def _visible_load_invalid(self) -> tuple[InvalidSessionRecord, ...]:
        """Load-time rejects of visible participants (unknown participants only when unfiltered)."""
        if not self._participant_filter:
            return self._load_invalid
        return tuple(record for record in self._load_invalid if record.participant_id in self._participant_filter)

    def _last_now(self) -> datetime | None:
        return self._snapshot.now if self._snapshot else None

    def recompute(self, now: datetime | None = None) -> TimelineSnapshot:
        """Rebuild every derived structure at one instant and swap the snapshot in.

        Without ``now`` the clock's current time is read directly, so a load
        between ticks classifies at the present moment. The snapshot instant is
        expressed in the session zone, which hour rows and availability
        editability rely on.
        """
        instant = align_now(now if now is not None else self._clock.instant(), self._tz)

        visible = filter_by_participants(self._sessions, self._participant_filter)
        self._activity_filter.reset(activity_types(visible))
        visible = self._activity_filter.apply(visible)

        result = classify_batch(instant, visible, self._tz)
        day_groups = tuple(build_day_groups(result.sessions))
        invalid = self._visible_load_invalid() + result.invalid
        excluded_by_day = Counter(record.date for record in invalid if record.date is not None)

        layouts = {
            group.date: layout_day(
                group.date,
                group.sessions,
                minimum_block_minutes=self._settings.minimum_block_minutes,
                row_unit_minutes=self._settings.row_unit_minutes,
                scroll_lead_rows=self._settings.scroll_lead_rows,
                excluded_count=excluded_by_day.get(group.date, 0),
            )
            for group in day_groups
        }

        self._snapshot = TimelineSnapshot(
            now=result.now,
            sessions=result.sessions,
            day_groups=day_groups,
            layouts=layouts,
            invalid=invalid,
        )
        logger.debug(
            "[ENGINE] Recomputed timeline",
            now=result.now.isoformat(),
            session_count=len(result.sessions),
            day_count=len(day_groups),
            invalid_count=len(invalid),
        )
        return self._snapshot

    @property
    def snapshot(self) -> TimelineSnapshot:
        if self._snapshot is None:
            return self.recompute()
        return self._snapshot

    # Queries

    def get_day_groups(self, within: DateRange | None = None) -> list[DayGroup]:
        groups = self.snapshot.day_groups
        if within is None:
            return list(groups)
        return [group for group in groups if within.contains(group.date)]

    def get_visible_day_groups(self) -> list[DayGroup]:
        return self.get_day_groups(self.get_visible_range())

    def get_layout_for(self, day: date | str) -> DayLayout:
        """Day layout for ``day``; an explicit empty layout when it has no valid sessions.

        Raises:
            ParseError: If ``day`` is not a valid date
        """
        target = parse_date(day)
        snapshot = self.snapshot
        layout = snapshot.layouts.get(target)
        if layout is not None:
            return layout
        return DayLayout(date=target, excluded_count=snapshot.excluded_on(target))

    def get_hour_rows(self, day: date | str) -> list[HourRow]:
        return hour_rows(parse_date(day), self.snapshot.now, self._settings.row_unit_minutes)

    def get_cell_summaries(self, day: date | str) -> list[ParticipantCellSummary]:
        target = parse_date(day)
        for group in self.snapshot.day_groups:
            if group.date == target:
                return summarize_day_cells(group)
        return []

    def get_availability_decoration(self, day: date | str) -> AvailabilityDecoration:
        return decorate(parse_date(day), self._availability)

    def get_availability_decorations(self, within: DateRange | None = None) -> dict[date, AvailabilityDecoration]:
        target = within or self.get_visible_range()
        return decorate_range(target.start, target.end, self._availability)

    def is_availability_editable(self, day: date | str) -> bool:
        return is_editable_for_availability(
            parse_date(day),
            self.snapshot.now,
            self._settings.availability_edit_lead_hours,
        )

    def get_invalid_sessions(self) -> list[InvalidSessionRecord]:
        return list(self.snapshot.invalid)

    def get_stats(self) -> SessionStats:
        return compute_stats(self.snapshot.sessions)

    def get_view_state(self) -> ViewState:
        return self._navigation.state

    def get_visible_range(self) -> DateRange:
        return self._navigation.visible_range()

    def get_week_range_dates(self) -> frozenset[date]:
        return week_range_dates(self._navigation.state)

    # Navigation

    def switch_to(self, granularity: Granularity | str, day: date | str | None = None) -> ViewState:
        return self._navigation.switch_to(granularity, day)

    def jump_to_date(self, day: date | str, force_day_view: bool = False) -> ViewState:
        return self._navigation.jump_to_date(day, force_day_view)

    def navigate(self, direction: Direction | str) -> ViewState:
        return self._navigation.navigate(direction)

    def go_to_today(self) -> ViewState:
        return self._navigation.go_to_today()

    def activate_session(self, session_id: str | int) -> ClassifiedSession:
        """Publish ``SessionActivated`` for a visible session.

        Raises:
            KeyError: If no visible session has this ID
        """
        wanted = str(session_id)
        for session in self.snapshot.sessions:
            if session.id == wanted:
                self._bus.publish(SessionActivated(session))
                return session
        raise KeyError(f"No visible session with id {wanted}")
