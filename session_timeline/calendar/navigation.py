"""View navigation state machine over month, week and day granularity.

``ViewState`` is an immutable value; ``apply_transition`` is the pure
transition function. ``ViewNavigationController`` owns the current state,
validates caller input, and publishes range/selection events so the mini
calendar re-highlights without reaching into the main timeline.

Two behaviours are deliberate and must stay distinct:
- Switching to week view jumps to the current real-world week, not the week
  that was last viewed.
- A date selected without forcing day view only moves the highlight; the
  visible month/week is left alone so arrow navigation does not snap back.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Literal

from loguru import logger

from session_timeline.core.errors import NavigationError, ParseError
from session_timeline.core.events import DateSelected, EventBus, ViewRangeChanged
from session_timeline.utils.calendar import (
    add_months,
    month_end,
    month_start,
    parse_date,
    same_month,
    week_end,
    week_start,
)

Direction = Literal["prev", "next"]


class Granularity(str, Enum):
    """Calendar zoom level."""

    MONTH = "month"
    WEEK = "week"
    DAY = "day"


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"DateRange end {self.end} is before start {self.start}")

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __len__(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class ViewState:
    """Immutable calendar view state.

    Attributes:
        granularity: Active zoom level
        anchor_month: First day of the anchored month
        anchor_week_start: Monday of the anchored week
        selected_day: Highlighted day (None when nothing is selected)
    """

    granularity: Granularity
    anchor_month: date
    anchor_week_start: date
    selected_day: date | None = None

    def replace(self, **changes: object) -> ViewState:
        """Create a new state instance with updated fields."""
        return replace(self, **changes)


def initial_state(today: date, granularity: Granularity = Granularity.MONTH) -> ViewState:
    return ViewState(
        granularity=granularity,
        anchor_month=month_start(today),
        anchor_week_start=week_start(today),
        selected_day=today if granularity is Granularity.DAY else None,
    )


@dataclass(frozen=True)
class SwitchTo:
    granularity: Granularity
    day: date | None = None


@dataclass(frozen=True)
class JumpToDate:
    day: date
    force_day_view: bool = False


@dataclass(frozen=True)
class Navigate:
    direction: Direction


@dataclass(frozen=True)
class GoToToday:
    pass


Transition = SwitchTo | JumpToDate | Navigate | GoToToday


def _focus_day(state: ViewState, day: date) -> ViewState:
    """Day view on ``day`` with month and week anchored to contain it."""
    return state.replace(
        granularity=Granularity.DAY,
        selected_day=day,
        anchor_month=month_start(day),
        anchor_week_start=week_start(day),
    )


def _switch_to(state: ViewState, transition: SwitchTo, today: date) -> ViewState:
    target = transition.granularity

    if target is Granularity.MONTH:
        leaving_day = state.granularity is Granularity.DAY
        previous_anchor = state.selected_day if leaving_day and state.selected_day else state.anchor_month
        return state.replace(
            granularity=Granularity.MONTH,
            anchor_month=month_start(previous_anchor),
            selected_day=None if leaving_day else state.selected_day,
        )

    if target is Granularity.WEEK:
        return state.replace(
            granularity=Granularity.WEEK,
            anchor_week_start=week_start(today),
            anchor_month=month_start(today),
        )

    return _focus_day(state, transition.day or today)


def _navigate(state: ViewState, direction: Direction, today: date) -> ViewState:
    step = 1 if direction == "next" else -1

    if state.granularity is Granularity.MONTH:
        return state.replace(anchor_month=add_months(state.anchor_month, step))

    if state.granularity is Granularity.WEEK:
        new_week = state.anchor_week_start + timedelta(weeks=step)
        changes: dict[str, object] = {"anchor_week_start": new_week}
        # Mini calendar follows the week across month boundaries
        if not same_month(new_week, state.anchor_month):
            changes["anchor_month"] = month_start(new_week)
        return state.replace(**changes)

    return _focus_day(state, (state.selected_day or today) + timedelta(days=step))


def _go_to_today(state: ViewState, today: date) -> ViewState:
    if state.granularity is Granularity.MONTH:
        return state.replace(anchor_month=month_start(today))
    if state.granularity is Granularity.WEEK:
        return state.replace(anchor_week_start=week_start(today), anchor_month=month_start(today))
    return _focus_day(state, today)


def apply_transition(state: ViewState, transition: Transition, today: date) -> ViewState:
    """Pure transition function.

    Args:
        state: Current view state
        transition: Requested transition
        today: Current real-world date

    Returns:
        New view state (``state`` itself is never modified)
    """
    if isinstance(transition, SwitchTo):
        return _switch_to(state, transition, today)
    if isinstance(transition, JumpToDate):
        if transition.force_day_view:
            return _focus_day(state, transition.day)
        return state.replace(selected_day=transition.day)
    if isinstance(transition, Navigate):
        return _navigate(state, transition.direction, today)
    if isinstance(transition, GoToToday):
        return _go_to_today(state, today)
    raise NavigationError(f"Unknown transition: {transition!r}")


def visible_range(state: ViewState, today: date) -> DateRange:
    """Dates rendered for the current granularity.

    The week anchor, not the month anchor, governs the week view.
    """
    if state.granularity is Granularity.MONTH:
        return DateRange(state.anchor_month, month_end(state.anchor_month))
    if state.granularity is Granularity.WEEK:
        return DateRange(state.anchor_week_start, week_end(state.anchor_week_start))
    day = state.selected_day or today
    return DateRange(day, day)


def week_range_dates(state: ViewState) -> frozenset[date]:
    """Dates the mini calendar highlights as the visible week (week view only)."""
    if state.granularity is not Granularity.WEEK:
        return frozenset()
    return frozenset(DateRange(state.anchor_week_start, week_end(state.anchor_week_start)).days())


class ViewNavigationController:
    """Owner of the mutable ``ViewState``.

    State changes only through the methods below. Every transition publishes
    ``ViewRangeChanged``; a transition that selects a new day also publishes
    ``DateSelected``. Invalid input raises ``NavigationError`` and leaves the
    state untouched.
    """

    def __init__(
        self,
        bus: EventBus | None = None,
        today_fn: Callable[[], date] | None = None,
        initial: ViewState | None = None,
    ) -> None:
        self._bus = bus or EventBus()
        self._today_fn = today_fn or date.today
        self._state = initial or initial_state(self._today_fn())

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def bus(self) -> EventBus:
        return self._bus

    def visible_range(self) -> DateRange:
        return visible_range(self._state, self._today_fn())

    def switch_to(self, granularity: Granularity | str, day: date | str | None = None) -> ViewState:
        target = self._coerce_granularity(granularity)
        if day is not None and target is not Granularity.DAY:
            raise self._reject(f"A date can only be supplied when switching to day view, got {target.value}")
        return self._apply(SwitchTo(target, self._coerce_date(day) if day is not None else None))

    def jump_to_date(self, day: date | str, force_day_view: bool = False) -> ViewState:
        return self._apply(JumpToDate(self._coerce_date(day), force_day_view))

    def navigate(self, direction: Direction | str) -> ViewState:
        if direction not in ("prev", "next"):
            raise self._reject(f"Unknown navigation direction: {direction!r}")
        return self._apply(Navigate(direction))  # type: ignore[arg-type]

    def go_to_today(self) -> ViewState:
        return self._apply(GoToToday())

    def _apply(self, transition: Transition) -> ViewState:
        today = self._today_fn()
        previous = self._state
        self._state = apply_transition(previous, transition, today)

        logger.debug(
            f"[NAV] {type(transition).__name__}",
            granularity=self._state.granularity.value,
            anchor_month=self._state.anchor_month.isoformat(),
            anchor_week_start=self._state.anchor_week_start.isoformat(),
            selected_day=self._state.selected_day.isoformat() if self._state.selected_day else None,
        )

        if self._state.selected_day is not None and self._state.selected_day != previous.selected_day:
            self._bus.publish(DateSelected(self._state.selected_day))
        self._bus.publish(ViewRangeChanged(visible_range(self._state, today), self._state.granularity))
        return self._state

    def _reject(self, message: str) -> NavigationError:
        logger.warning(f"[NAV] Rejected navigation: {message}")
        return NavigationError(message)

    def _coerce_granularity(self, granularity: Granularity | str) -> Granularity:
        try:
            return Granularity(granularity)
        except ValueError as e:
            raise self._reject(f"Unknown granularity: {granularity!r}") from e

    def _coerce_date(self, day: date | str) -> date:
        try:
            return parse_date(day)
        except ParseError as e:
            raise self._reject(str(e)) from e
