"""Day-view timeline layout in minutes relative to the viewed day's midnight.

Each block is positioned independently. Simultaneous sessions are not packed
into collision lanes; the host renders participants in parallel lanes from
the participant grouping, and same-participant overlaps stack.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date as date_type
from datetime import datetime, time, timedelta

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from session_timeline.config.settings import settings
from session_timeline.sessions.types import ClassifiedSession
from session_timeline.utils.time_math import (
    MINUTES_PER_DAY,
    format_hhmm,
    minutes_since_midnight,
    resolve_span,
)


class LayoutBlock(BaseModel):
    """Position of one session on the 24-hour grid.

    Attributes:
        session_id: Positioned session
        start_offset_minutes: Minutes after midnight of the viewed day (0-1439)
        end_offset_minutes: May exceed 1439 when the session runs past midnight
        height_minutes: max(minimum block, end - start)
        overflows_to_next_day: Session ends on the following day
        display_end_time: Resolved end as HH:MM
        session: The classified session itself
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    start_offset_minutes: int = Field(ge=0, lt=MINUTES_PER_DAY)
    end_offset_minutes: int
    height_minutes: int
    overflows_to_next_day: bool
    display_end_time: str
    session: ClassifiedSession


class HourRow(BaseModel):
    """One row of the day grid."""

    model_config = ConfigDict(frozen=True)

    offset_minutes: int
    label: str
    is_past_hour: bool
    is_now_hour: bool


class DayLayout(BaseModel):
    """Everything a day view needs to draw one date.

    Attributes:
        date: Viewed day
        blocks: One block per valid session, in grouped order
        earliest_session_id: Session to auto-scroll to (None when empty)
        scroll_offset_minutes: Auto-scroll target (None when empty)
        excluded_count: Sessions of this day dropped for invalid times
    """

    model_config = ConfigDict(frozen=True)

    date: date_type
    blocks: tuple[LayoutBlock, ...] = ()
    earliest_session_id: str | None = None
    scroll_offset_minutes: int | None = None
    excluded_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.blocks


def layout_block(session: ClassifiedSession, minimum_block_minutes: int | None = None) -> LayoutBlock:
    """Position one session, applying the overnight rule."""
    minimum = minimum_block_minutes if minimum_block_minutes is not None else settings.minimum_block_minutes
    span = resolve_span(session.date, session.start_time, session.end_time)

    start_offset = minutes_since_midnight(span.start)
    end_offset = minutes_since_midnight(span.end)
    if span.overflows_to_next_day:
        end_offset += MINUTES_PER_DAY

    return LayoutBlock(
        session_id=session.id,
        start_offset_minutes=start_offset,
        end_offset_minutes=end_offset,
        height_minutes=max(minimum, end_offset - start_offset),
        overflows_to_next_day=span.overflows_to_next_day,
        display_end_time=format_hhmm(span.end),
        session=session,
    )


def earliest_session_of(sessions: Sequence[ClassifiedSession]) -> ClassifiedSession | None:
    """First session by start time; ties resolve to the earliest in input order."""
    if not sessions:
        return None
    # min() returns the first of equal minima
    return min(sessions, key=lambda s: minutes_since_midnight(s.starts_at))


def scroll_offset_minutes(
    session: ClassifiedSession,
    row_unit_minutes: int | None = None,
    lead_rows: int | None = None,
) -> int:
    """Scroll target that keeps a few rows visible above the session."""
    row_unit = row_unit_minutes if row_unit_minutes is not None else settings.row_unit_minutes
    lead = lead_rows if lead_rows is not None else settings.scroll_lead_rows
    return max(0, minutes_since_midnight(session.starts_at) - lead * row_unit)


def layout_day(
    day: date_type,
    sessions: Sequence[ClassifiedSession],
    *,
    minimum_block_minutes: int | None = None,
    row_unit_minutes: int | None = None,
    scroll_lead_rows: int | None = None,
    excluded_count: int = 0,
) -> DayLayout:
    """Lay out one day's sessions.

    Args:
        day: Viewed day
        sessions: Classified sessions dated ``day`` (others are ignored)
        minimum_block_minutes: Minimum block height (default from settings)
        row_unit_minutes: Minutes per grid row (default from settings)
        scroll_lead_rows: Rows of context above the earliest session
        excluded_count: Invalid sessions of this day, for diagnostics

    Returns:
        DayLayout; ``is_empty`` is True when no valid session falls on ``day``
    """
    day_sessions = [s for s in sessions if s.date == day]
    blocks = tuple(layout_block(s, minimum_block_minutes) for s in day_sessions)

    earliest = earliest_session_of(day_sessions)
    layout = DayLayout(
        date=day,
        blocks=blocks,
        earliest_session_id=earliest.id if earliest else None,
        scroll_offset_minutes=scroll_offset_minutes(earliest, row_unit_minutes, scroll_lead_rows) if earliest else None,
        excluded_count=excluded_count,
    )
    logger.debug(
        f"[LAYOUT] Laid out {len(blocks)} blocks",
        date=day.isoformat(),
        overnight_count=sum(1 for b in blocks if b.overflows_to_next_day),
        excluded_count=excluded_count,
    )
    return layout


def hour_rows(day: date_type, now: datetime, row_unit_minutes: int | None = None) -> list[HourRow]:
    """Rows of the day grid with past/current markers relative to ``now``."""
    row_unit = row_unit_minutes if row_unit_minutes is not None else settings.row_unit_minutes
    wall_now = now.replace(tzinfo=None)
    now_row_start = datetime.combine(
        wall_now.date(),
        time(),
    ) + timedelta(minutes=(minutes_since_midnight(wall_now) // row_unit) * row_unit)

    rows: list[HourRow] = []
    for offset in range(0, MINUTES_PER_DAY, row_unit):
        row_start = datetime.combine(day, time()) + timedelta(minutes=offset)
        rows.append(
            HourRow(
                offset_minutes=offset,
                label=format_hhmm(row_start),
                is_past_hour=row_start < now_row_start,
                is_now_hour=row_start == now_row_start,
            )
        )
    return rows
