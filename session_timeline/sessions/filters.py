"""Pre-grouping filters: participant visibility and activity types.

Filtered-out sessions are excluded from every derived structure, not merely
hidden at render time.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from loguru import logger

from session_timeline.sessions.types import Session

S = TypeVar("S", bound=Session)


def filter_by_participants(sessions: Iterable[S], participant_ids: Iterable[str | int] | None) -> list[S]:
    """Keep only sessions of visible participants.

    Args:
        sessions: Sessions to filter
        participant_ids: Visible participant IDs; None or empty keeps everything

    Returns:
        Filtered sessions in input order
    """
    visible = {str(pid) for pid in participant_ids} if participant_ids else set()
    if not visible:
        return list(sessions)
    return [session for session in sessions if session.participant_id in visible]


def activity_types(sessions: Iterable[Session]) -> list[str]:
    """Distinct activity names across sessions, sorted."""
    types: set[str] = set()
    for session in sessions:
        types.update(session.activities)
    return sorted(types)


class ActivityFilter:
    """Enabled activity types for the session-type checkboxes.

    All known types start enabled. When the set of known types changes (new
    data loaded), the filter is re-seeded with every type enabled again.
    """

    def __init__(self, known_types: Sequence[str] = ()) -> None:
        self._known: tuple[str, ...] = tuple(known_types)
        self._enabled: set[str] = set(known_types)

    @property
    def known_types(self) -> tuple[str, ...]:
        return self._known

    @property
    def enabled_types(self) -> frozenset[str]:
        return frozenset(self._enabled)

    def is_enabled(self, activity_type: str) -> bool:
        return activity_type in self._enabled

    def reset(self, known_types: Sequence[str]) -> bool:
        """Re-seed when the known types differ.

        Returns:
            True if the filter was re-seeded
        """
        if tuple(known_types) == self._known:
            return False
        self._known = tuple(known_types)
        self._enabled = set(known_types)
        logger.debug("Activity filter re-seeded", known_types=list(self._known))
        return True

    def toggle(self, activity_type: str) -> bool:
        """Flip one type on or off.

        Returns:
            New enabled state of the type
        """
        if activity_type in self._enabled:
            self._enabled.discard(activity_type)
            return False
        self._enabled.add(activity_type)
        return True

    def accepts(self, session: Session) -> bool:
        # Sessions without activities are never hidden by type
        if not session.activities:
            return True
        return any(activity in self._enabled for activity in session.activities)

    def apply(self, sessions: Iterable[S]) -> list[S]:
        return [session for session in sessions if self.accepts(session)]
