"""Typed notifications between the engine and its collaborators.

The host UI and the mini calendar subscribe to these events instead of
threading callbacks through each other.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger

if TYPE_CHECKING:
    from session_timeline.calendar.navigation import DateRange, Granularity
    from session_timeline.sessions.types import ClassifiedSession


@dataclass(frozen=True)
class SessionActivated:
    """A session block was activated (clicked/opened) in a view."""

    session: ClassifiedSession


@dataclass(frozen=True)
class DateSelected:
    """The highlighted day changed."""

    date: date


@dataclass(frozen=True)
class ViewRangeChanged:
    """The visible date range or granularity changed."""

    range: DateRange
    granularity: Granularity


TimelineEvent = SessionActivated | DateSelected | ViewRangeChanged
E = TypeVar("E")


class EventBus:
    """Synchronous in-process event bus.

    Handlers run in subscription order. A failing handler is logged and does
    not prevent delivery to the handlers after it.
    """

    def __init__(self) -> None:
        self._handlers: dict[type, dict[int, Callable[[Any], None]]] = defaultdict(dict)
        self._next_token = 0

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Subscribe a handler to one event type.

        Returns:
            Disposer that removes the handler (idempotent)
        """
        token = self._next_token
        self._next_token += 1
        self._handlers[event_type][token] = handler

        def dispose() -> None:
            self._handlers[event_type].pop(token, None)

        return dispose

    def handler_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, {}))

    def publish(self, event: object) -> None:
        handlers = list(self._handlers.get(type(event), {}).values())
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"[EVENTS] Handler failed for {type(event).__name__}")
