"""Root conftest for all tests.

Shared fixtures: a session factory, fixed instants, and settings that never
read the process environment or a .env file.
"""

from collections.abc import Callable
from datetime import date, datetime
from typing import Any

import pytest

from session_timeline.config.settings import Settings
from session_timeline.core.clock import Clock
from session_timeline.core.events import EventBus
from session_timeline.engine import TimelineEngine
from session_timeline.sessions.types import Session

FIXED_NOW = datetime(2024, 6, 10, 9, 45)
FIXED_TODAY = date(2024, 6, 10)


@pytest.fixture
def make_session() -> Callable[..., Session]:
    """Factory for Session models with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> Session:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "id": f"s{counter['n']}",
            "participant_id": "p1",
            "participant_name": "Ava",
            "date": date(2024, 6, 10),
            "start_time": "09:00",
            "end_time": "10:30",
            "activities": ("Football",),
            "lifecycle_status": "scheduled",
            "assignment_status": None,
        }
        fields.update(overrides)
        return Session(**fields)

    return _make


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def fixed_clock() -> Clock:
    return Clock(now_fn=lambda: FIXED_NOW, interval_seconds=60)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def engine(test_settings: Settings, fixed_clock: Clock, bus: EventBus) -> TimelineEngine:
    return TimelineEngine(settings=test_settings, clock=fixed_clock, bus=bus, today_fn=lambda: FIXED_TODAY)
