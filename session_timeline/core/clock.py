"""Ticking time source for live reclassification.

The clock is the only autonomous activity in the engine. Every tick produces a
``ClockReading`` and notifies subscribers, which reclassify the sessions they
display so an ongoing session turns past without user action.

Time is read through an injectable ``now_fn`` so tests (and replays) drive the
clock deterministically with ``tick(now=...)``.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from loguru import logger

from session_timeline.config.settings import settings
from session_timeline.core.errors import ClockSkewDetectedError

ClockCallback = Callable[["ClockReading"], None]


@dataclass(frozen=True)
class ClockReading:
    """One accepted clock tick.

    Attributes:
        now: Current instant
        sequence: 1-based tick number for this clock
    """

    now: datetime
    sequence: int


class Clock:
    """Periodic clock with subscribe/dispose semantics.

    Rules:
    - A tick whose instant is earlier than the last accepted one is ignored
    - Subscribers are called synchronously in subscription order
    - Disposers are idempotent; a disposed subscriber never hears another tick
    """

    def __init__(
        self,
        now_fn: Callable[[], datetime] | None = None,
        interval_seconds: float | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._now_fn = now_fn or (lambda: datetime.now(tz))
        self.interval_seconds = interval_seconds if interval_seconds is not None else settings.tick_interval_seconds
        if self.interval_seconds <= 0:
            raise ValueError("Clock interval must be positive")
        self._subscribers: dict[int, ClockCallback] = {}
        self._next_token = 0
        self._latest: ClockReading | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def latest(self) -> ClockReading | None:
        return self._latest

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def now(self) -> datetime:
        return self._now_fn()

    def reading(self) -> ClockReading:
        """Latest accepted reading, accepting a first one (without notifying) if none exists yet."""
        if self._latest is None:
            return self._accept(self._now_fn())
        return self._latest

    def instant(self) -> datetime:
        """Current time from the time source, never earlier than the latest accepted tick.

        Unlike ``tick()`` this neither records a reading nor notifies subscribers.
        """
        current = self._now_fn()
        if self._latest is not None and current < self._latest.now:
            return self._latest.now
        return current

    def subscribe(self, callback: ClockCallback) -> Callable[[], None]:
        """Register a tick callback.

        Returns:
            Disposer that unregisters the callback (safe to call repeatedly)
        """
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = callback

        def dispose() -> None:
            self._subscribers.pop(token, None)

        return dispose

    def _check_skew(self, current: datetime) -> None:
        if self._latest is not None and current < self._latest.now:
            raise ClockSkewDetectedError(self._latest.now, current)

    def _accept(self, current: datetime) -> ClockReading:
        sequence = self._latest.sequence + 1 if self._latest else 1
        self._latest = ClockReading(now=current, sequence=sequence)
        return self._latest

    def tick(self, now: datetime | None = None) -> ClockReading | None:
        """Produce a new reading and notify subscribers.

        Args:
            now: Explicit instant (defaults to the time source)

        Returns:
            The accepted reading, or None when the tick was ignored for skew
        """
        current = now if now is not None else self._now_fn()
        try:
            self._check_skew(current)
        except ClockSkewDetectedError as e:
            logger.warning(
                "[CLOCK] Ignoring tick that moved backward",
                previous=e.previous.isoformat(),
                current=e.current.isoformat(),
            )
            return None

        reading = self._accept(current)
        for callback in list(self._subscribers.values()):
            try:
                callback(reading)
            except Exception:
                logger.exception(f"[CLOCK] Tick subscriber failed on tick {reading.sequence}")
        return reading

    async def run(self) -> None:
        """Tick forever at the configured interval (cancel to stop)."""
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.tick()

    def start(self) -> None:
        """Start ticking on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self.run())
        logger.info(f"[CLOCK] Started with interval={self.interval_seconds}s")

    async def stop(self) -> None:
        """Cancel the ticking task and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("[CLOCK] Stopped")

    async def __aenter__(self) -> Clock:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
