"""
Round countdown timer.

Fires a tick callback every interval while running. Each run is tagged with
the round id it was started for; a tick whose round id no longer matches
(because the round was reset or restarted in between) is dropped instead of
reaching the new round. Pausing cancels the pending tick, and resuming arms
a fresh full interval.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from hideseek.logic.scheduler import ScheduledCall, Scheduler

logger = structlog.get_logger()


class CountdownTimer:
    """Repeating tick driver for a single engine."""

    def __init__(self, scheduler: Scheduler, interval_seconds: float = 1.0) -> None:
        self._scheduler = scheduler
        self._interval = interval_seconds
        self._pending: ScheduledCall | None = None
        self._round_id: int | None = None
        self._on_tick: Callable[[int], None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def round_id(self) -> int | None:
        """Round the timer was last started for."""
        return self._round_id

    def start(self, round_id: int, on_tick: Callable[[int], None]) -> None:
        """Start ticking for the given round, replacing any previous run."""
        self.cancel()
        self._round_id = round_id
        self._on_tick = on_tick
        self._running = True
        self._arm()

    def resume(self) -> None:
        """Re-arm after cancel() for the same round. No-op if running or never started."""
        if self._running or self._on_tick is None:
            return
        self._running = True
        self._arm()

    def cancel(self) -> None:
        """Stop ticking without forgetting the round (resume() can restart it)."""
        self._running = False
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _arm(self) -> None:
        round_id = self._round_id
        self._pending = self._scheduler.call_later(self._interval, lambda: self._fire(round_id))

    def _fire(self, round_id: int | None) -> None:
        self._pending = None
        if not self._running or round_id != self._round_id or self._on_tick is None:
            logger.debug("dropped stale tick", tick_round_id=round_id, current_round_id=self._round_id)
            return
        try:
            self._on_tick(round_id)
        except (RuntimeError, ValueError):
            logger.exception("tick callback failed")
        # the callback may have stopped or restarted the timer
        if self._running and self._pending is None and round_id == self._round_id:
            self._arm()
