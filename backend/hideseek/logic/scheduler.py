"""
Scheduling abstraction for engine timers.

The engine never sleeps or polls: it asks a Scheduler to run a callback
after a delay and keeps the returned handle so it can cancel it. Production
code runs on AsyncioScheduler (the running event loop's clock).
VirtualScheduler keeps its own clock that only moves when advance() is
called, so round timing can be driven deterministically.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class ScheduledCall(ABC):
    """Handle to a callback registered with a Scheduler."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool: ...


class Scheduler(ABC):
    """Clock plus delayed-callback registry."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's monotonic clock."""
        ...

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback once, delay seconds from now."""
        ...


class _AsyncioCall(ScheduledCall):
    __slots__ = ("_handle",)

    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    The loop is resolved lazily so the scheduler can be built before the
    loop starts running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self._get_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        return _AsyncioCall(self._get_loop().call_later(max(0.0, delay), callback))


class _VirtualCall(ScheduledCall):
    __slots__ = ("_cancelled", "callback", "when")

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class VirtualScheduler(Scheduler):
    """Scheduler with a manually advanced clock.

    Callbacks fire in due-time order (registration order breaks ties), and a
    callback that schedules another callback inside the advanced window sees
    it fire within the same advance() call.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, _VirtualCall]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _VirtualCall(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (call.when, next(self._sequence), call))
        return call

    @property
    def pending_count(self) -> int:
        """Number of scheduled callbacks that have not fired or been cancelled."""
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that comes due."""
        if seconds < 0:
            raise ValueError(f"cannot move the clock backwards by {seconds}")
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now = when
            call.callback()
        self._now = target
