"""
Tick sources for the practice timer.

AsyncioScheduler runs on a live event loop; SimulatedScheduler is a manual
clock that only moves when `advance()` is called.
"""

import asyncio
import heapq
import itertools
from collections.abc import Callable

from ril.domain.ports import Scheduler, TickHandle


class AsyncioScheduler(Scheduler):
    """Schedules callbacks with `loop.call_later` on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TickHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class SimulatedHandle:
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SimulatedScheduler(Scheduler):
    """
    Deterministic clock.

    Callbacks fire in due-time order (ties in scheduling order) as `advance`
    moves the clock forward. Callbacks scheduled while advancing fire in the
    same call if they fall due before the target time.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, SimulatedHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> SimulatedHandle:
        handle = SimulatedHandle(self.now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled:
                handle.callback()
        self.now = target

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)
