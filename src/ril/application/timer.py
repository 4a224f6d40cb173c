"""
Practice timer state machine.

idle -> running -> paused -> running ... ; reset() returns to idle at 0.
Tick scheduling is delegated to a Scheduler port so tests can drive a
simulated clock.
"""

import logging
from collections.abc import Callable

from ril.domain.constants import TICK_INTERVAL
from ril.domain.models import TimerState, TimerStatus
from ril.domain.ports import Scheduler, TickHandle

from .utils.time import format_time

logger = logging.getLogger(__name__)


class PracticeTimer:
    """
    Counts whole seconds while running.

    Each armed tick carries the generation it was scheduled under. Pausing,
    resetting or disposing bumps the generation, so a tick that was already
    queued by the host when the timer stopped is discarded.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval: float = TICK_INTERVAL,
        on_tick: Callable[[int], None] | None = None,
    ):
        """
        Args:
            scheduler: Tick source (port).
            interval: Seconds between ticks.
            on_tick: Optional listener called with the new seconds value.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._scheduler = scheduler
        self._interval = interval
        self._on_tick = on_tick

        self._seconds = 0
        self._status = TimerStatus.IDLE
        self._generation = 0
        self._handle: TickHandle | None = None
        self._disposed = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def seconds(self) -> int:
        return self._seconds

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is TimerStatus.RUNNING

    @property
    def state(self) -> TimerState:
        return TimerState(seconds=self._seconds, is_active=self.is_active)

    @property
    def display(self) -> str:
        return format_time(self._seconds)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._disposed or self._status is TimerStatus.RUNNING:
            return
        self._status = TimerStatus.RUNNING
        self._generation += 1
        self._arm()

    def pause(self) -> None:
        if self._status is not TimerStatus.RUNNING:
            return
        self._stop_ticking()
        self._status = TimerStatus.PAUSED

    def toggle(self) -> None:
        if self._status is TimerStatus.RUNNING:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._stop_ticking()
        self._status = TimerStatus.IDLE
        self._seconds = 0

    def dispose(self) -> None:
        """Cancel any pending tick and make this timer inert."""
        self._stop_ticking()
        self._status = TimerStatus.IDLE
        self._disposed = True

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def _arm(self) -> None:
        generation = self._generation
        self._handle = self._scheduler.call_later(
            self._interval, lambda: self._tick(generation)
        )

    def _tick(self, generation: int) -> None:
        if (
            self._disposed
            or generation != self._generation
            or self._status is not TimerStatus.RUNNING
        ):
            logger.debug("Discarding stale timer tick")
            return

        self._seconds += 1
        self._arm()
        if self._on_tick is not None:
            self._on_tick(self._seconds)

    def _stop_ticking(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
