"""
Catalog Controller: composition root for the catalog state engine.

Wires filter criteria through the filter engine, and passes completion and
timer operations through to the Progress Store and Practice Timer.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace

from ril.domain.constants import ALL
from ril.domain.errors import SandboxError
from ril.domain.models import Challenge, FilterCriteria, TimerState
from ril.domain.ports import CodeSandbox

from .catalog_filter import filter_challenges, find_challenge
from .progress_store import ProgressStore
from .timer import PracticeTimer

logger = logging.getLogger(__name__)


class CatalogController:
    """
    Holds the current FilterCriteria and the selected challenge.

    The visible subset is recomputed on every criteria change, so `visible`
    is always a computed list; an empty list means nothing matched.
    """

    def __init__(
        self,
        challenges: Sequence[Challenge],
        progress: ProgressStore,
        timer: PracticeTimer,
        sandbox: CodeSandbox | None = None,
    ):
        self._challenges = tuple(challenges)
        self._progress = progress
        self._timer = timer
        self._sandbox = sandbox

        self._criteria = FilterCriteria()
        self._visible: list[Challenge] = []
        self._current: Challenge | None = None
        self._recompute()

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    @property
    def challenges(self) -> tuple[Challenge, ...]:
        return self._challenges

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def visible(self) -> list[Challenge]:
        return list(self._visible)

    @property
    def total(self) -> int:
        return len(self._challenges)

    def set_category(self, category: str) -> list[Challenge]:
        return self._apply(replace(self._criteria, category=category))

    def set_difficulty(self, difficulty: str) -> list[Challenge]:
        return self._apply(replace(self._criteria, difficulty=difficulty))

    def set_query(self, query: str) -> list[Challenge]:
        return self._apply(replace(self._criteria, query=query))

    def set_criteria(self, criteria: FilterCriteria) -> list[Challenge]:
        return self._apply(criteria)

    def clear_filters(self) -> list[Challenge]:
        return self._apply(FilterCriteria(category=ALL, difficulty=ALL, query=""))

    def showing_summary(self) -> str:
        return f"Showing {len(self._visible)} of {self.total} challenges"

    def _apply(self, criteria: FilterCriteria) -> list[Challenge]:
        self._criteria = criteria
        self._recompute()
        return self.visible

    def _recompute(self) -> None:
        self._visible = filter_challenges(self._challenges, self._criteria)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def current(self) -> Challenge | None:
        return self._current

    def get_challenge(self, challenge_id: int) -> Challenge | None:
        return find_challenge(self._challenges, challenge_id)

    def open_challenge(self, challenge_id: int) -> Challenge | None:
        """Select a challenge and start a fresh practice timer for it."""
        challenge = self.get_challenge(challenge_id)
        if challenge is None:
            logger.debug(f"Challenge {challenge_id} not found")
            return None

        self._current = challenge
        self._timer.reset()
        self._timer.start()
        return challenge

    def close_challenge(self) -> None:
        self._current = None
        self._timer.reset()

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    @property
    def progress(self) -> int:
        return self._progress.progress(self.total)

    @property
    def completed_count(self) -> int:
        return self._progress.completed_count

    @property
    def has_saved_progress(self) -> bool:
        return self.completed_count > 0 or self._progress.has_stored_progress()

    def is_completed(self, challenge_id: int) -> bool:
        return self._progress.is_completed(challenge_id)

    def completion_time(self, challenge_id: int) -> int | None:
        return self._progress.completion_time(challenge_id)

    def mark_complete(self, challenge_id: int, elapsed_seconds: int | None = None) -> bool:
        """
        Mark a challenge complete.

        Returns:
            False (and records nothing) if the id is not in the collection.
        """
        if self.get_challenge(challenge_id) is None:
            logger.warning(f"Ignoring completion for unknown challenge {challenge_id}")
            return False
        self._progress.mark_complete(challenge_id, elapsed_seconds)
        logger.info(f"Marked challenge {challenge_id} complete")
        return True

    def complete_current(self) -> int | None:
        """
        Stop the timer and commit the current challenge with its elapsed time.

        Returns:
            The recorded seconds, or None if no challenge is open.
        """
        if self._current is None:
            return None
        self._timer.pause()
        elapsed = self._timer.seconds
        self.mark_complete(self._current.id, elapsed)
        return elapsed

    def reset_progress(self) -> None:
        self._progress.reset_progress()
        logger.info("Progress reset")

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    @property
    def timer_state(self) -> TimerState:
        return self._timer.state

    @property
    def timer_display(self) -> str:
        return self._timer.display

    def start_timer(self) -> None:
        self._timer.start()

    def pause_timer(self) -> None:
        self._timer.pause()

    def toggle_timer(self) -> None:
        self._timer.toggle()

    def reset_timer(self) -> None:
        self._timer.reset()

    # ------------------------------------------------------------------
    # Sandbox
    # ------------------------------------------------------------------

    def run_in_sandbox(
        self, code: str | None = None, challenge_id: int | None = None
    ) -> bool:
        """
        Hand code for a challenge to the sandbox.

        Targets `challenge_id` if given, otherwise the open challenge, and
        defaults to its starter code. Returns False when there is no sandbox
        or no target challenge. A sandbox failure is logged and also
        returns False.
        """
        if challenge_id is not None:
            target = self.get_challenge(challenge_id)
        else:
            target = self._current
        if self._sandbox is None or target is None:
            return False
        source = code if code is not None else target.starter_code
        try:
            self._sandbox.run(source, target.test_code)
        except SandboxError as e:
            logger.warning(f"Sandbox failed for challenge {target.id}: {e}")
            return False
        return True

    def dispose(self) -> None:
        self._timer.dispose()
