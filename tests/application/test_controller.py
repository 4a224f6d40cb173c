"""Integration scenarios for the Catalog Controller."""

from unittest.mock import MagicMock

import pytest

from ril.application.controller import CatalogController
from ril.application.progress_store import ProgressStore
from ril.domain.constants import COMPLETED_KEY, TIMES_KEY
from ril.domain.errors import SandboxError
from ril.domain.models import FilterCriteria, TimerState
from ril.infrastructure.sandbox import WorkspaceSandbox


@pytest.fixture
def sandbox():
    return MagicMock()


@pytest.fixture
def controller(challenges, progress_store, timer, sandbox):
    return CatalogController(challenges, progress_store, timer, sandbox=sandbox)


def ids(items):
    return [c.id for c in items]


class TestFiltering:
    def test_initially_shows_everything(self, controller, challenges):
        assert controller.visible == challenges
        assert controller.criteria == FilterCriteria()
        assert controller.showing_summary() == "Showing 4 of 4 challenges"

    def test_setters_recompute(self, controller):
        assert ids(controller.set_category("Performance")) == [2, 4]
        assert ids(controller.set_difficulty("Expert")) == [4]
        assert ids(controller.set_query("zzz")) == []
        assert controller.showing_summary() == "Showing 0 of 4 challenges"

    def test_clear_filters(self, controller, challenges):
        controller.set_category("Architecture")
        controller.set_query("plugin")
        assert controller.clear_filters() == challenges

    def test_set_criteria(self, controller):
        visible = controller.set_criteria(FilterCriteria("Performance", "All", ""))
        assert ids(visible) == [2, 4]

    def test_visible_is_a_copy(self, controller):
        controller.visible.clear()
        assert len(controller.visible) == 4


class TestSelection:
    def test_get_challenge_missing(self, controller):
        assert controller.get_challenge(42) is None

    def test_open_starts_fresh_timer(self, controller, scheduler):
        controller.open_challenge(2)
        scheduler.advance(3)
        assert controller.current.id == 2
        assert controller.timer_state == TimerState(seconds=3, is_active=True)

        controller.open_challenge(3)
        assert controller.timer_state.seconds == 0
        assert controller.timer_state.is_active

    def test_open_unknown_leaves_state(self, controller, scheduler):
        controller.open_challenge(1)
        scheduler.advance(2)
        assert controller.open_challenge(99) is None
        assert controller.current.id == 1
        assert controller.timer_state.seconds == 2

    def test_close_resets_timer(self, controller, scheduler):
        controller.open_challenge(1)
        scheduler.advance(4)
        controller.close_challenge()
        assert controller.current is None
        assert controller.timer_state == TimerState(seconds=0, is_active=False)


class TestCompletion:
    def test_complete_current_captures_timer(self, controller, scheduler, storage):
        controller.open_challenge(3)
        scheduler.advance(65)
        assert controller.timer_display == "1:05"

        assert controller.complete_current() == 65
        assert controller.is_completed(3)
        assert controller.completion_time(3) == 65
        assert not controller.timer_state.is_active
        assert storage.get_item(COMPLETED_KEY) == "[3]"
        assert storage.get_item(TIMES_KEY) == '{"3":65}'

    def test_complete_current_without_selection(self, controller):
        assert controller.complete_current() is None
        assert controller.completed_count == 0

    def test_mark_complete_unknown_id_is_noop(self, controller, storage):
        assert controller.mark_complete(99) is False
        assert controller.completed_count == 0
        assert storage.get_item(COMPLETED_KEY) is None

    def test_progress(self, controller):
        controller.mark_complete(1)
        assert controller.progress == 25
        controller.mark_complete(2, 30)
        assert controller.progress == 50

    def test_reset_progress(self, controller, storage):
        controller.mark_complete(1, 10)
        controller.reset_progress()
        assert controller.progress == 0
        assert storage.keys() == []

    def test_progress_survives_new_controller(self, challenges, storage, timer, controller):
        controller.mark_complete(4, 200)
        again = CatalogController(challenges, ProgressStore.open(storage), timer)
        assert again.is_completed(4)
        assert again.completion_time(4) == 200


class TestTimerPassThrough:
    def test_toggle_pause_reset(self, controller, scheduler):
        controller.toggle_timer()
        scheduler.advance(2)
        controller.pause_timer()
        scheduler.advance(2)
        assert controller.timer_state == TimerState(seconds=2, is_active=False)
        controller.start_timer()
        scheduler.advance(1)
        assert controller.timer_state.seconds == 3
        controller.reset_timer()
        assert controller.timer_state == TimerState(0, False)

    def test_dispose_stops_ticks(self, controller, scheduler):
        controller.open_challenge(1)
        controller.dispose()
        scheduler.advance(5)
        assert controller.timer_state.seconds == 0


class TestSandbox:
    def test_runs_starter_and_test_code(self, controller, sandbox):
        controller.open_challenge(3)
        assert controller.run_in_sandbox() is True
        sandbox.run.assert_called_once_with(
            "function createPluginHost() {}", "test('host', () => {});"
        )

    def test_runs_given_code(self, controller, sandbox):
        controller.open_challenge(1)
        controller.run_in_sandbox("my code")
        sandbox.run.assert_called_once_with("my code", None)

    def test_by_id_without_opening(self, controller, sandbox):
        assert controller.run_in_sandbox(challenge_id=3) is True
        sandbox.run.assert_called_once()

    def test_nothing_open(self, controller, sandbox):
        assert controller.run_in_sandbox() is False
        sandbox.run.assert_not_called()

    def test_no_sandbox(self, challenges, progress_store, timer):
        controller = CatalogController(challenges, progress_store, timer)
        controller.open_challenge(1)
        assert controller.run_in_sandbox() is False

    def test_sandbox_failure_is_contained(self, controller, sandbox):
        sandbox.run.side_effect = SandboxError("disk full")
        controller.open_challenge(3)
        assert controller.run_in_sandbox() is False
        # The open challenge and its timer are untouched.
        assert controller.current.id == 3
        assert controller.timer_state.is_active is True

    def test_unwritable_workspace(self, challenges, progress_store, timer, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        controller = CatalogController(
            challenges, progress_store, timer, sandbox=WorkspaceSandbox(blocker / "sub")
        )
        assert controller.run_in_sandbox(challenge_id=3) is False


class TestSavedProgress:
    def test_nothing_saved(self, controller):
        assert controller.has_saved_progress is False

    def test_completed(self, controller):
        controller.mark_complete(1)
        assert controller.has_saved_progress is True

    def test_malformed_keys_still_count(self, challenges, storage, timer):
        storage.set_item(COMPLETED_KEY, "not json")
        storage.set_item(TIMES_KEY, '{"1":45}')
        controller = CatalogController(challenges, ProgressStore.open(storage), timer)

        assert controller.completed_count == 0
        assert controller.has_saved_progress is True

        controller.reset_progress()
        assert storage.get_item(COMPLETED_KEY) is None
        assert storage.get_item(TIMES_KEY) is None
        assert controller.has_saved_progress is False
