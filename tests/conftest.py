from pathlib import Path

import pytest
import yaml

from ril.application.progress_store import ProgressStore
from ril.application.timer import PracticeTimer
from ril.domain.models import Category, Challenge, Difficulty
from ril.infrastructure.scheduling import SimulatedScheduler
from ril.infrastructure.storage import MemoryStore


def make_challenge(
    cid: int,
    category: Category = Category.PERFORMANCE,
    difficulty: Difficulty = Difficulty.EXPERT,
    title: str | None = None,
    description: str = "A challenge.",
    **kwargs,
) -> Challenge:
    return Challenge(
        id=cid,
        category=category,
        difficulty=difficulty,
        title=title or f"Challenge {cid}",
        description=description,
        **kwargs,
    )


@pytest.fixture
def challenges() -> list[Challenge]:
    """Four challenges over three categories, Performance repeated."""
    return [
        make_challenge(
            1,
            Category.HOOKS_AND_STATE,
            Difficulty.EXPERT,
            title="Build useSyncExternalStore from Scratch",
            description="Bridge external mutable stores with concurrent rendering.",
            time_estimate="25 min",
        ),
        make_challenge(
            2,
            Category.PERFORMANCE,
            Difficulty.HARD,
            title="Build a Virtualized List",
            description="Render 100,000 items smoothly with overscan.",
            time_estimate="30 min",
        ),
        make_challenge(
            3,
            Category.ARCHITECTURE,
            Difficulty.MEDIUM,
            title="Plugin Architecture",
            description="Third-party plugins register UI slots and middleware.",
            starter_code="function createPluginHost() {}",
            test_code="test('host', () => {});",
        ),
        make_challenge(
            4,
            Category.PERFORMANCE,
            Difficulty.EXPERT,
            title="Concurrent Data Fetching",
            description="Eliminate race conditions with a VIRTUALIZED cache.",
        ),
    ]


@pytest.fixture
def storage() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def progress_store(storage) -> ProgressStore:
    return ProgressStore.open(storage)


@pytest.fixture
def scheduler() -> SimulatedScheduler:
    return SimulatedScheduler()


@pytest.fixture
def timer(scheduler) -> PracticeTimer:
    return PracticeTimer(scheduler)


@pytest.fixture
def catalog_file(tmp_path, challenges) -> Path:
    """Writes the `challenges` fixture as a YAML catalog."""
    entries = []
    for c in challenges:
        entry = {
            "id": c.id,
            "category": c.category.value,
            "difficulty": c.difficulty.value,
            "title": c.title,
            "description": c.description,
        }
        if c.time_estimate:
            entry["time_estimate"] = c.time_estimate
        if c.starter_code:
            entry["starter_code"] = c.starter_code
        if c.test_code:
            entry["test_code"] = c.test_code
        entries.append(entry)
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump({"challenges": entries}, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/progress
    monkeypatch.setenv("HOME", str(home))
    for var in ("RIL_STORAGE_PATH", "RIL_CATALOG_PATH", "RIL_TICK_INTERVAL", "RIL_SANDBOX_DIR"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def challenge_factory():
    return make_challenge
