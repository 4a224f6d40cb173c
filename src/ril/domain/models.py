"""
Domain models for the challenge catalog.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum

from .constants import ALL


class Category(str, Enum):
    HOOKS_AND_STATE = "Hooks & State"
    PERFORMANCE = "Performance"
    ARCHITECTURE = "Architecture"


class Difficulty(str, Enum):
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"


@dataclass(frozen=True)
class Challenge:
    """
    A single catalog entry.

    Only id, category, difficulty, title and description are read by the
    catalog engine. Everything else is payload for the host to render.

    Attributes:
        id: Unique positive integer, stable identity key.
        category: One of the closed Category values.
        difficulty: One of the closed Difficulty values.
        title: Display title (searchable).
        description: Display description (searchable).
        time_estimate: Human-readable estimate such as "30 min".
        test_code: Optional test source handed to the sandbox with the code.
    """

    id: int
    category: Category
    difficulty: Difficulty
    title: str
    description: str
    time_estimate: str = ""
    real_world: str = ""
    requirements: tuple[str, ...] = ()
    starter_code: str = ""
    solution_code: str = ""
    key_points: tuple[str, ...] = ()
    follow_up: str = ""
    test_code: str | None = None


@dataclass(frozen=True)
class FilterCriteria:
    """
    Active category/difficulty/text-query selection.

    `category` and `difficulty` hold either an enum value or the "All"
    sentinel. Any other string is allowed and simply matches nothing.
    """

    category: str = ALL
    difficulty: str = ALL
    query: str = ""


@dataclass
class ProgressRecord:
    """
    Which challenges are completed and how long each took.

    Attributes:
        completed_ids: Set of completed challenge ids.
        completion_times: Challenge id -> elapsed seconds. Keys are always a
            subset of completed_ids; a completed id may have no time.
    """

    completed_ids: set[int] = field(default_factory=set)
    completion_times: dict[int, int] = field(default_factory=dict)


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the practice timer."""

    seconds: int = 0
    is_active: bool = False
