# Domain Package
from .errors import (
    CatalogError,
    RilError,
    SandboxError,
    StorageError,
    StorageQuotaExceededError,
)
from .models import (
    ALL,
    Category,
    Challenge,
    Difficulty,
    FilterCriteria,
    ProgressRecord,
    TimerState,
    TimerStatus,
)
from .ports import CodeSandbox, KeyValueStore, Scheduler, TickHandle

__all__ = [
    "ALL",
    "Category",
    "Challenge",
    "Difficulty",
    "FilterCriteria",
    "ProgressRecord",
    "TimerState",
    "TimerStatus",
    "CodeSandbox",
    "KeyValueStore",
    "Scheduler",
    "TickHandle",
    "RilError",
    "StorageError",
    "StorageQuotaExceededError",
    "CatalogError",
    "SandboxError",
]
