"""
Catalog Factory
Centralizes construction of the storage, timer and controller from config.
"""

from collections.abc import Callable

from ril.application.config import AppConfig
from ril.application.controller import CatalogController
from ril.application.progress_store import ProgressStore
from ril.application.timer import PracticeTimer
from ril.domain.ports import CodeSandbox, KeyValueStore, Scheduler
from ril.infrastructure.catalog_loader import load_catalog
from ril.infrastructure.sandbox import WorkspaceSandbox
from ril.infrastructure.scheduling import AsyncioScheduler
from ril.infrastructure.storage import JsonFileStore


def get_storage(config: AppConfig) -> KeyValueStore:
    return JsonFileStore(config.storage_path, quota_bytes=config.storage_quota_bytes)


def get_sandbox(config: AppConfig) -> CodeSandbox:
    return WorkspaceSandbox(config.sandbox_dir)


def build_controller(
    config: AppConfig,
    scheduler: Scheduler | None = None,
    storage: KeyValueStore | None = None,
    on_tick: Callable[[int], None] | None = None,
) -> CatalogController:
    """
    Wire a CatalogController from config.

    The scheduler defaults to the running asyncio loop. It is only touched
    once the timer starts, so purely synchronous callers may omit it.
    """
    challenges = load_catalog(config.catalog_path)
    progress = ProgressStore.open(storage or get_storage(config))
    timer = PracticeTimer(
        scheduler or AsyncioScheduler(), interval=config.tick_interval, on_tick=on_tick
    )
    return CatalogController(challenges, progress, timer, sandbox=get_sandbox(config))
