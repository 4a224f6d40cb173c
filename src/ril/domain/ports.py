"""
Ports (interfaces) for storage, tick scheduling and code execution.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol


class KeyValueStore(ABC):
    """
    Port for the durable key-value facility.

    Values are opaque strings; callers own serialization. Reading a key that
    was never written (or was removed) returns None.

    Implementations:
        - JsonFileStore: One JSON document on disk.
        - MemoryStore: In-process dict, nothing survives the process.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value for `key`, or None if absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store `value` under `key`, replacing any previous value.

        Raises:
            StorageError: If the write could not be made durable.
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Delete `key` entirely. Removing an absent key is a no-op.

        Raises:
            StorageError: If the removal could not be made durable.
        """
        pass


class TickHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """
    Port for the host's timer facility.

    Implementations:
        - AsyncioScheduler: asyncio event loop `call_later`.
        - SimulatedScheduler: Manual clock advanced explicitly (tests).
    """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TickHandle:
        """
        Run `callback` once after `delay` seconds.

        Returns:
            A handle whose `cancel()` prevents the callback from running.
        """
        pass


class CodeSandbox(Protocol):
    """Opaque code-execution tool. Nothing is returned to the caller."""

    def run(self, code: str, test_code: str | None = None) -> None: ...
