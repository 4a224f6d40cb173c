"""
In-memory key-value store.

Implements KeyValueStore with a plain dict; nothing survives the process.
"""

from ril.domain.ports import KeyValueStore


class MemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)
