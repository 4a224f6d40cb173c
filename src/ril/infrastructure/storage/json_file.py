"""
JSON File Store: durable key-value adapter backed by a single file.

The file holds one JSON object mapping each key to its serialized string
value, mirroring a browser's localStorage for one origin.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from ril.domain.errors import StorageError, StorageQuotaExceededError
from ril.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """
    Persists every write immediately with an atomic file replace.

    A missing file reads as empty. An unreadable or corrupt file also reads
    as empty (with a warning); the next successful write replaces it.
    """

    def __init__(self, path: Path, quota_bytes: int | None = None):
        """
        Args:
            path: Location of the JSON document.
            quota_bytes: Optional upper bound on the encoded document size.
        """
        self.path = Path(path)
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read(for_update=True)
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read(for_update=True)
        if key not in items:
            return
        del items[key]
        self._write(items)

    def _read(self, for_update: bool = False) -> dict[str, str]:
        """
        Load the document.

        An unreadable file is empty for lookups, but raises StorageError when
        `for_update` is set so a write never replaces keys it could not see.
        A corrupt document is empty in both cases.
        """
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            if for_update:
                raise StorageError(f"Could not read {self.path} before writing: {e}") from e
            logger.warning(f"Could not read storage file {self.path}: {e}")
            return {}
        except UnicodeDecodeError as e:
            logger.warning(f"Ignoring undecodable storage file {self.path}: {e}")
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Could not read storage file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self.path}: expected a JSON object")
            return {}
        return data

    def _write(self, items: dict[str, str]) -> None:
        payload = json.dumps(items, indent=2, ensure_ascii=False)
        encoded = payload.encode("utf-8")

        if self.quota_bytes is not None and len(encoded) > self.quota_bytes:
            raise StorageQuotaExceededError(
                f"Storage quota of {self.quota_bytes} bytes exceeded ({len(encoded)} bytes)"
            )

        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(encoded)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
