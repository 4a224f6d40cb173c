"""
Progress Store: tracks completed challenges and their recorded times.

All parsing and defaulting of persisted data happens here, at the storage
boundary, so malformed blobs never reach the typed ProgressRecord.
"""

import json
import logging
import math
from typing import Any

from ril.domain.constants import COMPLETED_KEY, TIMES_KEY
from ril.domain.errors import StorageError
from ril.domain.models import ProgressRecord
from ril.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    # bool is a subclass of int; JSON true/false are not ids.
    return isinstance(value, int) and not isinstance(value, bool)


def parse_completed_ids(raw: str | None) -> set[int]:
    """
    Decode the `ril-completed` value.

    Absent, unparsable or wrongly shaped data all decode to an empty set.
    """
    if raw is None:
        return set()
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning(f"Ignoring unparsable '{COMPLETED_KEY}' entry")
        return set()

    if not isinstance(data, list) or not all(_is_int(v) for v in data):
        logger.warning(f"Ignoring malformed '{COMPLETED_KEY}' entry: expected a list of ids")
        return set()
    return set(data)


def parse_completion_times(raw: str | None) -> dict[int, int]:
    """
    Decode the `ril-times` value.

    Keys are string-encoded ids, values non-negative integer seconds.
    Absent, unparsable or wrongly shaped data all decode to an empty mapping.
    """
    if raw is None:
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning(f"Ignoring unparsable '{TIMES_KEY}' entry")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring malformed '{TIMES_KEY}' entry: expected an object")
        return {}

    times: dict[int, int] = {}
    for key, seconds in data.items():
        try:
            cid = int(key)
        except ValueError:
            logger.warning(f"Ignoring malformed '{TIMES_KEY}' entry: bad id {key!r}")
            return {}
        if not _is_int(seconds) or seconds < 0:
            logger.warning(f"Ignoring malformed '{TIMES_KEY}' entry: bad time for id {cid}")
            return {}
        times[cid] = seconds
    return times


def percent_complete(completed: int, total: int) -> int:
    """Whole-number percentage, halves rounded up."""
    if total <= 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


class ProgressStore:
    """
    Owns the ProgressRecord and its durable copy.

    Every mutation is written through to the KeyValueStore before it
    returns. Write failures are logged and swallowed: the in-memory record
    stays correct for the current session, durability is best-effort.
    """

    def __init__(self, storage: KeyValueStore):
        """
        Args:
            storage: The durable key-value store (port).
        """
        self._storage = storage
        self._record = ProgressRecord()

    @classmethod
    def open(cls, storage: KeyValueStore) -> "ProgressStore":
        """Create a store and rehydrate it from `storage`."""
        store = cls(storage)
        store.load()
        return store

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> ProgressRecord:
        """
        Rehydrate from durable storage.

        Each key is decoded independently; a bad value for one key never
        discards the other.
        """
        completed = parse_completed_ids(self._storage.get_item(COMPLETED_KEY))
        times = parse_completion_times(self._storage.get_item(TIMES_KEY))

        orphans = [cid for cid in times if cid not in completed]
        if orphans:
            logger.debug(f"Dropping times for ids not marked complete: {sorted(orphans)}")
            for cid in orphans:
                del times[cid]

        self._record = ProgressRecord(completed_ids=completed, completion_times=times)
        logger.debug(
            f"Loaded progress: {len(completed)} completed, {len(times)} with times"
        )
        return self._record

    def mark_complete(self, challenge_id: int, elapsed_seconds: int | None = None) -> None:
        """
        Record `challenge_id` as completed, optionally with its elapsed time.

        Re-marking an id is a no-op for membership; a new time overwrites
        the previous one. The completed list is persisted first and the
        times map only when a time was supplied.

        Raises:
            ValueError: If `elapsed_seconds` is negative.
        """
        if elapsed_seconds is not None and elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must be non-negative, got {elapsed_seconds}")

        self._record.completed_ids.add(challenge_id)
        self._write(COMPLETED_KEY, sorted(self._record.completed_ids))

        if elapsed_seconds is not None:
            self._record.completion_times[challenge_id] = elapsed_seconds
            self._write(
                TIMES_KEY,
                {str(cid): t for cid, t in sorted(self._record.completion_times.items())},
            )

    def reset_progress(self) -> None:
        """Clear all progress and remove both storage entries."""
        self._record = ProgressRecord()
        for key in (COMPLETED_KEY, TIMES_KEY):
            try:
                self._storage.remove_item(key)
            except StorageError as e:
                logger.warning(f"Could not remove '{key}' from storage: {e}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def record(self) -> ProgressRecord:
        return self._record

    @property
    def completed_ids(self) -> frozenset[int]:
        return frozenset(self._record.completed_ids)

    @property
    def completion_times(self) -> dict[int, int]:
        return dict(self._record.completion_times)

    @property
    def completed_count(self) -> int:
        return len(self._record.completed_ids)

    def is_completed(self, challenge_id: int) -> bool:
        return challenge_id in self._record.completed_ids

    def completion_time(self, challenge_id: int) -> int | None:
        return self._record.completion_times.get(challenge_id)

    def has_stored_progress(self) -> bool:
        """True if either storage key is present, even when its value is malformed."""
        return any(self._storage.get_item(key) is not None for key in (COMPLETED_KEY, TIMES_KEY))

    def progress(self, total: int) -> int:
        """Percentage of `total` challenges completed, 0-100."""
        return percent_complete(len(self._record.completed_ids), total)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _write(self, key: str, value: Any) -> None:
        try:
            self._storage.set_item(key, json.dumps(value, separators=(",", ":")))
        except StorageError as e:
            logger.warning(f"Could not persist '{key}'; progress kept for this session only: {e}")
