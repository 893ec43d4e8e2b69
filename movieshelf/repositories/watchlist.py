from __future__ import annotations

import json
import logging
import threading

from movieshelf.models.display import DisplayRecord, is_record_id
from movieshelf.storage.kv import KeyValueStore, StoreError, get_store

logger = logging.getLogger(__name__)

WATCHLIST_KEY = "list"


class WatchlistCorruptError(ValueError):
    pass


def serialize_watchlist(records: list[DisplayRecord]) -> str:
    return json.dumps([record.to_dict() for record in records])


def deserialize_watchlist(raw: str) -> list[DisplayRecord]:
    """
    Parse a stored watchlist value.

    Raises `WatchlistCorruptError` when the value is not a JSON array. Entries that are
    not valid records are logged and skipped; the remaining entries are kept.
    """

    try:
        payload = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise WatchlistCorruptError(f"Watchlist is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise WatchlistCorruptError(f"Watchlist must be a JSON array, got {type(payload).__name__}.")
    records: list[DisplayRecord] = []
    for index, item in enumerate(payload):
        try:
            records.append(DisplayRecord.from_dict(item))
        except ValueError as exc:
            logger.warning(f"Skipping invalid watchlist entry at index {index}: {exc}")
    return records


class WatchlistRepository:
    """
    The user's saved titles, unique by `id`, stored as one JSON array under a fixed key.

    Read-modify-write calls are serialized per instance. Other processes writing the
    same backing store are not coordinated, so concurrent writers can drop each
    other's additions (last writer wins).
    """

    def __init__(self, store: KeyValueStore | None = None, *, key: str = WATCHLIST_KEY) -> None:
        self.store = store or get_store()
        self.key = key
        self._lock = threading.Lock()

    def _load_for_update(self) -> list[DisplayRecord]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        try:
            return deserialize_watchlist(raw)
        except WatchlistCorruptError as exc:
            logger.error(f"Discarding corrupt watchlist under {self.key!r}: {exc}")
            try:
                self.store.delete(self.key)
            except StoreError as delete_exc:
                logger.error(f"Error erasing the corrupt watchlist: {delete_exc}")
            return []

    def _save(self, records: list[DisplayRecord]) -> bool:
        try:
            self.store.set(self.key, serialize_watchlist(records))
        except StoreError as exc:
            logger.error(f"Error saving the watchlist: {exc}")
            return False
        return True

    def add(self, record: DisplayRecord) -> bool:
        """
        Append `record` unless an entry with the same id is already saved.

        Returns True only when the record was added and persisted. An existing entry
        is left untouched even if the new record's fields differ. Records without an
        integer id are refused.
        """

        if not is_record_id(record.id):
            logger.error(f"Refusing to save a watchlist record without an integer id: {record.id!r}")
            return False
        with self._lock:
            records = self._load_for_update()
            if any(existing.id == record.id for existing in records):
                logger.info(f"Record {record.id} already exists in the watchlist.")
                return False
            records.append(record)
            if not self._save(records):
                return False
        logger.info(f"Added record {record.id} to the watchlist.")
        return True

    def get_list(self) -> list[DisplayRecord]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        try:
            return deserialize_watchlist(raw)
        except WatchlistCorruptError as exc:
            logger.error(f"Error parsing the watchlist under {self.key!r}: {exc}")
            return []

    def contains(self, record_id: int) -> bool:
        return any(record.id == record_id for record in self.get_list())

    def remove(self, record_id: int) -> bool:
        """Drop the entry with `record_id`. Returns True when an entry was removed and persisted."""
        with self._lock:
            records = self._load_for_update()
            remaining = [record for record in records if record.id != record_id]
            if len(remaining) == len(records):
                return False
            return self._save(remaining)
