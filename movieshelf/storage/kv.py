"""
Key-value store abstraction for persisted client state.

Uses Redis when REDIS_URL is set, otherwise a JSON file on local disk
(MOVIESHELF_STORAGE_PATH, default ~/.movieshelf/storage.json).
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import redis

from movieshelf.utils.env import get_redis_url, get_storage_path, load_env

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a backend cannot persist or erase a value."""


class KeyValueStore(ABC):
    """String-valued key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""


class InMemoryStore(KeyValueStore):
    """
    Process-local store for tests and local development.

    Values do not survive a restart.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    All keys live in one JSON object file: `{"<key>": "<value>", ...}`.

    Writes replace the file atomically (temp file + rename).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self, *, for_write: bool = False) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            return self._unreadable(f"unreadable ({exc})", for_write=for_write)
        if not isinstance(raw, dict):
            return self._unreadable("not a JSON object", for_write=for_write)
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _unreadable(self, reason: str, *, for_write: bool) -> dict[str, str]:
        if not for_write:
            logger.warning(f"Ignoring store file {self.path}: {reason}")
            return {}
        # The next write replaces the file, so keep the previous contents aside first.
        backup = self.path.with_name(f"{self.path.name}.bak")
        try:
            shutil.copy2(self.path, backup)
        except OSError as exc:
            raise StoreError(f"Store file {self.path} is {reason} and could not be backed up: {exc}") from exc
        logger.error(f"Store file {self.path} is {reason}; previous contents saved to {backup}, starting empty")
        return {}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"Failed to write {self.path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all(for_write=True)
            data[key] = value
            self._write_all(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read_all(for_write=True)
            if data.pop(key, None) is not None:
                self._write_all(data)


class RedisStore(KeyValueStore):
    """
    Redis-backed store for deployments where several processes share state.
    """

    def __init__(self, redis_url: str, *, client: Any = None) -> None:
        self._redis_url = redis_url
        self._redis: Any = client

    def _client(self) -> Any:
        if self._redis is None:
            self._redis = redis.Redis.from_url(self._redis_url, decode_responses=True)
            logger.info(f"RedisStore connected to {self._redis_url}")
        return self._redis

    def _call(self, op: str, *args: Any) -> Any:
        try:
            return getattr(self._client(), op)(*args)
        except redis.RedisError as exc:
            raise StoreError(f"Redis {op} failed: {exc}") from exc

    def get(self, key: str) -> str | None:
        value = self._call("get", key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        self._call("set", key, value)

    def delete(self, key: str) -> None:
        self._call("delete", key)


# --- Singleton store instance ---

_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """
    Get the store singleton.

    Uses Redis if REDIS_URL is set, otherwise the JSON file store.
    """
    global _store
    if _store is None:
        load_env()
        redis_url = get_redis_url()
        if redis_url:
            _store = RedisStore(redis_url)
        else:
            path = get_storage_path()
            logger.info(f"Using JSON file store at {path}")
            _store = JsonFileStore(path)
    return _store


def reset_store() -> None:
    global _store
    _store = None
