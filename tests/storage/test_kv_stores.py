from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import redis

from movieshelf.storage import kv


@pytest.fixture(autouse=True)
def _reset_singleton():
    kv.reset_store()
    yield
    kv.reset_store()


class TestInMemoryStore:
    def test_get_set_delete(self) -> None:
        store = kv.InMemoryStore()
        assert store.get("list") is None
        store.set("list", "[]")
        assert store.get("list") == "[]"
        store.delete("list")
        store.delete("list")
        assert store.get("list") is None


class TestJsonFileStore:
    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "storage.json"
        kv.JsonFileStore(path).set("list", '[{"id": 1}]')

        assert kv.JsonFileStore(path).get("list") == '[{"id": 1}]'
        assert json.loads(path.read_text(encoding="utf-8")) == {"list": '[{"id": 1}]'}

    def test_delete_keeps_other_keys(self, tmp_path: Path) -> None:
        store = kv.JsonFileStore(tmp_path / "storage.json")
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == "2"

    def test_unreadable_file_reads_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        store = kv.JsonFileStore(path)

        assert store.get("list") is None
        store.set("list", "[]")
        assert store.get("list") == "[]"

    def test_write_failure_raises_store_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = kv.JsonFileStore(blocker / "storage.json")

        with pytest.raises(kv.StoreError):
            store.set("list", "[]")


class TestRedisStore:
    def test_delegates_to_client(self) -> None:
        client = MagicMock()
        client.get.return_value = "[]"
        store = kv.RedisStore("redis://localhost:6379/0", client=client)

        assert store.get("list") == "[]"
        store.set("list", "[1]")
        store.delete("list")

        client.get.assert_called_once_with("list")
        client.set.assert_called_once_with("list", "[1]")
        client.delete.assert_called_once_with("list")

    def test_decodes_bytes(self) -> None:
        client = MagicMock()
        client.get.return_value = b"[]"
        assert kv.RedisStore("redis://x", client=client).get("list") == "[]"

    def test_redis_errors_become_store_errors(self) -> None:
        client = MagicMock()
        client.set.side_effect = redis.ConnectionError("down")
        store = kv.RedisStore("redis://x", client=client)

        with pytest.raises(kv.StoreError, match="down"):
            store.set("list", "[]")


def test_get_store_prefers_redis(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(kv, "load_env", lambda **kwargs: None)
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

    store = kv.get_store()

    assert isinstance(store, kv.RedisStore)
    assert kv.get_store() is store


def test_get_store_falls_back_to_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(kv, "load_env", lambda **kwargs: None)
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("MOVIESHELF_STORAGE_PATH", str(tmp_path / "store.json"))

    store = kv.get_store()

    assert isinstance(store, kv.JsonFileStore)
    assert store.path == tmp_path / "store.json"


def test_overwriting_unreadable_file_keeps_a_backup(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "storage.json"
    path.write_text('{"list": "[1]", "other": "x"', encoding="utf-8")
    store = kv.JsonFileStore(path)

    store.set("list", "[]")

    backup = tmp_path / "storage.json.bak"
    assert backup.read_text(encoding="utf-8") == '{"list": "[1]", "other": "x"'
    assert json.loads(path.read_text(encoding="utf-8")) == {"list": "[]"}
    assert any(r.levelname == "ERROR" and "storage.json.bak" in r.getMessage() for r in caplog.records)
