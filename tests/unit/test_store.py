"""Tests for storage/store.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from mailqc.errors import StorageError, StorageQuotaError
from mailqc.storage.agents import AgentRepository
from mailqc.storage.store import JsonFileStore, KeyValueStore, MemoryStore, read_json, write_json


class TestMemoryStore:
    def test_roundtrip(self):
        store = MemoryStore()
        store.set_item("a", "1")
        assert store.get_item("a") == "1"
        assert store.keys() == ["a"]
        store.remove_item("a")
        assert store.get_item("a") is None

    def test_quota(self):
        store = MemoryStore(quota_bytes=10)
        store.set_item("a", "12345")
        with pytest.raises(StorageQuotaError):
            store.set_item("b", "123456")
        # overwriting a key does not count its old value
        store.set_item("a", "1234567890")

    def test_rejects_bad_keys(self):
        with pytest.raises(ValueError):
            MemoryStore().get_item("../etc/passwd")

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStore(), KeyValueStore)


class TestJsonFileStore:
    def test_roundtrip(self, tmp_path: Path):
        store = JsonFileStore(tmp_path / "storage")
        assert store.keys() == []
        store.set_item("quality_check_agents", "[]")
        assert (tmp_path / "storage" / "quality_check_agents.json").read_text(encoding="utf-8") == "[]"
        assert store.get_item("quality_check_agents") == "[]"
        assert store.keys() == ["quality_check_agents"]

    def test_missing_key(self, tmp_path: Path):
        assert JsonFileStore(tmp_path).get_item("nope") is None

    def test_clear(self, tmp_path: Path):
        store = JsonFileStore(tmp_path)
        store.set_item("a", "1")
        store.set_item("b", "2")
        store.clear()
        assert store.keys() == []

    def test_write_failure_raises_storage_error(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileStore(blocker / "storage").set_item("a", "1")

    def test_invalid_utf8_raises_storage_error(self, tmp_path: Path):
        (tmp_path / "a.json").write_bytes(b"\"\xff\xfe\"")
        with pytest.raises(StorageError):
            JsonFileStore(tmp_path).get_item("a")

    def test_invalid_utf8_reads_as_default(self, tmp_path: Path):
        (tmp_path / "quality_check_agents.json").write_bytes(b'[{"id":"a","name":"\xff"}]')
        store = JsonFileStore(tmp_path)
        assert read_json(store, "quality_check_agents", []) == []
        assert AgentRepository(store).get_agents() == []


class TestJsonHelpers:
    def test_default_when_missing(self):
        assert read_json(MemoryStore(), "missing", []) == []

    def test_corrupt_json_returns_default(self):
        store = MemoryStore()
        store.set_item("broken", "{not json")
        assert read_json(store, "broken", {"x": 1}) == {"x": 1}

    def test_write_and_read(self):
        store = MemoryStore()
        assert write_json(store, "k", {"name": "Zoë"}) is True
        assert read_json(store, "k", None) == {"name": "Zoë"}

    def test_write_failure_returns_false(self):
        store = MemoryStore(quota_bytes=2)
        assert write_json(store, "k", ["too", "big"]) is False
        assert store.get_item("k") is None
