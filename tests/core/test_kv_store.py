"""Tests for key-value stores."""
import json

import pytest

from devtodo.core.kv_store import FileKeyValueStore, MemoryKeyValueStore


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    """Both store implementations, so they are held to the same contract."""
    if request.param == "memory":
        return MemoryKeyValueStore()
    return FileKeyValueStore(tmp_path / "data")


class TestKeyValueStore:
    """Contract shared by all key-value stores."""

    def test_get_missing_returns_none(self, store):
        assert store.get("missing") is None

    def test_set_then_get(self, store):
        store.set("key", "value")
        assert store.get("key") == "value"

    def test_set_overwrites(self, store):
        store.set("key", "one")
        store.set("key", "two")
        assert store.get("key") == "two"

    def test_remove(self, store):
        store.set("key", "value")
        store.remove("key")
        assert store.get("key") is None

    def test_remove_missing_is_noop(self, store):
        store.remove("missing")
        assert store.keys() == []

    def test_clear(self, store):
        store.set("a", "1")
        store.set("b", "2")
        store.clear()
        assert store.keys() == []


class TestFileKeyValueStore:
    """File specific behavior."""

    def test_creates_data_dir(self, tmp_path):
        data_dir = tmp_path / "nested" / "data"
        FileKeyValueStore(data_dir)
        assert data_dir.is_dir()

    def test_persists_across_instances(self, tmp_path):
        FileKeyValueStore(tmp_path).set("key", "value")
        assert FileKeyValueStore(tmp_path).get("key") == "value"

    def test_writes_single_json_document(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("a", "1")

        with open(store.store_file) as f:
            assert json.load(f) == {"a": "1"}
        assert [p.name for p in tmp_path.iterdir()] == [store.store_file.name]

    def test_invalid_document_raises(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.store_file.write_text("[1, 2]")

        with pytest.raises(ValueError):
            store.get("a")
