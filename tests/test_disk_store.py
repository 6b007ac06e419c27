from __future__ import annotations

import json

import pytest

import persistence.disk_store as disk_store
from json_store import InvalidJsonDocument, atomic_write_json, read_json
from persistence.disk_store import DiskJsonDocumentStore, InMemoryDocumentStore
from persistence.errors import PersistenceError, StoreAccessError


def test_read_json_missing_empty_and_invalid(tmp_path):
    p = tmp_path / "doc.json"
    assert read_json(p) is None
    p.write_text("   \n", encoding="utf-8")
    assert read_json(p) is None
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidJsonDocument):
        read_json(p)


def test_atomic_write_json_leaves_no_temp_file(tmp_path):
    p = tmp_path / "nested" / "doc.json"
    atomic_write_json(p, {"b": 1, "a": [1, 2]})
    assert json.loads(p.read_text(encoding="utf-8")) == {"a": [1, 2], "b": 1}
    assert not (tmp_path / "nested" / "doc.json.tmp").exists()


def test_disk_store_is_lazy_and_staged_values_are_invisible_until_saved(data_dir):
    path = data_dir / "voice_commands.json"
    store = DiskJsonDocumentStore("voice_commands", path)
    assert store.get("command_history") is None
    assert not path.exists()

    store.set("command_history", [{"id": "1"}])
    assert store.get("command_history") is None

    store.save()
    assert store.get("command_history") == [{"id": "1"}]
    assert json.loads(path.read_text(encoding="utf-8")) == {"command_history": [{"id": "1"}]}


def test_disk_store_keeps_other_slots_and_is_shared_across_handles(data_dir):
    path = data_dir / "document_cache.json"
    path.write_text(json.dumps({"other": 1}), encoding="utf-8")

    a = DiskJsonDocumentStore("document_cache", path)
    b = DiskJsonDocumentStore("document_cache", path)
    assert a.lock is b.lock

    a.set("scans", [])
    a.save()
    assert b.get("scans") == []
    assert b.get("other") == 1


def test_disk_store_reads_invalid_or_non_object_documents_as_empty(data_dir):
    path = data_dir / "accessibility.json"
    store = DiskJsonDocumentStore("accessibility", path)

    path.write_text("{broken", encoding="utf-8")
    assert store.get("accessibility_settings") is None

    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert store.get("accessibility_settings") is None

    store.set("accessibility_settings", {"high_contrast": True})
    store.save()
    assert store.get("accessibility_settings") == {"high_contrast": True}


def test_disk_store_read_failure_is_store_access_error(data_dir):
    path = data_dir / "voice_commands.json"
    path.mkdir()
    store = DiskJsonDocumentStore("voice_commands", path)
    with pytest.raises(StoreAccessError) as exc:
        store.get("command_history")
    assert exc.value.namespace == "voice_commands"


def test_disk_store_failed_save_keeps_previous_document(data_dir, monkeypatch):
    path = data_dir / "document_cache.json"
    store = DiskJsonDocumentStore("document_cache", path)
    store.set("scans", [{"id": "A"}])
    store.save()

    def _boom(*args, **kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(disk_store, "atomic_write_json", _boom)
    store.set("scans", [{"id": "A"}, {"id": "B"}])
    with pytest.raises(PersistenceError) as exc:
        store.save()
    assert "No space left on device" in str(exc.value)

    monkeypatch.undo()
    assert store.get("scans") == [{"id": "A"}]
    # the failed value was dropped, not left staged for the next save
    store.save()
    assert store.get("scans") == [{"id": "A"}]


def test_in_memory_store_returns_copies_and_discards():
    store = InMemoryDocumentStore("scratch")
    store.set("items", [1])
    store.save()

    got = store.get("items")
    got.append(2)
    assert store.get("items") == [1]

    store.set("items", [9])
    store.discard()
    store.save()
    assert store.get("items") == [1]
