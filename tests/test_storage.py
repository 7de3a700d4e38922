import json
import os

import pytest

import storage
from errors import CorruptStore


def test_write_then_read(db_path):
    items = [{"__backendId": "b-1-0", "item_name": "Widget ✓"}]
    storage.write_document(db_path, items)
    assert storage.read_document(db_path) == items
    assert not os.path.exists(storage.tmp_path_for(db_path))


def test_write_creates_parent_directory(tmp_path):
    path = str(tmp_path / "nested" / "dir" / "db.json")
    storage.write_document(path, [])
    assert storage.read_document(path) == []


def test_read_missing_file(db_path):
    with pytest.raises(FileNotFoundError):
        storage.read_document(db_path)


@pytest.mark.parametrize("content", [
    "{not json",
    "[]",
    '{"items": "not-an-array"}',
    '{"other": []}',
    '{"items": [1, 2]}',
])
def test_read_rejects_malformed_documents(db_path, content):
    with open(db_path, "w", encoding="utf-8") as f:
        f.write(content)
    with pytest.raises(CorruptStore):
        storage.read_document(db_path)


def test_failed_rename_keeps_previous_document(db_path, monkeypatch):
    storage.write_document(db_path, [{"item_id": "old"}])

    def broken_replace(src, dst):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(storage.os, "replace", broken_replace)
    with pytest.raises(OSError):
        storage.write_document(db_path, [{"item_id": "new"}])

    monkeypatch.undo()
    with open(db_path, encoding="utf-8") as f:
        assert json.load(f) == {"items": [{"item_id": "old"}]}
    assert not os.path.exists(storage.tmp_path_for(db_path))


def test_stat_stamp(db_path):
    assert storage.stat_stamp(db_path) is None
    storage.write_document(db_path, [])
    first = storage.stat_stamp(db_path)
    storage.write_document(db_path, [{"item_id": "I1", "item_name": "Widget"}])
    assert storage.stat_stamp(db_path) != first
