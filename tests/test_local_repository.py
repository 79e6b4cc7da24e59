"""
Tests for key/value storage media and the local task repository.
"""

import json
from datetime import datetime, timezone

import pytest

from taskpad.core.constants import Priority, STORAGE_KEY
from taskpad.core.exceptions import NoSavedTasksError, StorageError
from taskpad.core.models import Task, TaskQuery
from taskpad.core.repository import LocalTaskRepository
from taskpad.core.storage import FileKeyValueStore, MemoryKeyValueStore


def make_task(task_id, title, minute=0, **kwargs):
    return Task(
        id=task_id,
        title=title,
        created_at=datetime(2025, 1, 1, 9, minute, tzinfo=timezone.utc),
        **kwargs,
    )


# --- FileKeyValueStore ---


def test_file_store_missing_file_is_empty(tmp_path):
    store = FileKeyValueStore(tmp_path / "nope" / "storage.json")
    assert store.get("tasks") is None


def test_file_store_set_then_get(tmp_path):
    """Values survive a fresh store instance on the same file."""
    path = tmp_path / "data" / "storage.json"
    FileKeyValueStore(path).set("tasks", "[]")
    FileKeyValueStore(path).set("other", "x")

    reopened = FileKeyValueStore(path)
    assert reopened.get("tasks") == "[]"
    assert reopened.get("other") == "x"
    assert json.loads(path.read_text(encoding="utf-8")) == {"tasks": "[]", "other": "x"}


def test_file_store_leaves_no_temp_files(tmp_path):
    path = tmp_path / "kv" / "storage.json"
    store = FileKeyValueStore(path)
    store.set("tasks", "[]")
    store.set("tasks", "[1]")

    assert [p.name for p in path.parent.iterdir()] == ["storage.json"]


def test_file_store_corrupt_file_raises_on_read(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        FileKeyValueStore(path).get("tasks")


def test_file_store_corrupt_file_is_replaced_on_write(tmp_path):
    """A write recovers from a corrupt file instead of failing forever."""
    path = tmp_path / "storage.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    store = FileKeyValueStore(path)

    store.set("tasks", "[]")

    assert store.get("tasks") == "[]"


def test_file_store_non_string_value(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"tasks": [1, 2]}), encoding="utf-8")

    with pytest.raises(StorageError):
        FileKeyValueStore(path).get("tasks")


# --- LocalTaskRepository ---


def test_local_load_without_saved_data():
    """Nothing stored yet is its own error so the store can start quietly."""
    repo = LocalTaskRepository(MemoryKeyValueStore())

    with pytest.raises(NoSavedTasksError):
        repo.load_all()


def test_local_save_and_load_preserves_order():
    storage = MemoryKeyValueStore()
    repo = LocalTaskRepository(storage)
    tasks = [
        make_task("b", "Second", minute=5, priority=Priority.HIGH),
        make_task("a", "First", minute=1),
    ]

    repo.save_all(tasks)

    assert [t.id for t in repo.load_all()] == ["b", "a"]
    stored = json.loads(storage.get(STORAGE_KEY))
    assert stored[0]["id"] == "b"
    assert stored[0]["priority"] == "high"
    assert stored[0]["dueDate"] == ""


def test_local_load_with_query():
    repo = LocalTaskRepository(MemoryKeyValueStore())
    repo.save_all([
        make_task("a", "Old", minute=1),
        make_task("b", "New", minute=2),
    ])

    tasks = repo.load_all(TaskQuery.from_input(sort_field="createdAt", direction="desc"))

    assert [t.id for t in tasks] == ["b", "a"]


def test_local_load_malformed_json():
    repo = LocalTaskRepository(MemoryKeyValueStore({STORAGE_KEY: "{oops"}))

    with pytest.raises(StorageError) as exc:
        repo.load_all()
    assert not isinstance(exc.value, NoSavedTasksError)


def test_local_load_wrong_shape():
    repo = LocalTaskRepository(MemoryKeyValueStore({STORAGE_KEY: '{"id": "a"}'}))

    with pytest.raises(StorageError):
        repo.load_all()


def test_local_load_invalid_record():
    document = json.dumps([{"id": "a", "title": "x", "createdAt": "2025-01-01", "priority": "urgent"}])
    repo = LocalTaskRepository(MemoryKeyValueStore({STORAGE_KEY: document}))

    with pytest.raises(StorageError):
        repo.load_all()


def test_local_hooks_write_whole_collection():
    """Every hook persists the full collection it is given."""
    storage = MemoryKeyValueStore()
    repo = LocalTaskRepository(storage)
    a = make_task("a", "A")
    b = make_task("b", "B", minute=1)

    assert repo.on_add(b, [a, b]) is b
    assert len(json.loads(storage.get(STORAGE_KEY))) == 2

    repo.on_remove("a", [b])
    assert [r["id"] for r in json.loads(storage.get(STORAGE_KEY))] == ["b"]
