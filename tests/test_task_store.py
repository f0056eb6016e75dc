# tests/test_task_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskledger.core.errors import TaskNotFound
from taskledger.tasks.task_models import Task
from taskledger.tasks.task_store import TaskStore


def test_allocate_starts_at_one_and_increases(store: TaskStore) -> None:
    assert store.total_count() == 0
    assert store.allocate() == 1
    assert store.allocate() == 2
    assert store.total_count() == 2
    # allocation alone does not create a live task
    assert store.count_live() == 0
    assert not store.exists(1)


def test_put_get_and_upsert(store: TaskStore) -> None:
    task_id = store.allocate()
    store.put(task_id, title="t", description="d", completed=False)
    assert store.get(task_id) == Task(id=task_id, title="t", description="d", completed=False)

    store.put(task_id, title="t2", description="d2", completed=True)
    assert store.get(task_id) == Task(id=task_id, title="t2", description="d2", completed=True)
    assert store.count_live() == 1


def test_empty_fields_are_still_a_live_task(store: TaskStore) -> None:
    task_id = store.allocate()
    store.put(task_id, title="", description="", completed=False)

    assert store.exists(task_id)
    assert store.get(task_id).title == ""
    assert [t.id for t in store.list_all()] == [task_id]


def test_get_and_remove_missing_raise(store: TaskStore) -> None:
    with pytest.raises(TaskNotFound) as exc:
        store.get(42)
    assert exc.value.task_id == 42

    with pytest.raises(TaskNotFound):
        store.remove(42)

    assert store.exists(42) is False


def test_remove_clears_record(store: TaskStore) -> None:
    task_id = store.allocate()
    store.put(task_id, title="x", description="y", completed=True)

    store.remove(task_id)

    assert not store.exists(task_id)
    with pytest.raises(TaskNotFound):
        store.get(task_id)
    with pytest.raises(TaskNotFound):
        store.remove(task_id)
    # high-water mark is not decremented
    assert store.total_count() == 1


def test_list_all_is_ascending_and_compact(store: TaskStore) -> None:
    ids = []
    for name in ("A", "B", "C"):
        task_id = store.allocate()
        store.put(task_id, title=name, description="", completed=False)
        ids.append(task_id)

    store.remove(ids[1])

    assert [t.title for t in store.list_all()] == ["A", "C"]
    assert store.count_live() == 2
    assert store.total_count() == 3


def test_counter_and_records_survive_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    first = TaskStore(db)
    a = first.allocate()
    first.put(a, title="keep", description="", completed=False)
    b = first.allocate()
    first.put(b, title="gone", description="", completed=False)
    first.remove(b)

    reopened = TaskStore(db)
    assert reopened.get(a).title == "keep"
    # deleted ids are never handed out again
    assert reopened.allocate() == b + 1


def test_owner_slot(store: TaskStore) -> None:
    assert store.load_owner() is None
    store.save_owner("alice")
    assert store.load_owner() == "alice"
    store.save_owner("bob")
    assert store.load_owner() == "bob"


def test_insert_new_allocates_and_writes_together(store: TaskStore) -> None:
    task_id = store.insert_new(title="t", description="d")

    assert task_id == 1
    assert store.get(task_id) == Task(id=1, title="t", description="d", completed=False)
    assert store.total_count() == 1


def test_failed_insert_does_not_consume_an_id(store: TaskStore) -> None:
    # a lone surrogate cannot be encoded for SQLite, so the insert fails
    with pytest.raises(UnicodeEncodeError):
        store.insert_new(title="\ud800", description="")

    assert store.total_count() == 0
    assert store.count_live() == 0
    assert store.insert_new(title="ok", description="") == 1


@pytest.mark.parametrize("task_id", [2**63, 10**20, -(2**63) - 1])
def test_ids_outside_sqlite_range_are_absent(store: TaskStore, task_id: int) -> None:
    assert store.exists(task_id) is False
    with pytest.raises(TaskNotFound):
        store.get(task_id)
    with pytest.raises(TaskNotFound):
        store.remove(task_id)
