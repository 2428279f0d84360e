# tests/test_task_manager.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from todo_manager.errors import NotFoundError, ParseError, ValidationError
from todo_manager.tasks.task_manager import TaskManager
from todo_manager.tasks.task_models import Task
from todo_manager.tasks.task_store import JsonTaskStore

from .conftest import NOW
from .fakes import FailingTaskRepo, FixedClock, InMemoryTaskRepo


def reopen(store: JsonTaskStore, clock: FixedClock) -> TaskManager:
    return TaskManager(store, clock=clock)


def test_add_creates_pending_medium_task(manager: TaskManager, store, clock) -> None:
    task = manager.add_task("  Buy milk  ")

    assert task.title == "Buy milk"
    assert task.completed is False
    assert task.priority == "medium"
    assert task.due_date is None
    assert task.created_at == NOW
    assert reopen(store, clock).find_task(task.id) == task


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_add_rejects_blank_title_without_mutation(manager: TaskManager, store, title: str) -> None:
    with pytest.raises(ValidationError):
        manager.add_task(title, "desc")

    assert len(manager) == 0
    assert not store.path.exists()


def test_add_with_bad_due_date_changes_nothing(manager: TaskManager, store) -> None:
    with pytest.raises(ParseError):
        manager.add_task("Pay rent", "", "high", "garbage")

    assert len(manager) == 0
    assert not store.path.exists()
    # The failed add did not consume an id.
    assert manager.add_task("Pay rent").id == 1


def test_add_with_unrenderable_due_date_changes_nothing(manager: TaskManager, store) -> None:
    with pytest.raises(ParseError):
        manager.add_task("x", due_date="0001-01-01T00:00:00+05:00")

    assert len(manager) == 0
    assert not store.path.exists()


def test_ids_stay_unique_across_adds_and_deletes(manager: TaskManager, store, clock) -> None:
    ids = [manager.add_task(f"task {i}").id for i in range(5)]
    manager.delete_task(ids[1])
    manager.delete_task(ids[4])
    ids += [manager.add_task(f"more {i}").id for i in range(3)]

    current = [t.id for t in manager.tasks]
    assert len(current) == len(set(current))

    reopened = reopen(store, clock)
    new_task = reopened.add_task("after restart")
    assert new_task.id not in current
    stored = [t.id for t in reopened.tasks]
    assert len(stored) == len(set(stored))


def test_rapid_adds_get_distinct_ids(manager: TaskManager) -> None:
    ids = {manager.add_task(f"burst {i}").id for i in range(200)}
    assert len(ids) == 200


def test_buy_milk_example(manager: TaskManager, store, clock) -> None:
    task = manager.add_task("Buy milk", "", "medium", None)
    assert (task.completed, task.priority, task.due_date) == (False, "medium", None)

    assert manager.complete_task(task.id) is True
    assert reopen(store, clock).find_task(task.id).completed is True

    completed = manager.list_tasks("completed")
    assert [t.id for t in completed] == [task.id]


def test_pay_rent_overdue_example(manager: TaskManager) -> None:
    task = manager.add_task("Pay rent", "", "high", "2000-01-01 00:00")

    assert [t.id for t in manager.list_tasks("overdue")] == [task.id]

    manager.complete_task(task.id)
    assert manager.list_tasks("overdue") == []


def test_overdue_filter_is_exact(manager: TaskManager, clock: FixedClock) -> None:
    late = manager.add_task("late", due_date=NOW - timedelta(hours=1))
    manager.add_task("later", due_date=NOW + timedelta(hours=1))
    manager.add_task("no deadline")
    done_late = manager.add_task("done late", due_date=NOW - timedelta(days=2))
    manager.complete_task(done_late.id)

    assert [t.id for t in manager.list_tasks("overdue")] == [late.id]

    clock.advance(hours=2)
    assert [t.title for t in manager.list_tasks("overdue")] == ["late", "later"]
    assert [t.title for t in manager.list_tasks("overdue", now=NOW)] == ["late"]


def test_complete_and_uncomplete_are_idempotent(manager: TaskManager, store, clock) -> None:
    task = manager.add_task("Toggle me")

    assert manager.uncomplete_task(task.id) is False
    assert manager.complete_task(task.id) is True
    assert manager.complete_task(task.id) is False
    assert manager.find_task(task.id).completed is True

    assert manager.uncomplete_task(task.id) is True
    assert manager.uncomplete_task(task.id) is False
    assert manager.find_task(task.id).completed is False
    assert reopen(store, clock).find_task(task.id).completed is False


def test_noop_toggle_does_not_save(clock: FixedClock) -> None:
    repo = InMemoryTaskRepo()
    manager = TaskManager(repo, clock=clock)
    task = manager.add_task("x")
    saves = repo.saves

    manager.uncomplete_task(task.id)
    assert repo.saves == saves


def test_unknown_ids_raise_not_found(manager: TaskManager) -> None:
    manager.add_task("exists")
    for op in (
        manager.find_task,
        manager.complete_task,
        manager.uncomplete_task,
        manager.delete_task,
        manager.update_task,
    ):
        with pytest.raises(NotFoundError) as exc_info:
            op(999)
        assert exc_info.value.task_id == 999


def test_delete_removes_and_persists(manager: TaskManager, store, clock) -> None:
    a = manager.add_task("a")
    b = manager.add_task("b")

    removed = manager.delete_task(a.id)

    assert removed == a
    assert [t.id for t in manager.tasks] == [b.id]
    assert [t.id for t in reopen(store, clock).tasks] == [b.id]


def test_list_filters(manager: TaskManager) -> None:
    a = manager.add_task("a")
    b = manager.add_task("b")
    manager.complete_task(a.id)

    assert [t.id for t in manager.list_tasks()] == [a.id, b.id]
    assert [t.id for t in manager.list_tasks("all")] == [a.id, b.id]
    assert [t.id for t in manager.list_tasks("completed")] == [a.id]
    assert [t.id for t in manager.list_tasks("PENDING")] == [b.id]


def test_unknown_filter_lists_everything(manager: TaskManager) -> None:
    manager.add_task("a")
    manager.add_task("b")
    assert len(manager.list_tasks("whatever")) == 2


def test_list_sorts_by_creation_time(clock: FixedClock) -> None:
    older = Task(
        id=7,
        title="older",
        description="",
        completed=False,
        priority="low",
        created_at=NOW - timedelta(days=2),
    )
    newer = replace(older, id=3, title="newer", created_at=NOW - timedelta(days=1))
    manager = TaskManager(InMemoryTaskRepo([newer, older]), clock=clock)

    assert [t.title for t in manager.list_tasks()] == ["older", "newer"]
    # Stored order is untouched.
    assert [t.title for t in manager.tasks] == ["newer", "older"]
    assert manager.add_task("next").id == 8


def test_update_replaces_given_fields(manager: TaskManager, store, clock) -> None:
    task = manager.add_task("Draft", "old", "low", "2030-01-01 09:00")

    updated = manager.update_task(
        task.id,
        title=" Final ",
        description="new",
        priority="high",
        due_date="2030-02-01 10:30",
    )

    assert updated.title == "Final"
    assert updated.description == "new"
    assert updated.priority == "high"
    assert updated.due_date is not None
    assert (updated.due_date.month, updated.due_date.hour, updated.due_date.minute) == (2, 10, 30)
    assert updated.created_at == task.created_at
    assert updated.id == task.id
    assert reopen(store, clock).find_task(task.id) == updated


def test_update_blank_values_keep_current(manager: TaskManager) -> None:
    task = manager.add_task("Keep", "me", "low", "2030-01-01")

    updated = manager.update_task(task.id, title="   ", description="", priority=None, due_date="")

    assert updated == task


def test_update_none_clears_due_date(manager: TaskManager) -> None:
    task = manager.add_task("Deadline", due_date="2030-01-01")

    assert manager.update_task(task.id, due_date="NONE").due_date is None


def test_update_with_bad_date_changes_nothing(manager: TaskManager) -> None:
    task = manager.add_task("Stable", "desc")

    with pytest.raises(ParseError):
        manager.update_task(task.id, title="Changed", due_date="garbage")

    assert manager.find_task(task.id) == task


def test_search_is_case_insensitive_in_stored_order(manager: TaskManager) -> None:
    manager.add_task("Buy MILK")
    manager.add_task("Call bank")
    manager.add_task("Groceries", "milk, eggs")

    assert [t.title for t in manager.search_tasks("milk")] == ["Buy MILK", "Groceries"]
    assert manager.search_tasks("nothing here") == []
    everything = ["Buy MILK", "Call bank", "Groceries"]
    assert [t.title for t in manager.search_tasks("   ")] == everything
    assert [t.title for t in manager.search_tasks("")] == everything


def test_stats_on_empty_store(manager: TaskManager) -> None:
    stats = manager.stats()

    assert (stats.total, stats.completed, stats.pending, stats.overdue) == (0, 0, 0, 0)
    assert stats.completion_rate is None


def test_stats_counts_and_rate(manager: TaskManager) -> None:
    a = manager.add_task("a")
    manager.add_task("b", due_date="2000-01-01")
    manager.add_task("c")
    manager.complete_task(a.id)

    stats = manager.stats()

    assert (stats.total, stats.completed, stats.pending, stats.overdue) == (3, 1, 2, 1)
    assert stats.completion_rate == 33.3


def test_clear_completed(manager: TaskManager, store, clock) -> None:
    a = manager.add_task("a")
    b = manager.add_task("b")
    c = manager.add_task("c")
    manager.complete_task(a.id)
    manager.complete_task(c.id)

    assert manager.clear_completed() == 2
    assert [t.id for t in manager.tasks] == [b.id]
    assert [t.id for t in reopen(store, clock).tasks] == [b.id]
    assert manager.clear_completed() == 0


def test_clear_completed_without_completed_tasks_does_not_save(clock: FixedClock) -> None:
    repo = InMemoryTaskRepo()
    manager = TaskManager(repo, clock=clock)
    manager.add_task("open")
    saves = repo.saves

    assert manager.clear_completed() == 0
    assert repo.saves == saves


def test_corrupt_store_starts_empty(store: JsonTaskStore, clock: FixedClock) -> None:
    store.path.write_text("{{{ definitely not json", "utf-8")

    manager = TaskManager(store, clock=clock)

    assert len(manager) == 0
    assert manager.load_error is not None
    assert manager.load_error.path == store.path

    manager.add_task("fresh start")
    assert [t.title for t in store.load_tasks()] == ["fresh start"]


def test_failed_save_leaves_memory_untouched(clock: FixedClock) -> None:
    existing = Task(
        id=1,
        title="existing",
        description="",
        completed=False,
        priority="medium",
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    manager = TaskManager(FailingTaskRepo([existing]), clock=clock)

    with pytest.raises(OSError):
        manager.add_task("new")
    with pytest.raises(OSError):
        manager.complete_task(1)
    with pytest.raises(OSError):
        manager.update_task(1, title="renamed")
    with pytest.raises(OSError):
        manager.delete_task(1)

    assert manager.tasks == (existing,)
