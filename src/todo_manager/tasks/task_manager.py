# src/todo_manager/tasks/task_manager.py

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime

from ..core.ports import Clock, TaskRepo
from ..errors import CorruptStoreError, NotFoundError, ValidationError
from .task_models import (
    DEFAULT_PRIORITY,
    Task,
    TaskFilter,
    TaskStats,
    local_now,
    parse_datetime,
    parse_due_date,
)

logger = logging.getLogger(__name__)

CLEAR_DUE_DATE = "none"


class TaskManager:
    """
    In-memory task collection backed by a TaskRepo.

    Tasks are kept in insertion order. Every mutation builds the new list first,
    saves it, and only then replaces the current list: if the save raises, the
    manager still holds exactly what it held before the call.

    Ids come from a counter seeded with max(existing id) + 1 on load, so they never
    collide within a run. The highest id may be handed out again after a restart if
    that task was deleted; ids are still unique among stored tasks at all times.
    """

    def __init__(self, store: TaskRepo, *, clock: Clock | None = None) -> None:
        self._store = store
        self._clock: Clock = clock or local_now
        self.load_error: CorruptStoreError | None = None

        try:
            tasks = store.load_tasks()
        except CorruptStoreError as e:
            # The next save overwrites the unreadable file.
            logger.warning("%s. Starting with an empty task list.", e)
            self.load_error = e
            tasks = []

        self._tasks: list[Task] = list(tasks)
        self._next_id = max((t.id for t in self._tasks), default=0) + 1
        logger.info("TaskManager ready total=%s next_id=%s", len(self._tasks), self._next_id)

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def now(self) -> datetime:
        return self._clock()

    # ---- low-level helpers ----

    def _commit(self, new_tasks: list[Task]) -> None:
        self._store.save_tasks(new_tasks)
        self._tasks = new_tasks

    def _index_of(self, task_id: int) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(task_id)

    def _replace_at(self, index: int, task: Task) -> None:
        new_tasks = list(self._tasks)
        new_tasks[index] = task
        self._commit(new_tasks)

    def _set_completed(self, task_id: int, completed: bool) -> bool:
        i = self._index_of(task_id)
        task = self._tasks[i]
        if task.completed == completed:
            logger.debug("Task %s already completed=%s; nothing to do.", task_id, completed)
            return False
        self._replace_at(i, dataclasses.replace(task, completed=completed))
        logger.info("Task %s completed=%s", task_id, completed)
        return True

    # ---- public API ----

    def add_task(
        self,
        title: str,
        description: str = "",
        priority: str | None = None,
        due_date: str | datetime | None = None,
    ) -> Task:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Task title cannot be empty.")

        task = Task(
            id=self._next_id,
            title=title,
            description=(description or "").strip(),
            completed=False,
            priority=(priority or "").strip() or DEFAULT_PRIORITY,
            created_at=self._clock(),
            due_date=parse_due_date(due_date),
        )
        self._commit([*self._tasks, task])
        self._next_id += 1
        logger.info("Task added id=%s priority=%s due=%s", task.id, task.priority, task.due_date)
        return task

    def find_task(self, task_id: int) -> Task:
        return self._tasks[self._index_of(task_id)]

    def list_tasks(self, task_filter: str = "all", *, now: datetime | None = None) -> list[Task]:
        flt = TaskFilter.from_raw(task_filter)
        if flt is TaskFilter.ALL and task_filter and task_filter.strip().lower() != "all":
            logger.warning("Unknown task filter %r; listing all tasks.", task_filter)
        now = now or self._clock()
        selected = [t for t in self._tasks if t.matches(flt, now)]
        return sorted(selected, key=lambda t: t.created_at)

    def complete_task(self, task_id: int) -> bool:
        return self._set_completed(task_id, True)

    def uncomplete_task(self, task_id: int) -> bool:
        return self._set_completed(task_id, False)

    def delete_task(self, task_id: int) -> Task:
        i = self._index_of(task_id)
        removed = self._tasks[i]
        self._commit(self._tasks[:i] + self._tasks[i + 1 :])
        logger.info("Task deleted id=%s", task_id)
        return removed

    def update_task(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        priority: str | None = None,
        due_date: str | None = None,
    ) -> Task:
        """
        Update the given fields; None or blank keeps the current value.

        due_date="none" (any case) clears the deadline. Invalid date text raises
        ParseError before anything is changed.
        """
        i = self._index_of(task_id)
        task = self._tasks[i]
        changes: dict[str, object] = {}

        if title is not None and title.strip():
            changes["title"] = title.strip()
        if description is not None and description.strip():
            changes["description"] = description.strip()
        if priority is not None and priority.strip():
            changes["priority"] = priority.strip()
        if due_date is not None and due_date.strip():
            if due_date.strip().lower() == CLEAR_DUE_DATE:
                changes["due_date"] = None
            else:
                changes["due_date"] = parse_datetime(due_date)

        if not changes:
            return task

        updated = dataclasses.replace(task, **changes)
        self._replace_at(i, updated)
        logger.info("Task updated id=%s fields=%s", task_id, sorted(changes))
        return updated

    def search_tasks(self, query: str) -> list[Task]:
        """Case-insensitive substring match; a blank query matches every task."""
        needle = (query or "").strip().lower()
        return [
            t
            for t in self._tasks
            if needle in t.title.lower() or needle in t.description.lower()
        ]

    def stats(self, *, now: datetime | None = None) -> TaskStats:
        now = now or self._clock()
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        overdue = sum(1 for t in self._tasks if t.is_overdue(now))
        rate = round(completed / total * 100, 1) if total else None
        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            overdue=overdue,
            completion_rate=rate,
        )

    def clear_completed(self) -> int:
        kept = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(kept)
        if removed:
            self._commit(kept)
            logger.info("Cleared %d completed tasks", removed)
        return removed

