# src/todo_manager/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from ..errors import CorruptStoreError
from .task_models import DEFAULT_PRIORITY, Task, ensure_aware

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    JSON file task store.

    The whole list is written on every save and read back in one go on load:
    - a missing file is an empty store
    - anything that does not parse back into tasks raises CorruptStoreError
    - saves go to a sibling temp file first and are moved into place with os.replace,
      so a crash mid-write leaves the previous file intact

    No locking: two processes sharing one file are last-writer-wins.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- serialization helpers ----

    @staticmethod
    def _dt_to_str(value: datetime | None) -> str | None:
        return value.isoformat() if value is not None else None

    @staticmethod
    def _str_to_dt(raw: Any) -> datetime:
        if not isinstance(raw, str):
            raise ValueError(f"expected ISO-8601 string, got {type(raw).__name__}")
        return ensure_aware(datetime.fromisoformat(raw))

    def _task_to_record(self, task: Task) -> dict[str, Any]:
        return {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "completed": task.completed,
            "priority": task.priority,
            "created_at": self._dt_to_str(task.created_at),
            "due_date": self._dt_to_str(task.due_date),
        }

    @staticmethod
    def _typed(raw: dict[str, Any], key: str, kind: type, default: Any = None) -> Any:
        # Missing or null takes the default; required fields have none.
        value = raw.get(key)
        if value is None:
            if default is None:
                raise KeyError(key)
            return default
        # bool is an int subclass; ids must not be true/false.
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            raise TypeError(f"{key} must be {kind.__name__}, got {type(value).__name__}")
        return value

    def _record_to_task(self, raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise ValueError(f"task record must be an object, got {type(raw).__name__}")
        due_raw = raw.get("due_date")
        return Task(
            id=self._typed(raw, "id", int),
            title=self._typed(raw, "title", str),
            description=self._typed(raw, "description", str, ""),
            completed=self._typed(raw, "completed", bool, False),
            priority=self._typed(raw, "priority", str, DEFAULT_PRIORITY) or DEFAULT_PRIORITY,
            created_at=self._str_to_dt(raw.get("created_at")),
            due_date=self._str_to_dt(due_raw) if due_raw is not None else None,
        )

    # ---- public API ----

    def load_tasks(self) -> list[Task]:
        if not self._path.exists():
            logger.debug("No tasks file at %s; starting empty.", self._path)
            return []

        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptStoreError(self._path, str(e)) from e

        if not isinstance(data, list):
            raise CorruptStoreError(self._path, "top-level value must be a list")

        tasks: list[Task] = []
        for i, item in enumerate(data):
            try:
                tasks.append(self._record_to_task(item))
            except (KeyError, TypeError, ValueError) as e:
                raise CorruptStoreError(self._path, f"record #{i}: {e!r}") from e

        seen: set[int] = set()
        for task in tasks:
            if task.id in seen:
                raise CorruptStoreError(self._path, f"duplicate task id {task.id}")
            seen.add(task.id)

        logger.debug("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save_tasks(self, tasks: Sequence[Task]) -> None:
        payload = [self._task_to_record(t) for t in tasks]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        logger.debug("Saved %d tasks to %s", len(payload), self._path)
