# src/todo_manager/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

TaskManager depends on these Protocols instead of the JSON store and the wall clock,
so tests can swap in in-memory repos and fixed clocks.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Protocol

from ..tasks.task_models import Task

Clock = Callable[[], datetime]
# Returns the current time as an aware datetime.


class TaskRepo(Protocol):
    """Whole-collection persistence: no state is kept between calls."""

    def load_tasks(self) -> list[Task]: ...
    def save_tasks(self, tasks: Sequence[Task]) -> None: ...
