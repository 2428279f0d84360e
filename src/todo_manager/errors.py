# src/todo_manager/errors.py

"""Domain errors raised by the task store and manager.

Every error here is recoverable: the command dispatcher turns it into a message and
the console loop keeps running.
"""

from __future__ import annotations

from pathlib import Path


class TodoError(Exception):
    """Base class for all todo_manager errors."""


class ValidationError(TodoError):
    """Input rejected before anything was changed (e.g. an empty title)."""


class NotFoundError(TodoError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with ID {task_id} not found.")
        self.task_id = task_id


class ParseError(TodoError):
    """A date/time string could not be understood."""

    def __init__(self, text: str, reason: str | None = None) -> None:
        msg = f"Invalid date/time: {text!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)
        self.text = text


class CorruptStoreError(TodoError):
    """The task file exists but cannot be read back as a list of tasks."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Could not parse tasks file {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
