# src/todo_manager/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from dateutil import parser as dtparser

from ..errors import ParseError

DEFAULT_PRIORITY = "medium"
KNOWN_PRIORITIES = ("high", "medium", "low")


def local_now() -> datetime:
    """Current time as an aware datetime in the local time zone."""
    return datetime.now().astimezone()


def ensure_aware(value: datetime) -> datetime:
    # Naive values are taken to be local time.
    if value.tzinfo is None:
        return value.astimezone()
    return value


def parse_datetime(text: str) -> datetime:
    """
    Parse a user-supplied date/time string.

    Accepts anything python-dateutil understands: "2024-05-01", "2024-05-01 18:30",
    "May 1 2024 6pm", ISO-8601 with an offset. A missing time means midnight.
    """
    raw = (text or "").strip()
    if not raw:
        raise ParseError(text, "empty value")
    try:
        parsed = dtparser.parse(raw)
    except (dtparser.ParserError, ValueError, OverflowError) as e:
        raise ParseError(raw, str(e)) from e
    return _checked_aware(parsed, raw)


def _checked_aware(value: datetime, text: str) -> datetime:
    # Dates near year 1 or 9999 may not survive the shift to local time,
    # and every list/search render needs that shift.
    try:
        aware = ensure_aware(value)
        aware.astimezone()
    except (ValueError, OverflowError) as e:
        raise ParseError(text, str(e)) from e
    return aware


def parse_due_date(value: str | datetime | None) -> datetime | None:
    """Blank or None means "no deadline"."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return _checked_aware(value, value.isoformat())
    if not value.strip():
        return None
    return parse_datetime(value)


class TaskFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    OVERDUE = "overdue"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    description: str
    completed: bool
    priority: str
    created_at: datetime
    due_date: datetime | None = None

    def is_overdue(self, now: datetime) -> bool:
        return self.due_date is not None and self.due_date < now and not self.completed

    def matches(self, task_filter: TaskFilter, now: datetime) -> bool:
        if task_filter is TaskFilter.COMPLETED:
            return self.completed
        if task_filter is TaskFilter.PENDING:
            return not self.completed
        if task_filter is TaskFilter.OVERDUE:
            return self.is_overdue(now)
        return True


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int
    # None when there are no tasks at all.
    completion_rate: float | None
