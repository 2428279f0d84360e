# src/todo_manager/cli/formatting.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from ..tasks.task_models import KNOWN_PRIORITIES, Task, TaskStats

TIME_FMT = "%Y-%m-%d %H:%M"
RULE_WIDE = "=" * 80
RULE_NARROW = "-" * 50


def fmt_time(value: datetime) -> str:
    try:
        return value.astimezone().strftime(TIME_FMT)
    except (ValueError, OverflowError):
        # Out-of-range values from a hand-edited file are shown as stored.
        return value.isoformat(sep=" ", timespec="minutes")


def priority_tag(priority: str) -> str:
    """Known priorities as "(high)"; anything else stands out as "(?urgent)"."""
    p = priority.strip().lower()
    if p in KNOWN_PRIORITIES:
        return f"({p})"
    return f"(?{p})"


def status_mark(task: Task) -> str:
    return "[x]" if task.completed else "[ ]"


def format_task(task: Task, now: datetime, *, index: int | None = None, details: bool = True) -> str:
    prefix = f"{index}. " if index is not None else ""
    overdue = "  OVERDUE" if task.is_overdue(now) else ""
    lines = [f"{prefix}{status_mark(task)} [{task.id}] {priority_tag(task.priority)} {task.title}{overdue}"]
    if task.description:
        lines.append(f"   {task.description}")
    if details:
        lines.append(f"   Created: {fmt_time(task.created_at)}")
        if task.due_date is not None:
            lines.append(f"   Due: {fmt_time(task.due_date)}")
    return "\n".join(lines)


def format_task_list(tasks: Iterable[Task], now: datetime, title: str) -> str:
    items = list(tasks)
    lines = [RULE_WIDE, f"{title} ({len(items)})", RULE_WIDE]
    for i, task in enumerate(items, start=1):
        lines.append(format_task(task, now, index=i))
    return "\n".join(lines)


def format_search_results(tasks: Iterable[Task], now: datetime, query: str) -> str:
    items = list(tasks)
    lines = [f"Search results for '{query}' ({len(items)} found)", RULE_NARROW]
    for task in items:
        lines.append(format_task(task, now, details=False))
    return "\n".join(lines)


def format_stats(stats: TaskStats) -> str:
    lines = [
        "Task statistics",
        "-" * 30,
        f"Total:     {stats.total}",
        f"Completed: {stats.completed}",
        f"Pending:   {stats.pending}",
        f"Overdue:   {stats.overdue}",
    ]
    if stats.completion_rate is not None:
        lines.append(f"Completion rate: {stats.completion_rate}%")
    return "\n".join(lines)
