# src/todo_manager/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..errors import TodoError, ValidationError
from ..tasks.task_models import DEFAULT_PRIORITY, TaskFilter
from .formatting import format_search_results, format_stats, format_task, format_task_list

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, str], str]
CommandHandler3 = Callable[[AppState, str, CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_QUOTED_RE = re.compile(r'"([^"]*)"')


class CommandRegistry:
    """Command registry used by the console loop (add, list, done, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._aliases: dict[str, list[str]] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._aliases[key] = [a.lower() for a in aliases]
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    @staticmethod
    def split_line(line: str) -> tuple[str, str]:
        """Split "name rest of line" into a lower-cased name and the remainder."""
        parts = line.strip().split(None, 1)
        if not parts:
            return "", ""
        args = parts[1].strip() if len(parts) > 1 else ""
        return parts[0].lower(), args

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a line like "add Buy milk".
        Returns a reply string, or None for blank input.

        Domain errors and failed saves are turned into messages here.
        """
        name, args = self.split_line(line)
        if not name:
            return None

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: {name}. Type 'help' for available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TodoError as e:
            logger.debug("Command %s failed: %s", name, e)
            return f"Error: {e}"
        except OSError as e:
            logger.error("Command %s could not persist tasks: %s", name, e)
            return f"Error: could not save tasks ({e})"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            names = ", ".join([name, *self._aliases.get(name, [])])
            lines.append(f"  {names} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_task_id(args: str) -> int:
    token = args.split(None, 1)[0] if args.strip() else ""
    try:
        return int(token)
    except ValueError:
        raise ValidationError("Please provide a valid task ID.") from None


def parse_quick_add(args: str) -> tuple[str, str]:
    """
    add Buy milk                    -> ("Buy milk", "")
    add "Buy milk" "2 liters"       -> ("Buy milk", "2 liters")
    """
    if '"' not in args:
        return args, ""
    quoted = _QUOTED_RE.findall(args)
    if not quoted:
        return args, ""
    title = quoted[0]
    description = quoted[1] if len(quoted) > 1 else ""
    return title, description


def cmd_add(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    """
    add                 -> prompt for every field
    add <title>         -> quick add with defaults
    add "title" "desc"  -> quick add with a description
    """
    if args:
        title, description = parse_quick_add(args)
        task = state.manager.add_task(title, description)
    else:
        title = state.prompt("Task title: ")
        description = state.prompt("Description (optional): ")
        priority = state.prompt(f"Priority (high/medium/low) [{DEFAULT_PRIORITY}]: ")
        due = state.prompt("Due date (YYYY-MM-DD HH:MM or press enter to skip): ")
        task = state.manager.add_task(title, description, priority or None, due or None)
    return f"Task '{task.title}' added successfully! (ID: {task.id})"


def cmd_list(state: AppState, args: str) -> str:
    manager = state.manager
    if len(manager) == 0:
        return "No tasks found. Add some tasks to get started!"

    flt = TaskFilter.from_raw(args)
    now = manager.now()
    tasks = manager.list_tasks(args or TaskFilter.ALL.value, now=now)
    if not tasks:
        return f"No {flt.value} tasks found."
    return format_task_list(tasks, now, f"TODO LIST - {flt.value.upper()} TASKS")


def cmd_complete(state: AppState, args: str) -> str:
    task_id = parse_task_id(args)
    task = state.manager.find_task(task_id)
    if not state.manager.complete_task(task_id):
        return f"Task '{task.title}' is already completed!"
    return f"Task '{task.title}' marked as completed!"


def cmd_uncomplete(state: AppState, args: str) -> str:
    task_id = parse_task_id(args)
    task = state.manager.find_task(task_id)
    if not state.manager.uncomplete_task(task_id):
        return f"Task '{task.title}' is already pending!"
    return f"Task '{task.title}' marked as pending!"


def cmd_delete(state: AppState, args: str) -> str:
    removed = state.manager.delete_task(parse_task_id(args))
    return f"Task '{removed.title}' deleted successfully!"


def cmd_update(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    """
    update <id> -> prompt for each field; enter keeps the current value,
    'none' as due date removes it.
    """
    manager = state.manager
    task_id = parse_task_id(args)
    task = manager.find_task(task_id)

    if emit:
        emit(f"Update task {task_id} (press enter to keep current value):")
        emit(format_task(task, manager.now()))

    title = state.prompt("New title: ")
    description = state.prompt("New description: ")
    priority = state.prompt("New priority (high/medium/low): ")
    due = state.prompt("New due date (YYYY-MM-DD HH:MM or 'none' to remove): ")

    updated = manager.update_task(
        task_id,
        title=title or None,
        description=description or None,
        priority=priority or None,
        due_date=due or None,
    )
    return "Task updated successfully!\n" + format_task(updated, manager.now())


def cmd_search(state: AppState, args: str) -> str:
    if not args:
        return "Usage: search <query>"
    results = state.manager.search_tasks(args)
    if not results:
        return f"No tasks found matching '{args}'"
    return format_search_results(results, state.manager.now(), args)


def cmd_stats(state: AppState, args: str) -> str:
    return format_stats(state.manager.stats())


def cmd_clear(state: AppState, args: str) -> str:
    removed = state.manager.clear_completed()
    if not removed:
        return "No completed tasks to clear."
    return f"Cleared {removed} completed task(s)!"


HELP_FOOTER = """\
  quit, exit - Exit the application

Examples:
  add "Buy groceries" "Milk, bread, eggs"
  list pending
  complete 3
  search grocery
  update 3"""


def cmd_help(state: AppState, args: str) -> str:
    path = getattr(state.settings, "tasks_path", "tasks.json")
    return f"{registry.build_help()}\n{HELP_FOOTER}\n\nTask data is saved to '{path}'."


registry.register("add", cmd_add, help_text="Add a new task (interactive or quick).", aliases=["a"])
registry.register(
    "list",
    cmd_list,
    help_text="List tasks (all/pending/completed/overdue).",
    aliases=["ls", "l"],
)
registry.register("complete", cmd_complete, help_text="Mark task as completed.", aliases=["done", "c"])
registry.register(
    "uncomplete", cmd_uncomplete, help_text="Mark task as pending.", aliases=["undone", "u"]
)
registry.register("delete", cmd_delete, help_text="Delete a task.", aliases=["del", "remove", "d"])
registry.register("update", cmd_update, help_text="Update task details.", aliases=["edit"])
registry.register(
    "search", cmd_search, help_text="Search tasks by title/description.", aliases=["find", "s"]
)
registry.register("stats", cmd_stats, help_text="Show task statistics.", aliases=["statistics"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("help", cmd_help, help_text="Show this help message.", aliases=["h", "?"])
