# src/todo_manager/core/state.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..tasks.task_manager import TaskManager

Prompt = Callable[[str], str]
# Shows a prompt and returns one line of input (builtin input() by default).


@dataclass
class AppState:
    # Settings are stored on the state so command handlers can reach them.
    settings: object
    manager: TaskManager
    prompt: Prompt = field(default=input)
