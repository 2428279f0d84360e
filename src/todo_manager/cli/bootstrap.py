# src/todo_manager/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires the JSON store and the TaskManager into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Clock
from ..core.state import AppState, Prompt
from ..tasks.task_manager import TaskManager
from ..tasks.task_store import JsonTaskStore

logger = logging.getLogger(__name__)


def create_initial_state(
    *,
    settings=None,
    prompt: Prompt | None = None,
    clock: Clock | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings, prompt and clock injectable makes the app easy to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    store = JsonTaskStore(settings.tasks_path)
    manager = TaskManager(store, clock=clock)
    logger.debug("State created tasks_path=%s", store.path)

    if prompt is None:
        return AppState(settings=settings, manager=manager)
    return AppState(settings=settings, manager=manager, prompt=prompt)
