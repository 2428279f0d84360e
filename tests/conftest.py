# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_manager.core.state import AppState
from todo_manager.tasks.task_manager import TaskManager
from todo_manager.tasks.task_store import JsonTaskStore

from .fakes import FixedClock, ScriptedPrompt

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="WARNING",
        log_to_file=False,
        data_dir=tmp_path / "data",
        tasks_path=tmp_path / "tasks.json",
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def store(settings: SimpleNamespace) -> JsonTaskStore:
    return JsonTaskStore(settings.tasks_path)


@pytest.fixture()
def manager(store: JsonTaskStore, clock: FixedClock) -> TaskManager:
    # Real JSON store: persistence is part of what we want to test.
    return TaskManager(store, clock=clock)


@pytest.fixture()
def prompt() -> ScriptedPrompt:
    return ScriptedPrompt()


@pytest.fixture()
def state(settings: SimpleNamespace, manager: TaskManager, prompt: ScriptedPrompt) -> AppState:
    return AppState(settings=settings, manager=manager, prompt=prompt)
