# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.cli.bootstrap import create_initial_state
from taskpad.core.state import AppState
from taskpad.tasks.session import TaskSession
from taskpad.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeKeyValueStorage, counting_ids


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        log_module_levels={"taskpad.storage": "WARNING"},
        data_dir=tmp_path,
        db_path=tmp_path / "taskpad.sqlite3",
        json_path=tmp_path / "storage.json",
        storage_backend="sqlite",
        storage_key="@taskpad/tasks",
        id_strategy="auto",
    )


@pytest.fixture()
def kv() -> FakeKeyValueStorage:
    return FakeKeyValueStorage()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(kv: FakeKeyValueStorage, clock: FakeClock) -> TaskStore:
    return TaskStore(kv, key="@taskpad/tasks", id_factory=counting_ids(), clock=clock)


@pytest.fixture()
def session(store: TaskStore) -> TaskSession:
    return TaskSession(store)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired through the real bootstrap.

    NOTE: We keep the real SQLite storage here because its behaviour is part
    of what the command tests exercise.
    """
    return create_initial_state(settings=settings)
