# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- picks the storage backend and the task id strategy,
- wires the store and session into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..storage.kv_store import JsonFileKeyValueStorage, SqliteKeyValueStorage
from ..tasks.ids import select_id_factory
from ..tasks.session import TaskSession
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.json_path.parent.mkdir(parents=True, exist_ok=True)


def create_storage(settings) -> KeyValueStorage:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "sqlite":
        return SqliteKeyValueStorage(settings.db_path)
    if backend == "json":
        return JsonFileKeyValueStorage(settings.json_path)
    raise ValueError(f"Unknown storage backend: {backend!r}")


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    The session is created but not loaded; await state.session.load()
    (or use TaskSession.open) before showing tasks.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = create_storage(settings)
    task_store = TaskStore(
        storage,
        key=settings.storage_key,
        id_factory=select_id_factory(settings.id_strategy),
    )
    logger.debug(
        "State wired backend=%s key=%s id_strategy=%s",
        settings.storage_backend,
        settings.storage_key,
        settings.id_strategy,
    )

    return AppState(
        settings=settings,
        storage=storage,
        task_store=task_store,
        session=TaskSession(task_store),
    )
