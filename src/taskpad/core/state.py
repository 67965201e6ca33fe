# src/taskpad/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.ports import KeyValueStorage
from ..tasks.session import TaskSession
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings are stored on the state so handlers can read them without globals.
    settings: Any

    storage: KeyValueStorage
    task_store: TaskStore
    session: TaskSession
