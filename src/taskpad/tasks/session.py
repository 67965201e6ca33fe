# src/taskpad/tasks/session.py

"""
Presentation-facing task session.

Holds an in-memory mirror of the stored tasks plus load status. Every
mutation is persisted first; the mirror is then patched from the store's
result instead of re-reading the whole collection.
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import TaskRepo
from .task_models import Task, TaskInput, TaskStats

logger = logging.getLogger(__name__)


class TaskSession:
    def __init__(self, store: TaskRepo) -> None:
        self._store = store
        self._tasks: list[Task] = []
        # True until the initial load() completes.
        self.loading: bool = True
        self.error: str | None = None

    @classmethod
    async def open(cls, store: TaskRepo) -> TaskSession:
        """Create a session and run the initial load."""
        session = cls(store)
        await session.load()
        return session

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def stats(self) -> TaskStats:
        return TaskStats.from_tasks(self._tasks)

    def find(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self._tasks = list(await self._store.read_all())
            logger.info("Loaded %d tasks", len(self._tasks))
        except Exception as exc:
            logger.exception("Failed to load tasks")
            self.error = str(exc) or "Failed to load tasks"
        finally:
            self.loading = False

    async def create_task(self, data: TaskInput) -> Task:
        task = await self._store.create(data)
        self._tasks.insert(0, task)
        return task

    async def update_task(self, task_id: str, **changes: Any) -> Task | None:
        task = await self._store.update(task_id, **changes)
        if task is not None:
            self._tasks = [task if t.id == task_id else t for t in self._tasks]
        return task

    async def toggle_task(self, task_id: str) -> Task | None:
        current = self.find(task_id)
        if current is None:
            return None
        return await self.update_task(task_id, done=not current.done)

    async def remove_task(self, task_id: str) -> None:
        await self._store.remove(task_id)
        self._tasks = [t for t in self._tasks if t.id != task_id]

    async def clear(self) -> None:
        await self._store.clear_all()
        self._tasks = []
