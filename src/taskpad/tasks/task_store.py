# src/taskpad/tasks/task_store.py

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from ..config import DEFAULT_STORAGE_KEY
from ..core.ports import KeyValueStorage
from .ids import IdFactory, select_id_factory
from .task_models import (
    UPDATABLE_FIELDS,
    Task,
    TaskInput,
    format_timestamp,
    normalize_description,
    parse_timestamp,
    utc_now,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Task records kept as one JSON array under a single storage key.

    Newest tasks come first. Every mutation is a full read-modify-write of
    the array; mutations on one instance are serialized by an asyncio.Lock
    so concurrent callers cannot overwrite each other's changes.

    Persisted data that is not a JSON array reads as an empty collection.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        id_factory: IdFactory | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._storage = storage
        self._key = key
        self._new_id = id_factory or select_id_factory("auto")
        self._clock = clock
        self._write_lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    # ---- low-level helpers ----

    def _decode(self, raw: str) -> list[Task]:
        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            # RecursionError: nesting deeper than the decoder can follow.
            logger.warning("Stored tasks under %s are not valid JSON; reading as empty.", self._key)
            return []
        if not isinstance(parsed, list):
            logger.warning(
                "Stored tasks under %s are a %s, not a list; reading as empty.",
                self._key,
                type(parsed).__name__,
            )
            return []

        tasks: list[Task] = []
        for i, rec in enumerate(parsed):
            task = Task.from_record(rec)
            if task is None:
                logger.warning("Skipping malformed task record #%d under %s", i, self._key)
                continue
            tasks.append(task)
        return tasks

    async def _get_all(self) -> list[Task]:
        raw = await self._storage.get_item(self._key)
        if not raw:
            return []
        return self._decode(raw)

    async def _save_all(self, tasks: list[Task]) -> None:
        payload = json.dumps([t.to_record() for t in tasks], ensure_ascii=False)
        await self._storage.set_item(self._key, payload)

    def _stamp_after(self, previous: str | None) -> str:
        """Current time, nudged forward so it is strictly later than previous."""
        now = self._clock()
        if previous:
            try:
                floor = parse_timestamp(previous)
            except ValueError:
                floor = None
            if floor is not None and now <= floor:
                now = floor + timedelta(microseconds=1)
        return format_timestamp(now)

    # ---- public API ----

    async def create(self, data: TaskInput) -> Task:
        async with self._write_lock:
            tasks = await self._get_all()
            now = format_timestamp(self._clock())
            task = Task(
                id=self._new_id(),
                title=data.title,
                description=normalize_description(data.description),
                created_at=now,
                updated_at=now,
                done=False if data.done is None else bool(data.done),
            )
            await self._save_all([task, *tasks])

        logger.debug("Task created id=%s done=%s", task.id, task.done)
        return task

    async def read_all(self) -> list[Task]:
        return await self._get_all()

    async def read_by_id(self, task_id: str) -> Task | None:
        for task in await self._get_all():
            if task.id == task_id:
                return task
        return None

    async def update(self, task_id: str, **changes: Any) -> Task | None:
        """
        Merge changes into the task with task_id and refresh updated_at.

        Accepts title, description, done (and updated_at, which is always
        overwritten). A blank or None description removes it. Returns None
        if no task has this id.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update task fields: {', '.join(sorted(unknown))}")

        async with self._write_lock:
            tasks = await self._get_all()
            updated_task: Task | None = None
            out: list[Task] = []

            for t in tasks:
                if t.id != task_id or updated_task is not None:
                    out.append(t)
                    continue

                fields: dict[str, Any] = {}
                if "title" in changes:
                    fields["title"] = changes["title"]
                if "description" in changes:
                    fields["description"] = normalize_description(changes["description"])
                if "done" in changes:
                    fields["done"] = bool(changes["done"])
                fields["updated_at"] = self._stamp_after(t.updated_at or t.created_at)

                updated_task = replace(t, **fields)
                out.append(updated_task)

            await self._save_all(out)

        if updated_task is None:
            logger.debug("Task update skipped; id=%s not found", task_id)
        else:
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return updated_task

    async def remove(self, task_id: str) -> None:
        async with self._write_lock:
            tasks = await self._get_all()
            await self._save_all([t for t in tasks if t.id != task_id])
        logger.debug("Task removed id=%s", task_id)

    async def clear_all(self) -> None:
        async with self._write_lock:
            await self._storage.remove_item(self._key)
        logger.info("All tasks cleared (key=%s)", self._key)
