# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and session depend on Protocols instead of concrete
implementations, so storage backends stay swappable and tests can use fakes.
"""

from typing import Any, Awaitable, Protocol


class KeyValueStorage(Protocol):
    """
    On-device string storage addressed by key.

    get_item returns None for a missing key. Medium failures are raised
    as taskpad.storage.kv_store.StorageError.
    """

    def get_item(self, key: str) -> Awaitable[str | None]: ...
    def set_item(self, key: str, value: str) -> Awaitable[None]: ...
    def remove_item(self, key: str) -> Awaitable[None]: ...


class TaskRepo(Protocol):
    """What TaskSession needs from a record store."""

    def create(self, data: Any) -> Awaitable[Any]: ...
    def read_all(self) -> Awaitable[list[Any]]: ...
    def read_by_id(self, task_id: str) -> Awaitable[Any | None]: ...
    def update(self, task_id: str, **changes: Any) -> Awaitable[Any | None]: ...
    def remove(self, task_id: str) -> Awaitable[None]: ...
    def clear_all(self) -> Awaitable[None]: ...
