# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

# Keys accepted by TaskStore.update(). A supplied updated_at is ignored.
UPDATABLE_FIELDS = frozenset({"title", "description", "done", "updated_at"})


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(dt: datetime) -> str:
    """ISO-8601 in UTC with microseconds and a 'Z' suffix."""
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(raw: str) -> datetime:
    dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    # Naive stamps are read as UTC.
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def normalize_description(text: str | None) -> str | None:
    if text is None:
        return None
    text = text.strip()
    return text or None


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do item.

    Persisted records use camelCase keys (createdAt, updatedAt) and omit
    description/updatedAt when they are absent.
    """

    id: str
    title: str
    created_at: str
    description: str | None = None
    updated_at: str | None = None
    done: bool = False

    def to_record(self) -> dict[str, Any]:
        rec: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.description is not None:
            rec["description"] = self.description
        rec["createdAt"] = self.created_at
        if self.updated_at is not None:
            rec["updatedAt"] = self.updated_at
        rec["done"] = self.done
        return rec

    @classmethod
    def from_record(cls, obj: Any) -> Task | None:
        """Parse one persisted record; None if it lacks the required fields."""
        if not isinstance(obj, dict):
            return None
        task_id = obj.get("id")
        title = obj.get("title")
        created_at = obj.get("createdAt")
        if not isinstance(task_id, str) or not isinstance(title, str):
            return None
        if not isinstance(created_at, str):
            return None

        description = obj.get("description")
        updated_at = obj.get("updatedAt")
        return cls(
            id=task_id,
            title=title,
            created_at=created_at,
            description=description if isinstance(description, str) else None,
            updated_at=updated_at if isinstance(updated_at, str) else None,
            # Only a JSON true counts; "false" or 1 must not read as done.
            done=obj.get("done") is True,
        )


@dataclass(frozen=True, slots=True)
class TaskInput:
    """Payload for TaskStore.create(). done=None means the default (False)."""

    title: str
    description: str | None = None
    done: bool | None = None


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    done: int
    pending: int

    @classmethod
    def from_tasks(cls, tasks: list[Task] | tuple[Task, ...]) -> TaskStats:
        total = len(tasks)
        done = sum(1 for t in tasks if t.done)
        return cls(total=total, done=done, pending=total - done)
