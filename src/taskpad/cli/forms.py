# src/taskpad/cli/forms.py

"""
Create/edit form for the console.

The form runs in one of two modes: creating a new task, or editing an
existing one (the mode carries the task being edited).
"""

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.session import TaskSession
from ..tasks.task_models import Task, TaskInput, normalize_description


class FormError(ValueError):
    """The form cannot be submitted as filled in."""


@dataclass(frozen=True, slots=True)
class CreateMode:
    pass


@dataclass(frozen=True, slots=True)
class EditMode:
    task: Task


FormMode = CreateMode | EditMode


@dataclass(slots=True)
class TaskForm:
    title: str = ""
    description: str = ""
    done: bool = False

    @classmethod
    def from_mode(cls, mode: FormMode) -> TaskForm:
        if isinstance(mode, EditMode):
            return cls(
                title=mode.task.title,
                description=mode.task.description or "",
                done=mode.task.done,
            )
        return cls()

    @property
    def can_submit(self) -> bool:
        return bool(self.title.strip())

    async def submit(self, session: TaskSession, mode: FormMode) -> Task | None:
        """Validate and send the form; returns the created or updated task."""
        if not self.can_submit:
            raise FormError("Title is required.")

        title = self.title.strip()
        description = normalize_description(self.description)

        if isinstance(mode, EditMode):
            return await session.update_task(
                mode.task.id, title=title, description=description, done=self.done
            )
        return await session.create_task(
            TaskInput(title=title, description=description, done=self.done)
        )


def form_title(mode: FormMode) -> str:
    return "Edit task" if isinstance(mode, EditMode) else "New task"
