# src/taskpad/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from ..core.state import AppState
from ..tasks.task_models import Task
from .forms import CreateMode, EditMode, FormError, FormMode, TaskForm, form_title

logger = logging.getLogger(__name__)


class CommandUI(Protocol):
    """How a command talks back to the user while it runs."""

    def emit(self, text: str) -> None: ...
    def ask(self, prompt: str) -> Awaitable[str]: ...
    def confirm(self, question: str) -> Awaitable[bool]: ...


CommandHandler = Callable[[AppState, list[str], CommandUI], Awaitable[str]]


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str, ui: CommandUI) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args, ui)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering helpers ----


def format_task(index: int, task: Task) -> str:
    mark = "x" if task.done else " "
    line = f"{index:>2}. [{mark}] {task.title}"
    if task.description:
        line += f"\n      {task.description}"
    return line


def format_stats(state: AppState) -> str:
    s = state.session.stats
    return f"Total: {s.total}  Done: {s.done}  Pending: {s.pending}"


def _split_title_description(args: list[str]) -> tuple[str, str]:
    text = " ".join(args)
    title, _, description = text.partition("|")
    return title.strip(), description.strip()


def _task_at(state: AppState, args: list[str]) -> Task | str:
    """Resolve a 1-based list position; returns an error message on failure."""
    if not args:
        return "Missing task number. Use /list to see numbers."
    try:
        pos = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]}"
    tasks = state.session.tasks
    if pos < 1 or pos > len(tasks):
        return f"No task #{pos}. There are {len(tasks)} tasks."
    return tasks[pos - 1]


# Answer to the description prompt that empties the field.
CLEAR_ANSWER = "-"


async def _fill_form(form: TaskForm, mode: FormMode, ui: CommandUI) -> None:
    """
    Prompt for each field; an empty answer keeps the current value and
    "-" clears the description.
    """
    ui.emit(form_title(mode))
    title = await ui.ask(f"Title [{form.title}]: " if form.title else "Title: ")
    if title.strip():
        form.title = title
    description = await ui.ask(
        f"Description [{form.description}] (- to clear): "
        if form.description
        else "Description (optional): "
    )
    if description.strip() == CLEAR_ANSWER:
        form.description = ""
    elif description.strip():
        form.description = description
    question = "Mark as pending?" if form.done else "Mark as done?"
    if await ui.confirm(question):
        form.done = not form.done


# ---- commands ----


async def cmd_help(state: AppState, args: list[str], ui: CommandUI) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str], ui: CommandUI) -> str:
    session = state.session
    lines = [format_stats(state)]
    if session.loading:
        lines.append("Loading...")
    if session.error:
        lines.append(f"Error: {session.error}")
    if not session.loading and not session.tasks:
        lines.append("No tasks yet. Add the first one with /add.")
    for i, task in enumerate(session.tasks, start=1):
        lines.append(format_task(i, task))
    return "\n".join(lines)


async def cmd_add(state: AppState, args: list[str], ui: CommandUI) -> str:
    """
    /add                      -> prompt for the fields
    /add Title | description  -> create directly
    """
    mode = CreateMode()
    form = TaskForm.from_mode(mode)
    if args:
        form.title, form.description = _split_title_description(args)
    else:
        await _fill_form(form, mode, ui)

    try:
        task = await form.submit(state.session, mode)
    except FormError as e:
        return str(e)
    return f'Added "{task.title}".'


async def cmd_edit(state: AppState, args: list[str], ui: CommandUI) -> str:
    """
    /edit N                      -> prompt with current values
    /edit N Title | description  -> replace title and description
    """
    found = _task_at(state, args)
    if isinstance(found, str):
        return found

    mode = EditMode(found)
    form = TaskForm.from_mode(mode)
    if len(args) > 1:
        form.title, form.description = _split_title_description(args[1:])
    else:
        await _fill_form(form, mode, ui)

    try:
        task = await form.submit(state.session, mode)
    except FormError as e:
        return str(e)
    if task is None:
        return "That task no longer exists. Use /reload."
    return f'Saved "{task.title}".'


async def cmd_toggle(state: AppState, args: list[str], ui: CommandUI) -> str:
    found = _task_at(state, args)
    if isinstance(found, str):
        return found
    task = await state.session.toggle_task(found.id)
    if task is None:
        return "That task no longer exists. Use /reload."
    return f'"{task.title}" is now {"done" if task.done else "pending"}.'


async def cmd_rm(state: AppState, args: list[str], ui: CommandUI) -> str:
    found = _task_at(state, args)
    if isinstance(found, str):
        return found
    if not await ui.confirm(f'Delete "{found.title}"?'):
        return "Cancelled."
    await state.session.remove_task(found.id)
    return f'Deleted "{found.title}".'


async def cmd_clear(state: AppState, args: list[str], ui: CommandUI) -> str:
    total = state.session.stats.total
    if not await ui.confirm(f"Delete all {total} tasks?"):
        return "Cancelled."
    await state.session.clear()
    return "All tasks deleted."


async def cmd_stats(state: AppState, args: list[str], ui: CommandUI) -> str:
    return format_stats(state)


async def cmd_reload(state: AppState, args: list[str], ui: CommandUI) -> str:
    await state.session.load()
    if state.session.error:
        return f"Error: {state.session.error}"
    return f"Reloaded {len(state.session.tasks)} tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks and counts.", aliases=["ls"])
registry.register("add", cmd_add, help_text="New task: /add [title | description].", aliases=["new"])
registry.register("edit", cmd_edit, help_text="Edit task: /edit N [title | description].")
registry.register("toggle", cmd_toggle, help_text="Flip done/pending: /toggle N.", aliases=["done"])
registry.register("rm", cmd_rm, help_text="Delete task (asks first): /rm N.", aliases=["del"])
registry.register("clear", cmd_clear, help_text="Delete all tasks (asks first).")
registry.register("stats", cmd_stats, help_text="Show total/done/pending counts.")
registry.register("reload", cmd_reload, help_text="Re-read tasks from storage.")
