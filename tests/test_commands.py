# tests/test_commands.py

from __future__ import annotations

from collections import deque

import pytest

from taskpad.cli.commands import CommandRegistry, registry
from taskpad.cli.forms import CreateMode, EditMode, FormError, TaskForm, form_title
from taskpad.connectors.console_connector import run_console_loop
from taskpad.core.state import AppState
from taskpad.tasks.session import TaskSession
from taskpad.tasks.task_models import TaskInput

from .fakes import ScriptedUI


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    async def handler(state, args, ui):
        called["a"] += 1
        return " ".join(args)

    reg.register("a", handler, "a", aliases=["alpha"])
    ui = ScriptedUI()

    assert await reg.handle(state, "/a x y", ui) == "x y"
    assert await reg.handle(state, "/ALPHA z", ui) == "z"
    assert called["a"] == 2


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    ui = ScriptedUI()
    assert await reg.handle(state, "hello", ui) is None
    assert "Unknown command" in (await reg.handle(state, "/nope", ui) or "")
    assert "Empty command" in (await reg.handle(state, "/", ui) or "")


@pytest.mark.asyncio
async def test_add_list_toggle_rm(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI()

    assert await registry.handle(state, "/add Buy milk | two litres", ui) == 'Added "Buy milk".'
    await registry.handle(state, "/add Walk dog", ui)

    listing = await registry.handle(state, "/list", ui) or ""
    assert "Total: 2  Done: 0  Pending: 2" in listing
    assert " 1. [ ] Walk dog" in listing
    assert " 2. [ ] Buy milk\n      two litres" in listing

    assert await registry.handle(state, "/toggle 2", ui) == '"Buy milk" is now done.'
    assert state.session.stats.done == 1

    ui.confirms = deque([False])
    assert await registry.handle(state, "/rm 1", ui) == "Cancelled."
    assert len(state.session.tasks) == 2

    ui.confirms = deque([True])
    assert await registry.handle(state, "/rm 1", ui) == 'Deleted "Walk dog".'
    assert [t.title for t in state.session.tasks] == ["Buy milk"]
    assert state.session.tasks == tuple(await state.task_store.read_all())


@pytest.mark.asyncio
async def test_bad_task_numbers(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI()
    assert "Missing task number" in (await registry.handle(state, "/toggle", ui) or "")
    assert "Not a task number" in (await registry.handle(state, "/toggle x", ui) or "")
    assert "No task #3" in (await registry.handle(state, "/rm 3", ui) or "")


@pytest.mark.asyncio
async def test_add_prompts_when_no_args(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI(answers=deque(["  Write report  ", "   "]), confirms=deque([True]))

    assert await registry.handle(state, "/add", ui) == 'Added "Write report".'
    task = state.session.tasks[0]
    assert task.title == "Write report"
    assert task.description is None
    assert task.done is True
    assert "New task" in ui.emitted


@pytest.mark.asyncio
async def test_add_with_blank_title_is_refused(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI(answers=deque(["   ", ""]), confirms=deque([False]))
    assert await registry.handle(state, "/add", ui) == "Title is required."
    assert state.session.tasks == ()


@pytest.mark.asyncio
async def test_edit_inline_and_prompted(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI()
    await registry.handle(state, "/add Old title | old notes", ui)

    assert await registry.handle(state, "/edit 1 New title", ui) == 'Saved "New title".'
    task = state.session.tasks[0]
    assert task.title == "New title"
    assert task.description is None

    # empty answers keep current values; confirm flips done
    ui.answers = deque(["", "fresh notes"])
    ui.confirms = deque([True])
    assert await registry.handle(state, "/edit 1", ui) == 'Saved "New title".'
    task = state.session.tasks[0]
    assert task.description == "fresh notes"
    assert task.done is True
    assert "Title [New title]: " in ui.prompts


@pytest.mark.asyncio
async def test_clear_asks_first(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI()
    await registry.handle(state, "/add a", ui)
    await registry.handle(state, "/add b", ui)

    ui.confirms = deque([False])
    assert await registry.handle(state, "/clear", ui) == "Cancelled."
    assert len(state.session.tasks) == 2

    ui.confirms = deque([True])
    assert await registry.handle(state, "/clear", ui) == "All tasks deleted."
    assert state.session.tasks == ()
    assert await registry.handle(state, "/stats", ui) == "Total: 0  Done: 0  Pending: 0"


@pytest.mark.asyncio
async def test_reload_rereads_storage(state: AppState) -> None:
    await state.session.load()
    await state.task_store.create(TaskInput(title="written elsewhere"))
    assert state.session.tasks == ()

    ui = ScriptedUI()
    assert await registry.handle(state, "/reload", ui) == "Reloaded 1 tasks."
    assert state.session.tasks[0].title == "written elsewhere"


@pytest.mark.asyncio
async def test_form_modes(session: TaskSession) -> None:
    await session.load()
    assert form_title(CreateMode()) == "New task"

    form = TaskForm(title="  Plan trip ", description="  ")
    created = await form.submit(session, CreateMode())
    assert created is not None
    assert created.title == "Plan trip"
    assert created.description is None

    mode = EditMode(created)
    assert form_title(mode) == "Edit task"
    edit = TaskForm.from_mode(mode)
    assert edit.title == "Plan trip"
    edit.description = "book hotel"
    edit.done = True
    updated = await edit.submit(session, mode)
    assert updated is not None
    assert updated.id == created.id
    assert updated.description == "book hotel"
    assert updated.done is True

    with pytest.raises(FormError):
        await TaskForm(title=" ").submit(session, CreateMode())


@pytest.mark.asyncio
async def test_console_loop_runs_commands_until_exit(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI(answers=deque(["Buy milk", "/toggle 1", "/nope", "/exit", "/add never"]))

    await run_console_loop(state, ui)

    assert [t.title for t in state.session.tasks] == ["Buy milk"]
    assert state.session.tasks[0].done is True
    assert any("Unknown command" in line for line in ui.emitted)
    assert list(ui.answers) == ["/add never"]


@pytest.mark.asyncio
async def test_console_loop_stops_on_eof(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI(answers=deque(["/add a"]))
    await run_console_loop(state, ui)
    assert len(state.session.tasks) == 1


@pytest.mark.asyncio
async def test_prompted_edit_can_clear_description(state: AppState) -> None:
    await state.session.load()
    ui = ScriptedUI()
    await registry.handle(state, "/add Call mum | after lunch", ui)

    ui.answers = deque(["", " - "])
    ui.confirms = deque([False])
    assert await registry.handle(state, "/edit 1", ui) == 'Saved "Call mum".'

    task = state.session.tasks[0]
    assert task.title == "Call mum"
    assert task.description is None
    assert "Description [after lunch] (- to clear): " in ui.prompts
    assert state.session.tasks == tuple(await state.task_store.read_all())
