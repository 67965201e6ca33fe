# tests/test_console_connector.py

from __future__ import annotations

import asyncio
import threading

import pytest

from taskpad.connectors.console_connector import ConsoleUI, run_console_loop
from taskpad.core.state import AppState

from .fakes import ScriptedUI


class HangingUI(ScriptedUI):
    """Prompt never answers, like a user who walked away from the terminal."""

    async def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        await asyncio.Event().wait()
        return ""


@pytest.mark.asyncio
async def test_cancel_at_prompt_stops_console_loop(state: AppState) -> None:
    await state.session.load()
    ui = HangingUI()

    runner = asyncio.create_task(run_console_loop(state, ui))
    await asyncio.sleep(0.01)
    assert ui.prompts == [">>> "]

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await asyncio.wait_for(runner, timeout=1.0)
    assert runner.done()


@pytest.mark.asyncio
async def test_console_ask_returns_typed_line(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("builtins.input", lambda prompt: "  Buy milk ")
    assert await ConsoleUI().ask(">>> ") == "  Buy milk "


@pytest.mark.asyncio
async def test_console_ask_raises_eof(monkeypatch: pytest.MonkeyPatch) -> None:
    def _eof(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    with pytest.raises(EOFError):
        await ConsoleUI().ask(">>> ")


@pytest.mark.asyncio
async def test_cancelled_ask_does_not_wait_for_blocked_input(monkeypatch: pytest.MonkeyPatch) -> None:
    release = threading.Event()
    readers: list[threading.Thread] = []

    def _blocked_input(prompt: str) -> str:
        readers.append(threading.current_thread())
        release.wait(timeout=5.0)
        return "late line"

    monkeypatch.setattr("builtins.input", _blocked_input)
    try:
        pending = asyncio.create_task(ConsoleUI().ask(">>> "))
        await asyncio.sleep(0.05)

        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(pending, timeout=1.0)

        # The reader is still stuck in input(), but it is a daemon thread,
        # so it cannot keep the interpreter or loop shutdown waiting.
        assert readers and readers[0].daemon
        assert readers[0].is_alive()
    finally:
        release.set()
        if readers:
            readers[0].join(timeout=1.0)
        # let the late call_soon_threadsafe callback run against the cancelled future
        await asyncio.sleep(0.01)
