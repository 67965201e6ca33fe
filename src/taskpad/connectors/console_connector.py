# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from datetime import datetime

from ..cli.commands import CommandUI
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _resolve(fut: asyncio.Future[str], line: str | None, exc: Exception | None) -> None:
    if fut.done():
        # The awaiting task was cancelled (Ctrl+C); drop the late line.
        return
    if exc is not None:
        fut.set_exception(exc)
    else:
        fut.set_result(line or "")


class ConsoleUI:
    """
    CommandUI over stdin/stdout.

    Each prompt is read by a daemon thread, so a cancelled prompt (Ctrl+C
    cancels the main task) never holds up event-loop shutdown while
    input() is still blocked.
    """

    def emit(self, text: str) -> None:
        print(text, flush=True)

    async def ask(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[str] = loop.create_future()

        def _read() -> None:
            line: str | None = None
            error: Exception | None = None
            try:
                line = input(prompt)
            except Exception as exc:  # EOFError and OSError go to the awaiting task
                error = exc
            # The loop may already be closed if we were cancelled during shutdown.
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(_resolve, fut, line, error)

        threading.Thread(target=_read, name="taskpad-stdin", daemon=True).start()
        return await fut

    async def confirm(self, question: str) -> bool:
        answer = await self.ask(f"{question} [y/N] ")
        return answer.strip().lower() in ("y", "yes")


async def run_console_loop(state: AppState, ui: CommandUI | None = None) -> None:
    ui = ui or ConsoleUI()
    logger.info("Console connector started.")
    ui.emit(f"[{_ts_local()}] Use /help for commands, /exit to quit.\n")

    listing = await command_registry.handle(state, "/list", ui)
    if listing:
        ui.emit(listing)

    while True:
        try:
            line = (await ui.ask(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except asyncio.CancelledError:
            logger.info("Console interrupted, exiting.")
            ui.emit("")
            raise

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            # Bare text is shorthand for /add.
            line = f"/add {line}"

        try:
            reply = await command_registry.handle(state, line, ui)
        except Exception:
            logger.exception("Command handler crashed: %s", line)
            reply = "Internal error while handling a command."

        if reply is not None:
            ui.emit(reply)

    logger.info("Console connector finished.")
