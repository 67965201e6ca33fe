# src/taskpad/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

LOG_FILE_NAME = "taskpad.log"


def _to_level(value: int | str) -> int | None:
    if isinstance(value, int):
        return value
    level = getattr(logging, str(value).strip().upper(), None)
    return level if isinstance(level, int) else None


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console floor per logger name.

    taskpad.* records pass unless a configured prefix (longest match wins,
    e.g. "taskpad.storage") sets a higher floor. Anything outside the app,
    captured warnings included, only shows at ERROR+.
    """

    def __init__(self, module_levels: Mapping[str, int | str] | None = None) -> None:
        super().__init__()
        levels: dict[str, int] = {}
        for prefix, value in (module_levels or {}).items():
            level = _to_level(value)
            if level is None:
                continue
            levels[prefix.rstrip(".")] = level
        # longest prefix first so "taskpad.storage.kv_store" beats "taskpad"
        self._levels = sorted(levels.items(), key=lambda kv: len(kv[0]), reverse=True)

    def floor_for(self, name: str) -> int:
        for prefix, level in self._levels:
            if name == prefix or name.startswith(prefix + "."):
                return level
        if name == "taskpad" or name.startswith("taskpad."):
            return logging.NOTSET
        return logging.ERROR

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.floor_for(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpad",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    module_levels: Mapping[str, int | str] | None = None,
) -> Path:
    """
    Console gets the app's own logs filtered by `module_levels`; the file
    under `log_dir` gets everything at `file_level`.

    Call this ONCE, before the first logger.info. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter(module_levels))
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
