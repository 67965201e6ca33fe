# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a local default.
- Invalid values fall back to defaults instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPAD"

STORAGE_BACKENDS = ("sqlite", "json")
ID_STRATEGIES = ("auto", "secure", "fallback")

DEFAULT_STORAGE_KEY = "@taskpad/tasks"

# Console floor per logger prefix; the log file always gets everything.
DEFAULT_LOG_MODULE_LEVELS = {"taskpad.storage": "WARNING"}


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


def _env_levels(name: str, default: dict[str, str]) -> dict[str, str]:
    """Parse "logger=LEVEL" pairs separated by commas/spaces; bad pairs are skipped."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return dict(default)
    out: dict[str, str] = {}
    for part in raw.replace(",", " ").split():
        logger_name, sep, level = part.partition("=")
        if not sep or not logger_name or not level:
            continue
        out[logger_name.strip()] = level.strip().upper()
    return out


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_module_levels: dict[str, str]

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    json_path: Path

    # ---- Storage ----
    storage_backend: str
    storage_key: str
    id_strategy: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_module_levels = _env_levels(_k("LOG_LEVELS"), DEFAULT_LOG_MODULE_LEVELS)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskpad.sqlite3")
        json_path = _env_path(_k("JSON_PATH"), data_dir / "storage.json")

        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "sqlite")
        storage_key = _env(_k("STORAGE_KEY"), DEFAULT_STORAGE_KEY).strip() or DEFAULT_STORAGE_KEY
        id_strategy = _env_choice(_k("ID_STRATEGY"), ID_STRATEGIES, "auto")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_module_levels=log_module_levels,
            data_dir=data_dir,
            db_path=db_path,
            json_path=json_path,
            storage_backend=storage_backend,
            storage_key=storage_key,
            id_strategy=id_strategy,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
