# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use .env (local, gitignored) for machine-specific values.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKPAD_LOG_LEVELS": "Per-logger console floors, e.g. \"taskpad.storage=WARNING,taskpad.cli=DEBUG\" (default: taskpad.storage=WARNING).",
    # Paths (gitignored)
    "TASKPAD_DATA_DIR": "Local data directory, also holds taskpad.log (default: .local/taskpad).",
    "TASKPAD_DB_PATH": "SQLite storage path (default: <data_dir>/taskpad.sqlite3).",
    "TASKPAD_JSON_PATH": "JSON storage path (default: <data_dir>/storage.json).",
    # Storage
    "TASKPAD_STORAGE_BACKEND": "sqlite or json (default: sqlite).",
    "TASKPAD_STORAGE_KEY": "Key the task list is stored under (default: @taskpad/tasks).",
    "TASKPAD_ID_STRATEGY": "auto, secure or fallback task ids (default: auto).",
}
