# src/taskpad/storage/kv_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import sqlite3
import threading
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """The persistence medium could not be read or written."""


class SqliteKeyValueStorage:
    """
    SQLite key-value storage.

    One table, one row per key. Each call opens its own short-lived
    connection and runs in a worker thread so the event loop never blocks
    on disk I/O.
    """

    def __init__(self, db_path: str | Path = "taskpad.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_keys()
        except StorageError:
            total = -1
        logger.info("SqliteKeyValueStorage ready db=%s keys=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open storage at {self._db_path}: {exc}") from exc
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot initialize storage schema: {exc}") from exc
        finally:
            conn.close()

    def _get_sync(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read key {key!r}: {exc}") from exc
        finally:
            conn.close()

    def _set_sync(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
            logger.debug("kv set key=%s bytes=%d", key, len(value))
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write key {key!r}: {exc}") from exc
        finally:
            conn.close()

    def _remove_sync(self, key: str) -> None:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
            logger.debug("kv remove key=%s removed=%s", key, cur.rowcount)
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to remove key {key!r}: {exc}") from exc
        finally:
            conn.close()

    # ---- public API ----

    def count_keys(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM kv").fetchone()
            return int(n)
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to count keys: {exc}") from exc
        finally:
            conn.close()

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set_sync, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove_sync, key)


class JsonFileKeyValueStorage:
    """
    Key-value storage kept in a single JSON object file.

    The whole file is rewritten on every change (temp file + os.replace).
    A file that is not a JSON object is treated as empty; it is replaced
    on the next write.
    """

    def __init__(self, path: str | Path = "storage.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Guards the read-modify-write of the file across worker threads.
        self._lock = threading.Lock()
        logger.info("JsonFileKeyValueStorage ready path=%s", self._path)

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text("utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to read {self._path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Storage file %s is not valid JSON; treating as empty.", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object; treating as empty.", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise StorageError(f"Failed to write {self._path}: {exc}") from exc
        with contextlib.suppress(OSError):
            # Task notes are private; keep the file owner-only.
            os.chmod(self._path, 0o600)

    def _get_sync(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def _set_sync(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def _remove_sync(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._dump(data)

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set_sync, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove_sync, key)
