"""
SQLite key-value store for korkort.

Durable, string-keyed storage that survives restarts. Values are plain
strings; JSON helpers serialize lists and dicts on top.

Database location: ~/.korkort/state.db
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
from pathlib import Path
from typing import Any

from loguru import logger


class LocalStorageError(Exception):
    """Raised when the local store cannot be read or written."""
    pass


class LocalStorage:
    """
    SQLite-backed key-value persistence.

    Every call opens its own connection so the blocking work can run in a
    worker thread via asyncio.to_thread. Each call touches one key and
    commits before returning.
    """

    DEFAULT_DB_PATH = Path.home() / ".korkort" / "state.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the key-value store.

        Args:
            db_path: Custom database path (defaults to ~/.korkort/state.db)
        """
        self.db_path = db_path or self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.debug("LocalStorage initialized at {}", self.db_path)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_schema(self) -> None:
        """Create the key-value table if it does not exist."""
        try:
            conn = self._connect()
            try:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise LocalStorageError(f"Cannot initialize {self.db_path}: {exc}") from exc

    # =========================================================================
    # Blocking primitives
    # =========================================================================

    def _get(self, key: str) -> str | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def _set(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def _remove(self, key: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def _clear(self) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM kv_store")
            conn.commit()
        finally:
            conn.close()

    def _keys(self) -> list[str]:
        conn = self._connect()
        try:
            return [row[0] for row in conn.execute("SELECT key FROM kv_store ORDER BY key")]
        finally:
            conn.close()

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as exc:
            logger.error("Local storage failure in {}: {}", func.__name__, exc)
            raise LocalStorageError(str(exc)) from exc

    # =========================================================================
    # Public API
    # =========================================================================

    async def get_item(self, key: str) -> str | None:
        """Return the stored string for key, or None if absent."""
        return await self._run(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, overwriting any previous value."""
        await self._run(self._set, key, value)

    async def remove_item(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""
        await self._run(self._remove, key)

    async def clear(self) -> None:
        """Delete every key."""
        await self._run(self._clear)

    async def keys(self) -> list[str]:
        """List stored keys in sorted order."""
        return await self._run(self._keys)

    async def get_json(self, key: str, default: Any = None) -> Any:
        """
        Read a JSON value.

        Args:
            key: Storage key
            default: Returned when the key is absent

        Raises:
            LocalStorageError: If the stored value is not valid JSON
        """
        raw = await self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise LocalStorageError(f"Corrupt JSON under {key!r}: {exc}") from exc

    async def set_json(self, key: str, value: Any) -> None:
        """Serialize value as JSON and store it under key."""
        await self.set_item(key, json.dumps(value))
