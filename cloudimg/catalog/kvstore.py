# -*- coding: utf-8 -*-
"""
Key-Value Store - Authoritative storage for catalog records.

Provides the ``KeyValueStore`` interface and a SQLite-backed
implementation. Keys are structured paths such as
``/ns/<namespace>/resources/image/<id>``; values are serialized
records.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

# Standard library
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple, Union

# cloudimg internal
from cloudimg.catalog.errors import PersistenceError


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

MEMORY = ":memory:"


class KeyValueStore(ABC):
    """Interface of the authoritative key-value store."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def put_if_absent(self, key: str, value: str) -> bool:
        """Store ``value`` only if ``key`` is unused.

        Returns
        -------
        bool
            True if the value was written, False if the key existed.
        """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value under ``key``, or None if missing."""

    @abstractmethod
    def get_list(self, prefix: str) -> List[Tuple[str, str]]:
        """Return ``(key, value)`` pairs whose key starts with ``prefix``."""

    def close(self) -> None:
        """Release resources held by the store."""


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-backed key-value store.

    Parameters
    ----------
    db_path : Union[str, Path]
        Path to the SQLite database file, or ``":memory:"``.
    """

    def __init__(self, db_path: Union[str, Path]) -> None:
        if str(db_path) == MEMORY:
            target = MEMORY
        else:
            path = Path(db_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(target, check_same_thread=False)
        self._conn.executescript(_SCHEMA_SQL)
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> 'SqliteKeyValueStore':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def put(self, key: str, value: str) -> None:
        try:
            with self._lock:
                self._conn.execute(
                    """INSERT INTO kv (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = datetime('now')""",
                    (key, value),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to put {key!r}: {e}") from e

    def put_if_absent(self, key: str, value: str) -> bool:
        try:
            with self._lock:
                cursor = self._conn.execute(
                    "INSERT OR IGNORE INTO kv (key, value) VALUES (?, ?)",
                    (key, value),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to put {key!r}: {e}") from e
        return cursor.rowcount > 0

    def get(self, key: str) -> Optional[str]:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT value FROM kv WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to get {key!r}: {e}") from e
        return row[0] if row is not None else None

    def get_list(self, prefix: str) -> List[Tuple[str, str]]:
        try:
            with self._lock:
                rows = self._conn.execute(
                    "SELECT key, value FROM kv "
                    "WHERE substr(key, 1, ?) = ? ORDER BY key",
                    (len(prefix), prefix),
                ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to list keys under {prefix!r}: {e}"
            ) from e
        return [(r[0], r[1]) for r in rows]
