# -*- coding: utf-8 -*-
"""
Catalog Index - SQLite-backed relational index of catalog images.

Provides the ImageIndex class, the query-optimized secondary copy of the
catalog. Rows are keyed by (namespace, id) and mirror the records held
in the key-value store.

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
import json
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Union

# cloudimg internal
from cloudimg.catalog.errors import PersistenceError
from cloudimg.catalog.kvstore import MEMORY
from cloudimg.catalog.models import CanonicalImageRecord, KeyValue


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS images (
    namespace TEXT NOT NULL,
    id TEXT NOT NULL,
    name TEXT NOT NULL DEFAULT '',
    connection_name TEXT DEFAULT '',
    csp_image_id TEXT DEFAULT '',
    csp_image_name TEXT DEFAULT '',
    description TEXT DEFAULT '',
    creation_date TEXT DEFAULT '',
    guest_os TEXT DEFAULT '',
    status TEXT DEFAULT '',
    key_value_list TEXT DEFAULT '[]',
    associated_object_list TEXT DEFAULT '[]',
    is_auto_generated INTEGER NOT NULL DEFAULT 0,

    PRIMARY KEY (namespace, id)
);

CREATE INDEX IF NOT EXISTS images_name ON images (namespace, name);
"""

_SCHEMA_VERSION_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""

_CURRENT_SCHEMA_VERSION = 1

_COLUMNS = (
    'namespace', 'id', 'name', 'connection_name', 'csp_image_id',
    'csp_image_name', 'description', 'creation_date', 'guest_os',
    'status', 'key_value_list', 'associated_object_list',
    'is_auto_generated',
)


def _escape_like(text: str) -> str:
    return (
        text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    )


class ImageIndex:
    """SQLite relational index over catalog images.

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
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        self._conn.executescript(_SCHEMA_SQL)
        self._conn.executescript(_SCHEMA_VERSION_SQL)
        self._conn.commit()

        row = self._conn.execute(
            "SELECT version FROM schema_version"
        ).fetchone()
        if row is None:
            self._conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (_CURRENT_SCHEMA_VERSION,),
            )
            self._conn.commit()

    @property
    def schema_version(self) -> int:
        """Current schema version."""
        row = self._conn.execute(
            "SELECT version FROM schema_version"
        ).fetchone()
        return row['version'] if row else 0

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> 'ImageIndex':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def insert(self, record: CanonicalImageRecord) -> None:
        """Insert a row for ``record``.

        Raises
        ------
        PersistenceError
            If the row cannot be inserted, including when a row with the
            same (namespace, id) already exists.
        """
        placeholders = ', '.join('?' for _ in _COLUMNS)
        try:
            with self._lock:
                self._conn.execute(
                    f"INSERT INTO images ({', '.join(_COLUMNS)}) "
                    f"VALUES ({placeholders})",
                    self._record_to_row(record),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to insert image {record.namespace}/{record.id}: {e}"
            ) from e

    def update(self, record: CanonicalImageRecord) -> bool:
        """Update the row keyed by the record's (namespace, id).

        Returns
        -------
        bool
            True if a row was updated.

        Raises
        ------
        PersistenceError
        """
        assignments = ', '.join(f"{c} = ?" for c in _COLUMNS[2:])
        params = self._record_to_row(record)[2:] + (record.namespace, record.id)
        try:
            with self._lock:
                cursor = self._conn.execute(
                    f"UPDATE images SET {assignments} "
                    "WHERE namespace = ? AND id = ?",
                    params,
                )
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to update image {record.namespace}/{record.id}: {e}"
            ) from e
        return cursor.rowcount > 0

    def get(self, namespace: str, image_id: str) -> Optional[CanonicalImageRecord]:
        """Get the indexed row for an image, or None if not found.

        Inspection accessor for the index copy; the registry itself reads
        records from the key-value store.
        """
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT * FROM images WHERE namespace = ? AND id = ?",
                    (namespace, image_id),
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to read image {namespace}/{image_id}: {e}"
            ) from e
        if row is None:
            return None
        return self._row_to_record(row)

    def search(
        self,
        namespace: str,
        keywords: Sequence[str] = (),
    ) -> List[CanonicalImageRecord]:
        """Find images in a namespace whose name contains every keyword.

        Keywords are matched verbatim as substrings (AND logic); callers
        normalize them first.

        Parameters
        ----------
        namespace : str
        keywords : Sequence[str]
            Substrings that must all occur in the name. Empty returns
            every image in the namespace.

        Returns
        -------
        List[CanonicalImageRecord]

        Raises
        ------
        PersistenceError
            If the query fails.
        """
        conditions = ["namespace = ?"]
        params: list = [namespace]
        for keyword in keywords:
            conditions.append("name LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(keyword)}%")

        sql = f"SELECT * FROM images WHERE {' AND '.join(conditions)} ORDER BY id"
        try:
            with self._lock:
                rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Image search failed: {e}") from e
        return [self._row_to_record(r) for r in rows]

    @staticmethod
    def _record_to_row(record: CanonicalImageRecord) -> tuple:
        return (
            record.namespace, record.id, record.name,
            record.connection_name, record.csp_image_id,
            record.csp_image_name, record.description,
            record.creation_date, record.guest_os, record.status,
            json.dumps([kv.to_dict() for kv in record.key_value_list]),
            json.dumps(list(record.associated_object_list)),
            int(record.is_auto_generated),
        )

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> CanonicalImageRecord:
        """Convert a database row to a CanonicalImageRecord."""
        return CanonicalImageRecord(
            namespace=row['namespace'],
            id=row['id'],
            name=row['name'] or '',
            connection_name=row['connection_name'] or '',
            csp_image_id=row['csp_image_id'] or '',
            csp_image_name=row['csp_image_name'] or '',
            description=row['description'] or '',
            creation_date=row['creation_date'] or '',
            guest_os=row['guest_os'] or '',
            status=row['status'] or '',
            key_value_list=[
                KeyValue.from_dict(kv)
                for kv in json.loads(row['key_value_list'] or '[]')
            ],
            associated_object_list=json.loads(
                row['associated_object_list'] or '[]'
            ),
            is_auto_generated=bool(row['is_auto_generated']),
        )
