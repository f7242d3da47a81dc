"""
SQLite adapter for BlobStore.

Use ":memory:" for tests, a file path for production.
"""

import sqlite3
from datetime import datetime, timezone

from cabinbook.domain.blob_store import BlobStore, StorageError

_SCHEMA = """
CREATE TABLE IF NOT EXISTS slots (
    name        TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteBlobStore(BlobStore):

    def __init__(self, db_path: str = "cabinbook.db"):
        try:
            self._conn = sqlite3.connect(db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open {db_path}: {exc}") from exc

    def read(self, slot: str) -> str | None:
        try:
            row = self._conn.execute(
                "SELECT value FROM slots WHERE name = ?", (slot,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot read slot {slot!r}: {exc}") from exc
        if not row:
            return None
        return row["value"]

    def write(self, slot: str, text: str) -> None:
        try:
            self._conn.execute(
                "INSERT OR REPLACE INTO slots (name, value, updated_at) VALUES (?, ?, ?)",
                (slot, text, _now()),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot write slot {slot!r}: {exc}") from exc
