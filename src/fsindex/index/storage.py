"""SQLite file record store."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from fsindex.models import FileRecord

RECORD_COLUMNS = "path, name, ext, size, modified, added_at, hash"


def to_epoch(value: datetime) -> int:
    return int(value.timestamp())


def from_epoch(value: Any) -> datetime:
    """Decode stored epoch seconds.

    Raises ValueError for non-integer values and ValueError, OverflowError or
    OSError for integers outside datetime's range.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"timestamp is not an integer: {value!r}")
    return datetime.fromtimestamp(value, tz=timezone.utc)


def row_to_record(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        path=row["path"],
        name=row["name"],
        ext=row["ext"],
        size=row["size"],
        modified=from_epoch(row["modified"]),
        added_at=from_epoch(row["added_at"]),
        hash=row["hash"],
    )


def merge_row(stored_added_at: Any, incoming: FileRecord) -> Tuple[Any, ...]:
    """Resolve a path conflict: keep the stored ``added_at``, take everything else new.

    ``stored_added_at`` is the raw column value (``None`` for a new path) and
    is carried over undecoded. Returns values in ``RECORD_COLUMNS`` order.
    """
    added_at = to_epoch(incoming.added_at) if stored_added_at is None else stored_added_at
    return (
        incoming.path,
        incoming.name,
        incoming.ext,
        incoming.size,
        to_epoch(incoming.modified),
        added_at,
        incoming.hash,
    )


class SQLiteFileStore:
    """Persistence layer for file records, one row per path."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self._conn = sqlite3.connect(self.db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._ensure_schema()

    def __enter__(self) -> SQLiteFileStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS files (
                    path TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    ext TEXT,
                    size INTEGER NOT NULL,
                    modified INTEGER NOT NULL,
                    added_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                    hash TEXT
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_files_name ON files(name)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_files_ext ON files(ext)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_files_modified ON files(modified)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_files_hash ON files(hash)")

    def get(self, path: str) -> Optional[FileRecord]:
        row = self._conn.execute(
            f"SELECT {RECORD_COLUMNS} FROM files WHERE path = ?", (path,)
        ).fetchone()
        return row_to_record(row) if row is not None else None

    def upsert(self, record: FileRecord) -> str:
        """Insert a record or update the existing row for its path.

        Returns:
            ``"inserted"`` for a new path, ``"updated"`` otherwise.
        """
        with self.transaction() as conn:
            row = conn.execute(
                "SELECT added_at FROM files WHERE path = ?", (record.path,)
            ).fetchone()
            stored = row["added_at"] if row is not None else None
            conn.execute(
                f"""
                INSERT INTO files({RECORD_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(path) DO UPDATE SET
                    name = excluded.name,
                    ext = excluded.ext,
                    size = excluded.size,
                    modified = excluded.modified,
                    added_at = excluded.added_at,
                    hash = excluded.hash
                """,
                merge_row(stored, record),
            )
        return "inserted" if row is None else "updated"

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        return self._conn.execute(sql, tuple(params)).fetchall()

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM files").fetchone()[0]
