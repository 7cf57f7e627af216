"""Filtered, sorted and paginated search over the file index."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, time, timezone
from typing import Any, Iterable, List, Optional, Tuple

from fsindex.errors import ValidationError
from fsindex.index.storage import RECORD_COLUMNS, SQLiteFileStore, row_to_record
from fsindex.models import FileRecord, SearchQuery, SortKey

LOGGER = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortKey.NAME: "name",
    SortKey.SIZE: "size",
    SortKey.MODIFIED: "modified",
}

_END_OF_DAY = time(23, 59, 59)


def _day_bound(value: Any, at: time, label: str) -> int:
    if isinstance(value, datetime) or not isinstance(value, date):
        raise ValidationError(f"invalid {label} date: {value!r}")
    try:
        return int(datetime.combine(value, at, tzinfo=timezone.utc).timestamp())
    except (OverflowError, ValueError) as exc:
        raise ValidationError(f"invalid {label} date: {value!r}") from exc


def _non_negative(value: int, label: str) -> int:
    if value < 0:
        raise ValidationError(f"{label} must be non-negative, got {value}")
    return value


def build_search_sql(query: SearchQuery) -> Tuple[str, List[Any]]:
    """Translate a :class:`SearchQuery` into SQL text and bound parameters.

    Each present filter contributes one ``(predicate, parameter)`` pair; the
    predicates are joined with ``AND``. User values only ever travel as
    parameters.
    """
    clauses: List[Tuple[str, Any]] = []

    if query.name_like:
        clauses.append(("instr(name, ?) > 0", query.name_like))
    ext = query.normalized_ext()
    if ext is not None:
        clauses.append(("ext = ?", ext))
    if query.min_size is not None:
        clauses.append(("size >= ?", query.min_size))
    if query.max_size is not None:
        clauses.append(("size <= ?", query.max_size))
    if query.date_from is not None:
        clauses.append(("modified >= ?", _day_bound(query.date_from, time.min, "from")))
    if query.date_to is not None:
        clauses.append(("modified <= ?", _day_bound(query.date_to, _END_OF_DAY, "to")))

    sql = f"SELECT {RECORD_COLUMNS} FROM files"
    params: List[Any] = [param for _, param in clauses]
    if clauses:
        sql += " WHERE " + " AND ".join(predicate for predicate, _ in clauses)

    sql += f" ORDER BY {_SORT_COLUMNS[SortKey(query.sort_key)]}"
    if query.desc:
        sql += " DESC"

    if query.limit is not None or query.offset is not None:
        limit = -1 if query.limit is None else _non_negative(query.limit, "limit")
        sql += " LIMIT ?"
        params.append(limit)
        if query.offset is not None:
            sql += " OFFSET ?"
            params.append(_non_negative(query.offset, "offset"))

    return sql, params


def decode_rows(rows: Iterable[sqlite3.Row]) -> List[FileRecord]:
    """Decode result rows, dropping any whose stored timestamps cannot be decoded."""
    records: List[FileRecord] = []
    dropped = 0
    for row in rows:
        try:
            records.append(row_to_record(row))
        except (OverflowError, OSError, TypeError, ValueError) as exc:
            dropped += 1
            LOGGER.warning("Skipping undecodable row for %s: %s", row["path"], exc)
    if dropped:
        LOGGER.warning("Dropped %d undecodable rows from result", dropped)
    return records


class Searcher:
    """High-level API to query the file index."""

    def __init__(self, store: SQLiteFileStore) -> None:
        self.store = store

    def search(self, query: Optional[SearchQuery] = None) -> List[FileRecord]:
        sql, params = build_search_sql(query or SearchQuery())
        return decode_rows(self.store.query(sql, params))

    def recently_added(self, limit: int) -> List[FileRecord]:
        """Return the most recently first-indexed files, newest first."""
        rows = self.store.query(
            f"SELECT {RECORD_COLUMNS} FROM files ORDER BY added_at DESC LIMIT ?",
            (_non_negative(limit, "limit"),),
        )
        return decode_rows(rows)
