"""Duplicate detection over indexed content hashes."""

from __future__ import annotations

from typing import List

from fsindex.errors import ValidationError
from fsindex.index.storage import SQLiteFileStore
from fsindex.models import DuplicateGroup


class DuplicateFinder:
    """Groups indexed files that share a content hash and size.

    Only files indexed with hashing enabled take part. Identical hashes are
    trusted as identical content; no byte comparison is performed.
    """

    def __init__(self, store: SQLiteFileStore) -> None:
        self.store = store

    def find(self, limit: int) -> List[DuplicateGroup]:
        if limit < 0:
            raise ValidationError(f"limit must be non-negative, got {limit}")

        groups = self.store.query(
            """
            SELECT hash, size, COUNT(*) AS count
            FROM files
            WHERE hash IS NOT NULL
            GROUP BY hash, size
            HAVING COUNT(*) > 1
            ORDER BY count DESC, hash
            LIMIT ?
            """,
            (limit,),
        )

        results: List[DuplicateGroup] = []
        for group in groups:
            rows = self.store.query(
                "SELECT path FROM files WHERE hash = ? AND size = ? ORDER BY name, path",
                (group["hash"], group["size"]),
            )
            results.append(
                DuplicateGroup(
                    hash=group["hash"],
                    size=group["size"],
                    count=group["count"],
                    paths=[row["path"] for row in rows],
                )
            )
        return results
