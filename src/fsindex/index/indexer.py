"""Directory indexing pipeline."""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fsindex.errors import IndexingError, ValidationError
from fsindex.index.storage import SQLiteFileStore
from fsindex.models import FileRecord
from fsindex.utils.files import compute_hash as hash_file
from fsindex.utils.files import iter_files

LOGGER = logging.getLogger(__name__)

MAX_FILE_SIZE = 2**63 - 1


def build_record(
    path: Path,
    *,
    compute_hash: bool = False,
    now: Optional[datetime] = None,
) -> FileRecord:
    """Build a :class:`FileRecord` from a file on disk.

    Raises:
        ValidationError: the entry is not a regular file, its name is not
            valid text, or its size does not fit a signed 64-bit integer.
        IndexingError: metadata or content could not be read.
    """
    path = Path(path)
    try:
        st = path.stat()
    except OSError as exc:
        raise IndexingError(path, "cannot read metadata") from exc
    if not stat.S_ISREG(st.st_mode):
        raise ValidationError(f"not a regular file: {path}")

    name = path.name
    try:
        str(path).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError(f"path is not valid UTF-8: {path!r}") from exc

    suffix = Path(name).suffix
    ext = suffix[1:].lower() if suffix else None

    if st.st_size > MAX_FILE_SIZE:
        raise ValidationError(f"file is larger than 9 exabytes: {path}")

    try:
        modified = datetime.fromtimestamp(int(st.st_mtime), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise IndexingError(path, "missing modified time") from exc

    added_at = now if now is not None else datetime.now(timezone.utc)
    digest = hash_file(path) if compute_hash else None

    return FileRecord(
        path=str(path),
        name=name,
        ext=ext,
        size=st.st_size,
        modified=modified,
        added_at=added_at,
        hash=digest,
    )


@dataclass(slots=True)
class IndexStats:
    inserted: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated

    def increment(self, status: str) -> None:
        if status == "inserted":
            self.inserted += 1
        elif status == "updated":
            self.updated += 1
        else:
            raise ValueError(f"unknown upsert status: {status}")


class Indexer:
    """Walks a directory tree and upserts one record per regular file."""

    def __init__(self, store: SQLiteFileStore) -> None:
        self.store = store

    def index_dir(self, root: Path, *, compute_hash: bool = False) -> IndexStats:
        """Index every regular file under ``root``.

        The walk stops at the first file that cannot be read or stored;
        records upserted before the failure are kept.
        """
        stats = IndexStats()
        for path in iter_files(Path(root)):
            LOGGER.debug("Indexing: %s", path)
            record = build_record(path, compute_hash=compute_hash)
            stats.increment(self.store.upsert(record))

        LOGGER.info(
            "Indexed %d files under %s (%d new, %d updated)",
            stats.total,
            root,
            stats.inserted,
            stats.updated,
        )
        return stats
