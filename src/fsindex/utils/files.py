"""Utility helpers for working with files."""

from __future__ import annotations

import errno
import hashlib
import os
import stat
from pathlib import Path
from typing import Iterator

from fsindex.errors import IndexingError

HASH_CHUNK_SIZE = 1 << 20


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every regular file under ``root``, descending into directories.

    Directory symlinks are not followed. Entries that are not regular files
    (broken links, FIFOs, sockets, devices) are skipped. Any other error while
    listing a directory or reading an entry's metadata aborts the walk with
    :class:`IndexingError`.
    """
    root = Path(root)
    if root.is_file():
        yield root
        return

    def _raise(exc: OSError) -> None:
        raise IndexingError(exc.filename or root, "cannot read directory") from exc

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if _is_regular_file(path):
                yield path


def _is_regular_file(path: Path) -> bool:
    """Stat ``path`` following links; only dangling or looping links are skipped."""
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        if exc.errno == errno.ELOOP:
            return False
        raise IndexingError(path, "cannot read metadata") from exc
    return stat.S_ISREG(st.st_mode)


def compute_hash(path: Path, *, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Compute the SHA256 hex digest of a file's full content."""
    sha = hashlib.sha256()
    try:
        with Path(path).open("rb") as handle:
            for chunk in iter(lambda: handle.read(chunk_size), b""):
                sha.update(chunk)
    except OSError as exc:
        raise IndexingError(path, "cannot hash file") from exc
    return sha.hexdigest()
