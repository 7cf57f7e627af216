"""Exceptions raised by fsindex."""

from __future__ import annotations

from pathlib import Path


class FsIndexError(Exception):
    """Base exception for fsindex errors."""


class IndexingError(FsIndexError):
    """A file or directory could not be read while indexing."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = Path(path)


class ValidationError(FsIndexError, ValueError):
    """Input that cannot be turned into a record or a query."""
