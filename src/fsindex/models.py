"""Core fsindex data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class SortKey(str, Enum):
    """Columns a search may be ordered by."""

    NAME = "name"
    SIZE = "size"
    MODIFIED = "modified"


@dataclass(slots=True)
class FileRecord:
    """One indexed file, keyed by its path."""

    path: str
    name: str
    ext: Optional[str]
    size: int
    modified: datetime
    added_at: datetime
    hash: Optional[str] = None


@dataclass(slots=True)
class DuplicateGroup:
    """Paths sharing the same content hash and size."""

    hash: str
    size: int
    count: int
    paths: List[str] = field(default_factory=list)


@dataclass(slots=True)
class SearchQuery:
    """Filter, sort and pagination options for a search.

    Every field is optional; ``None`` (or an empty string for the text
    filters) means no constraint on that dimension.
    """

    name_like: Optional[str] = None
    ext: Optional[str] = None
    min_size: Optional[int] = None
    max_size: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    sort_key: SortKey = SortKey.NAME
    desc: bool = False
    limit: Optional[int] = None
    offset: Optional[int] = None

    def normalized_ext(self) -> Optional[str]:
        if not self.ext:
            return None
        ext = self.ext.lstrip(".").lower()
        return ext or None
