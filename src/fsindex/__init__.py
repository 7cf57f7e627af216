"""fsindex - index a directory tree into SQLite and query it."""

from fsindex.models import DuplicateGroup, FileRecord, SearchQuery, SortKey

__all__ = ["DuplicateGroup", "FileRecord", "SearchQuery", "SortKey"]
__version__ = "0.1.0"
