"""Tests for core data models."""

from __future__ import annotations

from datetime import datetime, timezone

from fsindex.models import DuplicateGroup, FileRecord, SearchQuery, SortKey


def _record(**overrides) -> FileRecord:
    fields = dict(
        path="/data/a.txt",
        name="a.txt",
        ext="txt",
        size=10,
        modified=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        added_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
        hash=None,
    )
    fields.update(overrides)
    return FileRecord(**fields)


class TestFileRecord:
    """Test FileRecord dataclass."""

    def test_hash_defaults_to_none(self) -> None:
        record = FileRecord(
            path="/x",
            name="x",
            ext=None,
            size=0,
            modified=datetime(2024, 1, 1, tzinfo=timezone.utc),
            added_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert record.hash is None

    def test_equality_by_value(self) -> None:
        assert _record() == _record()
        assert _record() != _record(size=11)



class TestDuplicateGroup:
    def test_paths_default_empty(self) -> None:
        group = DuplicateGroup(hash="h", size=1, count=2)
        assert group.paths == []


class TestSearchQuery:
    """Test SearchQuery defaults and normalization."""

    def test_defaults_impose_no_constraints(self) -> None:
        query = SearchQuery()

        assert query.name_like is None
        assert query.ext is None
        assert query.min_size is None
        assert query.max_size is None
        assert query.date_from is None
        assert query.date_to is None
        assert query.sort_key is SortKey.NAME
        assert query.desc is False
        assert query.limit is None
        assert query.offset is None

    def test_normalized_ext_lowercases(self) -> None:
        assert SearchQuery(ext="TXT").normalized_ext() == "txt"

    def test_normalized_ext_strips_leading_dot(self) -> None:
        assert SearchQuery(ext=".Md").normalized_ext() == "md"

    def test_normalized_ext_empty_is_absent(self) -> None:
        assert SearchQuery(ext="").normalized_ext() is None
        assert SearchQuery(ext=".").normalized_ext() is None
        assert SearchQuery().normalized_ext() is None


class TestSortKey:
    def test_values(self) -> None:
        assert SortKey("name") is SortKey.NAME
        assert SortKey("size") is SortKey.SIZE
        assert SortKey("modified") is SortKey.MODIFIED
