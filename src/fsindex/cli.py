"""Command line interface for fsindex."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from fsindex.config import AppConfig
from fsindex.errors import FsIndexError
from fsindex.index.duplicates import DuplicateFinder
from fsindex.index.indexer import Indexer
from fsindex.index.search import Searcher
from fsindex.index.storage import SQLiteFileStore
from fsindex.models import DuplicateGroup, FileRecord, SearchQuery, SortKey
from fsindex.utils.text import format_timestamp, human_bytes


console = Console()
app = typer.Typer(help="fsindex - file system indexing and search utility")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _resolve_db(ctx: typer.Context) -> Path:
    config: AppConfig = ctx.obj
    return config.resolve_db_path(Path.cwd())


def _open_store(ctx: typer.Context) -> SQLiteFileStore:
    resolved_db = _resolve_db(ctx)
    _ensure_db_parent(resolved_db)
    return SQLiteFileStore(resolved_db)


def _parse_date(value: Optional[str], option: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter(
            f"expected YYYY-MM-DD, got {value!r}", param_hint=option
        ) from exc


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {exc}")
    raise typer.Exit(code=1)


def render_records(records: List[FileRecord]) -> None:
    if not records:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Ext")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Path")

    for record in records:
        table.add_row(
            record.name,
            record.ext or "",
            human_bytes(record.size),
            format_timestamp(record.modified),
            record.path,
        )
    console.print(table)


def render_duplicates(groups: List[DuplicateGroup]) -> None:
    if not groups:
        console.print("[yellow]No duplicates found.[/yellow]")
        return

    for group in groups:
        console.print(
            f"hash={group.hash} size={human_bytes(group.size)} count={group.count}",
            highlight=False,
        )
        for path in group.paths:
            console.print(f"  {path}", highlight=False)


@app.callback()
def main(
    ctx: typer.Context,
    db: Path = typer.Option(None, "--db", help="Path to the SQLite database"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """File system indexing and search utility."""
    _setup_logging(verbose)
    ctx.obj = AppConfig(db_path=db)


@app.command()
def index(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Root directory to index", resolve_path=True),
    hash_: bool = typer.Option(False, "--hash", help="Compute and store file hashes"),
) -> None:
    """Index a directory recursively."""
    with _open_store(ctx) as store:
        try:
            stats = Indexer(store).index_dir(path, compute_hash=hash_)
        except FsIndexError as exc:
            _fail(exc)
    console.print(f"Indexed {stats.total} files")


@app.command()
def search(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, help="Filter by name fragment"),
    ext: Optional[str] = typer.Option(None, help="Filter by file extension"),
    min_size: Optional[int] = typer.Option(None, help="Minimum file size in bytes"),
    max_size: Optional[int] = typer.Option(None, help="Maximum file size in bytes"),
    date_from: Optional[str] = typer.Option(
        None, "--from", help="Earliest modified date (YYYY-MM-DD)"
    ),
    date_to: Optional[str] = typer.Option(
        None, "--to", help="Latest modified date (YYYY-MM-DD)"
    ),
    sort: SortKey = typer.Option(SortKey.NAME, help="Sort column"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending instead of ascending"),
    limit: int = typer.Option(AppConfig().search_limit, help="Limit number of rows"),
    offset: int = typer.Option(0, help="Offset for pagination"),
) -> None:
    """Search files using optional filters."""
    query = SearchQuery(
        name_like=name,
        ext=ext,
        min_size=min_size,
        max_size=max_size,
        date_from=_parse_date(date_from, "--from"),
        date_to=_parse_date(date_to, "--to"),
        sort_key=sort,
        desc=desc,
        limit=limit,
        offset=offset,
    )
    with _open_store(ctx) as store:
        try:
            records = Searcher(store).search(query)
        except FsIndexError as exc:
            _fail(exc)
    render_records(records)


@app.command()
def recent(
    ctx: typer.Context,
    limit: int = typer.Option(AppConfig().recent_limit, help="Number of rows to fetch"),
) -> None:
    """Show most recently indexed files."""
    with _open_store(ctx) as store:
        try:
            records = Searcher(store).recently_added(limit)
        except FsIndexError as exc:
            _fail(exc)
    render_records(records)


@app.command()
def duplicates(
    ctx: typer.Context,
    limit: int = typer.Option(
        AppConfig().duplicate_limit, help="Maximum number of duplicate groups"
    ),
) -> None:
    """Display duplicate files grouped by hash."""
    with _open_store(ctx) as store:
        try:
            groups = DuplicateFinder(store).find(limit)
        except FsIndexError as exc:
            _fail(exc)
    render_duplicates(groups)
