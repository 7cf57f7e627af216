"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_NAME = "index.db"
DB_ENV_VAR = "FSINDEX_DB"


def _get_default_db_path() -> Path:
    """Use ``$FSINDEX_DB`` when set, otherwise ``index.db`` in the working directory."""
    env_db = os.environ.get(DB_ENV_VAR)
    if env_db:
        return Path(env_db).expanduser()
    return Path(DEFAULT_DB_NAME)


@dataclass(slots=True)
class AppConfig:
    db_path: Path | None = None
    search_limit: int = 50
    recent_limit: int = 50
    duplicate_limit: int = 25

    def __post_init__(self) -> None:
        if self.db_path is None:
            self.db_path = _get_default_db_path()

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if self.db_path is None:
            self.db_path = _get_default_db_path()
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path
