"""SQLite engine helpers for the persistence layer.

Purpose
-------
Centralize opening SQLite connections for the conversation store.

Timeout and reliability strategy
--------------------------------
- Applies ``busy_timeout`` (milliseconds) from
  ``llm_playground.config.defaults`` to mitigate lock contention.
- Enables WAL journaling and NORMAL synchronous mode for durability with good
  interactive performance, and enforces foreign keys.
- Connections are opened with ``check_same_thread=False`` because the store
  runs queries on worker threads; callers serialize access with a lock.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from ...config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)
from ...config.env import default_db_path

MEMORY_DB = ":memory:"


def get_db_path(db_path: Optional[Union[str, Path]] = None) -> Union[Path, str]:
    """Return a concrete database location.

    ``None`` resolves to :func:`default_db_path`; ``":memory:"`` is passed
    through unchanged; other values are expanded with ``Path.expanduser()``.
    """
    if db_path is None:
        return default_db_path()
    if str(db_path) == MEMORY_DB:
        return MEMORY_DB
    return Path(db_path).expanduser()


def create_connection(db_path: Optional[Union[str, Path]] = None) -> sqlite3.Connection:
    """Open a SQLite connection with sane defaults and apply PRAGMA settings.

    Behavior
    --------
    - Ensures the parent directory exists prior to opening a file database.
    - Avoids ``detect_types``; repositories handle ISO8601 text explicitly.
    - ``row_factory`` is ``sqlite3.Row``.
    """
    path = get_db_path(db_path)
    if isinstance(path, Path):
        path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


__all__ = ["MEMORY_DB", "get_db_path", "create_connection"]
