from __future__ import annotations

from .engine import create_connection, get_db_path
from .migrator import migrate
from .store import SqliteConversationStore
from .unit_of_work import UnitOfWorkSqlite

__all__ = [
    "create_connection",
    "get_db_path",
    "migrate",
    "SqliteConversationStore",
    "UnitOfWorkSqlite",
]
