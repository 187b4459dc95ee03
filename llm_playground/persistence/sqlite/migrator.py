"""Schema migrations tracked through ``PRAGMA user_version``.

Each entry in ``MIGRATIONS`` upgrades the schema by exactly one version and
runs inside its own transaction. ``migrate`` is idempotent: a database that
is already current is left untouched.
"""

from __future__ import annotations

import sqlite3
from typing import Tuple

MIGRATIONS: Tuple[str, ...] = (
    # 1: conversations + messages
    """
    CREATE TABLE IF NOT EXISTS conversations (
        id         TEXT PRIMARY KEY,
        title      TEXT NOT NULL,
        provider   TEXT NOT NULL,
        model      TEXT,
        base_url   TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    CREATE TABLE IF NOT EXISTS messages (
        id              INTEGER PRIMARY KEY AUTOINCREMENT,
        conversation_id TEXT NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
        role            TEXT NOT NULL CHECK (role IN ('system', 'user', 'assistant')),
        content         TEXT NOT NULL DEFAULT '',
        status          TEXT NOT NULL,
        created_at      TEXT NOT NULL,
        updated_at      TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id, id);
    CREATE INDEX IF NOT EXISTS idx_conversations_updated ON conversations(updated_at);
    """,
)


def schema_version(conn: sqlite3.Connection) -> int:
    return int(conn.execute("PRAGMA user_version;").fetchone()[0])


def migrate(conn: sqlite3.Connection) -> int:
    """Apply pending migrations and return the resulting schema version.

    Raises:
        RuntimeError: The database was written by a newer schema version.
    """
    current = schema_version(conn)
    if current > len(MIGRATIONS):
        raise RuntimeError(f"database schema version {current} is newer than supported {len(MIGRATIONS)}")
    for version, script in enumerate(MIGRATIONS[current:], start=current + 1):
        try:
            conn.execute("BEGIN")
            for statement in filter(str.strip, script.split(";")):
                conn.execute(statement)
            conn.execute(f"PRAGMA user_version={version};")
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    return schema_version(conn)


__all__ = ["MIGRATIONS", "migrate", "schema_version"]
