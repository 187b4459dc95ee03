"""Shared fixtures for SQLite persistence tests.

Provides a ``db_path`` per test and a ``store`` fixture that opens a
``SqliteConversationStore`` on it and closes it after the test completes.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from llm_playground.persistence.sqlite import SqliteConversationStore


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "history.db"


@pytest.fixture()
def store(db_path: Path) -> Iterator[SqliteConversationStore]:
    """Yield a store on a fresh database file."""
    s = SqliteConversationStore(db_path)
    try:
        yield s
    finally:
        s.close()
