"""Conversation persistence backends (SQLite and in-memory)."""
