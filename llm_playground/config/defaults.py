"""llm_playground.config.defaults
===============================

Central place for small, stable default values used across the package.
These defaults can be overridden via environment variables or the settings
file, but provide sensible fallbacks for local use and tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Application ----
APP_DIR_NAME = "llm-playground"
SETTINGS_FILE_NAME = "config.json"
HISTORY_DB_FILE_NAME = "history.db"

# Generation parameters used when the settings file does not set them.
DEFAULT_TEMPERATURE = 0.8
DEFAULT_MAX_TOKENS = 1024

# Upper bound on concurrently streaming runs per session controller.
DEFAULT_MAX_CONCURRENT_STREAMS = 4

# Title given to conversations created without one.
DEFAULT_CONVERSATION_TITLE = "New chat"


# ---- Provider-specific defaults ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-latest"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_API_VERSION = "2023-06-01"

GEMINI_DEFAULT_MODEL = "gemini-1.5-flash"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Family tag -> default model. Self-hosted endpoints have no sensible default.
DEFAULT_MODELS = {
    "openai": OPENAI_DEFAULT_MODEL,
    "anthropic": ANTHROPIC_DEFAULT_MODEL,
    "gemini": GEMINI_DEFAULT_MODEL,
}


# ---- Streaming ----
# Ceiling on undispatched bytes buffered by the SSE decoder (4 MiB).
SSE_MAX_EVENT_BYTES = 4 * 1024 * 1024


# ---- SQLite config (infrastructure) ----
# Standard busy timeout to mitigate lock contention (milliseconds).
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"


__all__ = [
    "APP_DIR_NAME",
    "SETTINGS_FILE_NAME",
    "HISTORY_DB_FILE_NAME",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MAX_CONCURRENT_STREAMS",
    "DEFAULT_CONVERSATION_TITLE",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "DEFAULT_MODELS",
    "SSE_MAX_EVENT_BYTES",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
]
