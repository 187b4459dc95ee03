"""llm_playground.config.env
==========================

Centralized environment variable mapping and helpers for provider credentials
and application paths.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Gemini historically accepts
  two variable names; ``ENV_ALIASES`` lists them with the canonical one first.
- Helpers never raise on unknown providers or unset variables; callers decide
  how to proceed.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from .defaults import APP_DIR_NAME, HISTORY_DB_FILE_NAME

CONFIG_DIR_ENV = "LLM_PLAYGROUND_CONFIG_DIR"
DB_PATH_ENV = "LLM_PLAYGROUND_DB"

# Canonical family -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "openai_compatible": "OPENAI_COMPATIBLE_API_KEY",
}

# Family -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. Case-insensitive.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a family tag."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a family, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a family from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        candidate; ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


def config_dir() -> Path:
    """Return ``<config dir>/llm-playground``.

    The base directory is ``LLM_PLAYGROUND_CONFIG_DIR`` when set, else
    ``XDG_CONFIG_HOME``, else ``~/.config``.
    """
    base = os.environ.get(CONFIG_DIR_ENV) or os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return Path(base) / APP_DIR_NAME


def default_db_path() -> Path:
    """Return the history database path (``LLM_PLAYGROUND_DB`` wins)."""
    override = os.environ.get(DB_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return config_dir() / HISTORY_DB_FILE_NAME


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "CONFIG_DIR_ENV",
    "DB_PATH_ENV",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
    "config_dir",
    "default_db_path",
]
