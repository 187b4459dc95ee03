"""Configuration layer.

Goals
-----
* Centralize defaults (models, base URLs, generation parameters).
* Map provider families to credential environment variables.
* Persist the user's settings file (``config.settings``).

Sources merge in a predictable order when a call is configured:
    1. Conversation overrides (model, base URL)
    2. Settings file (selected key, model, temperature, max tokens)
    3. Environment variables (``OPENAI_API_KEY`` and friends)
    4. Built-in defaults

Only the dependency-free modules are re-exported here; import
``llm_playground.config.settings`` for the settings model, which depends on
the base DTOs.
"""
from __future__ import annotations

from .defaults import DEFAULT_MAX_TOKENS, DEFAULT_MODELS, DEFAULT_TEMPERATURE
from .env import config_dir, default_db_path, resolve_provider_key

__all__ = [
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODELS",
    "DEFAULT_TEMPERATURE",
    "config_dir",
    "default_db_path",
    "resolve_provider_key",
]
