"""Application settings file.

Purpose
-------
Persist the user-facing settings of the desktop client: generation
parameters, the preferred model, and a named list of API keys with one of
them selected. The core never reads this file itself; the session layer
calls :meth:`AppSettings.provider_config_for` to turn the settings plus a
conversation into the ``ProviderConfig`` value passed into each call.

File format
-----------
JSON by default (``<config dir>/llm-playground/config.json``). A path ending
in ``.yaml``/``.yml`` is read and written with PyYAML::

    temperature: 0.8
    max_tokens: 1024
    model: ""
    api_key: 0
    api_keys:
      - name: work
        key: sk-...
        provider: openai

Failure modes
-------------
- Missing file: defaults are written and returned.
- Unparsable or invalid content: :class:`ConfigError`.
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from ..base.dto.provider_config import ProviderConfig
from ..base.models import Conversation, ProviderFamily
from .defaults import DEFAULT_MAX_TOKENS, DEFAULT_MODELS, DEFAULT_TEMPERATURE, SETTINGS_FILE_NAME
from .env import config_dir, resolve_provider_key


class ConfigError(Exception):
    """The settings file exists but cannot be used."""


class APIKey(BaseModel):
    """A named credential for one provider family."""

    name: str = Field(..., min_length=1)
    key: str = Field(default="", repr=False)
    provider: ProviderFamily = ProviderFamily.OPENAI
    base_url: Optional[str] = None

    @field_validator("provider", mode="before")
    @classmethod
    def _parse_provider(cls, value):
        return ProviderFamily.parse(value)


class AppSettings(BaseModel):
    """User settings persisted between sessions.

    Attributes:
        temperature: Sampling temperature for every call.
        max_tokens: Generation limit for every call.
        model: Preferred model; empty means "use the family default".
        api_key: Index of the selected entry in ``api_keys``.
        api_keys: Named credentials.
        system_prompt: Optional system instruction for new requests.
    """

    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    model: str = ""
    api_key: Optional[int] = None
    api_keys: List[APIKey] = Field(default_factory=list)
    system_prompt: Optional[str] = None

    @property
    def selected_key(self) -> Optional[APIKey]:
        if self.api_key is None or not 0 <= self.api_key < len(self.api_keys):
            return None
        return self.api_keys[self.api_key]

    def key_for(self, family: ProviderFamily) -> Optional[APIKey]:
        """Selected key when it matches ``family``, else the first key for it."""
        selected = self.selected_key
        if selected is not None and selected.provider is family:
            return selected
        return next((k for k in self.api_keys if k.provider is family), None)

    def provider_config_for(self, conversation: Conversation) -> ProviderConfig:
        """Resolve the configuration for a call on ``conversation``.

        Precedence:
            key: settings entry for the family, then the environment.
            model: conversation, then settings, then the family default.
            base_url: conversation, then the key entry.

        Raises:
            pydantic.ValidationError: When the resolved values are incomplete
                (no key for a hosted family, no model for a self-hosted one).
        """
        family = conversation.provider
        entry = self.key_for(family)
        api_key = entry.key if entry is not None and entry.key else None
        if api_key is None:
            api_key, _ = resolve_provider_key(family.value)
        model = conversation.model or self.model or DEFAULT_MODELS.get(family.value, "")
        base_url = conversation.base_url or (entry.base_url if entry is not None else None)
        return ProviderConfig(
            family=family,
            model=model,
            api_key=api_key,
            base_url=base_url,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            system_prompt=self.system_prompt,
        )


def settings_path(path: Optional[Union[str, Path]] = None) -> Path:
    return Path(path).expanduser() if path else config_dir() / SETTINGS_FILE_NAME


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in (".yaml", ".yml")


def _parse(path: Path, text: str) -> Dict[str, Any]:
    if _is_yaml(path):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return data


def _dump(path: Path, settings: AppSettings) -> str:
    data = settings.model_dump(mode="json")
    if _is_yaml(path):
        return yaml.safe_dump(data, sort_keys=False)
    return json.dumps(data, indent=2) + "\n"


def save_settings(settings: AppSettings, path: Optional[Union[str, Path]] = None) -> Path:
    """Write ``settings`` atomically (temp file + rename) and return the path."""
    target = settings_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".settings-", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(_dump(target, settings))
        os.replace(tmp, target)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    return target


def load_settings(path: Optional[Union[str, Path]] = None) -> AppSettings:
    """Load settings, writing defaults when the file does not exist yet.

    Raises:
        ConfigError: The file is unreadable, unparsable or invalid.
    """
    target = settings_path(path)
    if not target.exists():
        settings = AppSettings()
        save_settings(settings, target)
        return settings
    try:
        data = _parse(target, target.read_text(encoding="utf-8"))
        return AppSettings.model_validate(data)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        # ValidationError and JSONDecodeError are ValueErrors
        raise ConfigError(f"{target}: {exc}") from exc


__all__ = [
    "APIKey",
    "AppSettings",
    "ConfigError",
    "load_settings",
    "save_settings",
    "settings_path",
]
