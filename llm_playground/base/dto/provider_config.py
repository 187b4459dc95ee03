"""Validated provider configuration value.

Purpose
-------
``ProviderConfig`` identifies the provider family, credential, optional
base-URL override and model for one call. It is built by the settings layer
and passed by value into every adapter call; the core never reads or writes
configuration storage itself.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation.

Failure modes
-------------
Validation either succeeds or raises ``pydantic.ValidationError``:
- ``model`` must be non-empty.
- ``api_key`` is required for every family except ``openai_compatible``.
- ``openai_compatible`` requires ``base_url``.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...config.defaults import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from ..models_parts.provider_family import ProviderFamily


class ProviderConfig(BaseModel):
    """Read-only configuration for a single provider call.

    Attributes
    ----------
    family:
        Wire protocol family.
    model:
        Model identifier sent to the provider.
    api_key:
        Credential. Excluded from ``repr`` so it never reaches logs.
    base_url:
        Optional API root override (proxies, self-hosted endpoints).
    temperature:
        Sampling temperature in ``[0, 2]``.
    max_tokens:
        Upper bound on generated tokens.
    system_prompt:
        Optional system instruction placed per family convention.
    """

    model_config = ConfigDict(frozen=True)

    family: ProviderFamily
    model: str = Field(..., min_length=1)
    api_key: Optional[str] = Field(default=None, repr=False)
    base_url: Optional[str] = None
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    system_prompt: Optional[str] = None

    @field_validator("family", mode="before")
    @classmethod
    def _parse_family(cls, value):
        return ProviderFamily.parse(value)

    @field_validator("api_key", "base_url", "system_prompt", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _validate_family_requirements(self) -> "ProviderConfig":
        if self.family is ProviderFamily.OPENAI_COMPATIBLE:
            if not self.base_url:
                raise ValueError("openai_compatible requires base_url")
        elif not self.api_key:
            raise ValueError(f"{self.family.value} requires api_key")
        return self

    def resolved_base_url(self, default: str) -> str:
        """Return the override (without trailing slash) or ``default``."""
        return (self.base_url or default).rstrip("/")


__all__ = ["ProviderConfig"]
