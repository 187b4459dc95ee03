"""Provider family enumeration.

A provider family is a class of vendor API sharing one wire protocol. The set
is closed: adding a provider means adding a family and an adapter variant.
"""
from __future__ import annotations

from enum import Enum


class ProviderFamily(str, Enum):
    """Closed set of supported wire protocols."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OPENAI_COMPATIBLE = "openai_compatible"

    @classmethod
    def parse(cls, value: "str | ProviderFamily") -> "ProviderFamily":
        """Parse a family tag case-insensitively (``google`` aliases ``gemini``).

        Raises:
            ValueError: For unknown tags.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        if key == "google":
            key = "gemini"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown provider family: {value!r}") from None


__all__ = ["ProviderFamily"]
