"""Adapter factory.

Purpose
-------
Resolve a :class:`ProviderFamily` to its adapter variant. Adapter modules are
imported lazily using ``importlib`` so importing the core does not import
every wire format.

Timeout and fallback semantics
------------------------------
None. The factory either returns an adapter or raises
:class:`UnknownProviderError`.
"""

from __future__ import annotations

from importlib import import_module
from typing import Dict, Tuple, Type

from .interfaces import ProviderAdapter
from .models import ProviderFamily


class UnknownProviderError(Exception):
    """Raised when a family cannot be resolved to an adapter.

    Failure modes include an unknown family tag, an import failure of the
    adapter module, and a missing adapter class.
    """


class AdapterFactory:
    """Create provider adapters for a family (e.g., ``"anthropic"``).

    Adapters are stateless, so one instance per family is cached and shared.
    """

    _ADAPTERS: Dict[ProviderFamily, Tuple[str, str]] = {
        ProviderFamily.OPENAI: ("llm_playground.openai.adapter", "OpenAIAdapter"),
        ProviderFamily.OPENAI_COMPATIBLE: ("llm_playground.openai.adapter", "OpenAICompatibleAdapter"),
        ProviderFamily.ANTHROPIC: ("llm_playground.anthropic.adapter", "AnthropicAdapter"),
        ProviderFamily.GEMINI: ("llm_playground.gemini.adapter", "GeminiAdapter"),
    }
    _CACHE: Dict[ProviderFamily, ProviderAdapter] = {}

    @classmethod
    def create(cls, family: "ProviderFamily | str") -> ProviderAdapter:
        """Return the adapter for ``family``.

        Raises
        ------
        UnknownProviderError
            If the family is unknown, the adapter module fails to import, or
            the adapter class is missing.
        """
        try:
            fam = ProviderFamily.parse(family)
        except ValueError as exc:
            raise UnknownProviderError(f"Unknown provider '{family}'") from exc
        cached = cls._CACHE.get(fam)
        if cached is not None:
            return cached

        module_path, class_name = cls._ADAPTERS[fam]
        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{fam.value}': {exc}"
            ) from exc
        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{fam.value}'"
            ) from exc
        adapter = klass()
        cls._CACHE[fam] = adapter
        return adapter

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported family tags in deterministic order."""
        return tuple(f.value for f in cls._ADAPTERS)


__all__ = ["AdapterFactory", "UnknownProviderError"]
