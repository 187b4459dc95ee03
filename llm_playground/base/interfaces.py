"""
Core interfaces (Protocols).

Re-exports the Protocols split into single-class modules under
``llm_playground.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import ConversationStore, ProviderAdapter

__all__ = ["ProviderAdapter", "ConversationStore"]
