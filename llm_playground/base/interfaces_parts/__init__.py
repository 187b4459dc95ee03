"""Interface parts package (see ``llm_playground.base.interfaces``)."""

from .conversation_store import ConversationStore
from .provider_adapter import ProviderAdapter

__all__ = ["ConversationStore", "ProviderAdapter"]
