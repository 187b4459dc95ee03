"""
Base package

Provider-agnostic contracts and machinery shared by every adapter:

- Models: conversation, message and streaming value objects
- Interfaces: the adapter and conversation store protocols
- DTOs: validated ``ProviderConfig``
- Factory: lazy creation of adapters by provider family
- Streaming: SSE decoding and the response aggregator
"""

from .cancellation import CancellationToken, Cancelled
from .dto import ProviderConfig
from .factory import AdapterFactory, UnknownProviderError
from .interfaces import ConversationStore, ProviderAdapter
from .timeouts import TimeoutConfig, get_timeout_config, guarded

__all__ = [
    "AdapterFactory",
    "CancellationToken",
    "Cancelled",
    "ConversationStore",
    "ProviderAdapter",
    "ProviderConfig",
    "TimeoutConfig",
    "UnknownProviderError",
    "get_timeout_config",
    "guarded",
]
