"""llm_playground package

Streaming chat client core for hosted LLM providers.

Purpose:
    Turn a conversation's visible history into a provider request, consume
    the Server-Sent-Events reply incrementally, persist the assistant message
    as it grows and record exactly one terminal status per run.

Public API (re-exported):
    - Version: ``__version__``
    - Orchestration: :class:`SessionController`, :class:`StreamHandle`
    - Run machinery: :class:`ResponseAggregator`, :class:`SSEDecoder`
    - Configuration: :class:`ProviderConfig`, :class:`AdapterFactory`
    - Stores: :class:`SqliteConversationStore`, :class:`InMemoryConversationStore`
    - Errors: :class:`ProviderError`, :class:`ErrorCode`,
      :class:`ConversationBusy`, :class:`PersistenceError`
"""

from .base.dto import ProviderConfig
from .base.errors import ConversationBusy, ErrorCode, PersistenceError, ProviderError
from .base.factory import AdapterFactory
from .base.models import Conversation, Message, MessageStatus, ProviderFamily, RunResult
from .base.streaming import ResponseAggregator, SSEDecoder
from .persistence.memory import InMemoryConversationStore
from .persistence.sqlite import SqliteConversationStore
from .service import SessionController, StreamHandle

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AdapterFactory",
    "Conversation",
    "ConversationBusy",
    "ErrorCode",
    "InMemoryConversationStore",
    "Message",
    "MessageStatus",
    "PersistenceError",
    "ProviderConfig",
    "ProviderError",
    "ProviderFamily",
    "ResponseAggregator",
    "RunResult",
    "SessionController",
    "SqliteConversationStore",
    "SSEDecoder",
    "StreamHandle",
]
