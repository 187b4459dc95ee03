"""
Domain models public surface.

This module re-exports the one-class-per-file implementations under
``llm_playground.base.models_parts``.
"""

from .models_parts.provider_family import ProviderFamily
from .models_parts.message_status import MessageStatus, TERMINAL_STATUSES
from .models_parts.message import Message, Role, ROLES, utc_now
from .models_parts.conversation import Conversation
from .models_parts.delta import Delta
from .models_parts.server_sent_event import ServerSentEvent
from .models_parts.provider_request import ProviderRequest
from .models_parts.stream_update import StreamUpdate
from .models_parts.stream_metrics import StreamMetrics
from .models_parts.run_result import RunResult

__all__ = [
    "ProviderFamily",
    "MessageStatus",
    "TERMINAL_STATUSES",
    "Message",
    "Role",
    "ROLES",
    "utc_now",
    "Conversation",
    "Delta",
    "ServerSentEvent",
    "ProviderRequest",
    "StreamUpdate",
    "StreamMetrics",
    "RunResult",
]
