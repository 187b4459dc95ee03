"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `llm_playground.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .stream_errors import DecodeError, FramingError, StreamError, UnrecognizedEvent
from .session_errors import ConversationBusy, PersistenceError
from .classification import classify_exception, code_for_status
from .error_info import ErrorInfo

__all__ = [
    "ErrorCode",
    "ProviderError",
    "StreamError",
    "DecodeError",
    "FramingError",
    "UnrecognizedEvent",
    "PersistenceError",
    "ConversationBusy",
    "classify_exception",
    "code_for_status",
    "ErrorInfo",
]
