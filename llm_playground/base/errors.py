"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``llm_playground.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.stream_errors import DecodeError, FramingError, StreamError, UnrecognizedEvent
from .errors_parts.session_errors import ConversationBusy, PersistenceError
from .errors_parts.classification import classify_exception, code_for_status
from .errors_parts.error_info import ErrorInfo

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
