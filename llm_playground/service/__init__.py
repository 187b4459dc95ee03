"""Service layer: session orchestration and the command-line surface."""

from .session import SessionController
from .stream_handle import StreamHandle

__all__ = ["SessionController", "StreamHandle"]
