"""ProviderAdapter Protocol (single-class module).

Defines the capability set every provider family variant implements.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ..dto.provider_config import ProviderConfig
from ..models import Delta, Message, ProviderFamily, ProviderRequest, ServerSentEvent


@runtime_checkable
class ProviderAdapter(Protocol):
    """Translate between internal values and one provider wire protocol.

    Implementations are stateless: one instance may serve concurrent runs.
    """

    @property
    def family(self) -> ProviderFamily:
        """Wire protocol family served by this adapter."""
        ...

    def build_request(self, history: Sequence[Message], config: ProviderConfig) -> ProviderRequest:
        """Serialize the visible ``history`` into an authenticated streaming request."""
        ...

    def decode_event(self, event: ServerSentEvent) -> Delta:
        """Decode one raw event.

        Raises:
            DecodeError: The event payload is not valid JSON or not an object.
            UnrecognizedEvent: The payload is well-formed but unknown; the
                caller logs and skips it.
        """
        ...
