"""Anthropic-style adapter (Messages API over SSE).

Wire format
-----------
- ``POST {base}/v1/messages`` with ``x-api-key`` and ``anthropic-version``.
- Body ``{model, max_tokens, temperature, stream, system?, messages}``. System
  text goes in the top-level ``system`` field and consecutive same-role turns
  are merged because the API requires alternating roles.
- Events are typed by the SSE ``event:`` field (mirrored in ``data.type``):
  ``message_start``, ``content_block_start``, ``content_block_delta``,
  ``content_block_stop``, ``message_delta``, ``message_stop``, ``ping`` and
  ``error``.
"""
from __future__ import annotations

from typing import Sequence

from ..base.dto.provider_config import ProviderConfig
from ..base.errors import UnrecognizedEvent
from ..base.models import Delta, Message, ProviderFamily, ProviderRequest, ServerSentEvent
from ..base.utils.messages import merge_consecutive, split_system
from ..base.utils.payload import error_from_payload, load_event_json
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_BASE_URL

_NOOP_EVENTS = frozenset({"message_start", "content_block_start", "content_block_stop", "ping"})


class AnthropicAdapter:
    """Adapter for the Anthropic Messages streaming API."""

    family = ProviderFamily.ANTHROPIC
    default_base_url = ANTHROPIC_DEFAULT_BASE_URL

    @property
    def provider_name(self) -> str:
        return self.family.value

    def build_request(self, history: Sequence[Message], config: ProviderConfig) -> ProviderRequest:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
            "x-api-key": config.api_key or "",
            "anthropic-version": ANTHROPIC_API_VERSION,
        }
        system, turns = split_system(history, config.system_prompt)
        body = {
            "model": config.model,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "stream": True,
            "messages": [{"role": role, "content": text} for role, text in merge_consecutive(turns)],
        }
        if system:
            body["system"] = system
        base = config.resolved_base_url(self.default_base_url)
        return ProviderRequest(url=f"{base}/v1/messages", headers=headers, body=body)

    def decode_event(self, event: ServerSentEvent) -> Delta:
        payload = load_event_json(event, self.provider_name)
        kind = event.event if event.event != "message" else payload.get("type")
        if kind in _NOOP_EVENTS:
            return Delta.noop(event=kind)
        if kind == "content_block_delta":
            delta = payload.get("delta") or {}
            text = delta.get("text") if isinstance(delta, dict) else None
            if isinstance(text, str):
                return Delta.content(text, event=kind)
            # input_json_delta, thinking_delta and friends carry no message text
            return Delta.noop(event=kind)
        if kind == "message_delta":
            delta = payload.get("delta") or {}
            stop = delta.get("stop_reason") if isinstance(delta, dict) else None
            return Delta(stop_reason=stop or None, event=kind)
        if kind == "message_stop":
            return Delta.done(event=kind)
        if kind == "error":
            return Delta.failure(error_from_payload(payload.get("error"), provider=self.provider_name), event=kind)
        raise UnrecognizedEvent(self.provider_name, kind if isinstance(kind, str) else event.event, event.data)


__all__ = ["AnthropicAdapter"]
