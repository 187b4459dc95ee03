"""OpenAI-style adapter (chat completions over SSE).

Serves both the hosted OpenAI API and OpenAI-compatible self-hosted
endpoints (llama.cpp, vLLM, Ollama, LM Studio). The two variants differ only
in family tag and in that a self-hosted endpoint may be keyless.

Wire format
-----------
- ``POST {base}/chat/completions`` with ``Authorization: Bearer <key>``.
- Body ``{model, messages, temperature, max_tokens, stream}``; system text
  travels as a leading ``system`` message.
- Each event's data is a ``chat.completion.chunk`` object; the stream ends
  with the literal ``[DONE]``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..base.dto.provider_config import ProviderConfig
from ..base.errors import UnrecognizedEvent
from ..base.models import Delta, Message, ProviderFamily, ProviderRequest, ServerSentEvent
from ..base.utils.messages import split_system
from ..base.utils.payload import error_from_payload, load_event_json
from ..config.defaults import OPENAI_DEFAULT_BASE_URL

DONE_SENTINEL = "[DONE]"


class OpenAIAdapter:
    """Adapter for the hosted OpenAI chat completions API."""

    family = ProviderFamily.OPENAI
    default_base_url = OPENAI_DEFAULT_BASE_URL

    @property
    def provider_name(self) -> str:
        return self.family.value

    def build_request(self, history: Sequence[Message], config: ProviderConfig) -> ProviderRequest:
        headers = {"Content-Type": "application/json", "Accept": "text/event-stream"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        system, turns = split_system(history, config.system_prompt)
        messages: List[Dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.extend({"role": role, "content": text} for role, text in turns)
        body = {
            "model": config.model,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "stream": True,
        }
        base = config.resolved_base_url(self.default_base_url)
        return ProviderRequest(url=f"{base}/chat/completions", headers=headers, body=body)

    def decode_event(self, event: ServerSentEvent) -> Delta:
        if event.data.strip() == DONE_SENTINEL:
            return Delta.done(event=DONE_SENTINEL)
        payload = load_event_json(event, self.provider_name)
        if "error" in payload:
            return Delta.failure(error_from_payload(payload["error"], provider=self.provider_name), event="error")
        choices = payload.get("choices")
        if not isinstance(choices, list):
            raise UnrecognizedEvent(self.provider_name, event.event, event.data)
        if not choices:
            # usage-only chunk sent when stream_options.include_usage is on
            return Delta.noop(event="usage")
        choice = choices[0]
        if not isinstance(choice, dict):
            raise UnrecognizedEvent(self.provider_name, event.event, event.data)
        delta = choice.get("delta") or {}
        text = delta.get("content") if isinstance(delta, dict) else None
        return Delta(
            text=text if isinstance(text, str) else "",
            stop_reason=choice.get("finish_reason") or None,
            event="chunk",
        )


class OpenAICompatibleAdapter(OpenAIAdapter):
    """Adapter for self-hosted endpoints speaking the OpenAI wire format.

    ``base_url`` is mandatory (enforced by ``ProviderConfig``) and the bearer
    header is omitted when no key is configured.
    """

    family = ProviderFamily.OPENAI_COMPATIBLE


__all__ = ["OpenAIAdapter", "OpenAICompatibleAdapter", "DONE_SENTINEL"]
