"""Google-style adapter (Gemini ``streamGenerateContent`` over SSE).

Wire format
-----------
- ``POST {base}/models/{model}:streamGenerateContent?alt=sse&key=<key>``.
- Body ``{contents, systemInstruction?, generationConfig}``; the assistant
  role is called ``model`` and consecutive same-role turns are merged.
- Each event is a ``GenerateContentResponse``. There is no completion
  sentinel: the stream simply closes after a chunk carrying ``finishReason``.
"""
from __future__ import annotations

from typing import Any, Dict, Sequence

from ..base.dto.provider_config import ProviderConfig
from ..base.errors import ErrorCode, ProviderError, UnrecognizedEvent
from ..base.models import Delta, Message, ProviderFamily, ProviderRequest, ServerSentEvent
from ..base.utils.messages import merge_consecutive, split_system
from ..base.utils.payload import error_from_payload, load_event_json
from ..config.defaults import GEMINI_DEFAULT_BASE_URL


def _candidate_text(candidate: Dict[str, Any]) -> str:
    content = candidate.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))


class GeminiAdapter:
    """Adapter for the Gemini generative language API."""

    family = ProviderFamily.GEMINI
    default_base_url = GEMINI_DEFAULT_BASE_URL

    @property
    def provider_name(self) -> str:
        return self.family.value

    def build_request(self, history: Sequence[Message], config: ProviderConfig) -> ProviderRequest:
        system, turns = split_system(history, config.system_prompt)
        contents = [
            {"role": "model" if role == "assistant" else "user", "parts": [{"text": text}]}
            for role, text in merge_consecutive(turns)
        ]
        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": config.temperature,
                "maxOutputTokens": config.max_tokens,
            },
        }
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        model = config.model.removeprefix("models/")
        base = config.resolved_base_url(self.default_base_url)
        return ProviderRequest(
            url=f"{base}/models/{model}:streamGenerateContent",
            headers={"Content-Type": "application/json", "Accept": "text/event-stream"},
            params={"alt": "sse", "key": config.api_key or ""},
            body=body,
        )

    def decode_event(self, event: ServerSentEvent) -> Delta:
        payload = load_event_json(event, self.provider_name)
        if "error" in payload:
            return Delta.failure(error_from_payload(payload["error"], provider=self.provider_name), event="error")
        candidates = payload.get("candidates")
        if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
            candidate = candidates[0]
            return Delta(
                text=_candidate_text(candidate),
                stop_reason=candidate.get("finishReason") or None,
                event="candidate",
            )
        feedback = payload.get("promptFeedback")
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            return Delta.failure(
                ProviderError(
                    code=ErrorCode.VALIDATION,
                    message=f"prompt blocked: {feedback['blockReason']}",
                    provider=self.provider_name,
                ),
                event="promptFeedback",
            )
        if "usageMetadata" in payload:
            return Delta.noop(event="usageMetadata")
        raise UnrecognizedEvent(self.provider_name, event.event, event.data)


__all__ = ["GeminiAdapter"]
