"""
Outbound provider call description.

Adapters build a :class:`ProviderRequest`; the aggregator turns it into an
``httpx`` request. The value is never logged directly because headers and
query parameters carry credentials; use :meth:`ProviderRequest.redacted_url`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx

_SECRET_PARAMS = ("key", "api_key")


@dataclass(frozen=True)
class ProviderRequest:
    """One outbound streaming call.

    Attributes:
        url: Absolute endpoint URL.
        headers: Request headers including authentication where the family
            authenticates by header.
        params: Query parameters (Google-style key authentication).
        body: JSON-ready request body containing the visible history.
        method: HTTP method; always ``POST`` for chat completions.
        stream: Whether a streamed response is requested.
    """

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)
    method: str = "POST"
    stream: bool = True

    def content(self) -> bytes:
        """Serialized UTF-8 JSON body."""
        return json.dumps(self.body, ensure_ascii=False).encode("utf-8")

    def redacted_url(self) -> str:
        """URL with query parameters, credentials masked."""
        shown = {k: ("***" if k in _SECRET_PARAMS else v) for k, v in self.params.items()}
        return str(httpx.URL(self.url, params=shown)) if shown else self.url

    def to_httpx(self, client: httpx.AsyncClient) -> httpx.Request:
        """Build the ``httpx.Request`` on ``client`` (so its defaults apply)."""
        return client.build_request(
            self.method,
            self.url,
            headers=self.headers,
            params=self.params or None,
            content=self.content(),
        )


__all__ = ["ProviderRequest"]
