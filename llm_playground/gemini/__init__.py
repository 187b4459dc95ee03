"""Google-style provider adapter."""

from .adapter import GeminiAdapter

__all__ = ["GeminiAdapter"]
