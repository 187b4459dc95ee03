"""OpenAI-style provider adapters."""

from .adapter import OpenAIAdapter, OpenAICompatibleAdapter

__all__ = ["OpenAIAdapter", "OpenAICompatibleAdapter"]
