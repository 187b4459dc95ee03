"""Anthropic-style provider adapter."""

from .adapter import AnthropicAdapter

__all__ = ["AnthropicAdapter"]
