"""DTO validation package."""

from .provider_config import ProviderConfig

__all__ = ["ProviderConfig"]
