"""Persistence protocols."""

from .repos import IConversationRepo, IMessageRepo, IUnitOfWork

__all__ = ["IConversationRepo", "IMessageRepo", "IUnitOfWork"]
