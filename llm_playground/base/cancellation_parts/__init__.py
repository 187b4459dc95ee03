"""Cancellation parts package (see ``llm_playground.base.cancellation``)."""

from .cancelled import Cancelled
from .cancellation_token import CancellationToken

__all__ = ["Cancelled", "CancellationToken"]
