"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose stable cancellation constructs via the canonical
``llm_playground.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` signals cancellation across the session controller,
  the response aggregator and any pending network read.
- ``Cancelled`` is raised by operations that observe a cancellation request.
"""

from .cancellation_parts.cancelled import Cancelled
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "Cancelled"]
