"""HTTP utilities package.

Exposes pooled ``httpx.AsyncClient`` instances shared by every run.
"""

from .client import close_all_clients, get_httpx_client, timeout_for

__all__ = ["get_httpx_client", "close_all_clients", "timeout_for"]
