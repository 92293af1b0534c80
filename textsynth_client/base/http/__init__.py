"""HTTP utilities package.

Exposes the configured ``httpx.AsyncClient`` factory.
"""

from .client import build_headers, create_async_client

__all__ = ["build_headers", "create_async_client"]
