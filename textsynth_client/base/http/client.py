"""HTTP client construction for the TextSynth API.

Purpose:
    Build the ``httpx.AsyncClient`` a :class:`~textsynth_client.client.TextSynthClient`
    owns for its lifetime. Authentication and content headers are attached
    once here so every request carries them. Timeouts derive exclusively from
    :func:`get_timeout_config` (or an explicit ``TimeoutConfig``).

External dependencies:
    - ``httpx`` for the asynchronous HTTP client and connection pool.

Lifecycle:
    - One client per ``TextSynthClient``; concurrent calls (including several
      open completion streams) share its connection pool, each stream holding
      its own response.
    - The owner closes it via ``TextSynthClient.aclose()``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ...config.defaults import TEXTSYNTH_USER_AGENT
from ..timeouts import TimeoutConfig, get_timeout_config


def build_headers(api_key: str) -> dict[str, str]:
    """Return the default headers sent with every request."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": TEXTSYNTH_USER_AGENT,
    }


def create_async_client(
    base_url: str,
    api_key: str,
    *,
    timeout_config: Optional[TimeoutConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a configured ``httpx.AsyncClient`` for the API.

    Parameters:
        base_url: API root (e.g. ``https://api.textsynth.com/v1``). Request
            paths are joined onto it, so a trailing slash is ensured.
        api_key: Bearer token attached to every request.
        timeout_config: Optional explicit timeouts; defaults to the cached
            :func:`get_timeout_config`.
        transport: Optional transport override (``httpx.MockTransport`` in
            tests).
    """
    cfg = timeout_config or get_timeout_config()
    if not base_url.endswith("/"):
        base_url += "/"
    return httpx.AsyncClient(
        base_url=base_url,
        headers=build_headers(api_key),
        timeout=cfg.to_httpx(),
        transport=transport,
    )


__all__ = ["build_headers", "create_async_client"]
