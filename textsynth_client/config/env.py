"""textsynth_client.config.env
===========================

Environment variable names and helpers for client credentials.

Purpose
-------
- Single source of truth for the environment variables the client reads.
- ``TEXTSYNTH_API_KEY`` is canonical; ``TEXT_SYNTH_API_KEY`` is accepted as an
  alias for scripts written against older tooling.

Failure Modes
-------------
Helpers never raise on unset variables; they return ``None`` and the caller
decides how to proceed.
"""

from __future__ import annotations

import os
from typing import Iterable, Optional, Tuple

API_KEY_ENV = "TEXTSYNTH_API_KEY"
API_KEY_ALIASES: Tuple[str, ...] = (API_KEY_ENV, "TEXT_SYNTH_API_KEY")
BASE_URL_ENV = "TEXTSYNTH_BASE_URL"
CONFIG_FILE_ENV = "TEXTSYNTH_CONFIG_FILE"
_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example")


def is_placeholder(val: Optional[str]) -> bool:
    """True for values such as ``changeme`` or ``test_key`` that stand in for a real secret."""
    if val is None:
        return False
    lowered = str(val).strip().lower()
    return lowered.startswith("test_") or any(marker in lowered for marker in _PLACEHOLDER_MARKERS)


def get_api_key_candidates() -> Iterable[str]:
    """Yield acceptable API key variable names, canonical first."""
    yield from API_KEY_ALIASES


def resolve_api_key() -> Tuple[Optional[str], Optional[str]]:
    """``(value, variable)`` for the first non-empty key variable, else ``(None, None)``."""
    for name in get_api_key_candidates():
        if val := os.environ.get(name):
            return val, name
    return None, None


__all__ = [
    "API_KEY_ENV",
    "API_KEY_ALIASES",
    "BASE_URL_ENV",
    "CONFIG_FILE_ENV",
    "is_placeholder",
    "get_api_key_candidates",
    "resolve_api_key",
]
