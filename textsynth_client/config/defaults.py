"""textsynth_client.config.defaults
================================

Central place for small, stable default values used across the client. These
defaults can be overridden via environment variables or an external
configuration file, but provide sensible fallbacks for local development and
tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- API endpoint ----
TEXTSYNTH_DEFAULT_BASE_URL = "https://api.textsynth.com/v1"

# ---- HTTP timeouts (seconds) ----
TEXTSYNTH_DEFAULT_CONNECT_TIMEOUT = 10.0
# Generation streams can idle for a while between chunks on large engines.
TEXTSYNTH_DEFAULT_READ_TIMEOUT = 120.0
TEXTSYNTH_DEFAULT_WRITE_TIMEOUT = 30.0
TEXTSYNTH_DEFAULT_POOL_TIMEOUT = 10.0

# ---- Request headers ----
TEXTSYNTH_USER_AGENT = "textsynth-client"


__all__ = [
    "TEXTSYNTH_DEFAULT_BASE_URL",
    "TEXTSYNTH_DEFAULT_CONNECT_TIMEOUT",
    "TEXTSYNTH_DEFAULT_READ_TIMEOUT",
    "TEXTSYNTH_DEFAULT_WRITE_TIMEOUT",
    "TEXTSYNTH_DEFAULT_POOL_TIMEOUT",
    "TEXTSYNTH_USER_AGENT",
]
