"""Unified timeout configuration for the client.

Centralizes the timeout values applied to every HTTP call so no ad-hoc
numeric timeouts appear elsewhere. Timeouts are enforced by ``httpx``
itself; the stream driver inherits them (a read timeout while waiting for
the next chunk surfaces as a terminal ``TransportError`` item).

get_timeout_config()
    Returns a process-cached configuration, re-parsing environment overrides
    only when they change. Supported environment variables (all optional):
        TEXTSYNTH_TIMEOUT_CONNECT_SECONDS
        TEXTSYNTH_TIMEOUT_READ_SECONDS
        TEXTSYNTH_TIMEOUT_WRITE_SECONDS
        TEXTSYNTH_TIMEOUT_POOL_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

from ..config.defaults import (
    TEXTSYNTH_DEFAULT_CONNECT_TIMEOUT,
    TEXTSYNTH_DEFAULT_POOL_TIMEOUT,
    TEXTSYNTH_DEFAULT_READ_TIMEOUT,
    TEXTSYNTH_DEFAULT_WRITE_TIMEOUT,
)

_ENV_NAMES = (
    "TEXTSYNTH_TIMEOUT_CONNECT_SECONDS",
    "TEXTSYNTH_TIMEOUT_READ_SECONDS",
    "TEXTSYNTH_TIMEOUT_WRITE_SECONDS",
    "TEXTSYNTH_TIMEOUT_POOL_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        read_timeout_seconds: Waiting for the next response bytes; for a
            completion stream this bounds the idle gap between chunks.
        write_timeout_seconds: Sending the request body.
        pool_timeout_seconds: Waiting for a free pooled connection.
    """

    connect_timeout_seconds: float = TEXTSYNTH_DEFAULT_CONNECT_TIMEOUT
    read_timeout_seconds: float = TEXTSYNTH_DEFAULT_READ_TIMEOUT
    write_timeout_seconds: float = TEXTSYNTH_DEFAULT_WRITE_TIMEOUT
    pool_timeout_seconds: float = TEXTSYNTH_DEFAULT_POOL_TIMEOUT

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``."""
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.pool_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    cur_guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED

    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], TEXTSYNTH_DEFAULT_CONNECT_TIMEOUT),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], TEXTSYNTH_DEFAULT_READ_TIMEOUT),
        write_timeout_seconds=_parse_env_float(_ENV_NAMES[2], TEXTSYNTH_DEFAULT_WRITE_TIMEOUT),
        pool_timeout_seconds=_parse_env_float(_ENV_NAMES[3], TEXTSYNTH_DEFAULT_POOL_TIMEOUT),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
