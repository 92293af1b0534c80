"""Pytest configuration for the client test suite.

Every test runs with the client's environment variables cleared and the
configuration cache reset, so a developer's real ``TEXTSYNTH_API_KEY`` or
``.env`` file never leaks into assertions.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from textsynth_client.base.logging import configure_logger
from textsynth_client.config import reset_config_cache

_CLIENT_ENV = (
    "TEXTSYNTH_API_KEY",
    "TEXT_SYNTH_API_KEY",
    "TEXTSYNTH_BASE_URL",
    "TEXTSYNTH_CONFIG_FILE",
    "TEXTSYNTH_LOG_LEVEL",
    "TEXTSYNTH_TIMEOUT_CONNECT_SECONDS",
    "TEXTSYNTH_TIMEOUT_READ_SECONDS",
    "TEXTSYNTH_TIMEOUT_WRITE_SECONDS",
    "TEXTSYNTH_TIMEOUT_POOL_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear client env vars and point the dotenv loader at a missing file."""
    for name in _CLIENT_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class EventCollector(logging.Handler):
    """Capture structured log lines emitted under the ``textsynth`` logger."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())

    def events(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for msg in self.messages:
            try:
                data = json.loads(msg)
            except ValueError:
                continue
            if isinstance(data, dict):
                out.append(data)
        return out

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.events() if e.get("event") == event]


@pytest.fixture()
def log_events() -> Iterator[EventCollector]:
    """Lower the base logger to DEBUG and collect its events."""
    base = configure_logger(level="DEBUG")
    collector = EventCollector()
    base.addHandler(collector)
    try:
        yield collector
    finally:
        base.removeHandler(collector)
        configure_logger(level="WARNING")
