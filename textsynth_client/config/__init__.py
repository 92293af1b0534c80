"""Unified configuration layer for the client.

Merge order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external config file (JSON or YAML) pointed to by
       ``TEXTSYNTH_CONFIG_FILE``
    3. Environment variables (``TEXTSYNTH_API_KEY`` / ``TEXT_SYNTH_API_KEY``,
       ``TEXTSYNTH_BASE_URL``)
    4. In-code overrides passed to :func:`get_client_config` (``None`` values
       are ignored)

A ``.env`` file (``DOTENV_FILE``, default ``.env``) is read once before the
environment is consulted; it only fills variables that are unset or hold a
placeholder value.

External config file example::

    textsynth:
      api_key: sk-...
      base_url: https://api.textsynth.com/v1

A flat mapping without the ``textsynth`` section is accepted as well.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .defaults import TEXTSYNTH_DEFAULT_BASE_URL
from .env import BASE_URL_ENV, CONFIG_FILE_ENV, is_placeholder, resolve_api_key

DEFAULTS: Dict[str, Any] = {
    "base_url": TEXTSYNTH_DEFAULT_BASE_URL,
}

CONFIG_SECTION = "textsynth"

_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _parse_dotenv_line(line: str) -> Optional[Tuple[str, str]]:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, _, value = line.partition("=")
    return key.strip(), value.strip().strip("\"'")


def _load_dotenv_once() -> None:
    """Copy ``KEY=VALUE`` pairs from the dotenv file into ``os.environ``.

    Runs once per cache lifetime. Existing variables win unless they only
    hold a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    dotenv = Path(os.getenv("DOTENV_FILE", ".env"))
    if not dotenv.is_file():
        return
    for raw in dotenv.read_text(encoding="utf-8").splitlines():
        pair = _parse_dotenv_line(raw)
        if pair is None or not pair[0]:
            continue
        key, value = pair
        if key not in os.environ or is_placeholder(os.environ[key]):
            os.environ[key] = value


def _parse_config_text(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            return {}
    if not isinstance(data, dict):
        return {}
    section = data.get(CONFIG_SECTION)
    return dict(section) if isinstance(section, dict) else data


def _load_external_config() -> Dict[str, Any]:
    """Settings from ``TEXTSYNTH_CONFIG_FILE``, cached after the first read."""
    global _FILE_CACHE
    if _FILE_CACHE is None:
        path = os.getenv(CONFIG_FILE_ENV)
        if path and Path(path).is_file():
            _FILE_CACHE = _parse_config_text(Path(path).read_text(encoding="utf-8"))
        else:
            _FILE_CACHE = {}
    return _FILE_CACHE


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    api_key, _ = resolve_api_key()
    if api_key:
        out["api_key"] = api_key
    if base_url := os.getenv(BASE_URL_ENV):
        out["base_url"] = base_url
    return out


def reset_config_cache() -> None:
    """Forget the cached config file and dotenv state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def get_client_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged client configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    _load_dotenv_once()
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


__all__ = [
    "DEFAULTS",
    "get_client_config",
    "reset_config_cache",
]
