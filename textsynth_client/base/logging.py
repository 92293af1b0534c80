"""Structured logging for the TextSynth client.

Every module logs through children of one ``textsynth`` logger that owns a
single stderr handler. Events are JSON objects: ``log_event`` writes one per
call, and ``normalized_log_event`` adds the fixed request/stream schema
(``structured``, ``phase``, ``attempt``, ``emitted``, ``tokens``, plus
``error_code`` on failures) so events from different operations line up.

``TEXTSYNTH_LOG_LEVEL`` overrides the level; without it the client logs at
``WARNING`` and stays quiet when imported as a library.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "textsynth"
LOG_LEVEL_ENV = "TEXTSYNTH_LOG_LEVEL"

_BASE_LOGGER_ATTR = "_textsynth_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_textsynth_console_handler"
_FILE_HANDLER_ATTR = "_textsynth_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
_LOG_FILE_BACKUPS = 5

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name (any case, ``WARN`` included) to its number, else ``default``."""
    if not value:
        return default
    return _LEVEL_NAMES.get(value.strip().upper(), default)


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _console_handler(level: int, json_mode: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_make_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    return handler


def _stream_is_dead(handler: logging.Handler) -> bool:
    stream = getattr(handler, "stream", None)
    return stream is None or getattr(stream, "closed", False)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Return the ``textsynth`` logger, setting it up on first use.

    Once set up, only ``TEXTSYNTH_LOG_LEVEL`` changes the level here; levels
    chosen with :func:`configure_logger` are kept.
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_level = os.getenv(LOG_LEVEL_ENV)

    if not getattr(logger, _BASE_LOGGER_ATTR, False):
        initial = _parse_level(env_level, default=level)
        logger.setLevel(initial)
        logger.handlers[:] = [_console_handler(initial, json_mode)]
        logger.propagate = False
        setattr(logger, _BASE_LOGGER_ATTR, True)
        return logger

    if env_level:
        logger.setLevel(_parse_level(env_level, default=logger.level))
    for handler in [h for h in logger.handlers if getattr(h, _CONSOLE_HANDLER_ATTR, False)]:
        if _stream_is_dead(handler):
            # stderr was replaced underneath us (pytest capture does this)
            logger.removeHandler(handler)
            logger.addHandler(_console_handler(logger.level, json_mode))
        else:
            handler.setLevel(logger.level)
    return logger


def get_logger(
    name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.WARNING
) -> logging.Logger:
    """Logger ``name`` under ``textsynth.``; children defer to the base handler."""
    base = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base
    qualified = name if name.startswith(BASE_LOGGER_NAME + ".") else f"{BASE_LOGGER_NAME}.{name}"
    child = logging.getLogger(qualified)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def _managed_file_handlers(logger: logging.Logger) -> List[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]


def _detach(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    with contextlib.suppress(OSError):
        handler.close()


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared ``textsynth`` logger while the process runs.

    ``level`` (a number or a name such as ``"DEBUG"``) is applied to the
    logger and every handler on it; ``None`` keeps the current one.

    ``file_path`` mirrors output into a rotating file (10 MB, 5 backups). A
    file handler this function attached for a different path is replaced,
    and ``file_path=None`` removes it. Handlers added by the application are
    never detached.
    """
    logger = get_logger(BASE_LOGGER_NAME, json_mode=json_mode)

    if level is not None:
        numeric = _parse_level(level, default=logger.level) if isinstance(level, str) else level
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path is not None else None
    current: Optional[logging.Handler] = None
    for handler in _managed_file_handlers(logger):
        if target is not None and getattr(handler, "baseFilename", None) == target:
            current = handler
        else:
            _detach(logger, handler)

    if target is None:
        return logger
    if current is None:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        current = RotatingFileHandler(
            target, maxBytes=_LOG_FILE_MAX_BYTES, backupCount=_LOG_FILE_BACKUPS, encoding="utf-8"
        )
        setattr(current, _FILE_HANDLER_ATTR, True)
        logger.addHandler(current)
    current.setLevel(logger.level)
    current.setFormatter(_make_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Write ``event`` plus the context and ``fields`` as one JSON message.

    ``None`` fields are left out unless ``keep_none`` is true.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload.update(ctx.to_dict())
    for key, value in fields.items():
        if value is not None or keep_none:
            payload[key] = value
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("structured", "phase", "attempt", "emitted", "tokens")


def _coerce_tokens(tokens: Any) -> Optional[Dict[str, Any]]:
    """Token usage as a plain dict; shapes that are not pairs get wrapped."""
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    if isinstance(tokens, (list, tuple)):
        with contextlib.suppress(TypeError, ValueError):
            return dict(tokens)
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | int | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int | None = None,
    **extra_fields: Any,
) -> None:
    """``log_event`` with the normalized schema keys always present.

    ``error_code`` appears only when set. Without an explicit ``level`` an
    event carrying an ``error_code`` goes out at WARNING, anything else at
    INFO. ``None`` extras are dropped.
    """
    fields: Dict[str, Any] = {k: v for k, v in extra_fields.items() if v is not None}
    fields.update(
        structured=structured,
        phase=phase,
        attempt=attempt,
        emitted=emitted,
        tokens=_coerce_tokens(tokens),
    )
    if error_code is not None:
        fields["error_code"] = error_code
    if level is None:
        level = logging.INFO if error_code is None else logging.WARNING
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
    "BASE_LOGGER_NAME",
]
