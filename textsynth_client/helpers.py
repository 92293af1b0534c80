"""TextSynth client helpers module.

Purpose:
- Reusable utilities for :class:`~textsynth_client.client.TextSynthClient`
  (engine capability checks, endpoint paths, request dispatch, status
  mapping and body decoding) to keep ``client.py`` lean.

External dependencies:
- ``httpx`` for request dispatch on the client-owned ``AsyncClient``.
- ``pydantic`` response models for body decoding.

Failure semantics:
- Wrong-capability engines raise ``TextSynthError(UNSUPPORTED)`` before any
  network call.
- Connection and I/O failures raise ``TransportError``; they are never
  retried here.
- Non-2xx statuses raise ``ApiError`` carrying the status and body text.
- A 2xx body that does not match the response model raises ``DecodeError``.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Type, TypeVar, Union

import httpx
from pydantic import ValidationError

from .base.dto import ResponseModel
from .base.engines import CompletionEngine, Engine, TranslationEngine
from .base.errors import (
    RETRYABLE_CODES,
    ApiError,
    DecodeError,
    ErrorCode,
    TextSynthError,
    code_for_status,
    transport_error_from,
)
from .base.logging import LogContext, normalized_log_event

R = TypeVar("R", bound=ResponseModel)

_BODY_PREVIEW_CHARS = 500


def coerce_engine(engine: Union[Engine, str]) -> Engine:
    """Return the engine enum member for ``engine``.

    Plain strings are looked up among completion engines first, then
    translation engines.
    """
    if isinstance(engine, (CompletionEngine, TranslationEngine)):
        return engine
    for enum_cls in (CompletionEngine, TranslationEngine):
        try:
            return enum_cls(engine)
        except ValueError:
            continue
    raise TextSynthError(
        code=ErrorCode.UNSUPPORTED,
        message=f"unknown engine {engine!r}",
        engine=str(engine),
    )


def require_completion_engine(engine: Union[Engine, str], operation: str) -> CompletionEngine:
    """Return ``engine`` if it serves completions, else raise ``UNSUPPORTED``."""
    resolved = coerce_engine(engine)
    if not resolved.is_completion:
        raise TextSynthError(
            code=ErrorCode.UNSUPPORTED,
            message=f"{operation} requires a completion engine",
            engine=str(resolved),
        )
    return resolved  # type: ignore[return-value]


def require_translation_engine(engine: Union[Engine, str], operation: str) -> TranslationEngine:
    """Return ``engine`` if it serves translation, else raise ``UNSUPPORTED``."""
    resolved = coerce_engine(engine)
    if not resolved.is_translation:
        raise TextSynthError(
            code=ErrorCode.UNSUPPORTED,
            message=f"{operation} requires a translation engine",
            engine=str(resolved),
        )
    return resolved  # type: ignore[return-value]


def endpoint_path(engine: Engine, operation: str) -> str:
    """Path of ``operation`` for ``engine`` relative to the API base URL."""
    return f"engines/{engine}/{operation}"


def api_error_from_response(response: httpx.Response, body: str, engine: Optional[str]) -> ApiError:
    """Build an :class:`ApiError` for a non-success response.

    The API reports failures as ``{"error": "..."}``; that text is used as the
    message when present.
    """
    message = f"HTTP {response.status_code}"
    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        message = f"{message}: {data['error']}"
    elif body:
        message = f"{message}: {body[:_BODY_PREVIEW_CHARS]}"
    code = code_for_status(response.status_code)
    return ApiError(
        code=code,
        message=message,
        engine=engine,
        retryable=code in RETRYABLE_CODES,
        status_code=response.status_code,
        body=body,
    )


def _log_request_error(logger: logging.Logger, ctx: LogContext, error: TextSynthError, t0: float) -> None:
    normalized_log_event(
        logger,
        "request.error",
        ctx,
        phase="start",
        emitted=False,
        error_code=error.code.value,
        error=error.message,
        latency_ms=(time.perf_counter() - t0) * 1000.0,
    )


async def send_request(
    client: httpx.AsyncClient,
    path: str,
    payload: Dict[str, Any],
    *,
    stream: bool,
    logger: logging.Logger,
    ctx: LogContext,
) -> httpx.Response:
    """POST ``payload`` to ``path`` and return the successful response.

    With ``stream=True`` the body is left unread so the caller can consume it
    incrementally; the caller then owns the response and must close it.

    Raises:
        TransportError: the request could not be sent or the response head
            could not be read.
        ApiError: the API answered with a non-2xx status (the response is
            closed before raising).
    """
    normalized_log_event(logger, "request.start", ctx, phase="start", stream=stream)
    t0 = time.perf_counter()
    request = client.build_request("POST", path, json=payload)
    try:
        response = await client.send(request, stream=stream)
    except httpx.HTTPError as e:
        err = transport_error_from(e, ctx.engine)
        _log_request_error(logger, ctx, err, t0)
        raise err from e

    if response.is_success:
        return response

    try:
        body_bytes = await response.aread()
    except httpx.HTTPError as e:
        await response.aclose()
        err = transport_error_from(e, ctx.engine)
        _log_request_error(logger, ctx, err, t0)
        raise err from e
    await response.aclose()
    api_err = api_error_from_response(response, body_bytes.decode("utf-8", errors="replace"), ctx.engine)
    _log_request_error(logger, ctx, api_err, t0)
    raise api_err


def decode_response(response: httpx.Response, model: Type[R], engine: Optional[str]) -> R:
    """Validate a fully read JSON body against ``model``.

    Raises:
        DecodeError: the body is not JSON or does not match ``model``.
    """
    content = response.content
    try:
        return model.model_validate_json(content)
    except ValidationError as e:
        raise DecodeError(
            message=f"invalid {model.__name__} body: {e.error_count()} error(s)",
            engine=engine,
            raw=e,
            residual=content,
        ) from e


async def request_json(
    client: httpx.AsyncClient,
    path: str,
    payload: Dict[str, Any],
    model: Type[R],
    *,
    logger: logging.Logger,
    ctx: LogContext,
) -> R:
    """One-shot call: send, read the whole body and decode it into ``model``."""
    t0 = time.perf_counter()
    response = await send_request(client, path, payload, stream=False, logger=logger, ctx=ctx)
    try:
        result = decode_response(response, model, ctx.engine)
    except DecodeError as e:
        _log_request_error(logger, ctx, e, t0)
        raise
    normalized_log_event(
        logger,
        "request.end",
        ctx,
        phase="finalize",
        emitted=True,
        tokens=_token_usage(result),
        latency_ms=(time.perf_counter() - t0) * 1000.0,
    )
    return result


def _token_usage(result: ResponseModel) -> Optional[Dict[str, int]]:
    usage = {
        k: getattr(result, k)
        for k in ("input_tokens", "output_tokens")
        if getattr(result, k, None) is not None
    }
    return usage or None


__all__ = [
    "coerce_engine",
    "require_completion_engine",
    "require_translation_engine",
    "endpoint_path",
    "api_error_from_response",
    "send_request",
    "decode_response",
    "request_json",
]
