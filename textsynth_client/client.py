"""TextSynth API client.

Purpose:
        Asynchronous facade over the TextSynth HTTP API
        (default ``https://api.textsynth.com/v1``): streamed text completions,
        log probabilities, tokenization and translation.

External dependencies:
        - ``httpx`` (``AsyncClient``) for HTTP; one client per instance, shared
            by every call including concurrently open completion streams.
        - ``pydantic`` request/response models from the endpoint packages.

Timeout strategy:
        - Timeouts come from ``get_timeout_config()`` (or an explicit
            ``TimeoutConfig``) and are enforced by ``httpx``. A read timeout
            while a stream waits for its next chunk ends the stream with a
            ``TransportError`` item.

Error handling:
        - Request fields are validated before any network call
            (``RequestValidationError``).
        - Engines of the wrong capability raise ``TextSynthError(UNSUPPORTED)``.
        - Failures while opening a call raise ``TransportError`` or
            ``ApiError``; nothing is retried internally.
        - A completion stream reports at most one terminal error item.
"""

from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional, Type, TypeVar, Union

import httpx

from .base.dto import RequestModel
from .base.engines import Engine
from .base.errors import ErrorCode, TextSynthError
from .base.http import create_async_client
from .base.logging import LogContext, get_logger
from .base.streaming import DecodedStream
from .base.timeouts import TimeoutConfig
from .completions import (
    CompletionRequest,
    CompletionResult,
    CompletionStream,
    LogprobRequest,
    LogprobResponse,
    ResponseChunk,
    collect_stream,
)
from .config import get_client_config
from .config.env import API_KEY_ENV
from .helpers import (
    coerce_engine,
    endpoint_path,
    request_json,
    require_completion_engine,
    require_translation_engine,
    send_request,
)
from .tokenize import TokenizeRequest, TokenizeResponse
from .translate import TranslateRequest, TranslateResponse

Q = TypeVar("Q", bound=RequestModel)


def _as_request(model: Type[Q], request: Union[Q, Mapping[str, Any]]) -> Q:
    """Accept a built request or a mapping of its fields (validated via ``build``)."""
    if isinstance(request, model):
        return request
    if isinstance(request, Mapping):
        return model.build(**request)
    raise TypeError(f"expected {model.__name__} or a mapping, got {type(request).__name__}")


class TextSynthClient:
    """Client bound to one API key and base URL.

    Usage::

        async with TextSynthClient() as client:
            stream = await client.completions(
                CompletionEngine.GPTJ_6B,
                CompletionRequest.build(prompt="Once upon a time", stream=True),
            )
            async with stream:
                async for event in stream:
                    print(event.unwrap().text[0], end="")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_config: Optional[TimeoutConfig] = None,
    ) -> None:
        """Resolve configuration and create the HTTP client.

        Parameters:
            api_key: Bearer token; falls back to ``TEXTSYNTH_API_KEY`` (or
                ``TEXT_SYNTH_API_KEY``) and the optional config file.
            base_url: API root; falls back to ``TEXTSYNTH_BASE_URL``, the
                config file, then the public endpoint.
            transport: Optional ``httpx`` transport (``MockTransport`` in tests).
            timeout_config: Optional explicit timeouts.

        Raises:
            TextSynthError: ``AUTH`` when no API key can be resolved.
        """
        cfg = get_client_config({"api_key": api_key, "base_url": base_url})
        resolved_key = cfg.get("api_key")
        if not resolved_key:
            raise TextSynthError(
                code=ErrorCode.AUTH,
                message=f"missing API key; pass api_key or set {API_KEY_ENV}",
            )
        self._base_url: str = cfg["base_url"]
        self._logger = get_logger("client")
        self._client = create_async_client(
            self._base_url,
            resolved_key,
            timeout_config=timeout_config,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def _ctx(self, engine: Engine, operation: str) -> LogContext:
        return LogContext(engine=str(engine), operation=operation, request_id=uuid.uuid4().hex)

    async def completions(
        self,
        engine: Union[Engine, str],
        request: Union[CompletionRequest, Mapping[str, Any]],
    ) -> CompletionStream:
        """Start a completion and return its decoded stream.

        Both streamed (``stream=True``) and single-answer bodies are read
        through the same stream; the caller owns it and should close it
        (``async with`` or ``aclose()``) when not consuming it to the end.

        Raises:
            RequestValidationError: ``request`` mapping fails validation.
            TextSynthError: ``UNSUPPORTED`` for a non-completion engine.
            TransportError: the request could not be sent.
            ApiError: non-2xx status.
        """
        req = _as_request(CompletionRequest, request)
        eng = require_completion_engine(engine, "completions")
        ctx = self._ctx(eng, "completions")
        response = await send_request(
            self._client,
            endpoint_path(eng, "completions"),
            req.to_payload(),
            stream=True,
            logger=self._logger,
            ctx=ctx,
        )
        return DecodedStream(response, ResponseChunk.model_validate, logger=self._logger, ctx=ctx)

    async def complete(
        self,
        engine: Union[Engine, str],
        request: Union[CompletionRequest, Mapping[str, Any]],
    ) -> CompletionResult:
        """Run a completion to the end and return the accumulated text.

        Raises the stream's terminal error, if any, after the response has
        been released.
        """
        stream = await self.completions(engine, request)
        return await collect_stream(stream)

    async def logprob(
        self,
        engine: Union[Engine, str],
        request: Union[LogprobRequest, Mapping[str, Any]],
    ) -> LogprobResponse:
        """Log probability of ``continuation`` following ``context``."""
        req = _as_request(LogprobRequest, request)
        eng = require_completion_engine(engine, "logprob")
        return await request_json(
            self._client,
            endpoint_path(eng, "logprob"),
            req.to_payload(),
            LogprobResponse,
            logger=self._logger,
            ctx=self._ctx(eng, "logprob"),
        )

    async def tokenize(
        self,
        engine: Union[Engine, str],
        request: Union[TokenizeRequest, Mapping[str, Any]],
    ) -> TokenizeResponse:
        """Token indexes of ``text`` for the engine's tokenizer (any engine)."""
        req = _as_request(TokenizeRequest, request)
        eng = coerce_engine(engine)
        return await request_json(
            self._client,
            endpoint_path(eng, "tokenize"),
            req.to_payload(),
            TokenizeResponse,
            logger=self._logger,
            ctx=self._ctx(eng, "tokenize"),
        )

    async def translate(
        self,
        engine: Union[Engine, str],
        request: Union[TranslateRequest, Mapping[str, Any]],
    ) -> TranslateResponse:
        """Translate up to 64 texts with a translation engine."""
        req = _as_request(TranslateRequest, request)
        eng = require_translation_engine(engine, "translate")
        return await request_json(
            self._client,
            endpoint_path(eng, "translate"),
            req.to_payload(),
            TranslateResponse,
            logger=self._logger,
            ctx=self._ctx(eng, "translate"),
        )

    async def aclose(self) -> None:
        """Close the HTTP client; streams still open are cut off."""
        await self._client.aclose()

    async def __aenter__(self) -> "TextSynthClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["TextSynthClient"]
