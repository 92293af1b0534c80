"""Async iterator binding a decoded stream to its HTTP response.

``DecodedStream`` owns the ``httpx.Response`` of one streaming call and the
``drive_stream`` generator reading it. The response is released when the
stream is exhausted or fails, when ``aclose()`` is called, or when an
``async with`` block around the stream exits, whichever comes first.
"""
from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable, Generic, Optional, TypeVar

import httpx

from ..logging import LogContext
from .events import StreamEvent
from .stream_driver import drive_stream

T = TypeVar("T")


class DecodedStream(Generic[T]):
    """Lazy, pull-driven, single-pass sequence of ``StreamEvent`` items.

    Usage::

        async with await client.completions(engine, request) as stream:
            async for event in stream:
                chunk = event.unwrap()
    """

    def __init__(
        self,
        response: httpx.Response,
        parse: Callable[[Any], T],
        *,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._response = response
        self._events: AsyncIterator[StreamEvent[T]] = drive_stream(
            response.aiter_bytes(), parse, logger=logger, ctx=ctx
        )
        self._closed = False

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "DecodedStream[T]":
        return self

    async def __anext__(self) -> StreamEvent[T]:
        if self._closed:
            raise StopAsyncIteration
        try:
            return await self._events.__anext__()
        except BaseException:
            # any exit from the generator ends the stream
            await self.aclose()
            raise

    async def aclose(self) -> None:
        """Stop decoding and release the HTTP response. Idempotent."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._events.aclose()  # type: ignore[attr-defined]
        finally:
            await self._response.aclose()

    async def __aenter__(self) -> "DecodedStream[T]":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["DecodedStream"]
