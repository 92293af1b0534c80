"""Helpers for stream decoding tests.

Transport chunk sources are plain async generators, which is exactly what the
stream driver sees from ``httpx.Response.aiter_bytes()``.
"""
from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence

import httpx

from ...base.streaming import StreamEvent
from ...completions import ResponseChunk

parse_chunk = ResponseChunk.model_validate

AB_STREAM = b'{"text":"a","reached_end":false}\n\n{"text":"b","reached_end":true}'


def encode_chunks(payloads: Iterable[Dict[str, Any]], sep: bytes = b"\n\n") -> bytes:
    """Serialize each payload and join them the way the API frames a stream."""
    return sep.join(json.dumps(p).encode("utf-8") for p in payloads)


def split_at(data: bytes, points: Sequence[int]) -> List[bytes]:
    """Split ``data`` at the given offsets (sorted, deduplicated)."""
    out: List[bytes] = []
    prev = 0
    for p in sorted(set(points)):
        out.append(data[prev:p])
        prev = p
    out.append(data[prev:])
    return out


class ChunkSource:
    """Async chunk iterator recording how far it was consumed and whether it
    was closed. Optionally raises ``error`` after ``fail_after`` chunks."""

    def __init__(
        self,
        chunks: Sequence[bytes],
        *,
        error: Optional[Exception] = None,
        fail_after: Optional[int] = None,
    ) -> None:
        self._chunks = list(chunks)
        self._error = error
        self._fail_after = fail_after
        self.pulled = 0
        self.closed = False

    def __aiter__(self) -> "ChunkSource":
        return self

    async def __anext__(self) -> bytes:
        if self._error is not None and self.pulled == self._fail_after:
            raise self._error
        if self.pulled >= len(self._chunks):
            raise StopAsyncIteration
        chunk = self._chunks[self.pulled]
        self.pulled += 1
        return chunk

    async def aclose(self) -> None:
        self.closed = True


class RecordingStream(httpx.AsyncByteStream):
    """Response body stream that remembers whether httpx closed it."""

    def __init__(self, chunks: Sequence[bytes], *, error: Optional[Exception] = None) -> None:
        self._chunks = list(chunks)
        self._error = error
        self.sent = 0
        self.closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            self.sent += 1
            yield chunk
        if self._error is not None:
            raise self._error

    async def aclose(self) -> None:
        self.closed = True


async def chunks_of(*parts: bytes) -> AsyncIterator[bytes]:
    for part in parts:
        yield part


async def collect(events: AsyncIterator[StreamEvent[Any]]) -> List[StreamEvent[Any]]:
    return [e async for e in events]


def values(events: Sequence[StreamEvent[Any]]) -> List[Any]:
    return [e.chunk for e in events if not e.is_error()]


def read_error(message: str = "connection reset") -> httpx.ReadError:
    return httpx.ReadError(message)


__all__ = [
    "AB_STREAM",
    "parse_chunk",
    "encode_chunks",
    "split_at",
    "ChunkSource",
    "RecordingStream",
    "chunks_of",
    "collect",
    "values",
    "read_error",
]
