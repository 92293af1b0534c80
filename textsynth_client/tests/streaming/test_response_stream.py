"""``DecodedStream`` ownership of the HTTP response."""
from __future__ import annotations

import httpx
import pytest

from textsynth_client.base.errors import TransportError
from textsynth_client.base.streaming import DecodedStream
from textsynth_client.tests.streaming.helpers import AB_STREAM, RecordingStream, parse_chunk


def _stream(*chunks: bytes, error=None):
    body = RecordingStream(chunks, error=error)
    return DecodedStream(httpx.Response(200, stream=body), parse_chunk), body


@pytest.mark.asyncio
async def test_exhaustion_closes_response():
    stream, body = _stream(AB_STREAM[:10], AB_STREAM[10:])
    texts = [event.unwrap().text for event in [e async for e in stream]]
    assert texts == [["a"], ["b"]]  # nosec B101
    assert stream.closed  # nosec B101
    assert body.closed  # nosec B101


@pytest.mark.asyncio
async def test_aclose_before_exhaustion_releases_transport():
    stream, body = _stream(AB_STREAM, AB_STREAM, AB_STREAM)
    first = await stream.__anext__()
    assert first.chunk.text == ["a"]  # nosec B101
    await stream.aclose()
    assert body.closed  # nosec B101
    assert body.sent == 1  # nosec B101
    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()


@pytest.mark.asyncio
async def test_context_manager_exit_closes():
    stream, body = _stream(AB_STREAM)
    async with stream as s:
        async for _ in s:
            break
    assert body.closed  # nosec B101


@pytest.mark.asyncio
async def test_aclose_is_idempotent():
    stream, body = _stream(AB_STREAM)
    await stream.aclose()
    await stream.aclose()
    assert stream.closed  # nosec B101


@pytest.mark.asyncio
async def test_transport_error_surfaces_as_last_item():
    stream, _ = _stream(AB_STREAM, error=httpx.RemoteProtocolError("peer closed"))
    events = [e async for e in stream]
    assert len(events) == 3  # nosec B101
    assert isinstance(events[-1].error, TransportError)  # nosec B101
    with pytest.raises(TransportError):
        events[-1].unwrap()


def _explode(obj):
    raise RuntimeError("parser blew up")


@pytest.mark.asyncio
async def test_error_raised_while_decoding_closes_response():
    body = RecordingStream([AB_STREAM])
    stream = DecodedStream(httpx.Response(200, stream=body), _explode)
    with pytest.raises(RuntimeError):
        await stream.__anext__()
    assert stream.closed  # nosec B101
    assert body.closed  # nosec B101


@pytest.mark.asyncio
async def test_deeply_nested_body_yields_error_and_closes_response():
    stream, body = _stream(b'{"x":' + b"[" * 100000)
    events = [e async for e in stream]
    assert len(events) == 1 and events[0].is_error()  # nosec B101
    assert body.closed  # nosec B101
