"""Stream driver: byte chunks in, decoded stream events out.

``drive_stream`` is a pull-driven async generator. Its only suspension point
on the input side is awaiting the next transport chunk; every value that can
be decoded from the buffer is yielded before the next chunk is requested.

Lifecycle::

    awaiting chunk --chunk--> decode loop --value--> yield --> decode loop
         |                        |  incomplete --> awaiting chunk
         |                        |  malformed  --> yield DecodeError, stop
         |-- I/O error --> yield TransportError, stop
         '-- exhausted --> empty/blank buffer: stop
                           residual bytes: yield DanglingDataError, stop

At most one error item is produced and it is always the last item. The
generator is not restartable. Closing it early (``aclose()``) closes the
chunk iterator as well.
"""
from __future__ import annotations

import logging
import time
from typing import Any, AsyncIterable, AsyncIterator, Callable, Optional, TypeVar

import httpx

from ..errors import DanglingDataError, transport_error_from
from ..logging import LogContext, get_logger, normalized_log_event
from .byte_buffer import ByteBuffer
from .decoder import Malformed, Parsed, decode_one
from .events import StreamEvent
from .termination import DanglingData, check_termination

T = TypeVar("T")

_PREVIEW_BYTES = 200


def _preview(data: bytes) -> str:
    """Short printable rendering of residual bytes for logs."""
    text = data[:_PREVIEW_BYTES].decode("utf-8", errors="replace")
    return text + ("..." if len(data) > _PREVIEW_BYTES else "")


async def drive_stream(  # noqa: C901
    chunks: AsyncIterable[bytes],
    parse: Callable[[Any], T],
    *,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> AsyncIterator[StreamEvent[T]]:
    """Decode concatenated JSON objects from ``chunks`` lazily.

    Parameters:
        chunks: Transport byte chunks in arrival order (for example
            ``httpx.Response.aiter_bytes()``).
        parse: Converts one decoded JSON object into the item type.
        logger: Logger for lifecycle events; defaults to ``textsynth.stream``.
        ctx: Correlation context merged into every log event.

    Yields:
        ``StreamEvent`` items; an error item, if any, is the last one.
    """
    logger = logger or get_logger("textsynth.stream")
    ctx = ctx or LogContext()
    engine = ctx.engine
    buffer = ByteBuffer()
    iterator = chunks.__aiter__()

    t0 = time.perf_counter()
    emitted = 0
    received = 0
    first_chunk_ms: Optional[float] = None
    error_code: Optional[str] = None

    normalized_log_event(logger, "stream.start", ctx, phase="start")
    try:
        while True:
            try:
                data = await iterator.__anext__()
            except StopAsyncIteration:
                break
            except (httpx.HTTPError, OSError) as e:
                err = transport_error_from(e, engine)
                error_code = err.code.value
                normalized_log_event(
                    logger,
                    "stream.transport_error",
                    ctx,
                    phase="mid_stream",
                    emitted=emitted,
                    error_code=error_code,
                    error=err.message,
                )
                yield StreamEvent(error=err)
                return

            received += len(data)
            buffer.append(data)
            while True:
                buffer.trim_leading_whitespace()
                outcome = decode_one(buffer.peek_all(), parse)
                if isinstance(outcome, Parsed):
                    buffer.advance(outcome.consumed)
                    buffer.trim_leading_whitespace()
                    emitted += 1
                    if first_chunk_ms is None:
                        first_chunk_ms = (time.perf_counter() - t0) * 1000.0
                    yield StreamEvent(chunk=outcome.value)
                    continue
                if isinstance(outcome, Malformed):
                    decode_err = outcome.error
                    decode_err.engine = engine
                    error_code = decode_err.code.value
                    buffer.clear()
                    normalized_log_event(
                        logger,
                        "stream.decode_error",
                        ctx,
                        phase="mid_stream",
                        emitted=emitted,
                        error_code=error_code,
                        error=decode_err.message,
                        residual=_preview(decode_err.residual),
                    )
                    yield StreamEvent(error=decode_err)
                    return
                break

        termination = check_termination(buffer)
        if isinstance(termination, DanglingData):
            dangling = DanglingDataError(engine=engine, residual=termination.residual)
            error_code = dangling.code.value
            normalized_log_event(
                logger,
                "stream.dangling_data",
                ctx,
                phase="finalize",
                emitted=emitted,
                error_code=error_code,
                residual=_preview(termination.residual),
            )
            yield StreamEvent(error=dangling)
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()
        normalized_log_event(
            logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=emitted,
            outcome=error_code or "ok",
            metrics={
                "time_to_first_chunk_ms": first_chunk_ms,
                "total_duration_ms": (time.perf_counter() - t0) * 1000.0,
                "emitted_count": emitted,
                "bytes_received": received,
            },
        )


__all__ = ["drive_stream"]
