"""Aggregation of completion stream chunks into a single result.

Streaming answers carry text deltas; concatenating the deltas per completion
index yields the full text. The last chunk (``reached_end``) carries the
token counts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..base.streaming import DecodedStream, StreamEvent
from .models import ResponseChunk

CompletionStream = DecodedStream[ResponseChunk]
CompletionStreamEvent = StreamEvent[ResponseChunk]


@dataclass
class CompletionResult:
    """Accumulated outcome of a completion call."""

    text: List[str] = field(default_factory=list)
    reached_end: bool = False
    truncated_prompt: Optional[bool] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    chunk_count: int = 0

    @property
    def first_text(self) -> str:
        return self.text[0] if self.text else ""


def accumulate_chunks(chunks: Iterable[ResponseChunk]) -> CompletionResult:
    """Fold decoded chunks into a :class:`CompletionResult`."""
    result = CompletionResult()
    for chunk in chunks:
        result.chunk_count += 1
        for i, piece in enumerate(chunk.text):
            if i >= len(result.text):
                result.text.append("")
            result.text[i] += piece
        result.reached_end = chunk.reached_end
        if chunk.truncated_prompt:
            result.truncated_prompt = True
        elif result.truncated_prompt is None and chunk.truncated_prompt is not None:
            result.truncated_prompt = chunk.truncated_prompt
        if chunk.input_tokens is not None:
            result.input_tokens = chunk.input_tokens
        if chunk.output_tokens is not None:
            result.output_tokens = chunk.output_tokens
    return result


async def collect_stream(stream: CompletionStream) -> CompletionResult:
    """Drain ``stream`` and accumulate its chunks.

    The stream is closed on return. A terminal error item is raised after the
    response has been released.
    """
    chunks: List[ResponseChunk] = []
    async with stream:
        async for event in stream:
            chunks.append(event.unwrap())
    return accumulate_chunks(chunks)


__all__ = [
    "CompletionStream",
    "CompletionStreamEvent",
    "CompletionResult",
    "accumulate_chunks",
    "collect_stream",
]
