"""Completion and logprob endpoints: request models, streamed chunk model and
result aggregation."""

from .logprob import LogprobRequest, LogprobResponse
from .models import CompletionRequest, ResponseChunk, string_or_list
from .result import (
    CompletionResult,
    CompletionStream,
    CompletionStreamEvent,
    accumulate_chunks,
    collect_stream,
)

__all__ = [
    "CompletionRequest",
    "ResponseChunk",
    "string_or_list",
    "CompletionResult",
    "CompletionStream",
    "CompletionStreamEvent",
    "accumulate_chunks",
    "collect_stream",
    "LogprobRequest",
    "LogprobResponse",
]
