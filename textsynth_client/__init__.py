"""textsynth_client package

Asynchronous client for the TextSynth text generation API.

Purpose:
    Typed request/response models for the completions, logprob, tokenize and
    translate endpoints, and an incremental decoder turning a streamed
    completion body (concatenated JSON objects in arbitrary transport
    chunks) into a lazy sequence of chunks.

Public API (re-exported):
    - Version: ``__version__``
    - Client: :class:`TextSynthClient`
    - Engines: :class:`CompletionEngine`, :class:`TranslationEngine`
    - Models: ``CompletionRequest``, ``ResponseChunk``, ``CompletionResult``,
      ``LogprobRequest``/``LogprobResponse``, ``TokenizeRequest``/
      ``TokenizeResponse``, ``TranslateRequest``/``TranslateResponse``
    - Errors: :class:`TextSynthError` and its subclasses, :class:`ErrorCode`
    - Logging: :func:`configure_logger`
"""

from .base.engines import CompletionEngine, Engine, TranslationEngine
from .base.errors import (
    ApiError,
    DanglingDataError,
    DecodeError,
    ErrorCode,
    FieldViolation,
    RequestValidationError,
    TextSynthError,
    TransportError,
)
from .base.logging import configure_logger
from .base.streaming import DecodedStream, StreamEvent
from .base.timeouts import TimeoutConfig
from .client import TextSynthClient
from .completions import (
    CompletionRequest,
    CompletionResult,
    CompletionStream,
    CompletionStreamEvent,
    LogprobRequest,
    LogprobResponse,
    ResponseChunk,
    accumulate_chunks,
)
from .tokenize import TokenizeRequest, TokenizeResponse
from .translate import TranslateRequest, TranslateResponse, Translation

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "TextSynthClient",
    "CompletionEngine",
    "TranslationEngine",
    "Engine",
    "CompletionRequest",
    "ResponseChunk",
    "CompletionResult",
    "CompletionStream",
    "CompletionStreamEvent",
    "accumulate_chunks",
    "LogprobRequest",
    "LogprobResponse",
    "TokenizeRequest",
    "TokenizeResponse",
    "TranslateRequest",
    "TranslateResponse",
    "Translation",
    "DecodedStream",
    "StreamEvent",
    "TimeoutConfig",
    "ErrorCode",
    "TextSynthError",
    "FieldViolation",
    "RequestValidationError",
    "TransportError",
    "ApiError",
    "DecodeError",
    "DanglingDataError",
    "configure_logger",
]
