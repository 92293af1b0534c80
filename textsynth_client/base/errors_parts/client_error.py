"""
Structured client error exception types.

`TextSynthError` wraps every failure surfaced by the library with a normalized
`ErrorCode` for consistent handling and structured logging. The subclasses
mirror the failure categories callers need to tell apart:

- `RequestValidationError`: a request field violates a documented range;
  raised before any network call.
- `TransportError`: connection or I/O failure reported by ``httpx``.
- `ApiError`: the API answered with a non-success HTTP status.
- `DecodeError`: bytes that can never form a valid value for the expected
  schema; terminal for a stream.
- `DanglingDataError`: the byte stream ended with non-whitespace bytes that
  never formed a complete value.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .error_code import ErrorCode


@dataclass
class TextSynthError(Exception):
    """Represents a structured client error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        engine: Engine identifier the failing call targeted, when known.
        retryable: Hint for caller retry logic (not authoritative; the
            library itself never retries).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    engine: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining engine, code, and message."""
        return f"{self.engine or '-'} {self.code.value}: {self.message}"


@dataclass(frozen=True)
class FieldViolation:
    """A single violated request constraint."""

    field: str
    message: str


@dataclass
class RequestValidationError(TextSynthError):
    """Request construction failed; lists every violated field."""

    code: ErrorCode = ErrorCode.VALIDATION
    message: str = "request validation failed"
    violations: List[FieldViolation] = field(default_factory=list)

    @property
    def fields(self) -> List[str]:
        return [v.field for v in self.violations]

    def __str__(self) -> str:  # pragma: no cover - trivial
        detail = "; ".join(f"{v.field}: {v.message}" for v in self.violations)
        return f"{self.code.value}: {self.message} ({detail})"


@dataclass
class TransportError(TextSynthError):
    """Connection or I/O failure; surfaced as-is and never retried internally."""

    code: ErrorCode = ErrorCode.TRANSPORT
    message: str = "transport failure"


@dataclass
class ApiError(TextSynthError):
    """Non-success HTTP status returned by the API."""

    code: ErrorCode = ErrorCode.UNKNOWN
    message: str = "api error"
    status_code: Optional[int] = None
    body: Optional[str] = None


@dataclass
class DecodeError(TextSynthError):
    """Bytes present cannot form a valid value under the expected schema.

    ``residual`` holds the unconsumed buffer contents at the point of failure.
    """

    code: ErrorCode = ErrorCode.MALFORMED
    message: str = "malformed response data"
    residual: bytes = b""


@dataclass
class DanglingDataError(TextSynthError):
    """Stream ended with unconsumed, non-whitespace bytes in the buffer.

    Distinct from :class:`DecodeError` because the residual bytes may only be
    truncated rather than invalid.
    """

    code: ErrorCode = ErrorCode.DANGLING_DATA
    message: str = "stream ended with unparsed data"
    residual: bytes = b""


__all__ = [
    "TextSynthError",
    "FieldViolation",
    "RequestValidationError",
    "TransportError",
    "ApiError",
    "DecodeError",
    "DanglingDataError",
]
