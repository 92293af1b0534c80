"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `textsynth_client.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .client_error import (
    ApiError,
    DanglingDataError,
    DecodeError,
    FieldViolation,
    RequestValidationError,
    TextSynthError,
    TransportError,
)
from .classification import (
    RETRYABLE_CODES,
    classify_exception,
    code_for_status,
    transport_error_from,
)

__all__ = [
    "ErrorCode",
    "TextSynthError",
    "FieldViolation",
    "RequestValidationError",
    "TransportError",
    "ApiError",
    "DecodeError",
    "DanglingDataError",
    "RETRYABLE_CODES",
    "classify_exception",
    "code_for_status",
    "transport_error_from",
]
