"""Unified client error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``textsynth_client.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.client_error import (
    ApiError,
    DanglingDataError,
    DecodeError,
    FieldViolation,
    RequestValidationError,
    TextSynthError,
    TransportError,
)
from .errors_parts.classification import (
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
