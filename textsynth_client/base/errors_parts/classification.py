"""Map HTTP statuses and ``httpx`` failures onto :class:`ErrorCode` values."""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .client_error import TextSynthError, TransportError


def _valid_status(value: object) -> Optional[int]:
    return value if isinstance(value, int) and 100 <= value < 600 else None


def _extract_status(exc: Exception) -> Optional[int]:
    """HTTP status carried by ``exc`` itself or by its ``response``, if any."""
    for holder, attrs in ((exc, ("status_code", "status")), (getattr(exc, "response", None), ("status_code",))):
        if holder is None:
            continue
        for attr in attrs:
            status = _valid_status(getattr(holder, attr, None))
            if status is not None:
                return status
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

RETRYABLE_CODES = frozenset(
    {ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.UNAVAILABLE}
)


def code_for_status(status: int) -> ErrorCode:
    """Map an HTTP status code onto an :class:`ErrorCode`."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if status >= 500:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def classify_exception(exc: Exception) -> ErrorCode:
    """Pick the :class:`ErrorCode` for ``exc``.

    Client errors keep their own code. Timeouts win over any status the
    exception carries, and other ``httpx`` failures without a status are
    ``TRANSPORT``.
    """
    if isinstance(exc, TextSynthError):
        return exc.code
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    if isinstance(exc, httpx.HTTPError):
        return ErrorCode.TRANSPORT
    return ErrorCode.UNKNOWN


def transport_error_from(exc: Exception, engine: Optional[str] = None) -> TransportError:
    """Wrap an ``httpx`` (or OS level) failure into a :class:`TransportError`.

    The code comes from :func:`classify_exception`; ``retryable`` is only a
    hint for callers.
    """
    code = classify_exception(exc)
    return TransportError(
        code=code,
        message=str(exc) or type(exc).__name__,
        engine=engine,
        retryable=code in RETRYABLE_CODES,
        raw=exc,
    )


__all__ = [
    "classify_exception",
    "transport_error_from",
    "code_for_status",
    "RETRYABLE_CODES",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
