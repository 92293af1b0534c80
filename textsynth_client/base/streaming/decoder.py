"""Incremental JSON decoder for concatenated-object byte streams.

``decode_one`` attempts to parse exactly one JSON object from the front of
the buffered bytes and reports one of three outcomes:

- ``Parsed(value, consumed)``: a complete object was decoded; ``consumed`` is
  the exact number of bytes it occupied.
- ``Incomplete()``: the bytes are a valid prefix of an object; wait for more.
- ``Malformed(error)``: the bytes can never become a valid value for the
  expected schema, whatever is appended.

``json.JSONDecoder.raw_decode`` reports where a value ended, which is what
makes incremental parsing possible, but it raises the same exception type for
truncated and for invalid input. ``_is_truncation`` tells the two apart from
the error position and the text left at that position.

The bytes are decoded with an incremental UTF-8 decoder so a multi-byte
character split across transport chunks is held back instead of rejected.
"""
from __future__ import annotations

import codecs
import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from ..errors import DecodeError

T = TypeVar("T")

_JSON = json.JSONDecoder()
_JSON_WHITESPACE = " \t\n\r"

# Bare literals the stdlib decoder accepts; a proper prefix may still complete.
_LITERALS = ("true", "false", "null", "NaN", "Infinity", "-Infinity")
# Text left at the error position of a cut ``\uXXXX`` escape.
_PARTIAL_UNICODE_ESCAPE = re.compile(r"\\?u[0-9A-Fa-f]{0,4}")
# Text left after a number cut right after its fraction dot or exponent marker.
_PARTIAL_NUMBER_TAIL = re.compile(r"\.|[eE][-+]?")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T
    consumed: int


@dataclass(frozen=True)
class Incomplete:
    pass


@dataclass(frozen=True)
class Malformed:
    error: DecodeError


DecodeOutcome = Union[Parsed[Any], Incomplete, Malformed]

INCOMPLETE = Incomplete()


def _is_truncation(exc: json.JSONDecodeError, text: str) -> bool:
    """Return True when appending bytes could still turn ``text`` into a value."""
    tail = text[exc.pos:]
    if not tail.strip(_JSON_WHITESPACE):
        return True
    if exc.msg.startswith("Unterminated string"):
        return True
    if exc.msg.startswith("Invalid \\uXXXX escape"):
        return _PARTIAL_UNICODE_ESCAPE.fullmatch(tail) is not None
    if exc.msg.startswith("Expecting value") and any(
        lit != tail and lit.startswith(tail) for lit in _LITERALS
    ):
        return True
    return (
        exc.pos > 0
        and text[exc.pos - 1].isdigit()
        and _PARTIAL_NUMBER_TAIL.fullmatch(tail) is not None
    )


def _malformed(message: str, data: bytes, raw: Exception | None = None) -> Malformed:
    return Malformed(DecodeError(message=message, residual=data, raw=raw))


def decode_one(data: bytes, parse: Callable[[Any], T]) -> DecodeOutcome:
    """Try to decode one JSON object starting at offset 0 of ``data``.

    Parameters:
        data: Buffered bytes. Leading whitespace must already be trimmed.
        parse: Converts the decoded JSON object into the schema type (for
            example ``ResponseChunk.model_validate``). ``ValueError`` or
            ``TypeError`` raised by it (pydantic's ``ValidationError``
            included) marks the data as malformed.

    Returns:
        ``Parsed``, ``Incomplete`` or ``Malformed``; ``data`` is never modified.
    """
    if not data:
        return INCOMPLETE
    bad_utf8: UnicodeDecodeError | None = None
    try:
        text = codecs.getincrementaldecoder("utf-8")().decode(data, final=False)
    except UnicodeDecodeError as e:
        # values ahead of the invalid sequence are still decodable
        bad_utf8 = e
        text = data[: e.start].decode("utf-8")
    if not text:
        if bad_utf8 is not None:
            return _malformed(f"invalid UTF-8 in response: {bad_utf8.reason}", data, bad_utf8)
        # only the first bytes of a multi-byte character so far
        return INCOMPLETE
    if text[0] != "{":
        return _malformed(f"expected a JSON object, found {text[0]!r}", data)

    try:
        obj, end = _JSON.raw_decode(text)
    except json.JSONDecodeError as e:
        if bad_utf8 is not None:
            return _malformed(f"invalid UTF-8 in response: {bad_utf8.reason}", data, bad_utf8)
        if _is_truncation(e, text):
            return INCOMPLETE
        return _malformed(f"invalid JSON: {e}", data, e)
    except RecursionError as e:
        return _malformed("JSON nesting too deep", data, e)

    try:
        value = parse(obj)
    except (ValueError, TypeError) as e:
        return _malformed(f"response does not match schema: {e}", data, e)
    return Parsed(value=value, consumed=len(text[:end].encode("utf-8")))


__all__ = [
    "Parsed",
    "Incomplete",
    "Malformed",
    "DecodeOutcome",
    "INCOMPLETE",
    "decode_one",
]
