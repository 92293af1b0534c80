"""Streaming package.

Exposes the incremental decoding primitives (buffer, decoder, termination
check), the stream driver and the response-bound stream under a single
namespace.
"""

from .byte_buffer import ByteBuffer, WHITESPACE
from .decoder import INCOMPLETE, DecodeOutcome, Incomplete, Malformed, Parsed, decode_one
from .events import StreamEvent
from .termination import CleanEnd, DanglingData, Termination, check_termination
from .stream_driver import drive_stream
from .response_stream import DecodedStream

__all__ = [
    "ByteBuffer",
    "WHITESPACE",
    "INCOMPLETE",
    "DecodeOutcome",
    "Incomplete",
    "Malformed",
    "Parsed",
    "decode_one",
    "StreamEvent",
    "CleanEnd",
    "DanglingData",
    "Termination",
    "check_termination",
    "drive_stream",
    "DecodedStream",
]
