"""End-of-stream inspection of the residual buffer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .byte_buffer import ByteBuffer


@dataclass(frozen=True)
class CleanEnd:
    pass


@dataclass(frozen=True)
class DanglingData:
    residual: bytes


Termination = Union[CleanEnd, DanglingData]


def check_termination(buffer: ByteBuffer) -> Termination:
    """Classify the buffer once the transport is exhausted.

    An empty or all-whitespace buffer is a clean end. Anything else is
    dangling data; the buffer is cleared and its bytes returned with it.
    """
    if buffer.is_blank():
        buffer.clear()
        return CleanEnd()
    return DanglingData(residual=buffer.clear())


__all__ = ["CleanEnd", "DanglingData", "Termination", "check_termination"]
