"""Stream item type produced by the stream driver.

Each item is either a decoded chunk or the single terminal error of the
stream. Callers consuming a stream must be prepared for the last item to be
an error even after receiving valid items.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ..errors import TextSynthError

T = TypeVar("T")


@dataclass(frozen=True)
class StreamEvent(Generic[T]):
    """One item of a decoded stream.

    Fields:
      chunk: the decoded value; ``None`` on the error item
      error: the terminal failure; ``None`` on regular items
    """

    chunk: Optional[T] = None
    error: Optional[TextSynthError] = None

    def __post_init__(self) -> None:
        if (self.chunk is None) == (self.error is None):
            raise ValueError("StreamEvent needs exactly one of chunk or error")

    def is_error(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """Return the chunk, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.chunk  # type: ignore[return-value]


__all__ = ["StreamEvent"]
