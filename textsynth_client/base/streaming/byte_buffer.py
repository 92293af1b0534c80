"""Append-then-drain byte accumulator for the stream driver.

The buffer holds exactly the bytes received from the transport that have not
yet been attributed to a parsed value or to skipped whitespace. It is owned by
a single stream for that stream's lifetime and is not safe to share.
"""
from __future__ import annotations

# Matches the ASCII whitespace set of ``bytes.isspace`` minus vertical tab,
# i.e. what the API may put between JSON values.
WHITESPACE = frozenset(b" \t\n\r\x0c")


class ByteBuffer:
    """Mutable byte sequence with a drain-from-front cursor."""

    __slots__ = ("_data",)

    def __init__(self, initial: bytes = b"") -> None:
        self._data = bytearray(initial)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"ByteBuffer({bytes(self._data)!r})"

    def append(self, data: bytes) -> None:
        self._data.extend(data)

    def advance(self, n: int) -> None:
        """Discard the first ``n`` bytes.

        Raises:
            ValueError: ``n`` is negative or larger than the buffer. This is a
                caller bug, not a stream condition.
        """
        if n < 0 or n > len(self._data):
            raise ValueError(f"cannot advance {n} bytes in a buffer of {len(self._data)}")
        del self._data[:n]

    def peek_all(self) -> bytes:
        """Return a read-only snapshot of the current contents."""
        return bytes(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def is_blank(self) -> bool:
        """True when every remaining byte is ASCII whitespace (or none remain)."""
        return all(b in WHITESPACE for b in self._data)

    def trim_leading_whitespace(self) -> int:
        """Drop leading whitespace bytes; return how many were dropped."""
        i = 0
        data = self._data
        while i < len(data) and data[i] in WHITESPACE:
            i += 1
        if i:
            del data[:i]
        return i

    def clear(self) -> bytes:
        """Empty the buffer, returning what it held."""
        residual = bytes(self._data)
        self._data.clear()
        return residual


__all__ = ["ByteBuffer", "WHITESPACE"]
