"""Forward-only byte source for the decoders.

The reader keeps the input and a read offset into it. It never allocates a
growable buffer of its own.
"""

from __future__ import annotations

from ..exceptions import TrailingBytes, UnexpectedEnd


class Reader:
    """Reads fixed-size chunks from an in-memory byte sequence.

    Example:
        >>> reader = Reader(b"\\x00\\x01\\x02")
        >>> reader.read_byte()
        0
        >>> reader.read(2)
        b'\\x01\\x02'
        >>> reader.is_empty()
        True
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._pos

    def is_empty(self) -> bool:
        return self._pos >= len(self._data)

    def peek_byte(self) -> int:
        if self.is_empty():
            raise UnexpectedEnd(1, 0)
        return self._data[self._pos]

    def read_byte(self) -> int:
        byte = self.peek_byte()
        self._pos += 1
        return byte

    def read(self, n: int) -> bytes:
        """Read exactly n bytes.

        Raises:
            UnexpectedEnd: If fewer than n bytes remain
        """
        if n < 0:
            raise ValueError(f"read size cannot be negative, got {n}")
        available = self.remaining()
        if available < n:
            raise UnexpectedEnd(n, available)
        data = self._data[self._pos:self._pos + n]
        self._pos += n
        return data

    def find(self, marker: bytes) -> int:
        """Offset of the first occurrence of marker in the unread input, or -1.

        The search never looks past the end of the available input.
        """
        index = self._data.find(marker, self._pos)
        return -1 if index < 0 else index - self._pos

    def finish(self) -> None:
        """Check that all input was consumed.

        Raises:
            TrailingBytes: If unread bytes remain
        """
        if not self.is_empty():
            raise TrailingBytes(self.remaining())
