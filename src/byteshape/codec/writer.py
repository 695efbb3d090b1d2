"""Output sinks for the encoders.

Every encoder writes through a Writer. The in-memory BytesWriter is the
default; StreamWriter adapts a binary I/O stream, BufferWriter fills a
caller-supplied fixed buffer, and CountingWriter only measures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO

from ..exceptions import EndOfBuffer, WriterError


class Writer(ABC):
    """Byte sink with a running count of bytes accepted."""

    def __init__(self) -> None:
        self.written = 0

    @abstractmethod
    def _write(self, data: bytes | memoryview) -> None:
        raise NotImplementedError

    def write(self, data: bytes | memoryview) -> int:
        """Write a byte sequence, returning the number of bytes written."""
        if data:
            self._write(data)
            self.written += len(data)
        return len(data)

    def write_byte(self, byte: int) -> int:
        """Write a single byte."""
        return self.write(bytes((byte,)))


class BytesWriter(Writer):
    """Growable in-memory sink."""

    def __init__(self) -> None:
        super().__init__()
        self._buffer = bytearray()

    def _write(self, data: bytes | memoryview) -> None:
        self._buffer.extend(data)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()
        self.written = 0


class StreamWriter(Writer):
    """Adapter for a binary stream such as a file or ``io.BytesIO``."""

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__()
        self._stream = stream

    def _write(self, data: bytes | memoryview) -> None:
        try:
            self._stream.write(data)
        except (OSError, ValueError) as e:
            raise WriterError(f"Output stream rejected {len(data)} bytes: {e}") from e


class BufferWriter(Writer):
    """Writes into a preallocated buffer without ever growing it.

    Example:
        >>> buff = bytearray(4)
        >>> writer = BufferWriter(buff)
        >>> writer.write(b"\\x00\\x01")
        2
        >>> bytes(buff)
        b'\\x00\\x01\\x00\\x00'
    """

    def __init__(self, buffer: bytearray | memoryview) -> None:
        super().__init__()
        self._view = memoryview(buffer).cast("B")
        if self._view.readonly:
            raise ValueError("BufferWriter requires a writable buffer")

    def _write(self, data: bytes | memoryview) -> None:
        end = self.written + len(data)
        if end > len(self._view):
            raise EndOfBuffer()
        self._view[self.written:end] = data


class CountingWriter(Writer):
    """Discards everything and only keeps the byte count."""

    def _write(self, data: bytes | memoryview) -> None:
        pass
