r"""Streaming string framing.

Text produced incrementally (for instance by ``print()`` or a formatter) is
written without knowing its length in advance:

    schema-driven:    [ESCAPE_LENGTH: u64][utf-8 bytes...][0xD8 0x00]
    self-describing:  [Tag.UNSIZED_STRING][utf-8 bytes...][0xD8 0x00]

0xD8 is a UTF-8 lead byte that must be followed by a continuation byte
(0x80-0xBF), so the pair D8 00 can never occur inside valid UTF-8. The first
occurrence of the marker therefore always terminates the string. This only
holds for UTF-8 text; arbitrary element bytes can contain any pattern, so
sequences use a count or tagged end marker instead.

>>> from byteshape.codec.writer import BytesWriter
>>> out = BytesWriter()
>>> out.write(ESCAPE_LENGTH_BYTES)
8
>>> sink = TextSink(out)
>>> sink.write("ab")
2
>>> sink.close()
>>> out.getvalue().hex()
'ffffffffffffffff6162d800'
"""

from __future__ import annotations

from structlog import get_logger

from ..exceptions import InvalidEncoding
from .primitives import U64_MAX, decode_u64, decode_utf8, encode_u64, encode_utf8
from .reader import Reader
from .writer import Writer

logger = get_logger()

ESCAPE_LENGTH = U64_MAX
ESCAPE_LENGTH_BYTES = encode_u64(ESCAPE_LENGTH)
END_MARKER = b"\xd8\x00"


class TextSink:
    """File-like text target that forwards UTF-8 bytes straight to a writer.

    The end marker is written by close(); nothing is buffered in between.
    """

    def __init__(self, writer: Writer) -> None:
        self._writer = writer
        self.written = 0
        self.closed = False

    def write(self, text: str) -> int:
        if self.closed:
            raise ValueError("write to closed TextSink")
        self.written += self._writer.write(encode_utf8(text))
        return len(text)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        if not self.closed:
            self._writer.write(END_MARKER)
            self.closed = True
            logger.debug("terminated streamed string", size=self.written)

    def __enter__(self) -> TextSink:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc_type is None:
            self.close()


def read_until_marker(reader: Reader) -> str:
    """Read a streamed string body and consume its end marker.

    Raises:
        InvalidEncoding: If the marker is missing or the body is not valid UTF-8
    """
    length = reader.find(END_MARKER)
    if length < 0:
        raise InvalidEncoding(
            f"Unterminated streamed string: no end marker in {reader.remaining()} bytes"
        )
    text = decode_utf8(reader.read(length))
    reader.read(len(END_MARKER))
    return text


def read_sized_or_streamed(reader: Reader) -> str:
    """Read a schema-driven string: literal length, or escape length then marker."""
    length = decode_u64(reader.read(8))
    if length == ESCAPE_LENGTH:
        return read_until_marker(reader)
    return decode_utf8(reader.read(length))
