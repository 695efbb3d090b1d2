"""Schema-driven (untagged) encoding.

No type information is written; both sides must agree on the shape of every
value ahead of time.

Layout:

    bool                 [0x00 | 0x01]
    integer / float      [big-endian, declared width]
    char                 [code point: u32]
    str / bytes          [length: u64][bytes]
    streamed str         [0xFFFFFFFFFFFFFFFF][utf-8 bytes][0xD8 0x00]
    option               [0x00] | [0x01][value]
    unit, unit struct    (nothing)
    newtype struct       [value]
    seq / map            [count: u64][element]... (map elements are key, value)
    tuple / struct       [field]...
    enum variant         [discriminant: u32][payload]

>>> from byteshape.codec.writer import BytesWriter
>>> out = BytesWriter()
>>> encoder = UntaggedEncoder(out)
>>> with encoder.seq(2) as seq:
...     seq.element().write_int(IntKind.U8, 7)
...     seq.element().write_int(IntKind.U8, 9)
>>> out.getvalue().hex()
'00000000000000020709'
"""

from __future__ import annotations

from collections.abc import Iterator

from ..exceptions import InvalidOption
from .base import CompoundWriter, Decoder, Encoder, VariantHeader, check_count
from .primitives import (
    CHAR_SIZE,
    FloatKind,
    IntKind,
    decode_bool,
    decode_char,
    decode_float,
    decode_int,
    decode_u64,
    encode_bool,
    encode_char,
    encode_float,
    encode_int,
    encode_u64,
    encode_utf8,
)
from .sequencer import SequenceBuffer
from .strings import ESCAPE_LENGTH_BYTES, TextSink, read_sized_or_streamed


class UntaggedEncoder(Encoder):
    """Encoder for the schema-driven format."""

    def _discriminant(self, discriminant: int) -> None:
        self.writer.write(encode_int(IntKind.U32, discriminant))

    def _write_sized(self, data: bytes) -> None:
        self.writer.write(encode_u64(len(data)))
        self.writer.write(data)

    def write_bool(self, value: bool) -> None:
        self._record("bool")
        self.writer.write(encode_bool(value))

    def write_int(self, kind: IntKind, value: int) -> None:
        self._record(kind.name.lower())
        self.writer.write(encode_int(kind, value))

    def write_float(self, kind: FloatKind, value: float) -> None:
        self._record(kind.name.lower())
        self.writer.write(encode_float(kind, value))

    def write_char(self, value: str) -> None:
        self._record("char")
        self.writer.write(encode_char(value))

    def write_str(self, value: str) -> None:
        self._record("str")
        self._write_sized(encode_utf8(value))

    def streamed_str(self) -> TextSink:
        self._record("streamed_str")
        self.writer.write(ESCAPE_LENGTH_BYTES)
        return TextSink(self.writer)

    def write_bytes(self, value: bytes) -> None:
        self._record("bytes")
        self._write_sized(value)

    def write_none(self) -> None:
        self._record("none")
        self.writer.write_byte(0)

    def write_some(self) -> None:
        self._record("some")
        self.writer.write_byte(1)

    def write_unit(self) -> None:
        self._record("unit")

    def write_unit_struct(self) -> None:
        self._record("unit_struct")

    def write_unit_variant(self, discriminant: int) -> None:
        self._record("unit_variant")
        self._discriminant(discriminant)

    def write_newtype_struct(self) -> None:
        self._record("newtype_struct")

    def write_newtype_variant(self, discriminant: int) -> None:
        self._record("newtype_variant")
        self._discriminant(discriminant)

    def _sequence(self, length: int | None) -> CompoundWriter:
        if length is not None:
            self.writer.write(encode_u64(length))
            return CompoundWriter(self, on_finish=check_count(length))

        buffer = SequenceBuffer.begin(self.config)

        def flush(_count: int) -> None:
            count, payload = buffer.finish()
            self.writer.write(encode_u64(count))
            self.writer.write(payload)

        return CompoundWriter(
            self.fork(buffer.writer),
            on_element=buffer.push,
            on_finish=flush,
            on_abort=buffer.discard,
        )

    def seq(self, length: int | None) -> CompoundWriter:
        self._record("seq")
        return self._sequence(length)

    def map(self, length: int | None) -> CompoundWriter:
        self._record("map")
        return self._sequence(length)

    def tuple(self, length: int) -> CompoundWriter:
        self._record("tuple")
        return CompoundWriter(self, on_finish=check_count(length))

    def tuple_struct(self, length: int) -> CompoundWriter:
        self._record("tuple_struct")
        return CompoundWriter(self, on_finish=check_count(length))

    def tuple_variant(self, discriminant: int, length: int) -> CompoundWriter:
        self._record("tuple_variant")
        self._discriminant(discriminant)
        return CompoundWriter(self, on_finish=check_count(length))

    def struct(self, length: int) -> CompoundWriter:
        self._record("struct")
        return CompoundWriter(self, on_finish=check_count(length))

    def struct_variant(self, discriminant: int, length: int) -> CompoundWriter:
        self._record("struct_variant")
        self._discriminant(discriminant)
        return CompoundWriter(self, on_finish=check_count(length))


class UntaggedDecoder(Decoder):
    """Decoder for the schema-driven format."""

    def _length(self) -> int:
        return decode_u64(self.reader.read(8))

    def read_bool(self) -> bool:
        self._record("bool")
        return decode_bool(self.reader.read_byte())

    def read_int(self, kind: IntKind) -> int:
        self._record(kind.name.lower())
        return decode_int(kind, self.reader.read(kind.size))

    def read_float(self, kind: FloatKind) -> float:
        self._record(kind.name.lower())
        return decode_float(kind, self.reader.read(kind.size))

    def read_char(self) -> str:
        self._record("char")
        return decode_char(self.reader.read(CHAR_SIZE))

    def read_str(self) -> str:
        self._record("str")
        return read_sized_or_streamed(self.reader)

    def read_bytes(self) -> bytes:
        self._record("bytes")
        return self.reader.read(self._length())

    def read_option(self) -> bool:
        self._record("option")
        byte = self.reader.read_byte()
        if byte == 0:
            return False
        if byte == 1:
            return True
        raise InvalidOption(byte)

    def read_unit(self) -> None:
        self._record("unit")

    def read_unit_struct(self) -> None:
        self._record("unit_struct")

    def read_newtype_struct(self) -> None:
        self._record("newtype_struct")

    def read_variant(self) -> VariantHeader:
        self._record("variant")
        return VariantHeader(decode_int(IntKind.U32, self.reader.read(4)))

    def variant_fields(self, length: int) -> Iterator[UntaggedDecoder]:
        return self._repeat(length)

    def seq(self) -> Iterator[UntaggedDecoder]:
        self._record("seq")
        return self._repeat(self._element_count(self._length()))

    def map(self) -> Iterator[UntaggedDecoder]:
        self._record("map")
        return self._repeat(self._element_count(self._length()))

    def tuple(self, length: int) -> Iterator[UntaggedDecoder]:
        self._record("tuple")
        return self._repeat(length)

    def tuple_struct(self, length: int) -> Iterator[UntaggedDecoder]:
        self._record("tuple_struct")
        return self._repeat(length)

    def struct(self, length: int) -> Iterator[UntaggedDecoder]:
        self._record("struct")
        return self._repeat(length)
