"""Self-describing (tagged) encoding.

Every value starts with a one-byte Tag, so a decoder can rebuild the value
tree without knowing its shape in advance.

Layout:

    bool                  [BOOL_FALSE | BOOL_TRUE]
    integer / float       [tag][big-endian, declared width]
    char                  [CHAR1..CHAR4][1-4 utf-8 bytes]
    str                   [STRING][length: u64][utf-8 bytes]
    streamed str          [UNSIZED_STRING][utf-8 bytes][0xD8 0x00]
    bytes                 [BYTE_ARRAY][length: u64][bytes]
    option                [NONE] | [SOME][value]
    unit, unit struct     [UNIT] | [UNIT_STRUCT]
    newtype struct        [NEWTYPE_STRUCT][value]
    seq / map             [SEQ | MAP][count: u64][value]...
    unsized seq / map     [UNSIZED_SEQ | UNSIZED_MAP][value]...[UNSIZED_SEQ_END]
    tuple / struct        [TUPLE | TUPLE_STRUCT | STRUCT][count: u8][value]...
    unit variant          [UNIT_VARIANT][discriminant: u32]
    newtype variant       [NEWTYPE_VARIANT][discriminant: u32][value]
    tuple / struct var.   [TUPLE_VARIANT | STRUCT_VARIANT][discriminant: u32][count: u8][value]...

Unknown-length sequences need no buffering here: each element carries its
own tag, so the end tag cannot be confused with element content.

>>> from byteshape.codec.writer import BytesWriter
>>> out = BytesWriter()
>>> encoder = TaggedEncoder(out)
>>> with encoder.seq(None) as seq:
...     seq.element().write_int(IntKind.U8, 7)
>>> out.getvalue().hex()
'1b08071c'
"""

from __future__ import annotations

from collections.abc import Iterator

from ..exceptions import InvalidEncoding, SizeMismatch, UnexpectedTag
from ..models.values import VariantKind
from .base import CompoundWriter, Decoder, Encoder, VariantHeader, check_count
from .primitives import (
    FloatKind,
    IntKind,
    decode_char_utf8,
    decode_float,
    decode_int,
    decode_u64,
    decode_utf8,
    encode_char_utf8,
    encode_float,
    encode_int,
    encode_u64,
    encode_utf8,
)
from .sequencer import SequenceBuffer
from .strings import TextSink, read_until_marker
from .tags import CHAR_TAGS, FLOAT_TAGS, INT_TAGS, Tag

MAX_FIELDS = 0xFF

VARIANT_KINDS = {
    Tag.UNIT_VARIANT: VariantKind.UNIT,
    Tag.NEWTYPE_VARIANT: VariantKind.NEWTYPE,
    Tag.TUPLE_VARIANT: VariantKind.TUPLE,
    Tag.STRUCT_VARIANT: VariantKind.STRUCT,
}


def field_count_byte(length: int) -> bytes:
    """Encode a struct/tuple field count in its single byte.

    Raises:
        InvalidEncoding: If the count does not fit in one byte
    """
    if not 0 <= length <= MAX_FIELDS:
        raise InvalidEncoding(
            f"{length} fields cannot be encoded in self-describing mode (maximum {MAX_FIELDS})"
        )
    return bytes((length,))


class TaggedEncoder(Encoder):
    """Encoder for the self-describing format."""

    def _tag(self, tag: Tag, payload: bytes = b"") -> None:
        self.writer.write_byte(tag)
        self.writer.write(payload)

    def _tag_sized(self, tag: Tag, data: bytes) -> None:
        self._tag(tag, encode_u64(len(data)))
        self.writer.write(data)

    def _tag_variant(self, tag: Tag, discriminant: int) -> None:
        self._tag(tag, encode_int(IntKind.U32, discriminant))

    def write_bool(self, value: bool) -> None:
        self._record("bool")
        self._tag(Tag.BOOL_TRUE if value else Tag.BOOL_FALSE)

    def write_int(self, kind: IntKind, value: int) -> None:
        self._record(kind.name.lower())
        self._tag(INT_TAGS[kind], encode_int(kind, value))

    def write_float(self, kind: FloatKind, value: float) -> None:
        self._record(kind.name.lower())
        self._tag(FLOAT_TAGS[kind], encode_float(kind, value))

    def write_char(self, value: str) -> None:
        self._record("char")
        data = encode_char_utf8(value)
        self._tag(Tag.for_char(len(data)), data)

    def write_str(self, value: str) -> None:
        self._record("str")
        self._tag_sized(Tag.STRING, encode_utf8(value))

    def streamed_str(self) -> TextSink:
        self._record("streamed_str")
        self._tag(Tag.UNSIZED_STRING)
        return TextSink(self.writer)

    def write_bytes(self, value: bytes) -> None:
        self._record("bytes")
        self._tag_sized(Tag.BYTE_ARRAY, value)

    def write_none(self) -> None:
        self._record("none")
        self._tag(Tag.NONE)

    def write_some(self) -> None:
        self._record("some")
        self._tag(Tag.SOME)

    def write_unit(self) -> None:
        self._record("unit")
        self._tag(Tag.UNIT)

    def write_unit_struct(self) -> None:
        self._record("unit_struct")
        self._tag(Tag.UNIT_STRUCT)

    def write_unit_variant(self, discriminant: int) -> None:
        self._record("unit_variant")
        self._tag_variant(Tag.UNIT_VARIANT, discriminant)

    def write_newtype_struct(self) -> None:
        self._record("newtype_struct")
        self._tag(Tag.NEWTYPE_STRUCT)

    def write_newtype_variant(self, discriminant: int) -> None:
        self._record("newtype_variant")
        self._tag_variant(Tag.NEWTYPE_VARIANT, discriminant)

    def _sequence(self, length: int | None, sized_tag: Tag, unsized_tag: Tag) -> CompoundWriter:
        if length is not None:
            self._tag(sized_tag, encode_u64(length))
            return CompoundWriter(self, on_finish=check_count(length))

        if self.config.prefer_length_prefix and self.config.buffering_enabled:
            buffer = SequenceBuffer.begin(self.config)

            def flush(_count: int) -> None:
                count, payload = buffer.finish()
                self._tag(sized_tag, encode_u64(count))
                self.writer.write(payload)

            return CompoundWriter(
                self.fork(buffer.writer),
                on_element=buffer.push,
                on_finish=flush,
                on_abort=buffer.discard,
            )

        self._tag(unsized_tag)
        return CompoundWriter(self, on_finish=lambda _count: self._tag(Tag.UNSIZED_SEQ_END))

    def seq(self, length: int | None) -> CompoundWriter:
        self._record("seq")
        return self._sequence(length, Tag.SEQ, Tag.UNSIZED_SEQ)

    def map(self, length: int | None) -> CompoundWriter:
        self._record("map")
        return self._sequence(length, Tag.MAP, Tag.UNSIZED_MAP)

    def _fields(self, tag: Tag, length: int, discriminant: int | None = None) -> CompoundWriter:
        count = field_count_byte(length)
        if discriminant is None:
            self._tag(tag, count)
        else:
            self._tag_variant(tag, discriminant)
            self.writer.write(count)
        return CompoundWriter(self, on_finish=check_count(length))

    def tuple(self, length: int) -> CompoundWriter:
        self._record("tuple")
        return self._fields(Tag.TUPLE, length)

    def tuple_struct(self, length: int) -> CompoundWriter:
        self._record("tuple_struct")
        return self._fields(Tag.TUPLE_STRUCT, length)

    def tuple_variant(self, discriminant: int, length: int) -> CompoundWriter:
        self._record("tuple_variant")
        return self._fields(Tag.TUPLE_VARIANT, length, discriminant)

    def struct(self, length: int) -> CompoundWriter:
        self._record("struct")
        return self._fields(Tag.STRUCT, length)

    def struct_variant(self, discriminant: int, length: int) -> CompoundWriter:
        self._record("struct_variant")
        return self._fields(Tag.STRUCT_VARIANT, length, discriminant)


class TaggedDecoder(Decoder):
    """Decoder for the self-describing format.

    Compound readers accept ``length=None`` to take whatever field count was
    encoded, which is how values are decoded without a known shape.
    """

    def peek_tag(self) -> Tag:
        return Tag.parse(self.reader.peek_byte())

    def _tag(self) -> Tag:
        return Tag.parse(self.reader.read_byte())

    def _expect(self, expected: str, *tags: Tag) -> Tag:
        tag = self._tag()
        if tag not in tags:
            raise UnexpectedTag(expected, tag.name)
        return tag

    def _length(self) -> int:
        return decode_u64(self.reader.read(8))

    def _counted(self, length: int | None) -> Iterator[TaggedDecoder]:
        count = self.reader.read_byte()
        if length is not None and count != length:
            raise SizeMismatch(length, count)
        return self._repeat(count)

    def _until_end(self) -> Iterator[TaggedDecoder]:
        while self.peek_tag() is not Tag.UNSIZED_SEQ_END:
            yield self
        self.reader.read_byte()

    def read_bool(self) -> bool:
        self._record("bool")
        return self._expect("bool", Tag.BOOL_FALSE, Tag.BOOL_TRUE) is Tag.BOOL_TRUE

    def read_int(self, kind: IntKind) -> int:
        self._record(kind.name.lower())
        self._expect(kind.name.lower(), INT_TAGS[kind])
        return decode_int(kind, self.reader.read(kind.size))

    def read_float(self, kind: FloatKind) -> float:
        self._record(kind.name.lower())
        self._expect(kind.name.lower(), FLOAT_TAGS[kind])
        return decode_float(kind, self.reader.read(kind.size))

    def read_char(self) -> str:
        self._record("char")
        tag = self._expect("char", *CHAR_TAGS)
        return decode_char_utf8(self.reader.read(CHAR_TAGS.index(tag) + 1))

    def read_str(self) -> str:
        self._record("str")
        tag = self._expect("str", Tag.STRING, Tag.UNSIZED_STRING)
        if tag is Tag.UNSIZED_STRING:
            return read_until_marker(self.reader)
        return decode_utf8(self.reader.read(self._length()))

    def read_bytes(self) -> bytes:
        self._record("bytes")
        self._expect("bytes", Tag.BYTE_ARRAY)
        return self.reader.read(self._length())

    def read_option(self) -> bool:
        self._record("option")
        return self._expect("option", Tag.NONE, Tag.SOME) is Tag.SOME

    def read_unit(self) -> None:
        self._record("unit")
        self._expect("unit", Tag.UNIT)

    def read_unit_struct(self) -> None:
        self._record("unit_struct")
        self._expect("unit struct", Tag.UNIT_STRUCT)

    def read_newtype_struct(self) -> None:
        self._record("newtype_struct")
        self._expect("newtype struct", Tag.NEWTYPE_STRUCT)

    def read_variant(self) -> VariantHeader:
        self._record("variant")
        tag = self._expect("enum variant", *VARIANT_KINDS)
        discriminant = decode_int(IntKind.U32, self.reader.read(4))
        return VariantHeader(discriminant, VARIANT_KINDS[tag])

    def variant_fields(self, length: int | None) -> Iterator[TaggedDecoder]:
        return self._counted(length)

    def seq(self) -> Iterator[TaggedDecoder]:
        self._record("seq")
        if self._expect("sequence", Tag.SEQ, Tag.UNSIZED_SEQ) is Tag.UNSIZED_SEQ:
            return self._until_end()
        return self._repeat(self._element_count(self._length()))

    def map(self) -> Iterator[TaggedDecoder]:
        self._record("map")
        if self._expect("map", Tag.MAP, Tag.UNSIZED_MAP) is Tag.UNSIZED_MAP:
            return self._until_end()
        return self._repeat(self._element_count(self._length()))

    def tuple(self, length: int | None) -> Iterator[TaggedDecoder]:
        self._record("tuple")
        self._expect("tuple", Tag.TUPLE)
        return self._counted(length)

    def tuple_struct(self, length: int | None) -> Iterator[TaggedDecoder]:
        self._record("tuple_struct")
        self._expect("tuple struct", Tag.TUPLE_STRUCT)
        return self._counted(length)

    def struct(self, length: int | None) -> Iterator[TaggedDecoder]:
        self._record("struct")
        self._expect("struct", Tag.STRUCT)
        return self._counted(length)
