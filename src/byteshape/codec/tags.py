"""Self-describing tag table.

Every value in self-describing mode starts with one of these 38 tag bytes.
Any byte value of 38 or above is not a tag.
"""

from __future__ import annotations

import enum

from ..exceptions import InvalidEncoding
from .primitives import FloatKind, IntKind


class Tag(enum.IntEnum):
    NONE = 0
    SOME = 1
    BOOL_FALSE = 2
    BOOL_TRUE = 3
    I8 = 4
    I16 = 5
    I32 = 6
    I64 = 7
    U8 = 8
    U16 = 9
    U32 = 10
    U64 = 11
    F32 = 12
    F64 = 13
    CHAR1 = 14
    CHAR2 = 15
    CHAR3 = 16
    CHAR4 = 17
    STRING = 18
    UNSIZED_STRING = 19
    BYTE_ARRAY = 20
    UNIT = 21
    UNIT_STRUCT = 22
    UNIT_VARIANT = 23
    NEWTYPE_STRUCT = 24
    NEWTYPE_VARIANT = 25
    SEQ = 26
    UNSIZED_SEQ = 27
    UNSIZED_SEQ_END = 28
    TUPLE = 29
    TUPLE_STRUCT = 30
    TUPLE_VARIANT = 31
    MAP = 32
    UNSIZED_MAP = 33
    STRUCT = 34
    STRUCT_VARIANT = 35
    I128 = 36
    U128 = 37

    @classmethod
    def parse(cls, byte: int) -> Tag:
        """Map a wire byte onto its tag.

        Raises:
            InvalidEncoding: If the byte is outside the tag table
        """
        try:
            return cls(byte)
        except ValueError as e:
            raise InvalidEncoding(
                f"Invalid tag: expected byte between 0 and {len(cls) - 1} included, got {byte}"
            ) from e

    @classmethod
    def for_char(cls, utf8_length: int) -> Tag:
        return CHAR_TAGS[utf8_length - 1]


INT_TAGS: dict[IntKind, Tag] = {
    IntKind.I8: Tag.I8,
    IntKind.I16: Tag.I16,
    IntKind.I32: Tag.I32,
    IntKind.I64: Tag.I64,
    IntKind.I128: Tag.I128,
    IntKind.U8: Tag.U8,
    IntKind.U16: Tag.U16,
    IntKind.U32: Tag.U32,
    IntKind.U64: Tag.U64,
    IntKind.U128: Tag.U128,
}

FLOAT_TAGS: dict[FloatKind, Tag] = {
    FloatKind.F32: Tag.F32,
    FloatKind.F64: Tag.F64,
}

TAG_INTS = {tag: kind for kind, tag in INT_TAGS.items()}
TAG_FLOATS = {tag: kind for kind, tag in FLOAT_TAGS.items()}

CHAR_TAGS = (Tag.CHAR1, Tag.CHAR2, Tag.CHAR3, Tag.CHAR4)
