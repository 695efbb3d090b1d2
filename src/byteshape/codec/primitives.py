"""Fixed-width primitive encoding.

Integers and floats are written big-endian at exactly their declared width.
Booleans take one byte (0 or 1). A char is written as its 32-bit code point;
the width of that field is a format detail and may change in a later format
version, so nothing outside this module should assume four bytes.
"""

from __future__ import annotations

import enum
import struct

from ..exceptions import EncodeError, InvalidBool, InvalidEncoding

U64_MAX = (1 << 64) - 1

CHAR_SIZE = 4


class IntKind(enum.Enum):
    """Integer widths understood by the codec.

    Each member carries its size in bytes and its signedness.
    """

    I8 = (1, True)
    I16 = (2, True)
    I32 = (4, True)
    I64 = (8, True)
    I128 = (16, True)
    U8 = (1, False)
    U16 = (2, False)
    U32 = (4, False)
    U64 = (8, False)
    U128 = (16, False)

    def __init__(self, size: int, signed: bool) -> None:
        self.size = size
        self.signed = signed

    @property
    def bits(self) -> int:
        return self.size * 8

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


class FloatKind(enum.Enum):
    """IEEE-754 float widths, with their struct format."""

    F32 = (4, ">f")
    F64 = (8, ">d")

    def __init__(self, size: int, fmt: str) -> None:
        self.size = size
        self.fmt = fmt


def encode_int(kind: IntKind, value: int) -> bytes:
    """Encode an integer at the width given by ``kind``.

    Raises:
        EncodeError: If value does not fit in the declared width
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"{kind.name.lower()}: expected int, got {type(value).__name__}")
    if value < kind.min_value or value > kind.max_value:
        raise EncodeError(
            f"Value {value} out of bounds for {kind.name.lower()} "
            f"[{kind.min_value}, {kind.max_value}]"
        )
    return value.to_bytes(kind.size, "big", signed=kind.signed)


def decode_int(kind: IntKind, data: bytes) -> int:
    return int.from_bytes(data, "big", signed=kind.signed)


def encode_u64(value: int) -> bytes:
    return encode_int(IntKind.U64, value)


def decode_u64(data: bytes) -> int:
    return int.from_bytes(data, "big")


def encode_float(kind: FloatKind, value: float) -> bytes:
    """Encode a float as IEEE-754 big-endian.

    Raises:
        EncodeError: If value is not a number or overflows a 32-bit float
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EncodeError(f"{kind.name.lower()}: expected float, got {type(value).__name__}")
    try:
        return struct.pack(kind.fmt, value)
    except (OverflowError, struct.error) as e:
        raise EncodeError(f"Value {value} does not fit in {kind.name.lower()}: {e}") from e


def decode_float(kind: FloatKind, data: bytes) -> float:
    (value,) = struct.unpack(kind.fmt, data)
    return value


def encode_bool(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def decode_bool(byte: int) -> bool:
    """Decode a boolean byte.

    Raises:
        InvalidBool: If the byte is neither 0 nor 1
    """
    if byte == 0:
        return False
    if byte == 1:
        return True
    raise InvalidBool(byte)


def _check_char(value: str) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise EncodeError(f"char: expected a single character, got {value!r}")


def encode_char(value: str) -> bytes:
    """Encode a unicode scalar value as its big-endian code point.

    Raises:
        EncodeError: If value is not exactly one character
        InvalidEncoding: If value is a lone surrogate
    """
    _check_char(value)
    code_point = ord(value)
    if 0xD800 <= code_point <= 0xDFFF:
        raise InvalidEncoding(f"char: surrogate code point U+{code_point:04X} is not a scalar value")
    return code_point.to_bytes(CHAR_SIZE, "big")


def decode_char(data: bytes) -> str:
    """Decode a big-endian code point.

    Raises:
        InvalidEncoding: If the code point is a surrogate or above U+10FFFF
    """
    code_point = int.from_bytes(data, "big")
    if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
        raise InvalidEncoding(f"Error decoding char: invalid code point {code_point:#x}")
    return chr(code_point)


def encode_char_utf8(value: str) -> bytes:
    """Encode a char as UTF-8 (1 to 4 bytes), as used by self-describing mode."""
    _check_char(value)
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidEncoding(f"char: {e}") from e


def decode_char_utf8(data: bytes) -> str:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding(f"Error decoding char: invalid UTF-8: {e}") from e
    if len(text) != 1:
        raise InvalidEncoding(f"Error decoding char: {len(text)} characters in a char slot")
    return text


def encode_utf8(value: str) -> bytes:
    if not isinstance(value, str):
        raise EncodeError(f"str: expected str, got {type(value).__name__}")
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidEncoding(f"str: {e}") from e


def decode_utf8(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding(f"Error decoding str: invalid UTF-8: {e}") from e
