"""Unit tests for fixed-width primitive encoding."""

from __future__ import annotations

import pytest

from byteshape import EncodeError, InvalidBool, InvalidEncoding
from byteshape.codec.primitives import (
    FloatKind,
    IntKind,
    decode_bool,
    decode_char,
    decode_char_utf8,
    decode_float,
    decode_int,
    decode_utf8,
    encode_bool,
    encode_char,
    encode_char_utf8,
    encode_float,
    encode_int,
)


class TestIntegers:
    """Tests for big-endian integer encoding."""

    def test_u16_is_big_endian(self) -> None:
        """Test that the 16-bit unsigned integer 1 encodes as 00 01."""
        assert encode_int(IntKind.U16, 1) == b"\x00\x01"

    @pytest.mark.parametrize("kind", list(IntKind))
    def test_width_matches_kind(self, kind: IntKind) -> None:
        """Test that every integer kind is written at exactly its width."""
        assert len(encode_int(kind, kind.max_value)) == kind.size
        assert len(encode_int(kind, kind.min_value)) == kind.size

    @pytest.mark.parametrize("kind", list(IntKind))
    def test_bounds_roundtrip(self, kind: IntKind) -> None:
        """Test that range limits survive encode/decode."""
        for value in (kind.min_value, kind.max_value):
            assert decode_int(kind, encode_int(kind, value)) == value

    def test_negative_twos_complement(self) -> None:
        """Test that signed integers use two's complement."""
        assert encode_int(IntKind.I8, -1) == b"\xff"
        assert encode_int(IntKind.I32, -2) == b"\xff\xff\xff\xfe"
        assert decode_int(IntKind.I16, b"\x80\x00") == -32768

    def test_u128(self) -> None:
        """Test 128-bit integers."""
        assert encode_int(IntKind.U128, 1) == b"\x00" * 15 + b"\x01"
        assert decode_int(IntKind.I128, b"\xff" * 16) == -1

    def test_out_of_range(self) -> None:
        """Test that values outside the declared width fail to encode."""
        with pytest.raises(EncodeError, match="out of bounds"):
            encode_int(IntKind.U8, 256)
        with pytest.raises(EncodeError, match="out of bounds"):
            encode_int(IntKind.U32, -1)
        with pytest.raises(EncodeError, match="out of bounds"):
            encode_int(IntKind.I8, 128)

    def test_wrong_type(self) -> None:
        """Test that non-integers are rejected."""
        with pytest.raises(EncodeError, match="expected int"):
            encode_int(IntKind.U8, True)
        with pytest.raises(EncodeError, match="expected int"):
            encode_int(IntKind.U8, 1.5)  # type: ignore[arg-type]


class TestFloats:
    """Tests for IEEE-754 float encoding."""

    def test_f32_one(self) -> None:
        """Test that 1.0 as a 32-bit float encodes as 3F 80 00 00."""
        assert encode_float(FloatKind.F32, 1.0) == b"\x3f\x80\x00\x00"

    def test_f64_one(self) -> None:
        """Test that 1.0 as a 64-bit float encodes big-endian."""
        assert encode_float(FloatKind.F64, 1.0) == b"\x3f\xf0" + b"\x00" * 6

    def test_roundtrip(self) -> None:
        """Test float encode/decode."""
        assert decode_float(FloatKind.F64, encode_float(FloatKind.F64, -12.375)) == -12.375
        assert decode_float(FloatKind.F32, encode_float(FloatKind.F32, 0.5)) == 0.5

    def test_int_accepted(self) -> None:
        """Test that an int is accepted as a float value."""
        assert encode_float(FloatKind.F32, 1) == encode_float(FloatKind.F32, 1.0)

    def test_f32_overflow(self) -> None:
        """Test that values too large for a 32-bit float fail to encode."""
        with pytest.raises(EncodeError, match="does not fit"):
            encode_float(FloatKind.F32, 1e40)

    def test_wrong_type(self) -> None:
        """Test that non-numbers are rejected."""
        with pytest.raises(EncodeError, match="expected float"):
            encode_float(FloatKind.F64, "1.0")  # type: ignore[arg-type]


class TestBool:
    """Tests for boolean encoding."""

    def test_encode(self) -> None:
        """Test that booleans encode as a single 0/1 byte."""
        assert encode_bool(False) == b"\x00"
        assert encode_bool(True) == b"\x01"

    def test_decode(self) -> None:
        """Test valid boolean bytes."""
        assert decode_bool(0) is False
        assert decode_bool(1) is True

    @pytest.mark.parametrize("byte", [2, 0x7F, 0xFF])
    def test_invalid_byte(self, byte: int) -> None:
        """Test that bytes outside {0, 1} fail with InvalidBool."""
        with pytest.raises(InvalidBool) as exc_info:
            decode_bool(byte)
        assert exc_info.value.byte == byte


class TestChar:
    """Tests for char encoding in both representations."""

    def test_code_point(self) -> None:
        """Test that chars encode as a 32-bit big-endian code point."""
        assert encode_char("A") == b"\x00\x00\x00\x41"
        assert encode_char("\U0001f600") == b"\x00\x01\xf6\x00"
        assert decode_char(b"\x00\x00\x20\xac") == "€"

    def test_surrogate_rejected(self) -> None:
        """Test that surrogate code points are not decoded as chars."""
        with pytest.raises(InvalidEncoding, match="invalid code point"):
            decode_char(b"\x00\x00\xd8\x00")

    def test_above_unicode_range(self) -> None:
        """Test that code points above U+10FFFF are rejected."""
        with pytest.raises(InvalidEncoding):
            decode_char(b"\x00\x11\x00\x00")

    def test_lone_surrogate_encode(self) -> None:
        """Test that a lone surrogate cannot be encoded."""
        with pytest.raises(InvalidEncoding):
            encode_char("\ud800")

    def test_not_single_char(self) -> None:
        """Test that anything but one character is rejected."""
        with pytest.raises(EncodeError, match="single character"):
            encode_char("ab")
        with pytest.raises(EncodeError, match="single character"):
            encode_char("")

    @pytest.mark.parametrize(
        "char,encoded",
        [
            ("A", b"A"),
            ("é", b"\xc3\xa9"),
            ("€", b"\xe2\x82\xac"),
            ("\U0001f600", b"\xf0\x9f\x98\x80"),
        ],
    )
    def test_utf8(self, char: str, encoded: bytes) -> None:
        """Test the 1 to 4 byte UTF-8 representation."""
        assert encode_char_utf8(char) == encoded
        assert decode_char_utf8(encoded) == char

    def test_utf8_two_chars_rejected(self) -> None:
        """Test that a UTF-8 char slot must hold exactly one character."""
        with pytest.raises(InvalidEncoding):
            decode_char_utf8(b"ab")


class TestUtf8:
    """Tests for UTF-8 text decoding."""

    def test_malformed(self) -> None:
        """Test that malformed UTF-8 fails with InvalidEncoding."""
        with pytest.raises(InvalidEncoding, match="invalid UTF-8"):
            decode_utf8(b"\xff\xfe")

    def test_valid(self) -> None:
        """Test valid UTF-8 text."""
        assert decode_utf8("hé".encode()) == "hé"
