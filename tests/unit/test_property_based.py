"""Property-based tests using hypothesis."""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from byteshape import InvalidEncoding, from_bytes, from_bytes_any, to_bytes
from byteshape.codec.primitives import FloatKind, IntKind
from byteshape.codec.strings import END_MARKER
from byteshape.codec.tags import Tag
from byteshape.models.shapes import (
    EnumShape,
    MapShape,
    OptionShape,
    Scalar,
    SeqShape,
    Shape,
    StructShape,
    VariantShape,
)
from byteshape.models.values import (
    Bool,
    Bytes,
    Char,
    Float,
    Int,
    Map,
    Option,
    Seq,
    Str,
    Struct,
    Unit,
    Variant,
    VariantKind,
)
from byteshape.utils import serialized_size

ENUM = EnumShape(
    (
        VariantShape(),
        VariantShape(VariantKind.NEWTYPE, (IntKind.U8,)),
        VariantShape(VariantKind.STRUCT, (Scalar.BOOL, Scalar.STR)),
    )
)

chars = (
    st.integers(min_value=0, max_value=0x10FFFF)
    .filter(lambda c: not 0xD800 <= c <= 0xDFFF)
    .map(chr)
)

leaf_shapes = st.sampled_from(
    [*IntKind, *FloatKind, Scalar.BOOL, Scalar.CHAR, Scalar.STR, Scalar.BYTES, Scalar.UNIT, ENUM]
)

shapes = st.recursive(
    leaf_shapes,
    lambda children: st.one_of(
        children.map(SeqShape),
        children.map(OptionShape),
        st.tuples(children, children).map(lambda kv: MapShape(*kv)),
        st.lists(children, max_size=4).map(lambda fields: StructShape(tuple(fields))),
    ),
    max_leaves=6,
)


def values_for(shape: Shape) -> st.SearchStrategy:
    """Strategy producing values of the given shape."""
    if isinstance(shape, IntKind):
        return st.integers(shape.min_value, shape.max_value).map(lambda v: Int(shape, v))
    if shape is FloatKind.F32:
        return st.floats(width=32, allow_nan=False).map(lambda v: Float(FloatKind.F32, v))
    if shape is FloatKind.F64:
        return st.floats(allow_nan=False).map(lambda v: Float(FloatKind.F64, v))
    if shape is Scalar.BOOL:
        return st.booleans().map(Bool)
    if shape is Scalar.CHAR:
        return chars.map(Char)
    if shape is Scalar.STR:
        return st.builds(Str, st.text(max_size=20), st.booleans())
    if shape is Scalar.BYTES:
        return st.binary(max_size=20).map(Bytes)
    if shape is Scalar.UNIT:
        return st.just(Unit())
    if shape is ENUM:
        return st.one_of(
            st.just(Variant(0)),
            values_for(IntKind.U8).map(lambda v: Variant(1, VariantKind.NEWTYPE, (v,))),
            st.tuples(values_for(Scalar.BOOL), values_for(Scalar.STR)).map(
                lambda fields: Variant(2, VariantKind.STRUCT, fields)
            ),
        )
    if isinstance(shape, SeqShape):
        return st.builds(
            lambda items, sized: Seq(tuple(items), sized),
            st.lists(values_for(shape.element), max_size=4),
            st.booleans(),
        )
    if isinstance(shape, OptionShape):
        return st.one_of(st.just(Option()), values_for(shape.inner).map(Option))
    if isinstance(shape, MapShape):
        return st.builds(
            lambda entries, sized: Map(tuple(entries), sized),
            st.lists(st.tuples(values_for(shape.key), values_for(shape.value)), max_size=3),
            st.booleans(),
        )
    assert isinstance(shape, StructShape)
    return st.tuples(*(values_for(field) for field in shape.fields)).map(Struct)


class TestRoundTrip:
    """Round-trip properties for both formats."""

    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    @given(data=st.data())
    def test_schema_driven(self, data: st.DataObject) -> None:
        """Test decode(encode(v)) == v without tags."""
        shape = data.draw(shapes)
        value = data.draw(values_for(shape))
        assert from_bytes(to_bytes(value), shape) == value

    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    @given(data=st.data())
    def test_self_describing(self, data: st.DataObject) -> None:
        """Test decode(encode(v)) == v with tags, with and without a shape."""
        shape = data.draw(shapes)
        value = data.draw(values_for(shape))
        encoded = to_bytes(value, tagged=True)
        assert from_bytes(encoded, shape, tagged=True) == value
        assert from_bytes_any(encoded) == value

    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    @given(data=st.data())
    def test_size_matches_encoding(self, data: st.DataObject) -> None:
        """Test that serialized_size counts exactly the bytes produced."""
        value = data.draw(values_for(data.draw(shapes)))
        assert serialized_size(value) == len(to_bytes(value))
        assert serialized_size(value, tagged=True) == len(to_bytes(value, tagged=True))


class TestStreamedStringProperties:
    """Properties of the end marker."""

    @given(text=st.text())
    def test_marker_absent_from_utf8(self, text: str) -> None:
        """Test that valid UTF-8 never contains the end marker."""
        assert END_MARKER not in text.encode("utf-8")

    @given(text=st.text())
    def test_streamed_roundtrip(self, text: str) -> None:
        """Test streamed strings in both formats."""
        value = Str(text, streamed=True)
        assert from_bytes(to_bytes(value), Scalar.STR) == value
        assert from_bytes_any(to_bytes(value, tagged=True)) == value


class TestTagProperties:
    """Properties of the tag table."""

    @given(byte=st.integers(min_value=38, max_value=255))
    def test_out_of_table_rejected(self, byte: int) -> None:
        """Test that no byte of 38 or above decodes as a value."""
        with pytest.raises(InvalidEncoding):
            from_bytes_any(bytes([byte]))

    @given(byte=st.integers(min_value=0, max_value=37))
    def test_in_table_parses(self, byte: int) -> None:
        """Test that every table byte is a tag."""
        assert Tag.parse(byte) == byte
