"""Value-tree dispatch.

Walks a value (or an expected shape) depth first and issues one codec call
per node. This is the only place that knows how each value category maps
onto the Encoder / Decoder interface.
"""

from __future__ import annotations

from ..exceptions import EncodeError, InvalidEncoding, SchemaError, UnexpectedTag
from ..models.shapes import (
    EnumShape,
    MapShape,
    NewtypeStructShape,
    OptionShape,
    Scalar,
    SeqShape,
    Shape,
    StructShape,
    TupleShape,
    TupleStructShape,
    VariantShape,
)
from ..models.values import (
    Bool,
    Bytes,
    Char,
    Float,
    Int,
    Map,
    NewtypeStruct,
    Option,
    Seq,
    Str,
    Struct,
    Tuple,
    TupleStruct,
    Unit,
    UnitStruct,
    Value,
    Variant,
    VariantKind,
)
from .base import Decoder, Encoder
from .primitives import FloatKind, IntKind
from .tagged import TaggedDecoder
from .tags import CHAR_TAGS, TAG_FLOATS, TAG_INTS, Tag


def encode_value(encoder: Encoder, value: Value) -> None:
    """Encode one value tree.

    Raises:
        EncodeError: If the value (or a nested one) cannot be encoded
    """
    if isinstance(value, Bool):
        encoder.write_bool(value.value)
    elif isinstance(value, Int):
        encoder.write_int(value.kind, value.value)
    elif isinstance(value, Float):
        encoder.write_float(value.kind, value.value)
    elif isinstance(value, Char):
        encoder.write_char(value.value)
    elif isinstance(value, Str):
        if value.streamed:
            with encoder.streamed_str() as out:
                out.write(value.value)
        else:
            encoder.write_str(value.value)
    elif isinstance(value, Bytes):
        encoder.write_bytes(value.value)
    elif isinstance(value, Unit):
        encoder.write_unit()
    elif isinstance(value, UnitStruct):
        encoder.write_unit_struct()
    elif isinstance(value, NewtypeStruct):
        encoder.write_newtype_struct()
        encode_value(encoder, value.inner)
    elif isinstance(value, Option):
        if value.value is None:
            encoder.write_none()
        else:
            encoder.write_some()
            encode_value(encoder, value.value)
    elif isinstance(value, Seq):
        with encoder.seq(len(value.items) if value.sized else None) as seq:
            for item in value.items:
                encode_value(seq.element(), item)
    elif isinstance(value, Map):
        with encoder.map(len(value.entries) if value.sized else None) as entries:
            for key, item in value.entries:
                out = entries.entry()
                encode_value(out, key)
                encode_value(out, item)
    elif isinstance(value, Tuple):
        with encoder.tuple(len(value.items)) as fields:
            for item in value.items:
                encode_value(fields.element(), item)
    elif isinstance(value, TupleStruct):
        with encoder.tuple_struct(len(value.items)) as fields:
            for item in value.items:
                encode_value(fields.element(), item)
    elif isinstance(value, Struct):
        with encoder.struct(len(value.fields)) as fields:
            for item in value.fields:
                encode_value(fields.field(), item)
    elif isinstance(value, Variant):
        _encode_variant(encoder, value)
    else:
        raise EncodeError(f"Cannot encode {type(value).__name__}: not a byteshape value")


def _encode_variant(encoder: Encoder, value: Variant) -> None:
    if value.kind is VariantKind.UNIT:
        if value.fields:
            raise EncodeError(f"Unit variant {value.discriminant} cannot carry fields")
        encoder.write_unit_variant(value.discriminant)
        return

    if value.kind is VariantKind.NEWTYPE:
        if len(value.fields) != 1:
            raise EncodeError(
                f"Newtype variant {value.discriminant} needs exactly one field, "
                f"got {len(value.fields)}"
            )
        encoder.write_newtype_variant(value.discriminant)
        encode_value(encoder, value.fields[0])
        return

    if value.kind is VariantKind.TUPLE:
        compound = encoder.tuple_variant(value.discriminant, len(value.fields))
    else:
        compound = encoder.struct_variant(value.discriminant, len(value.fields))
    with compound as fields:
        for item in value.fields:
            encode_value(fields.field(), item)


def decode_value(decoder: Decoder, shape: Shape) -> Value:
    """Decode one value of a known shape.

    Raises:
        DecodeError: If the input does not hold a valid value of that shape
        SchemaError: If ``shape`` is not a shape descriptor
    """
    if isinstance(shape, IntKind):
        return Int(shape, decoder.read_int(shape))
    if isinstance(shape, FloatKind):
        return Float(shape, decoder.read_float(shape))
    if isinstance(shape, Scalar):
        return _decode_scalar(decoder, shape)
    if isinstance(shape, SeqShape):
        return Seq(tuple(decode_value(d, shape.element) for d in decoder.seq()))
    if isinstance(shape, MapShape):
        return Map(
            tuple((decode_value(d, shape.key), decode_value(d, shape.value)) for d in decoder.map())
        )
    if isinstance(shape, OptionShape):
        if decoder.read_option():
            return Option(decode_value(decoder, shape.inner))
        return Option()
    if isinstance(shape, NewtypeStructShape):
        decoder.read_newtype_struct()
        return NewtypeStruct(decode_value(decoder, shape.inner))
    if isinstance(shape, TupleShape):
        fields = decoder.tuple(len(shape.elements))
        return Tuple(tuple(decode_value(d, s) for d, s in zip(fields, shape.elements)))
    if isinstance(shape, TupleStructShape):
        fields = decoder.tuple_struct(len(shape.elements))
        return TupleStruct(tuple(decode_value(d, s) for d, s in zip(fields, shape.elements)))
    if isinstance(shape, StructShape):
        fields = decoder.struct(len(shape.fields))
        return Struct(tuple(decode_value(d, s) for d, s in zip(fields, shape.fields)))
    if isinstance(shape, EnumShape):
        return _decode_variant(decoder, shape)
    raise SchemaError(f"Not a shape descriptor: {shape!r}")


def _decode_scalar(decoder: Decoder, shape: Scalar) -> Value:
    if shape is Scalar.BOOL:
        return Bool(decoder.read_bool())
    if shape is Scalar.CHAR:
        return Char(decoder.read_char())
    if shape is Scalar.STR:
        return Str(decoder.read_str())
    if shape is Scalar.BYTES:
        return Bytes(decoder.read_bytes())
    if shape is Scalar.UNIT:
        decoder.read_unit()
        return Unit()
    decoder.read_unit_struct()
    return UnitStruct()


def _decode_variant(decoder: Decoder, shape: EnumShape) -> Variant:
    header = decoder.read_variant()
    variant: VariantShape | None = shape.variant(header.discriminant)
    if variant is None:
        raise InvalidEncoding(
            f"Unknown variant discriminant {header.discriminant} "
            f"(expected 0 to {len(shape.variants) - 1})"
        )
    if header.kind is not None and header.kind is not variant.kind:
        raise UnexpectedTag(f"{variant.kind.value} variant", f"{header.kind.value} variant")

    if variant.kind is VariantKind.UNIT:
        return Variant(header.discriminant)
    if variant.kind is VariantKind.NEWTYPE:
        inner = decode_value(decoder, variant.fields[0])
        return Variant(header.discriminant, VariantKind.NEWTYPE, (inner,))
    fields = decoder.variant_fields(len(variant.fields))
    return Variant(
        header.discriminant,
        variant.kind,
        tuple(decode_value(d, s) for d, s in zip(fields, variant.fields)),
    )


def decode_any(decoder: TaggedDecoder) -> Value:
    """Decode one self-describing value without knowing its shape.

    The tag in front of every value says what it is, so the whole tree can be
    rebuilt. Sequences, maps and strings keep track of whether they were
    written with an end marker.

    Raises:
        DecodeError: If the input is not a valid self-describing value
    """
    tag = decoder.peek_tag()

    if tag in (Tag.NONE, Tag.SOME):
        return Option(decode_any(decoder)) if decoder.read_option() else Option()
    if tag in (Tag.BOOL_FALSE, Tag.BOOL_TRUE):
        return Bool(decoder.read_bool())
    if tag in TAG_INTS:
        kind = TAG_INTS[tag]
        return Int(kind, decoder.read_int(kind))
    if tag in TAG_FLOATS:
        float_kind = TAG_FLOATS[tag]
        return Float(float_kind, decoder.read_float(float_kind))
    if tag in CHAR_TAGS:
        return Char(decoder.read_char())
    if tag in (Tag.STRING, Tag.UNSIZED_STRING):
        return Str(decoder.read_str(), streamed=tag is Tag.UNSIZED_STRING)
    if tag is Tag.BYTE_ARRAY:
        return Bytes(decoder.read_bytes())
    if tag is Tag.UNIT:
        decoder.read_unit()
        return Unit()
    if tag is Tag.UNIT_STRUCT:
        decoder.read_unit_struct()
        return UnitStruct()
    if tag is Tag.NEWTYPE_STRUCT:
        decoder.read_newtype_struct()
        return NewtypeStruct(decode_any(decoder))
    if tag in (Tag.SEQ, Tag.UNSIZED_SEQ):
        items = tuple(decode_any(d) for d in decoder.seq())
        return Seq(items, sized=tag is Tag.SEQ)
    if tag in (Tag.MAP, Tag.UNSIZED_MAP):
        entries = tuple((decode_any(d), decode_any(d)) for d in decoder.map())
        return Map(entries, sized=tag is Tag.MAP)
    if tag is Tag.TUPLE:
        return Tuple(tuple(decode_any(d) for d in decoder.tuple(None)))
    if tag is Tag.TUPLE_STRUCT:
        return TupleStruct(tuple(decode_any(d) for d in decoder.tuple_struct(None)))
    if tag is Tag.STRUCT:
        return Struct(tuple(decode_any(d) for d in decoder.struct(None)))
    if tag is Tag.UNSIZED_SEQ_END:
        raise UnexpectedTag("a value", tag.name)

    header = decoder.read_variant()
    if header.kind is VariantKind.UNIT:
        return Variant(header.discriminant)
    if header.kind is VariantKind.NEWTYPE:
        return Variant(header.discriminant, VariantKind.NEWTYPE, (decode_any(decoder),))
    fields = tuple(decode_any(d) for d in decoder.variant_fields(None))
    return Variant(header.discriminant, header.kind, fields)
