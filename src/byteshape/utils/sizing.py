"""Encoded size calculation utilities.

This module provides functions to calculate the encoded size of values and
messages without keeping the encoded bytes around.
"""

from __future__ import annotations

from pydantic import BaseModel

from ..codec.dispatch import encode_value
from ..codec.encoder import make_encoder
from ..codec.schema import MessageSchema
from ..codec.writer import CountingWriter
from ..config import CodecConfig
from ..models.values import Value


def serialized_size(value: Value, *, tagged: bool = False, config: CodecConfig | None = None) -> int:
    """Calculate the encoded size of a value tree in bytes.

    The value is encoded into a counting sink, so the size is exact for
    every framing, streamed strings and unknown-length sequences included.

    Example:
        >>> from byteshape.models.values import Str
        >>> serialized_size(Str("ab"))
        10
        >>> serialized_size(Str("ab", streamed=True))
        12
    """
    writer = CountingWriter()
    encode_value(make_encoder(writer, tagged, config), value)
    return writer.written


def encoded_size(message: BaseModel, *, tagged: bool | None = None) -> int:
    """Calculate the encoded size of a message in bytes.

    Unlike a fixed-layout format, the size depends on the field values
    (strings, sequences, options), so an instance is required.

    Raises:
        SchemaError: If schema is invalid or contains unsupported features
    """
    if tagged is None:
        tagged = bool(getattr(type(message), "byteshape_tagged", False))
    schema = MessageSchema.from_model(type(message))
    return serialized_size(schema.to_value(message), tagged=tagged)


def field_sizes(message: BaseModel, *, tagged: bool | None = None) -> dict[str, int]:
    """Get the encoded size in bytes of each field in a message.

    In self-describing mode the struct's own tag and field count byte are
    not attributed to any field.

    Example:
        >>> field_sizes(Status(vehicle_id=42, active=True))
        {'vehicle_id': 1, 'active': 1}
    """
    if tagged is None:
        tagged = bool(getattr(type(message), "byteshape_tagged", False))
    schema = MessageSchema.from_model(type(message))
    struct = schema.to_value(message)
    return {
        field_schema.name: serialized_size(item, tagged=tagged)
        for field_schema, item in zip(schema.fields, struct.fields)
    }
