"""Binary decoder entry points.

This module provides the functions that turn bytes back into a value tree
(or a Pydantic message). Every entry point requires the whole input to be
consumed.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel
from structlog import get_logger

from ..config import CodecConfig
from ..models.shapes import Shape
from ..models.values import Value
from .base import Decoder
from .dispatch import decode_any, decode_value
from .reader import Reader
from .schema import MessageSchema
from .tagged import TaggedDecoder
from .untagged import UntaggedDecoder

T = TypeVar("T", bound=BaseModel)

logger = get_logger()


def make_decoder(
    data: bytes | bytearray | memoryview,
    tagged: bool = False,
    config: CodecConfig | None = None,
) -> Decoder:
    """Build the decoder for the requested format."""
    if tagged:
        return TaggedDecoder(Reader(data), config)
    return UntaggedDecoder(Reader(data), config)


def from_bytes(
    data: bytes | bytearray | memoryview,
    shape: Shape,
    *,
    tagged: bool = False,
    config: CodecConfig | None = None,
) -> Value:
    """Decode a value of a known shape.

    Args:
        data: Encoded bytes
        shape: Expected shape of the value
        tagged: Input is in the self-describing format
        config: Capability flags

    Returns:
        The decoded value tree

    Raises:
        DecodeError: If data is truncated, malformed, or has trailing bytes

    Example:
        >>> from byteshape.models.shapes import SeqShape
        >>> from byteshape.codec.primitives import IntKind
        >>> from_bytes(bytes.fromhex("00000000000000020709"), SeqShape(IntKind.U8))
        Seq(items=(Int(kind=<IntKind.U8: (1, False)>, value=7), Int(kind=<IntKind.U8: (1, False)>, value=9)))
    """
    decoder = make_decoder(data, tagged, config)
    value = decode_value(decoder, shape)
    decoder.finish()
    return value


def from_bytes_any(data: bytes | bytearray | memoryview, *, config: CodecConfig | None = None) -> Value:
    """Decode a self-describing value without knowing its shape.

    Raises:
        DecodeError: If data is not a single valid self-describing value
    """
    decoder = TaggedDecoder(Reader(data), config)
    value = decode_any(decoder)
    decoder.finish()
    return value


def decode(
    message_class: type[T],
    data: bytes | bytearray | memoryview,
    *,
    tagged: bool | None = None,
    config: CodecConfig | None = None,
) -> T:
    """Decode binary data to a Pydantic message.

    Args:
        message_class: Pydantic message class to decode to
        data: Binary data to decode
        tagged: Input is in the self-describing format (defaults to the
            class's ``byteshape_tagged``)
        config: Capability flags

    Returns:
        Decoded message instance

    Raises:
        SchemaError: If message schema is invalid
        DecodeError: If data is truncated, corrupted, or doesn't match schema

    Examples:
        ```python
        from byteshape import BaseMessage, FixedInt, encode, decode

        class Status(BaseMessage):
            vehicle_id: int = FixedInt(bits=8)
            active: bool

        msg = Status(vehicle_id=42, active=True)
        assert decode(Status, encode(msg)) == msg
        ```
    """
    if tagged is None:
        tagged = bool(getattr(message_class, "byteshape_tagged", False))

    schema = MessageSchema.from_model(message_class)
    value = from_bytes(data, schema.shape, tagged=tagged, config=config)
    message = schema.from_value(value)

    logger.debug("decoded message", message=message_class.__name__, size=len(data), tagged=tagged)
    return message  # type: ignore[return-value]
