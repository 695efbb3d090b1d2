"""Binary encoder entry points.

This module provides the functions that turn a value tree (or a Pydantic
message) into bytes, in either the schema-driven or the self-describing
format.
"""

from __future__ import annotations

from typing import BinaryIO

from pydantic import BaseModel
from structlog import get_logger

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import EncodeError, UnsupportedOperation
from ..models.values import Value
from .base import Encoder
from .dispatch import encode_value
from .schema import MessageSchema
from .tagged import TaggedEncoder
from .untagged import UntaggedEncoder
from .writer import BufferWriter, BytesWriter, StreamWriter, Writer

logger = get_logger()


def make_encoder(writer: Writer, tagged: bool = False, config: CodecConfig | None = None) -> Encoder:
    """Build the encoder for the requested format."""
    if tagged:
        return TaggedEncoder(writer, config)
    return UntaggedEncoder(writer, config)


def to_bytes(value: Value, *, tagged: bool = False, config: CodecConfig | None = None) -> bytes:
    """Encode a value tree to bytes.

    Args:
        value: Value to encode
        tagged: Use the self-describing format
        config: Capability flags (defaults to everything enabled)

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the value cannot be encoded
        UnsupportedOperation: If an unknown-length sequence needs buffering
            that the configuration disables

    Example:
        >>> from byteshape.models.values import Int
        >>> from byteshape.codec.primitives import IntKind
        >>> to_bytes(Int(IntKind.U16, 1)).hex()
        '0001'
    """
    writer = BytesWriter()
    encode_value(make_encoder(writer, tagged, config), value)
    return writer.getvalue()


def to_writer(
    value: Value,
    output: Writer | BinaryIO,
    *,
    tagged: bool = False,
    config: CodecConfig | None = None,
) -> int:
    """Encode a value tree straight into a Writer or a binary stream.

    Nothing but unknown-length sequences is buffered; everything else goes
    to the output as it is produced.

    Returns:
        Number of bytes written

    Raises:
        UnsupportedOperation: If ``output`` is a stream and ``config.std`` is off
        WriterError: If the output fails to accept the bytes
    """
    config = config or DEFAULT_CONFIG
    if isinstance(output, Writer):
        writer = output
    else:
        if not config.std:
            raise UnsupportedOperation("Stream output requires the std capability")
        writer = StreamWriter(output)
    start = writer.written
    encode_value(make_encoder(writer, tagged, config), value)
    return writer.written - start


def to_buffer(
    value: Value,
    buffer: bytearray | memoryview,
    *,
    tagged: bool = False,
    config: CodecConfig | None = None,
) -> int:
    """Encode a value tree into a preallocated buffer.

    Returns:
        Number of bytes written at the start of ``buffer``

    Raises:
        EndOfBuffer: If the buffer is too small for the encoding
    """
    writer = BufferWriter(buffer)
    encode_value(make_encoder(writer, tagged, config), value)
    return writer.written


def encode(
    message: BaseModel,
    *,
    tagged: bool | None = None,
    config: CodecConfig | None = None,
) -> bytes:
    """Encode a Pydantic message.

    The message is encoded as a struct of its fields in declaration order.

    Args:
        message: Pydantic message instance to encode
        tagged: Use the self-describing format (defaults to the class's
            ``byteshape_tagged``)
        config: Capability flags

    Returns:
        Encoded bytes

    Raises:
        SchemaError: If message schema is invalid
        EncodeError: If a field value is invalid or the message exceeds
            ``byteshape_max_bytes``

    Examples:
        ```python
        from byteshape import BaseMessage, FixedInt, encode

        class Status(BaseMessage):
            vehicle_id: int = FixedInt(bits=8)
            active: bool

        data = encode(Status(vehicle_id=42, active=True))
        assert data == b"\\x2a\\x01"
        ```
    """
    message_class = type(message)
    if tagged is None:
        tagged = bool(getattr(message_class, "byteshape_tagged", False))

    schema = MessageSchema.from_model(message_class)
    encoded = to_bytes(schema.to_value(message), tagged=tagged, config=config)

    # Check max_bytes constraint if present
    max_bytes = getattr(message_class, "byteshape_max_bytes", None)
    if max_bytes is not None and len(encoded) > max_bytes:
        raise EncodeError(
            f"Encoded message size ({len(encoded)} bytes) exceeds byteshape_max_bytes={max_bytes}"
        )

    logger.debug("encoded message", message=message_class.__name__, size=len(encoded), tagged=tagged)
    return encoded
