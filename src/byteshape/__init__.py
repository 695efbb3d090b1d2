"""byteshape: Binary Encoding for Structured Values

A Python library that maps tree-shaped values (primitives, strings,
sequences, maps, options, enum variants, structs and tuples) onto a
deterministic big-endian byte stream and back.

Two formats share one codec interface:
- Schema-driven: no type information on the wire; both sides agree on shape
- Self-describing: every value carries a one-byte tag, so data can be
  decoded without knowing its shape

Quick Start:
    >>> from byteshape import BaseMessage, FixedInt, encode, decode
    >>>
    >>> class StatusReport(BaseMessage):
    ...     vehicle_id: int = FixedInt(bits=8)
    ...     depth_cm: int = FixedInt(bits=16)
    ...     active: bool
    >>>
    >>> msg = StatusReport(vehicle_id=42, depth_cm=1500, active=True)
    >>> data = encode(msg)
    >>> decoded = decode(StatusReport, data)
"""

from __future__ import annotations

from .codec import (
    FloatKind,
    IntKind,
    Tag,
    decode,
    encode,
    from_bytes,
    from_bytes_any,
    to_buffer,
    to_bytes,
    to_writer,
)
from .config import CodecConfig
from .exceptions import (
    ByteshapeError,
    DecodeError,
    EncodeError,
    EndOfBuffer,
    InvalidBool,
    InvalidEncoding,
    InvalidOption,
    SchemaError,
    SizeMismatch,
    TrailingBytes,
    UnexpectedEnd,
    UnexpectedTag,
    UnsupportedOperation,
    WriterError,
)
from .models import BaseMessage, FixedFloat, FixedInt, StreamedStr
from .utils import encoded_size, field_sizes, serialized_size

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BaseMessage",
    "encode",
    "decode",
    "to_bytes",
    "to_writer",
    "to_buffer",
    "from_bytes",
    "from_bytes_any",
    "CodecConfig",
    "IntKind",
    "FloatKind",
    "Tag",
    # Field helpers
    "FixedInt",
    "FixedFloat",
    "StreamedStr",
    # Exceptions
    "ByteshapeError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "InvalidBool",
    "InvalidOption",
    "InvalidEncoding",
    "UnexpectedEnd",
    "UnexpectedTag",
    "SizeMismatch",
    "TrailingBytes",
    "UnsupportedOperation",
    "WriterError",
    "EndOfBuffer",
    # Sizing
    "serialized_size",
    "encoded_size",
    "field_sizes",
    # Version
    "__version__",
]
