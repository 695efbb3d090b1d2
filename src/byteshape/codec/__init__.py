"""Binary codec for byteshape.

This module provides the schema-driven and self-describing encoders and
decoders, and the entry points that drive them over value trees and
Pydantic messages.
"""

from __future__ import annotations

from .base import CompoundWriter, Decoder, Encoder, VariantHeader
from .decoder import decode, from_bytes, from_bytes_any, make_decoder
from .dispatch import decode_any, decode_value, encode_value
from .encoder import encode, make_encoder, to_buffer, to_bytes, to_writer
from .primitives import FloatKind, IntKind
from .schema import FieldSchema, MessageSchema
from .tagged import TaggedDecoder, TaggedEncoder
from .tags import Tag
from .untagged import UntaggedDecoder, UntaggedEncoder

__all__ = [
    "encode",
    "decode",
    "to_bytes",
    "to_writer",
    "to_buffer",
    "from_bytes",
    "from_bytes_any",
    "encode_value",
    "decode_value",
    "decode_any",
    "make_encoder",
    "make_decoder",
    "Encoder",
    "Decoder",
    "CompoundWriter",
    "VariantHeader",
    "UntaggedEncoder",
    "UntaggedDecoder",
    "TaggedEncoder",
    "TaggedDecoder",
    "Tag",
    "IntKind",
    "FloatKind",
    "MessageSchema",
    "FieldSchema",
]
