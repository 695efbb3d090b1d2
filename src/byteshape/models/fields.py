"""Field type helpers.

This module provides convenience functions that attach wire-format options
to message fields. The options are stored as extra field metadata and read
back by the schema introspection.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError

INT_BITS = (8, 16, 32, 64, 128)


def FixedInt(*, bits: int, signed: bool = False, **kwargs: Any) -> FieldInfo:
    """Create a fixed-width integer field.

    The width is stored as extra metadata; values outside its range are
    rejected with EncodeError when the message is encoded. On a list, tuple
    or dict field the width applies to the integers inside it.

    Args:
        bits: Width in bits (8, 16, 32, 64 or 128)
        signed: Whether the integer is signed (default False)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Raises:
        SchemaError: If ``bits`` is not a supported width

    Example:
        >>> class Message(BaseMessage):
        ...     temperature: Annotated[int, FixedInt(bits=16, signed=True)]
        ...     readings: list[int] = FixedInt(bits=8)
    """
    if bits not in INT_BITS:
        raise SchemaError(f"Integer width must be one of {INT_BITS}, got {bits}")
    extra = {"bits": bits, "signed": signed}
    return cast(FieldInfo, Field(json_schema_extra=extra, **kwargs))


def FixedFloat(*, bits: int = 32, **kwargs: Any) -> FieldInfo:
    """Create a float field encoded as IEEE-754 single or double precision.

    Python floats are doubles, so ``bits=32`` rounds the value to the
    nearest single-precision float on encode. A decoded message then holds
    the rounded value (0.1 decodes as 0.10000000149011612).

    Example:
        >>> class Message(BaseMessage):
        ...     depth: Annotated[float, FixedFloat(bits=32)]
    """
    if bits not in (32, 64):
        raise SchemaError(f"Float width must be 32 or 64, got {bits}")
    return cast(FieldInfo, Field(json_schema_extra={"float_bits": bits}, **kwargs))


def StreamedStr(**kwargs: Any) -> FieldInfo:
    """Create a string field written with the streamed (end-marker) framing.

    Example:
        >>> class LogLine(BaseMessage):
        ...     text: Annotated[str, StreamedStr()]
    """
    return cast(FieldInfo, Field(json_schema_extra={"streamed": True}, **kwargs))
