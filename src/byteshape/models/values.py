"""Value tree handled by the codec.

A value is one of a closed set of shapes. Field names and tuple positions
have no wire representation, so a struct is just its ordered field values.

Example:
    >>> from byteshape.codec.primitives import IntKind
    >>> Struct((Int(IntKind.U64, 56), Str("Hello")))
    Struct(fields=(Int(kind=<IntKind.U64: (8, False)>, value=56), Str(value='Hello')))
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union

from ..codec.primitives import FloatKind, IntKind


class VariantKind(enum.Enum):
    """Payload category of an enum variant."""

    UNIT = "unit"
    NEWTYPE = "newtype"
    TUPLE = "tuple"
    STRUCT = "struct"


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Int:
    kind: IntKind
    value: int


@dataclass(frozen=True)
class Float:
    kind: FloatKind
    value: float


@dataclass(frozen=True)
class Char:
    value: str


@dataclass(frozen=True)
class Str:
    """A string.

    ``streamed`` marks text whose length is not known when writing begins;
    it selects the wire framing and is ignored by equality.
    """

    value: str
    streamed: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class Bytes:
    value: bytes


@dataclass(frozen=True)
class Unit:
    pass


@dataclass(frozen=True)
class UnitStruct:
    pass


@dataclass(frozen=True)
class NewtypeStruct:
    inner: Value


@dataclass(frozen=True)
class Option:
    value: Optional[Value] = None


@dataclass(frozen=True)
class Seq:
    """A sequence.

    ``sized=False`` means the element count is not known when encoding
    starts, which selects buffering or end-marker framing.
    """

    items: tuple[Value, ...] = ()
    sized: bool = field(default=True, compare=False, repr=False)


@dataclass(frozen=True)
class Map:
    entries: tuple[tuple[Value, Value], ...] = ()
    sized: bool = field(default=True, compare=False, repr=False)


@dataclass(frozen=True)
class Tuple:
    items: tuple[Value, ...] = ()


@dataclass(frozen=True)
class TupleStruct:
    items: tuple[Value, ...] = ()


@dataclass(frozen=True)
class Struct:
    fields: tuple[Value, ...] = ()


@dataclass(frozen=True)
class Variant:
    """An enum variant: discriminant plus payload.

    A newtype variant has exactly one field, a unit variant has none.
    """

    discriminant: int
    kind: VariantKind = VariantKind.UNIT
    fields: tuple[Value, ...] = ()


Value = Union[
    Bool,
    Int,
    Float,
    Char,
    Str,
    Bytes,
    Unit,
    UnitStruct,
    NewtypeStruct,
    Option,
    Seq,
    Map,
    Tuple,
    TupleStruct,
    Struct,
    Variant,
]
