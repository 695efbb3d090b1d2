"""Expected-shape descriptors for schema-driven decoding.

Schema-driven bytes carry no type information, so the decoder is handed a
shape that says what to read at each position. Integer and float shapes are
the IntKind / FloatKind members themselves; the other leaves are Scalar
members.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from ..codec.primitives import FloatKind, IntKind
from .values import VariantKind


class Scalar(enum.Enum):
    BOOL = "bool"
    CHAR = "char"
    STR = "str"
    BYTES = "bytes"
    UNIT = "unit"
    UNIT_STRUCT = "unit_struct"


@dataclass(frozen=True)
class SeqShape:
    element: Shape


@dataclass(frozen=True)
class MapShape:
    key: Shape
    value: Shape


@dataclass(frozen=True)
class OptionShape:
    inner: Shape


@dataclass(frozen=True)
class NewtypeStructShape:
    inner: Shape


@dataclass(frozen=True)
class TupleShape:
    elements: tuple[Shape, ...]


@dataclass(frozen=True)
class TupleStructShape:
    elements: tuple[Shape, ...]


@dataclass(frozen=True)
class StructShape:
    fields: tuple[Shape, ...]


@dataclass(frozen=True)
class VariantShape:
    kind: VariantKind = VariantKind.UNIT
    fields: tuple[Shape, ...] = ()


@dataclass(frozen=True)
class EnumShape:
    """Variants indexed by discriminant."""

    variants: tuple[VariantShape, ...]

    def variant(self, discriminant: int) -> VariantShape | None:
        if 0 <= discriminant < len(self.variants):
            return self.variants[discriminant]
        return None


Shape = Union[
    IntKind,
    FloatKind,
    Scalar,
    SeqShape,
    MapShape,
    OptionShape,
    NewtypeStructShape,
    TupleShape,
    TupleStructShape,
    StructShape,
    EnumShape,
]
