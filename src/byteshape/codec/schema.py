"""Schema introspection for Pydantic models.

This module maps the fields of a Pydantic model onto value shapes, and
converts model instances to and from value trees. A model is encoded as a
struct whose fields follow declaration order.
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass
from typing import Annotated, Any, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from ..exceptions import DecodeError, EncodeError, SchemaError
from ..models.shapes import (
    EnumShape,
    MapShape,
    OptionShape,
    Scalar,
    SeqShape,
    Shape,
    StructShape,
    TupleShape,
    VariantShape,
)
from ..models.values import (
    Bool,
    Bytes,
    Float,
    Int,
    Map,
    Option,
    Seq,
    Str,
    Struct,
    Tuple,
    Value,
    Variant,
)
from .primitives import FloatKind, IntKind

_INT_KINDS = {(kind.bits, kind.signed): kind for kind in IntKind}
_FLOAT_KINDS = {32: FloatKind.F32, 64: FloatKind.F64}


@dataclass(frozen=True)
class TypeSchema:
    """How one annotation maps onto a shape.

    Attributes:
        annotation: The (unwrapped) Python annotation
        shape: Shape the value is encoded as
        streamed: Strings are written with the streamed framing
        args: Schemas of the element / key / value / item annotations
        enum_type: Enum class for enum annotations
        message: Nested message schema for model annotations
    """

    annotation: Any
    shape: Shape
    streamed: bool = False
    args: tuple[TypeSchema, ...] = ()
    enum_type: Optional[Type[enum.Enum]] = None
    message: Optional[MessageSchema] = None

    def to_value(self, obj: Any) -> Value:
        """Convert a Python object of this annotation into a value tree.

        Raises:
            EncodeError: If the object does not match the annotation
        """
        shape = self.shape
        if isinstance(shape, IntKind):
            return Int(shape, obj)
        if isinstance(shape, FloatKind):
            return Float(shape, obj)
        if shape is Scalar.BOOL:
            return Bool(obj)
        if shape is Scalar.STR:
            return Str(obj, streamed=self.streamed)
        if shape is Scalar.BYTES:
            return Bytes(bytes(obj))
        if isinstance(shape, OptionShape):
            return Option(None if obj is None else self.args[0].to_value(obj))
        if isinstance(shape, SeqShape):
            return Seq(tuple(self.args[0].to_value(item) for item in obj))
        if isinstance(shape, MapShape):
            key, value = self.args
            return Map(tuple((key.to_value(k), value.to_value(v)) for k, v in obj.items()))
        if isinstance(shape, TupleShape):
            if len(obj) != len(self.args):
                raise EncodeError(f"Expected a {len(self.args)}-tuple, got {len(obj)} items")
            return Tuple(tuple(arg.to_value(item) for arg, item in zip(self.args, obj)))
        if isinstance(shape, EnumShape) and self.enum_type is not None:
            if not isinstance(obj, self.enum_type):
                raise EncodeError(
                    f"Expected {self.enum_type.__name__}, got {type(obj).__name__}"
                )
            # Encode enum as its ordinal (0-indexed position in enum)
            return Variant(list(self.enum_type).index(obj))
        if self.message is not None:
            return self.message.to_value(obj)
        raise EncodeError(f"Unsupported annotation {self.annotation!r}")

    def from_value(self, value: Value) -> Any:
        """Convert a decoded value tree back into a Python object."""
        if isinstance(value, (Int, Float, Bool, Str, Bytes)):
            return value.value
        if isinstance(value, Option):
            return None if value.value is None else self.args[0].from_value(value.value)
        if isinstance(value, Seq):
            items = [self.args[0].from_value(item) for item in value.items]
            return tuple(items) if get_origin(self.annotation) is tuple else items
        if isinstance(value, Map):
            key, item = self.args
            return {key.from_value(k): item.from_value(v) for k, v in value.entries}
        if isinstance(value, Tuple):
            return tuple(arg.from_value(item) for arg, item in zip(self.args, value.items))
        if isinstance(value, Variant) and self.enum_type is not None:
            return list(self.enum_type)[value.discriminant]
        if isinstance(value, Struct) and self.message is not None:
            return self.message.from_value(value)
        raise DecodeError(f"Cannot convert {type(value).__name__} to {self.annotation!r}")


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Field name
        type: Shape and conversion information for the annotation
        required: Whether field is required (not Optional)
    """

    name: str
    type: TypeSchema
    required: bool

    @property
    def shape(self) -> Shape:
        return self.type.shape


class MessageSchema:
    """Schema information for an entire message.

    This class introspects a Pydantic model and maps each field onto a shape.

    Example:
        >>> schema = MessageSchema.from_model(StatusReport)
        >>> for field in schema.fields:
        ...     print(f"{field.name}: {field.shape}")
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to introspect
        """
        self.model_class = model_class
        self.fields: List[FieldSchema] = []
        self._introspect()

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> MessageSchema:
        """Create a schema from a Pydantic model.

        Args:
            model_class: Pydantic model class

        Returns:
            MessageSchema instance
        """
        return cls(model_class)

    @property
    def shape(self) -> StructShape:
        return StructShape(tuple(field.shape for field in self.fields))

    def _introspect(self) -> None:
        """Introspect the model and populate field schemas."""
        for field_name, field_info in self.model_class.model_fields.items():
            self.fields.append(self._extract_field_schema(field_name, field_info))

    def _extract_field_schema(self, name: str, field_info: FieldInfo) -> FieldSchema:
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        extra = field_info.json_schema_extra if isinstance(field_info.json_schema_extra, dict) else {}
        type_schema = _type_schema(name, annotation, extra)
        return FieldSchema(
            name=name,
            type=type_schema,
            required=field_info.is_required() and not isinstance(type_schema.shape, OptionShape),
        )

    def to_value(self, message: BaseModel) -> Struct:
        """Convert a message instance into a struct value.

        Raises:
            EncodeError: If the instance does not belong to this schema's model
        """
        if not isinstance(message, self.model_class):
            raise EncodeError(
                f"Expected {self.model_class.__name__}, got {type(message).__name__}"
            )
        values = []
        for field_schema in self.fields:
            try:
                values.append(field_schema.type.to_value(getattr(message, field_schema.name)))
            except EncodeError as e:
                raise EncodeError(f"Field {field_schema.name}: {e}") from e
        return Struct(tuple(values))

    def from_value(self, value: Value) -> BaseModel:
        """Build a message instance from a decoded struct value.

        Raises:
            DecodeError: If the value does not validate against the model
        """
        if not isinstance(value, Struct) or len(value.fields) != len(self.fields):
            raise DecodeError(f"Value does not match {self.model_class.__name__}")

        field_values: dict[str, Any] = {
            field_schema.name: field_schema.type.from_value(item)
            for field_schema, item in zip(self.fields, value.fields)
        }
        try:
            return self.model_class(**field_values)
        except ValidationError as e:
            raise DecodeError(f"Decoded data failed validation: {e}") from e


def _merge_extra(extra: dict[str, Any], metadata: tuple[Any, ...]) -> dict[str, Any]:
    merged = dict(extra)
    for item in metadata:
        if isinstance(item, FieldInfo) and isinstance(item.json_schema_extra, dict):
            merged.update(item.json_schema_extra)
    return merged


def _type_schema(name: str, annotation: Any, extra: dict[str, Any]) -> TypeSchema:
    """Map an annotation onto a shape.

    Width options from FixedInt / FixedFloat / StreamedStr apply to the
    annotation itself or, for containers, to the leaves inside it.
    """
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return _type_schema(name, args[0], _merge_extra(extra, args[1:]))

    # Check if Optional (Union[T, None])
    if origin is Union or origin is types.UnionType:
        non_none_args = [arg for arg in args if arg is not type(None)]
        if len(non_none_args) != 1 or len(args) != 2:
            raise SchemaError(f"Field {name}: only Optional[T] unions are supported")
        inner = _type_schema(name, non_none_args[0], extra)
        return TypeSchema(annotation, OptionShape(inner.shape), args=(inner,))

    if annotation is bool:
        return TypeSchema(annotation, Scalar.BOOL)

    if annotation is int:
        bits = extra.get("bits", 64)
        signed = extra.get("signed", True)
        kind = _INT_KINDS.get((bits, signed))
        if kind is None:
            raise SchemaError(f"Field {name}: unsupported integer width {bits} bits")
        return TypeSchema(annotation, kind)

    if annotation is float:
        float_kind = _FLOAT_KINDS.get(extra.get("float_bits", 64))
        if float_kind is None:
            raise SchemaError(f"Field {name}: floats must be 32 or 64 bits")
        return TypeSchema(annotation, float_kind)

    if annotation is str:
        return TypeSchema(annotation, Scalar.STR, streamed=bool(extra.get("streamed", False)))

    if annotation is bytes:
        return TypeSchema(annotation, Scalar.BYTES)

    if origin is list or (origin is tuple and len(args) == 2 and args[1] is Ellipsis):
        if not args:
            raise SchemaError(f"Field {name}: sequence annotations need an element type")
        element = _type_schema(name, args[0], extra)
        return TypeSchema(annotation, SeqShape(element.shape), args=(element,))

    if origin is tuple:
        items = tuple(_type_schema(name, arg, extra) for arg in args)
        return TypeSchema(annotation, TupleShape(tuple(item.shape for item in items)), args=items)

    if origin is dict:
        if len(args) != 2:
            raise SchemaError(f"Field {name}: dict annotations need key and value types")
        key = _type_schema(name, args[0], extra)
        value = _type_schema(name, args[1], extra)
        return TypeSchema(annotation, MapShape(key.shape, value.shape), args=(key, value))

    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        if len(annotation) == 0:
            raise SchemaError(f"Enum {annotation.__name__} has no values")
        variants = tuple(VariantShape() for _ in annotation)
        return TypeSchema(annotation, EnumShape(variants), enum_type=annotation)

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        nested = MessageSchema.from_model(annotation)
        return TypeSchema(annotation, nested.shape, message=nested)

    raise SchemaError(
        f"Field {name}: unsupported type {annotation!r}. "
        f"Supported: bool, int, float, str, bytes, list, tuple, dict, Optional, enum, models."
    )
