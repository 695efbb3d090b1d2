"""Codec interface shared by the schema-driven and self-describing modes.

A driver walks a value tree and, for each value, calls exactly one write
method on an Encoder (or one read method on a Decoder). Compound values are
opened with a context manager; the object it yields hands out the encoder
each element must be written to.

    with encoder.seq(len(items)) as seq:
        for item in items:
            seq.element().write_int(IntKind.U8, item)

    items = [d.read_int(IntKind.U8) for d in decoder.seq()]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Callable, TypeVar

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import EncodeError, InvalidEncoding
from ..models.values import VariantKind
from .primitives import FloatKind, IntKind
from .reader import Reader
from .strings import TextSink
from .writer import Writer

E = TypeVar("E", bound="Encoder")
D = TypeVar("D", bound="Decoder")


def check_count(declared: int) -> Callable[[int], None]:
    """Finish hook verifying that a compound got exactly its declared element count."""

    def _check(count: int) -> None:
        if count != declared:
            raise EncodeError(f"Declared {declared} elements but {count} were written")

    return _check


class CompoundWriter:
    """Handle for the elements of an open sequence, map, tuple or struct.

    Each call to element() (or its aliases entry() and field()) counts one
    element and returns the encoder that element must be written to.
    """

    def __init__(
        self,
        encoder: Encoder,
        on_element: Callable[[], None] | None = None,
        on_finish: Callable[[int], None] | None = None,
        on_abort: Callable[[], None] | None = None,
    ) -> None:
        self.encoder = encoder
        self.count = 0
        self._on_element = on_element
        self._on_finish = on_finish
        self._on_abort = on_abort

    def element(self) -> Encoder:
        if self._on_element is not None:
            self._on_element()
        self.count += 1
        return self.encoder

    entry = element
    field = element

    def __enter__(self) -> CompoundWriter:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc_type is not None:
            if self._on_abort is not None:
                self._on_abort()
            return
        if self._on_finish is not None:
            self._on_finish(self.count)


class Encoder(ABC):
    """Writes values to a Writer, one visitor call at a time."""

    def __init__(self, writer: Writer, config: CodecConfig | None = None) -> None:
        self.writer = writer
        self.config = config or DEFAULT_CONFIG
        self.trace: list[str] = []

    def fork(self: E, writer: Writer) -> E:
        """Same codec and configuration, writing elsewhere (shares the trace)."""
        clone = type(self)(writer, self.config)
        clone.trace = self.trace
        return clone

    def _record(self, operation: str) -> None:
        if self.config.test_utils:
            self.trace.append(operation)

    @abstractmethod
    def write_bool(self, value: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_int(self, kind: IntKind, value: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_float(self, kind: FloatKind, value: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_char(self, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_str(self, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def streamed_str(self) -> TextSink:
        """Start a string of unknown length; use the result as a context manager.

        Example:
            >>> with encoder.streamed_str() as out:
            ...     print("depth", 42, file=out, end="")
        """
        raise NotImplementedError

    @abstractmethod
    def write_bytes(self, value: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_none(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_some(self) -> None:
        """Mark an option as present; the inner value is written next."""
        raise NotImplementedError

    @abstractmethod
    def write_unit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_unit_struct(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_unit_variant(self, discriminant: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_newtype_struct(self) -> None:
        """Open a newtype wrapper; the inner value is written next."""
        raise NotImplementedError

    @abstractmethod
    def write_newtype_variant(self, discriminant: int) -> None:
        """Write a newtype variant header; the inner value is written next."""
        raise NotImplementedError

    @abstractmethod
    def seq(self, length: int | None) -> CompoundWriter:
        """Open a sequence; ``length=None`` when the count is not known yet."""
        raise NotImplementedError

    @abstractmethod
    def map(self, length: int | None) -> CompoundWriter:
        """Open a map; each entry() is followed by a key and a value."""
        raise NotImplementedError

    @abstractmethod
    def tuple(self, length: int) -> CompoundWriter:
        raise NotImplementedError

    @abstractmethod
    def tuple_struct(self, length: int) -> CompoundWriter:
        raise NotImplementedError

    @abstractmethod
    def tuple_variant(self, discriminant: int, length: int) -> CompoundWriter:
        raise NotImplementedError

    @abstractmethod
    def struct(self, length: int) -> CompoundWriter:
        raise NotImplementedError

    @abstractmethod
    def struct_variant(self, discriminant: int, length: int) -> CompoundWriter:
        raise NotImplementedError


@dataclass(frozen=True)
class VariantHeader:
    """Enum variant prefix as read from the wire.

    ``kind`` is only known in self-describing mode, where the tag carries it.
    """

    discriminant: int
    kind: VariantKind | None = None


class Decoder(ABC):
    """Reads values from a Reader, one visitor call at a time."""

    def __init__(self, reader: Reader, config: CodecConfig | None = None) -> None:
        self.reader = reader
        self.config = config or DEFAULT_CONFIG
        self.trace: list[str] = []

    def _record(self, operation: str) -> None:
        if self.config.test_utils:
            self.trace.append(operation)

    def _element_count(self, count: int) -> int:
        # Elements such as unit take no bytes, so only a count larger than
        # both the remaining input and max_seq_length is rejected.
        if count > self.reader.remaining() and count > self.config.max_seq_length:
            raise InvalidEncoding(
                f"Sequence length {count} exceeds max_seq_length={self.config.max_seq_length} "
                f"with {self.reader.remaining()} bytes remaining"
            )
        return count

    def _repeat(self: D, count: int) -> Iterator[D]:
        for _ in range(count):
            yield self

    def finish(self) -> None:
        """Fail with TrailingBytes unless all input was consumed."""
        self.reader.finish()

    @abstractmethod
    def read_bool(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def read_int(self, kind: IntKind) -> int:
        raise NotImplementedError

    @abstractmethod
    def read_float(self, kind: FloatKind) -> float:
        raise NotImplementedError

    @abstractmethod
    def read_char(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def read_str(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def read_bytes(self) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def read_option(self) -> bool:
        """Return True when a value follows, False for an empty option."""
        raise NotImplementedError

    @abstractmethod
    def read_unit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def read_unit_struct(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def read_newtype_struct(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def read_variant(self) -> VariantHeader:
        raise NotImplementedError

    @abstractmethod
    def variant_fields(self: D, length: int) -> Iterator[D]:
        """Iterate over the fields of a tuple or struct variant."""
        raise NotImplementedError

    @abstractmethod
    def seq(self: D) -> Iterator[D]:
        raise NotImplementedError

    @abstractmethod
    def map(self: D) -> Iterator[D]:
        """Yield once per entry; read the key then the value each time."""
        raise NotImplementedError

    @abstractmethod
    def tuple(self: D, length: int) -> Iterator[D]:
        raise NotImplementedError

    @abstractmethod
    def tuple_struct(self: D, length: int) -> Iterator[D]:
        raise NotImplementedError

    @abstractmethod
    def struct(self: D, length: int) -> Iterator[D]:
        raise NotImplementedError

