"""Codec capability configuration.

The capability flags mirror the build-time options of the wire format:

- ``std``: buffered sequences plus encoding straight into I/O streams
- ``alloc``: buffered sequences without stream support
- ``no_unsized_seq``: refuse buffered unknown-length sequences even when
  allocation is available
- ``test_utils``: record an operation trace on encoders and decoders
  (no effect on the bytes produced)

Example:
    >>> from byteshape import CodecConfig, to_bytes
    >>> from byteshape.models.values import Seq, Int
    >>> from byteshape.codec.primitives import IntKind
    >>> value = Seq((Int(IntKind.U8, 7),), sized=False)
    >>> to_bytes(value, config=CodecConfig(no_unsized_seq=True))
    Traceback (most recent call last):
    ...
    byteshape.exceptions.UnsupportedOperation: ...
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CodecConfig(BaseModel):
    """Runtime capability flags shared by both codec modes.

    Attributes:
        std: Enable buffering and stream-based output
        alloc: Enable buffering without stream support
        no_unsized_seq: Disable buffered unknown-length sequences
        test_utils: Record an operation trace (no wire effect)
        prefer_length_prefix: In self-describing mode, buffer unknown-length
            sequences and write a length prefix instead of an end marker
            (only when buffering is enabled)
        max_seq_length: Largest decoded sequence or map length accepted
            when the length exceeds the remaining input (zero-width
            elements such as unit)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    std: bool = True
    alloc: bool = True
    no_unsized_seq: bool = False
    test_utils: bool = False
    prefer_length_prefix: bool = False
    max_seq_length: int = Field(default=1 << 20, ge=0)

    @property
    def buffering_enabled(self) -> bool:
        """Whether unknown-length sequences may be buffered in memory."""
        return (self.std or self.alloc) and not self.no_unsized_seq


DEFAULT_CONFIG = CodecConfig()
