"""Exception hierarchy for byteshape.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from ByteshapeError for easy catching of any byteshape-specific error.
"""

from __future__ import annotations


class ByteshapeError(Exception):
    """Base exception for all byteshape errors."""

    pass


class SchemaError(ByteshapeError):
    """Raised when a message model cannot be mapped onto a value shape.

    Examples:
        - Unsupported field annotation
        - Invalid FixedInt/FixedFloat width
        - Enum with no members
    """

    pass


class EncodeError(ByteshapeError):
    """Raised when encoding a value fails.

    Examples:
        - Integer out of range for its declared width
        - Message exceeds byteshape_max_bytes
        - Failure reported by the output sink
    """

    pass


class DecodeError(ByteshapeError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (insufficient bytes)
        - Out-of-domain boolean or option byte
        - Unknown self-describing tag
        - Unconsumed bytes after the top-level value
    """

    pass


class InvalidBool(DecodeError):
    """A byte outside {0, 1} was found where a boolean was expected."""

    def __init__(self, byte: int) -> None:
        super().__init__(f"Error decoding bool: expected 0 or 1, found {byte}")
        self.byte = byte


class InvalidOption(DecodeError):
    """A byte outside {0, 1} was found where an option tag was expected."""

    def __init__(self, byte: int) -> None:
        super().__init__(f"Error decoding option: expected tag 0 or 1, found {byte}")
        self.byte = byte


class UnexpectedEnd(DecodeError):
    """Input was exhausted before a value's declared or implied length was satisfied."""

    def __init__(self, needed: int, available: int) -> None:
        super().__init__(f"Truncated data: need {needed} bytes, have {available}")
        self.needed = needed
        self.available = available


class InvalidEncoding(DecodeError, EncodeError):
    """Raised for malformed wire data, or for a value that cannot be framed.

    Examples:
        - Malformed UTF-8 or an invalid code point
        - Streamed string without its end marker
        - Unknown self-describing tag (byte value >= 38)
        - Struct or tuple with more than 255 fields in self-describing mode
    """

    pass


class UnexpectedTag(InvalidEncoding):
    """A valid tag was found, but not one the decoder can accept at this position."""

    def __init__(self, expected: str, got: object) -> None:
        super().__init__(f"Expected {expected} but got {got}")
        self.expected = expected
        self.got = got


class SizeMismatch(InvalidEncoding):
    """The encoded field count differs from the field count the decoder expects."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"Field count mismatch: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class TrailingBytes(DecodeError):
    """Decoding finished but input bytes remain."""

    def __init__(self, remaining: int) -> None:
        super().__init__(f"Reached end of decoding but {remaining} bytes are remaining")
        self.remaining = remaining


class UnsupportedOperation(EncodeError):
    """Raised when an operation needs a capability the codec configuration disables.

    Examples:
        - Unknown-length sequence in schema-driven mode without buffering
        - Stream output with the ``std`` capability turned off
    """

    pass


class WriterError(EncodeError):
    """Raised when the output sink fails to accept bytes."""

    pass


class EndOfBuffer(WriterError):
    """Raised when a fixed-size output buffer is full."""

    def __init__(self) -> None:
        super().__init__("Reached end of buffer before end of encoding")
