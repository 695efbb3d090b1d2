"""Buffering for sequences whose element count is unknown up front.

Layout written by the caller once the buffer is finished:

    [count: u64][element_0]...[element_N-1]

The elements are encoded into a private growable buffer while counting them;
only when the sequence ends are the count and the buffered bytes written to
the real output. The buffer belongs to a single sequence encode and is
dropped as soon as it has been flushed or the encode fails.
"""

from __future__ import annotations

from structlog import get_logger

from ..config import CodecConfig
from ..exceptions import UnsupportedOperation
from .writer import BytesWriter

logger = get_logger()


class SequenceBuffer:
    """Accumulates encoded elements and counts them.

    Example:
        >>> buf = SequenceBuffer.begin(CodecConfig())
        >>> buf.push(b"\\x07")
        >>> buf.push(b"\\x09")
        >>> buf.finish()
        (2, b'\\x07\\t')
    """

    def __init__(self) -> None:
        self.count = 0
        self.writer = BytesWriter()

    @classmethod
    def begin(cls, config: CodecConfig) -> SequenceBuffer:
        """Start a fresh buffer.

        Raises:
            UnsupportedOperation: If the configuration disables buffering
        """
        if not config.buffering_enabled:
            raise UnsupportedOperation(
                "Tried to encode a sequence of unknown length without buffering support"
            )
        return cls()

    def push(self, element: bytes | None = None) -> None:
        """Account for one more element.

        Encoders write the element directly into ``self.writer`` and call
        push() with no argument; already encoded bytes may be passed instead.
        """
        if element is not None:
            self.writer.write(element)
        self.count += 1

    def finish(self) -> tuple[int, bytes]:
        """Return ``(count, payload)`` and release the buffer."""
        payload = self.writer.getvalue()
        count = self.count
        logger.debug("flushing buffered sequence", count=count, size=len(payload))
        self.discard()
        return count, payload

    def discard(self) -> None:
        self.writer.clear()
        self.count = 0
