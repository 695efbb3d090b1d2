"""Unit tests for the buffering sequencer."""

from __future__ import annotations

import pytest

from byteshape import CodecConfig, UnsupportedOperation
from byteshape.codec.sequencer import SequenceBuffer


class TestSequenceBuffer:
    """Tests for SequenceBuffer."""

    def test_push_and_finish(self) -> None:
        """Test counting pushed elements."""
        buffer = SequenceBuffer.begin(CodecConfig())
        buffer.push(b"\x07")
        buffer.push(b"\x09")
        assert buffer.finish() == (2, b"\x07\x09")

    def test_push_after_direct_write(self) -> None:
        """Test elements written straight into the buffer's writer."""
        buffer = SequenceBuffer.begin(CodecConfig())
        buffer.push()
        buffer.writer.write(b"\x01\x02")
        assert buffer.finish() == (1, b"\x01\x02")

    def test_finish_releases_buffer(self) -> None:
        """Test that the buffer is emptied once flushed."""
        buffer = SequenceBuffer.begin(CodecConfig())
        buffer.push(b"\x01")
        buffer.finish()
        assert buffer.count == 0
        assert buffer.writer.getvalue() == b""

    def test_empty(self) -> None:
        """Test a sequence with no elements."""
        assert SequenceBuffer.begin(CodecConfig()).finish() == (0, b"")

    def test_discard(self) -> None:
        """Test discarding a partially filled buffer."""
        buffer = SequenceBuffer.begin(CodecConfig())
        buffer.push(b"\x01")
        buffer.discard()
        assert buffer.finish() == (0, b"")

    @pytest.mark.parametrize(
        "config",
        [
            CodecConfig(no_unsized_seq=True),
            CodecConfig(std=False, alloc=False),
        ],
    )
    def test_disabled(self, config: CodecConfig) -> None:
        """Test that begin() fails when buffering is disabled."""
        with pytest.raises(UnsupportedOperation, match="unknown length"):
            SequenceBuffer.begin(config)

    def test_alloc_without_std(self) -> None:
        """Test that allocation alone enables buffering."""
        config = CodecConfig(std=False, alloc=True)
        assert config.buffering_enabled
        SequenceBuffer.begin(config)
