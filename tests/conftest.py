"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from byteshape import CodecConfig
from byteshape.codec.writer import BytesWriter


@pytest.fixture
def out() -> BytesWriter:
    """Fresh in-memory output sink."""
    return BytesWriter()


@pytest.fixture
def traced_config() -> CodecConfig:
    """Configuration that records an operation trace."""
    return CodecConfig(test_utils=True)


@pytest.fixture
def no_buffering_config() -> CodecConfig:
    """Configuration with the buffered sequence path disabled."""
    return CodecConfig(no_unsized_seq=True)


@pytest.fixture
def sample_text() -> str:
    """Text mixing ASCII, 2-byte, 3-byte and 4-byte UTF-8 characters."""
    return "depth: 42 m é\u0600€\U0001f600"
