"""Value model and Pydantic message modeling for byteshape.

This module provides the BaseMessage class and field helpers. The value
tree and shape descriptors live in ``byteshape.models.values`` and
``byteshape.models.shapes``.
"""

from __future__ import annotations

from .base import BaseMessage
from .fields import FixedFloat, FixedInt, StreamedStr

__all__ = [
    "BaseMessage",
    "FixedInt",
    "FixedFloat",
    "StreamedStr",
]
