"""Utility functions for byteshape.

This module provides size calculation helpers.
"""

from __future__ import annotations

from .sizing import encoded_size, field_sizes, serialized_size

__all__ = [
    "serialized_size",
    "encoded_size",
    "field_sizes",
]
