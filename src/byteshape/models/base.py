"""Base message class and byteshape-specific Pydantic configuration.

This module provides the BaseMessage class that byteshape messages inherit from.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class BaseMessage(BaseModel):
    """Base class for byteshape messages.

    Fields are encoded as a struct, in declaration order. Integer and float
    widths default to 64 bits and can be narrowed with FixedInt / FixedFloat.

    byteshape-specific options are configured as ClassVar attributes:

    Example:
        >>> from typing import ClassVar, Optional
        >>> class StatusReport(BaseMessage):
        ...     vehicle_id: int = FixedInt(bits=8)
        ...     depth_m: float = FixedFloat(bits=32)
        ...     note: Optional[str] = None
        ...
        ...     byteshape_max_bytes: ClassVar[Optional[int]] = 64
        ...     byteshape_tagged: ClassVar[bool] = True

    Attributes:
        byteshape_max_bytes: Maximum encoded size in bytes (optional, checked on encode)
        byteshape_tagged: Use the self-describing format by default
    """

    model_config = ConfigDict(
        strict=False,
        validate_assignment=True,
        extra="forbid",
    )

    byteshape_max_bytes: ClassVar[int | None] = None
    byteshape_tagged: ClassVar[bool] = False
