#!/usr/bin/env python3
"""Basic usage example for byteshape.

This example demonstrates:
1. Defining a message with Pydantic
2. Encoding in the schema-driven and self-describing formats
3. Decoding back to a Pydantic model, and decoding without the model
4. Streaming formatted text and unknown-length sequences
"""

from __future__ import annotations

import io
from typing import Annotated

from pydantic import Field

from byteshape import (
    BaseMessage,
    CodecConfig,
    FixedFloat,
    FixedInt,
    StreamedStr,
    UnsupportedOperation,
    decode,
    encode,
    field_sizes,
    from_bytes_any,
    to_bytes,
)
from byteshape.codec.primitives import IntKind
from byteshape.codec.tagged import TaggedEncoder
from byteshape.codec.writer import StreamWriter
from byteshape.models.values import Int, Seq


class StatusReport(BaseMessage):
    """Vehicle status report."""

    vehicle_id: int = FixedInt(bits=8, description="Vehicle ID")
    depth_m: float = FixedFloat(bits=32, description="Depth in meters")
    battery_pct: int = FixedInt(bits=8, le=100, description="Battery percentage")
    active: bool = Field(description="Vehicle active flag")
    readings: list[int] = FixedInt(bits=16, default_factory=list)
    note: Annotated[str, StreamedStr()] = ""


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("byteshape Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Creating a status report message...")
    msg = StatusReport(
        vehicle_id=42, depth_m=25.5, battery_pct=87, active=True, readings=[12, 15], note="ok"
    )
    print(f"   {msg!r}")
    print()

    print("2. Analyzing field sizes (schema-driven)...")
    for field_name, size in field_sizes(msg).items():
        print(f"   {field_name}: {size} bytes")
    print()

    print("3. Encoding...")
    plain = encode(msg)
    tagged = encode(msg, tagged=True)
    print(f"   Schema-driven:   {len(plain)} bytes  {plain.hex()}")
    print(f"   Self-describing: {len(tagged)} bytes  {tagged.hex()}")
    print()

    print("4. Decoding...")
    assert decode(StatusReport, plain) == msg
    assert decode(StatusReport, tagged, tagged=True) == msg
    print("   Round-trip OK in both formats")
    print(f"   Without the model: {from_bytes_any(tagged)!r}")
    print()

    print("5. Streaming formatted text into an unknown-length sequence...")
    stream = io.BytesIO()
    encoder = TaggedEncoder(StreamWriter(stream))
    with encoder.seq(None) as lines:
        for depth in (10, 20, 30):
            with lines.element().streamed_str() as out:
                print("depth", depth, "m", file=out, end="")
    print(f"   {stream.getvalue().hex()}")
    print()

    print("6. Capability flags...")
    unsized = Seq((Int(IntKind.U8, 7), Int(IntKind.U8, 9)), sized=False)
    print(f"   Buffered:  {to_bytes(unsized).hex()}")
    try:
        to_bytes(unsized, config=CodecConfig(no_unsized_seq=True))
    except UnsupportedOperation as e:
        print(f"   Without buffering: {e}")
    no_alloc = CodecConfig(no_unsized_seq=True)
    print(f"   Self-describing without buffering: {to_bytes(unsized, tagged=True, config=no_alloc).hex()}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
