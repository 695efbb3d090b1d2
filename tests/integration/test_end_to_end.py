"""End-to-end integration tests."""

from __future__ import annotations

import enum
import io
from typing import Annotated, ClassVar, Optional

import pytest
from pydantic import Field

from byteshape import (
    BaseMessage,
    CodecConfig,
    EndOfBuffer,
    FixedFloat,
    FixedInt,
    StreamedStr,
    UnsupportedOperation,
    decode,
    encode,
    encoded_size,
    field_sizes,
    from_bytes,
    from_bytes_any,
    to_buffer,
    to_bytes,
    to_writer,
)
from byteshape.codec.primitives import IntKind
from byteshape.codec.schema import MessageSchema
from byteshape.codec.tagged import TaggedEncoder
from byteshape.codec.untagged import UntaggedEncoder
from byteshape.codec.writer import StreamWriter
from byteshape.models.shapes import SeqShape
from byteshape.models.values import Struct


class MissionPhase(enum.Enum):
    """Mission phase enum."""

    STARTUP = 1
    TRANSIT = 2
    SURVEY = 3
    RETURN = 4
    SHUTDOWN = 5


class Waypoint(BaseMessage):
    """Navigation waypoint."""

    latitude: float = Field(ge=-90.0, le=90.0, description="Degrees")
    longitude: float = Field(ge=-180.0, le=180.0, description="Degrees")
    depth_m: float = FixedFloat(bits=32)


class StatusReport(BaseMessage):
    """Underwater vehicle status report."""

    vehicle_id: int = FixedInt(bits=8, description="Vehicle ID")
    mission_phase: MissionPhase = Field(description="Current mission phase")
    depth_cm: int = FixedInt(bits=16, description="Depth in centimeters")
    battery_pct: int = FixedInt(bits=8, le=100, description="Battery percentage")
    emergency: bool = Field(description="Emergency flag")
    route: list[Waypoint] = Field(default_factory=list)
    sensors: dict[str, Annotated[float, FixedFloat(bits=32)]] = Field(default_factory=dict)
    log: Annotated[str, StreamedStr()] = ""
    fault_code: Optional[int] = FixedInt(bits=32, default=None)

    byteshape_max_bytes: ClassVar[Optional[int]] = 512


def make_report() -> StatusReport:
    return StatusReport(
        vehicle_id=42,
        mission_phase=MissionPhase.SURVEY,
        depth_cm=1500,
        battery_pct=87,
        emergency=False,
        route=[
            Waypoint(latitude=41.5, longitude=-70.25, depth_m=12.5),
            Waypoint(latitude=41.75, longitude=-70.5, depth_m=30.0),
        ],
        sensors={"temp_c": 4.5, "salinity": 35.0},
        log="descending\nbattery ok",
        fault_code=None,
    )


class TestStatusReport:
    """End-to-end message workflows."""

    @pytest.mark.parametrize("tagged", [False, True])
    def test_roundtrip(self, tagged: bool) -> None:
        """Test encode/decode of a message using every field category."""
        report = make_report()
        data = encode(report, tagged=tagged)
        assert decode(StatusReport, data, tagged=tagged) == report
        assert encoded_size(report, tagged=tagged) == len(data)

    def test_schema_driven_prefix(self) -> None:
        """Test the leading fixed-width fields."""
        data = encode(make_report())
        # u8 id, u32 phase ordinal, u16 depth, u8 battery, bool
        assert data[:9] == bytes.fromhex("2a" "00000002" "05dc" "57" "00")

    def test_tagged_is_larger(self) -> None:
        """Test that tags cost space."""
        report = make_report()
        assert len(encode(report, tagged=True)) > len(encode(report))

    def test_decode_any_matches_schema(self) -> None:
        """Test that a tagged message decodes without its class."""
        report = make_report()
        value = from_bytes_any(encode(report, tagged=True))
        assert isinstance(value, Struct)
        assert value == MessageSchema.from_model(StatusReport).to_value(report)

    def test_field_sizes_sum(self) -> None:
        """Test that field sizes add up to the schema-driven size."""
        report = make_report()
        assert sum(field_sizes(report).values()) == len(encode(report))

    def test_optional_fault_code(self) -> None:
        """Test a present optional field."""
        report = make_report().model_copy(update={"fault_code": 7})
        data = encode(report)
        assert data[-5:] == b"\x01\x00\x00\x00\x07"
        assert decode(StatusReport, data).fault_code == 7


class TestOutputs:
    """Tests for the writer, stream and buffer entry points."""

    def test_to_writer_stream(self) -> None:
        """Test encoding straight into a binary stream."""
        value = MessageSchema.from_model(StatusReport).to_value(make_report())
        stream = io.BytesIO()
        written = to_writer(value, stream)
        assert stream.getvalue() == to_bytes(value)
        assert written == len(stream.getvalue())

    def test_to_writer_without_std(self) -> None:
        """Test that stream output needs the std capability."""
        value = MessageSchema.from_model(StatusReport).to_value(make_report())
        with pytest.raises(UnsupportedOperation):
            to_writer(value, io.BytesIO(), config=CodecConfig(std=False))

    def test_to_writer_existing_writer(self) -> None:
        """Test appending to a Writer that already holds data."""
        stream = io.BytesIO()
        writer = StreamWriter(stream)
        writer.write(b"\xaa")
        value = MessageSchema.from_model(Waypoint).to_value(
            Waypoint(latitude=1.0, longitude=2.0, depth_m=3.0)
        )
        assert to_writer(value, writer) == 20
        assert stream.getvalue()[:1] == b"\xaa"

    def test_to_buffer(self) -> None:
        """Test encoding into a fixed buffer."""
        value = MessageSchema.from_model(Waypoint).to_value(
            Waypoint(latitude=1.0, longitude=2.0, depth_m=3.0)
        )
        buffer = bytearray(32)
        size = to_buffer(value, buffer)
        assert size == 20
        assert bytes(buffer[:size]) == to_bytes(value)

    def test_to_buffer_too_small(self) -> None:
        """Test that a short buffer fails with EndOfBuffer."""
        value = MessageSchema.from_model(Waypoint).to_value(
            Waypoint(latitude=1.0, longitude=2.0, depth_m=3.0)
        )
        with pytest.raises(EndOfBuffer):
            to_buffer(value, bytearray(10))


class TestStreamingWorkflow:
    """Tests driving the encoder by hand, as a value walker would."""

    def test_formatted_log_in_unsized_seq(self) -> None:
        """Test streaming formatted lines into an unknown-length sequence."""
        stream = io.BytesIO()
        config = CodecConfig(alloc=False, no_unsized_seq=True)
        encoder = TaggedEncoder(StreamWriter(stream), config)

        with encoder.seq(None) as lines:
            for depth in (10, 20):
                with lines.element().streamed_str() as out:
                    print("depth", depth, "m", file=out, end="")

        value = from_bytes_any(stream.getvalue())
        assert [item.value for item in value.items] == ["depth 10 m", "depth 20 m"]  # type: ignore[union-attr]

    def test_schema_driven_unsized_stream(self) -> None:
        """Test that schema-driven streams buffer only the unsized sequence."""
        stream = io.BytesIO()
        encoder = UntaggedEncoder(StreamWriter(stream))
        with encoder.seq(None) as seq:
            for reading in range(3):
                seq.element().write_int(IntKind.U16, reading)
        assert stream.getvalue() == bytes.fromhex("0000000000000003" "0000" "0001" "0002")
        assert len(from_bytes(stream.getvalue(), SeqShape(IntKind.U16)).items) == 3  # type: ignore[union-attr]
