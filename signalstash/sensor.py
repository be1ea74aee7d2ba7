"""Sensor messages in protocol buffer wire format."""

from __future__ import annotations

import argparse
import enum
import struct
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SAMPLE_PATH = "tests/http/sample_sensor_data.bin"

_UINT64_MAX = (1 << 64) - 1
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


class DecodeError(ValueError):
    """Raised when bytes are not a valid encoding of a message."""


class Domain(enum.IntEnum):
    """What a sensor datum measures."""

    UNSPECIFIED = 0
    SOUND_PRESSURE_LEVEL = 1

    def as_str_name(self) -> str:
        """The field name used in the protocol definition."""
        return self.name

    @classmethod
    def from_str_name(cls, value: str) -> Domain | None:
        """Look up a member by its protocol field name, or None if unknown."""
        return cls.__members__.get(value)


class _Wire(enum.IntEnum):
    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    FIXED32 = 5


def _varint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _key(field_number: int, wire: _Wire) -> bytes:
    return _varint((field_number << 3) | wire)


def _length_delimited(field_number: int, payload: bytes) -> bytes:
    return _key(field_number, _Wire.LENGTH_DELIMITED) + _varint(len(payload)) + payload


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def varint(self) -> int:
        result = 0
        for index in range(10):
            if self.at_end():
                raise DecodeError("buffer underflow while reading varint")
            byte = self._data[self._pos]
            self._pos += 1
            if index == 9 and byte > 1:
                raise DecodeError("invalid varint")
            result |= (byte & 0x7F) << (7 * index)
            if byte < 0x80:
                return result
        raise DecodeError("invalid varint")

    def take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise DecodeError("buffer underflow")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def length_delimited(self) -> bytes:
        return self.take(self.varint())

    def key(self) -> tuple[int, _Wire]:
        raw = self.varint()
        if raw > 0xFFFFFFFF:
            raise DecodeError(f"invalid key value: {raw}")
        wire_value = raw & 0x7
        if wire_value > _Wire.FIXED32:
            raise DecodeError(f"invalid wire type value: {wire_value}")
        field_number = raw >> 3
        if field_number == 0:
            raise DecodeError("invalid tag value: 0")
        return field_number, _Wire(wire_value)

    def fields(self) -> Iterator[tuple[int, _Wire]]:
        while not self.at_end():
            field_number, wire = self.key()
            if wire is _Wire.END_GROUP:
                raise DecodeError("unexpected end group tag")
            yield field_number, wire

    def skip(self, field_number: int, wire: _Wire) -> None:
        if wire is _Wire.VARINT:
            self.varint()
        elif wire is _Wire.FIXED64:
            self.take(8)
        elif wire is _Wire.FIXED32:
            self.take(4)
        elif wire is _Wire.LENGTH_DELIMITED:
            self.length_delimited()
        elif wire is _Wire.START_GROUP:
            while True:
                if self.at_end():
                    raise DecodeError("buffer underflow inside group")
                inner_field, inner_wire = self.key()
                if inner_wire is _Wire.END_GROUP:
                    if inner_field != field_number:
                        raise DecodeError("unexpected end group tag")
                    return
                self.skip(inner_field, inner_wire)
        else:
            raise DecodeError("unexpected end group tag")


def _expect(actual: _Wire, expected: _Wire, where: str) -> None:
    if actual is not expected:
        raise DecodeError(
            f"invalid wire type: {actual.name} (expected {expected.name}) in {where}"
        )


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value > _INT32_MAX else value


@dataclass
class SensorData:
    """One reading from a device."""

    timestamp: int = 0
    datum: float = 0.0
    domain: int = Domain.UNSPECIFIED
    device_id: bytes = b""

    def encode(self) -> bytes:
        """Serialise to wire format, omitting fields that hold their default."""
        if not 0 <= self.timestamp <= _UINT64_MAX:
            raise ValueError(f"timestamp out of uint64 range: {self.timestamp}")
        if not _INT32_MIN <= self.domain <= _INT32_MAX:
            raise ValueError(f"domain out of int32 range: {self.domain}")
        out = bytearray()
        if self.timestamp:
            out += _key(1, _Wire.VARINT) + _varint(self.timestamp)
        if self.datum != 0.0:
            out += _key(2, _Wire.FIXED32) + struct.pack("<f", self.datum)
        if self.domain:
            out += _key(3, _Wire.VARINT) + _varint(self.domain & _UINT64_MAX)
        if self.device_id:
            out += _length_delimited(4, bytes(self.device_id))
        return bytes(out)

    @classmethod
    def decode(cls, data: bytes) -> SensorData:
        """Parse wire format; unknown fields are skipped, later fields win."""
        message = cls()
        reader = _Reader(data)
        for field_number, wire in reader.fields():
            if field_number == 1:
                _expect(wire, _Wire.VARINT, "SensorData.timestamp")
                message.timestamp = reader.varint()
            elif field_number == 2:
                _expect(wire, _Wire.FIXED32, "SensorData.datum")
                (message.datum,) = struct.unpack("<f", reader.take(4))
            elif field_number == 3:
                _expect(wire, _Wire.VARINT, "SensorData.domain")
                message.domain = _to_int32(reader.varint())
            elif field_number == 4:
                _expect(wire, _Wire.LENGTH_DELIMITED, "SensorData.device_id")
                message.device_id = reader.length_delimited()
            else:
                reader.skip(field_number, wire)
        return message


@dataclass
class SensorDataBatch:
    """A sequence of readings sent together."""

    samples: list[SensorData] = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialise every sample as a nested message."""
        return b"".join(_length_delimited(1, sample.encode()) for sample in self.samples)

    @classmethod
    def decode(cls, data: bytes) -> SensorDataBatch:
        """Parse wire format into a batch."""
        batch = cls()
        reader = _Reader(data)
        for field_number, wire in reader.fields():
            if field_number == 1:
                _expect(wire, _Wire.LENGTH_DELIMITED, "SensorDataBatch.samples")
                batch.samples.append(SensorData.decode(reader.length_delimited()))
            else:
                reader.skip(field_number, wire)
        return batch


def sample_sensor_data() -> SensorData:
    """The fixed reading used as a sample request body."""
    return SensorData(
        timestamp=1723839123,
        datum=42.5,
        domain=Domain.SOUND_PRESSURE_LEVEL,
        device_id=b"testdevice",
    )


def write_sample(path: str | Path) -> int:
    """Write the encoded sample reading to path and return the number of bytes written."""
    payload = sample_sensor_data().encode()
    Path(path).write_bytes(payload)
    return len(payload)


def main(argv: Sequence[str] | None = None) -> int:
    """Write the sample sensor reading to a file."""
    parser = argparse.ArgumentParser(description="Write a sample encoded sensor reading.")
    parser.add_argument("--output", default=DEFAULT_SAMPLE_PATH, help="file to write")
    args = parser.parse_args(argv)
    size = write_sample(args.output)
    print(f"Wrote {Path(args.output).name} ({size} bytes)")
    return 0