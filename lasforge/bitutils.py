"""Bit reinterpretation, little-endian packing, checksums and a running median."""

from __future__ import annotations

import struct
from collections.abc import Iterable

_U32 = 0xFFFFFFFF

_FORMATS = {
    "u8": "<B",
    "i8": "<b",
    "u16": "<H",
    "i16": "<h",
    "u32": "<I",
    "i32": "<i",
    "u64": "<Q",
    "i64": "<q",
    "f32": "<f",
    "f64": "<d",
}


def _format(kind: str) -> struct.Struct:
    try:
        return struct.Struct(_FORMATS[kind])
    except KeyError:
        raise ValueError(
            f"unknown value kind {kind!r}; expected one of {', '.join(_FORMATS)}"
        ) from None


def clear_bit(value: int, bit: int) -> int:
    """Return ``value`` with bit number ``bit`` cleared."""
    if bit < 0:
        raise ValueError("bit number must not be negative")
    return value & ~(1 << bit)


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Limit ``value`` to the inclusive range ``minimum`` .. ``maximum``."""
    if minimum > maximum:
        raise ValueError("minimum is greater than maximum")
    if value <= minimum:
        return minimum
    if value >= maximum:
        return maximum
    return value


def u2d(value: int) -> float:
    """Reinterpret the bits of an unsigned 64-bit integer as a double."""
    return struct.unpack("<d", struct.pack("<Q", value))[0]


def i2d(value: int) -> float:
    """Reinterpret the bits of a signed 64-bit integer as a double."""
    return struct.unpack("<d", struct.pack("<q", value))[0]


def d2u(value: float) -> int:
    """Reinterpret the bits of a double as an unsigned 64-bit integer."""
    return struct.unpack("<Q", struct.pack("<d", value))[0]


def d2i(value: float) -> int:
    """Reinterpret the bits of a double as a signed 64-bit integer."""
    return struct.unpack("<q", struct.pack("<d", value))[0]


def pack(value: int | float, kind: str) -> bytes:
    """Encode ``value`` little-endian as the given kind (``u32``, ``f64``, ...)."""
    fmt = _format(kind)
    try:
        return fmt.pack(value)
    except struct.error as exc:
        raise ValueError(f"cannot pack {value!r} as {kind}: {exc}") from exc


def unpack(data: bytes | bytearray | memoryview, kind: str) -> int | float:
    """Decode a little-endian value of the given kind from the start of ``data``."""
    fmt = _format(kind)
    if len(data) < fmt.size:
        raise ValueError(f"need {fmt.size} bytes to unpack {kind}, got {len(data)}")
    return fmt.unpack_from(data, 0)[0]


def byte_sum(data: Iterable[int]) -> int:
    """Sum of the byte values in ``data``."""
    return sum(data)


class Summer:
    """Accumulates a 32-bit byte checksum and a count of values added."""

    def __init__(self) -> None:
        self._sum = 0
        self._count = 0

    def add_value(self, data: bytes | bytearray | memoryview) -> None:
        """Add the bytes of one encoded value and count it."""
        self._sum = (self._sum + byte_sum(data)) & _U32
        self._count += 1

    def add_bytes(self, data: bytes | bytearray | memoryview) -> None:
        """Add raw bytes without counting a value."""
        self._sum = (self._sum + byte_sum(data)) & _U32

    def value(self) -> int:
        """Return the checksum and reset it."""
        v, self._sum = self._sum, 0
        return v

    def count(self) -> int:
        """Return the value count and reset it."""
        c, self._count = self._count, 0
        return c


class StreamingMedian:
    """Approximate running median over a sorted five-value window."""

    def __init__(self) -> None:
        self.values: list = [0] * 5
        self.high = True
        self.reset()

    def reset(self) -> None:
        self.values = [0] * 5
        self.high = True

    def add(self, value) -> None:
        v = self.values
        if self.high:
            if value < v[2]:
                v[4] = v[3]
                v[3] = v[2]
                if value < v[0]:
                    v[2] = v[1]
                    v[1] = v[0]
                    v[0] = value
                elif value < v[1]:
                    v[2] = v[1]
                    v[1] = value
                else:
                    v[2] = value
            else:
                if value < v[3]:
                    v[4] = v[3]
                    v[3] = value
                else:
                    v[4] = value
                self.high = False
        else:
            if v[2] < value:
                v[0] = v[1]
                v[1] = v[2]
                if v[4] < value:
                    v[2] = v[3]
                    v[3] = v[4]
                    v[4] = value
                elif v[3] < value:
                    v[2] = v[3]
                    v[3] = value
                else:
                    v[2] = value
            else:
                if v[1] < value:
                    v[0] = v[1]
                    v[1] = value
                else:
                    v[0] = value
                self.high = True

    def get(self):
        return self.values[2]