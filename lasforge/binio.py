"""Little-endian readers and writers over byte buffers."""

from __future__ import annotations

import struct


class LeExtractor:
    """Reads little-endian values sequentially from a byte buffer."""

    def __init__(self, buf: bytes | bytearray | memoryview) -> None:
        self._buf = bytes(buf)
        self._pos = 0

    def __bool__(self) -> bool:
        return self.good()

    def good(self) -> bool:
        """Whether the read position is inside the buffer."""
        return self._pos < len(self._buf)

    def seek(self, pos: int) -> None:
        self._pos = pos

    def skip(self, count: int) -> None:
        self._pos += count

    def position(self) -> int:
        return self._pos

    def _take(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        end = self._pos + size
        if self._pos < 0 or end > len(self._buf):
            raise EOFError(
                f"cannot read {size} bytes at position {self._pos} "
                f"of a {len(self._buf)}-byte buffer"
            )
        chunk = self._buf[self._pos:end]
        self._pos = end
        return chunk

    def get_string(self, size: int) -> str:
        """Read a fixed-size string field, dropping trailing NUL bytes."""
        return self._take(size).rstrip(b"\0").decode("latin-1")

    def get_bytes(self, size: int) -> bytes:
        return self._take(size)

    def _read(self, fmt: str) -> int | float:
        return struct.unpack(fmt, self._take(struct.calcsize(fmt)))[0]

    def read_u8(self) -> int:
        return self._read("<B")

    def read_i8(self) -> int:
        return self._read("<b")

    def read_u16(self) -> int:
        return self._read("<H")

    def read_i16(self) -> int:
        return self._read("<h")

    def read_u32(self) -> int:
        return self._read("<I")

    def read_i32(self) -> int:
        return self._read("<i")

    def read_u64(self) -> int:
        return self._read("<Q")

    def read_i64(self) -> int:
        return self._read("<q")

    def read_f32(self) -> float:
        return self._read("<f")

    def read_f64(self) -> float:
        return self._read("<d")


class LeInserter:
    """Writes little-endian values sequentially into a fixed-size bytearray."""

    def __init__(self, buf: bytearray) -> None:
        if not isinstance(buf, bytearray):
            raise TypeError("LeInserter needs a bytearray to write into")
        self._buf = buf
        self._pos = 0

    def __bool__(self) -> bool:
        return self.good()

    def good(self) -> bool:
        """Whether the write position is inside the buffer."""
        return self._pos < len(self._buf)

    def seek(self, pos: int) -> None:
        self._pos = pos

    def position(self) -> int:
        return self._pos

    def _put(self, data: bytes) -> None:
        end = self._pos + len(data)
        if self._pos < 0 or end > len(self._buf):
            raise ValueError(
                f"cannot write {len(data)} bytes at position {self._pos} "
                f"of a {len(self._buf)}-byte buffer"
            )
        self._buf[self._pos:end] = data
        self._pos = end

    def put_string(self, s: str | bytes, length: int | None = None) -> None:
        """Write a string, padded with NULs or truncated to ``length`` bytes."""
        raw = s.encode("latin-1") if isinstance(s, str) else bytes(s)
        if length is None:
            length = len(raw)
        self._put(raw[:length].ljust(length, b"\0"))

    def put_bytes(self, data: bytes | bytearray | memoryview) -> None:
        self._put(bytes(data))

    def _write(self, fmt: str, value: int | float) -> None:
        self._put(struct.pack(fmt, value))

    def write_u8(self, value: int) -> None:
        self._write("<B", value)

    def write_i8(self, value: int) -> None:
        self._write("<b", value)

    def write_u16(self, value: int) -> None:
        self._write("<H", value)

    def write_i16(self, value: int) -> None:
        self._write("<h", value)

    def write_u32(self, value: int) -> None:
        self._write("<I", value)

    def write_i32(self, value: int) -> None:
        self._write("<i", value)

    def write_u64(self, value: int) -> None:
        self._write("<Q", value)

    def write_i64(self, value: int) -> None:
        self._write("<q", value)

    def write_f32(self, value: float) -> None:
        self._write("<f", value)

    def write_f64(self, value: float) -> None:
        self._write("<d", value)