"""Variable-length records (VLRs) of LAS/LAZ files."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import BinaryIO

from .binio import LeExtractor, LeInserter

_U16 = 0xFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF

LASZIP_USER_ID = "laszip encoded"
LASZIP_RECORD_ID = 22204
LASZIP_DESCRIPTION = "lazperf variant"

EB_USER_ID = "LASF_Spec"
EB_RECORD_ID = 4
EB_FIELD_SIZE = 192

WKT_USER_ID = "LASF_Projection"
WKT_RECORD_ID = 2112

COPC_USER_ID = "copc"
COPC_RECORD_ID = 1
COPC_DESCRIPTION = "COPC info VLR"
COPC_INFO_SIZE = 160

LAZ_VLR_BASE_SIZE = 34
LAZ_ITEM_SIZE = 6


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if data is None or len(data) < size:
        got = 0 if data is None else len(data)
        raise EOFError(f"expected {size} bytes, got {got}")
    return data


@dataclass
class VlrHeader:
    """The 54-byte header that precedes a VLR's payload."""

    reserved: int = 0
    user_id: str = ""
    record_id: int = 0
    data_length: int = 0
    description: str = ""

    SIZE = 54

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> VlrHeader:
        s = LeExtractor(data)
        reserved = s.read_u16()
        user_id = s.get_string(16)
        record_id = s.read_u16()
        data_length = s.read_u16()
        description = s.get_string(32)
        return cls(reserved, user_id, record_id, data_length, description)

    @classmethod
    def read(cls, stream: BinaryIO) -> VlrHeader:
        return cls.from_bytes(_read_exact(stream, cls.SIZE))

    def data(self) -> bytes:
        buf = bytearray(self.SIZE)
        s = LeInserter(buf)
        s.write_u16(self.reserved)
        s.put_string(self.user_id, 16)
        s.write_u16(self.record_id)
        s.write_u16(self.data_length)
        s.put_string(self.description, 32)
        return bytes(buf)

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.data())


@dataclass
class EvlrHeader:
    """The 60-byte header that precedes an extended VLR's payload."""

    reserved: int = 0
    user_id: str = ""
    record_id: int = 0
    data_length: int = 0
    description: str = ""

    SIZE = 60

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> EvlrHeader:
        s = LeExtractor(data)
        reserved = s.read_u16()
        user_id = s.get_string(16)
        record_id = s.read_u16()
        data_length = s.read_u64()
        description = s.get_string(32)
        return cls(reserved, user_id, record_id, data_length, description)

    @classmethod
    def read(cls, stream: BinaryIO) -> EvlrHeader:
        return cls.from_bytes(_read_exact(stream, cls.SIZE))

    def data(self) -> bytes:
        buf = bytearray(self.SIZE)
        s = LeInserter(buf)
        s.write_u16(self.reserved)
        s.put_string(self.user_id, 16)
        s.write_u16(self.record_id)
        s.write_u64(self.data_length)
        s.put_string(self.description, 32)
        return bytes(buf)

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.data())


@dataclass
class VlrIndexRecord:
    """Where a (E)VLR's payload sits in a file."""

    user_id: str
    record_id: int
    data_length: int
    description: str
    byte_offset: int

    @classmethod
    def from_header(
        cls, header: VlrHeader | EvlrHeader, byte_offset: int
    ) -> VlrIndexRecord:
        return cls(
            header.user_id,
            header.record_id,
            header.data_length,
            header.description,
            byte_offset,
        )


class Vlr(ABC):
    """A record that can describe itself with a VLR or EVLR header."""

    @abstractmethod
    def size(self) -> int:
        """Payload size in bytes."""

    @abstractmethod
    def header(self) -> VlrHeader:
        """A VLR header for this payload."""

    @abstractmethod
    def eheader(self) -> EvlrHeader:
        """An EVLR header for this payload."""


# LAZ item type codes.
ITEM_BYTE = 0
ITEM_POINT10 = 6
ITEM_GPSTIME = 7
ITEM_RGB12 = 8
ITEM_POINT14 = 10
ITEM_RGB14 = 11
ITEM_RGBNIR14 = 12
ITEM_BYTE14 = 14


@dataclass
class LazItem:
    """One compressed item of a point record."""

    type: int
    size: int
    version: int


_POINT_ITEM = (ITEM_POINT10, 20, 2)
_GPS_ITEM = (ITEM_GPSTIME, 8, 2)
_RGB_ITEM = (ITEM_RGB12, 6, 2)
_BYTE_ITEM = (ITEM_BYTE, 0, 2)
_POINT14_ITEM = (ITEM_POINT14, 30, 3)
_RGB14_ITEM = (ITEM_RGB14, 6, 3)
_RGBNIR14_ITEM = (ITEM_RGBNIR14, 8, 3)
_BYTE14_ITEM = (ITEM_BYTE14, 0, 3)


@dataclass
class LazVlr(Vlr):
    """The LASzip VLR describing how point data is compressed."""

    compressor: int = 0
    coder: int = 0
    ver_major: int = 0
    ver_minor: int = 0
    revision: int = 0
    options: int = 0
    chunk_size: int = 0
    num_points: int = 0
    num_bytes: int = 0
    items: list[LazItem] = field(default_factory=list)

    @classmethod
    def for_format(cls, format: int, eb_count: int, chunk_size: int) -> LazVlr:
        """Build the VLR for a point format with ``eb_count`` extra bytes."""
        vlr = cls(
            compressor=2 if format <= 5 else 3,
            coder=0,
            ver_major=3,
            ver_minor=4,
            revision=3,
            options=0,
            chunk_size=chunk_size,
            num_points=_U64_MAX,
            num_bytes=_U64_MAX,
        )
        if 0 <= format <= 5:
            vlr.items.append(LazItem(*_POINT_ITEM))
            if format in (1, 3):
                vlr.items.append(LazItem(*_GPS_ITEM))
            if format in (2, 3):
                vlr.items.append(LazItem(*_RGB_ITEM))
            if eb_count:
                vlr.items.append(LazItem(_BYTE_ITEM[0], eb_count, _BYTE_ITEM[2]))
        elif 6 <= format <= 8:
            vlr.items.append(LazItem(*_POINT14_ITEM))
            if format == 7:
                vlr.items.append(LazItem(*_RGB14_ITEM))
            if format == 8:
                vlr.items.append(LazItem(*_RGBNIR14_ITEM))
            if eb_count:
                vlr.items.append(LazItem(_BYTE14_ITEM[0], eb_count, _BYTE14_ITEM[2]))
        return vlr

    def valid(self) -> bool:
        return bool(self.items)

    @staticmethod
    def _parse_fixed(s: LeExtractor) -> tuple[dict[str, int], int]:
        values = {
            "compressor": s.read_u16(),
            "coder": s.read_u16(),
            "ver_major": s.read_u8(),
            "ver_minor": s.read_u8(),
            "revision": s.read_u16(),
            "options": s.read_u32(),
            "chunk_size": s.read_u32(),
            "num_points": s.read_u64(),
            "num_bytes": s.read_u64(),
        }
        return values, s.read_u16()

    @staticmethod
    def _parse_items(s: LeExtractor, count: int) -> list[LazItem]:
        return [LazItem(s.read_u16(), s.read_u16(), s.read_u16()) for _ in range(count)]

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> LazVlr:
        s = LeExtractor(data)
        values, num_items = cls._parse_fixed(s)
        return cls(**values, items=cls._parse_items(s, num_items))

    @classmethod
    def read(cls, stream: BinaryIO) -> LazVlr:
        values, num_items = cls._parse_fixed(
            LeExtractor(_read_exact(stream, LAZ_VLR_BASE_SIZE))
        )
        items_data = _read_exact(stream, num_items * LAZ_ITEM_SIZE)
        return cls(**values, items=cls._parse_items(LeExtractor(items_data), num_items))

    def data(self) -> bytes:
        buf = bytearray(self.size())
        s = LeInserter(buf)
        s.write_u16(self.compressor)
        s.write_u16(self.coder)
        s.write_u8(self.ver_major)
        s.write_u8(self.ver_minor)
        s.write_u16(self.revision)
        s.write_u32(self.options)
        s.write_u32(self.chunk_size)
        s.write_u64(self.num_points)
        s.write_u64(self.num_bytes)
        s.write_u16(len(self.items))
        for item in self.items:
            s.write_u16(item.type)
            s.write_u16(item.size)
            s.write_u16(item.version)
        return bytes(buf)

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.data())

    def size(self) -> int:
        return LAZ_VLR_BASE_SIZE + len(self.items) * LAZ_ITEM_SIZE

    def header(self) -> VlrHeader:
        return VlrHeader(
            0, LASZIP_USER_ID, LASZIP_RECORD_ID, self.size() & _U16, LASZIP_DESCRIPTION
        )

    def eheader(self) -> EvlrHeader:
        return EvlrHeader(
            0, LASZIP_USER_ID, LASZIP_RECORD_ID, self.size(), LASZIP_DESCRIPTION
        )


def _three() -> list[float]:
    return [0.0, 0.0, 0.0]


@dataclass
class EbField:
    """Description of one extra-bytes dimension."""

    reserved: bytes = bytes(2)
    data_type: int = 1
    options: int = 0
    name: str = ""
    unused: bytes = bytes(4)
    no_data: list[float] = field(default_factory=_three)
    minval: list[float] = field(default_factory=_three)
    maxval: list[float] = field(default_factory=_three)
    scale: list[float] = field(default_factory=_three)
    offset: list[float] = field(default_factory=_three)
    description: str = ""


@dataclass
class EbVlr(Vlr):
    """The extra-bytes VLR, a list of 192-byte field descriptions."""

    items: list[EbField] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> EbVlr:
        s = LeExtractor(data)
        items = []
        for _ in range(len(data) // EB_FIELD_SIZE):
            f = EbField()
            f.reserved = s.get_bytes(2)
            f.data_type = s.read_u8()
            f.options = s.read_u8()
            f.name = s.get_string(32)
            f.unused = s.get_bytes(4)
            f.no_data = [s.read_f64() for _ in range(3)]
            f.minval = [s.read_f64() for _ in range(3)]
            f.maxval = [s.read_f64() for _ in range(3)]
            f.scale = [s.read_f64() for _ in range(3)]
            f.offset = [s.read_f64() for _ in range(3)]
            f.description = s.get_string(32)
            items.append(f)
        return cls(items)

    @classmethod
    def read(cls, stream: BinaryIO, byte_size: int) -> EbVlr:
        return cls.from_bytes(_read_exact(stream, byte_size))

    def data(self) -> bytes:
        buf = bytearray(self.size())
        s = LeInserter(buf)
        for f in self.items:
            s.put_string(f.reserved, 2)
            s.write_u8(f.data_type)
            s.write_u8(f.options)
            s.put_string(f.name, 32)
            s.put_string(f.unused, 4)
            for values in (f.no_data, f.minval, f.maxval, f.scale, f.offset):
                if len(values) != 3:
                    raise ValueError("extra-bytes value arrays must hold three numbers")
                for v in values:
                    s.write_f64(v)
            s.put_string(f.description, 32)
        return bytes(buf)

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.data())

    def add_field(self, field: EbField | None = None) -> None:
        """Append ``field``, or a default field named ``FIELD_<n>``."""
        if field is None:
            field = EbField(name=f"FIELD_{len(self.items)}")
        self.items.append(field)

    def size(self) -> int:
        return EB_FIELD_SIZE * len(self.items)

    def header(self) -> VlrHeader:
        return VlrHeader(0, EB_USER_ID, EB_RECORD_ID, self.size() & _U16, "")

    def eheader(self) -> EvlrHeader:
        return EvlrHeader(0, EB_USER_ID, EB_RECORD_ID, self.size(), "")


def _encode_text(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


@dataclass
class WktVlr(Vlr):
    """The coordinate-system VLR holding a WKT string."""

    wkt: str = ""

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> WktVlr:
        return cls(bytes(data).decode("utf-8", errors="surrogateescape"))

    @classmethod
    def read(cls, stream: BinaryIO, byte_size: int) -> WktVlr:
        return cls.from_bytes(_read_exact(stream, byte_size))

    def data(self) -> bytes:
        return _encode_text(self.wkt)

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.data())

    def size(self) -> int:
        return len(self.data())

    def header(self) -> VlrHeader:
        return VlrHeader(0, WKT_USER_ID, WKT_RECORD_ID, self.size() & _U16, "")

    def eheader(self) -> EvlrHeader:
        return EvlrHeader(0, WKT_USER_ID, WKT_RECORD_ID, self.size(), "")


def _reserved() -> list[int]:
    return [0] * 11


@dataclass
class CopcInfoVlr(Vlr):
    """The COPC info VLR: octree root cube, spacing and hierarchy location."""

    center_x: float = 0.0
    center_y: float = 0.0
    center_z: float = 0.0
    halfsize: float = 0.0
    spacing: float = 0.0
    root_hier_offset: int = 0
    root_hier_size: int = 0
    gpstime_minimum: float = 0.0
    gpstime_maximum: float = 0.0
    reserved: list[int] = field(default_factory=_reserved)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> CopcInfoVlr:
        s = LeExtractor(data)
        return cls(
            center_x=s.read_f64(),
            center_y=s.read_f64(),
            center_z=s.read_f64(),
            halfsize=s.read_f64(),
            spacing=s.read_f64(),
            root_hier_offset=s.read_u64(),
            root_hier_size=s.read_u64(),
            gpstime_minimum=s.read_f64(),
            gpstime_maximum=s.read_f64(),
            reserved=[s.read_u64() for _ in range(11)],
        )

    @classmethod
    def read(cls, stream: BinaryIO) -> CopcInfoVlr:
        return cls.from_bytes(_read_exact(stream, COPC_INFO_SIZE))

    def data(self) -> bytes:
        if len(self.reserved) != 11:
            raise ValueError("COPC info VLR needs eleven reserved values")
        buf = bytearray(self.size())
        s = LeInserter(buf)
        for v in (self.center_x, self.center_y, self.center_z, self.halfsize, self.spacing):
            s.write_f64(v)
        s.write_u64(self.root_hier_offset)
        s.write_u64(self.root_hier_size)
        s.write_f64(self.gpstime_minimum)
        s.write_f64(self.gpstime_maximum)
        for r in self.reserved:
            s.write_u64(r)
        return bytes(buf)

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.data())

    def size(self) -> int:
        return COPC_INFO_SIZE

    def header(self) -> VlrHeader:
        return VlrHeader(0, COPC_USER_ID, COPC_RECORD_ID, self.size(), COPC_DESCRIPTION)

    def eheader(self) -> EvlrHeader:
        return EvlrHeader(0, COPC_USER_ID, COPC_RECORD_ID, self.size(), COPC_DESCRIPTION)