"""Shared types: options, fatal errors, dimension descriptions and points."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any

# Number of cells into which points are put for each octree voxel.
CELL_COUNT = 128

METADATA_FILENAME = "info2.txt"


class FatalError(RuntimeError):
    """An error that ends processing."""


@dataclass
class Options:
    """Settings controlling a processing run."""

    output_name: str = ""
    single_file: bool = False
    input_files: list[str] = field(default_factory=list)
    temp_dir: str = ""
    preserve_temp_dir: bool = False
    do_cube: bool = True
    file_limit: int = 10000000
    level: int = -1
    progress_fd: int = -1
    progress_debug: bool = False
    dim_names: list[str] = field(default_factory=list)
    stats: bool = False
    a_srs: str = ""
    metadata: bool = False


@dataclass
class FileDimInfo:
    """Name, type code and byte offset of one dimension in a point record."""

    name: str = ""
    type: int = 0
    offset: int = 0
    dim: Any = None
    extra_dim: bool = False

    def __str__(self) -> str:
        return f"{self.name} {self.type} {self.offset}"

    @classmethod
    def parse(cls, text: str) -> FileDimInfo:
        """Build an entry from the text form ``"<name> <type> <offset>"``."""
        parts = text.split()
        if len(parts) < 3:
            raise ValueError(f"expected '<name> <type> <offset>', got {text!r}")
        name, type_code, offset = parts[:3]
        try:
            return cls(name=name, type=int(type_code), offset=int(offset))
        except ValueError as exc:
            raise ValueError(f"bad dimension description {text!r}") from exc


_COORD = struct.Struct("<d")


class Point:
    """A view of a point record whose first fields are X, Y and Z doubles."""

    def __init__(self, data: bytes | bytearray | memoryview | None = None) -> None:
        self.data = data

    def _coord(self, index: int) -> float:
        if self.data is None:
            raise ValueError("point has no data")
        offset = index * _COORD.size
        if len(self.data) < offset + _COORD.size:
            raise ValueError("point data too short for coordinate")
        return _COORD.unpack_from(self.data, offset)[0]

    def x(self) -> float:
        return self._coord(0)

    def y(self) -> float:
        return self._coord(1)

    def z(self) -> float:
        return self._coord(2)