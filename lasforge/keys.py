"""Keys identifying grid cells and octree voxels."""

from __future__ import annotations

from dataclasses import dataclass

_U8_MAX = 0xFF
_U64 = 0xFFFFFFFFFFFFFFFF


class GridKey:
    """A cell of a grid with at most 255 cells per axis, packed into one int."""

    __slots__ = ("_key",)

    def __init__(self, i: int, j: int, k: int) -> None:
        for name, v in (("i", i), ("j", j), ("k", k)):
            if not 0 <= v < _U8_MAX:
                raise ValueError(f"grid index {name}={v} must be in 0..{_U8_MAX - 1}")
        self._key = (i << 16) | (j << 8) | k

    def i(self) -> int:
        return self._key >> 16

    def j(self) -> int:
        return (self._key >> 8) & 0xFF

    def k(self) -> int:
        return self._key & 0xFF

    def key(self) -> int:
        return self._key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridKey):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return f"{self.i()}/{self.j()}/{self.k()}"

    def __repr__(self) -> str:
        return f"GridKey({self.i()}, {self.j()}, {self.k()})"


@dataclass(frozen=True, order=True)
class VoxelKey:
    """An octree voxel: integer position at a tree level."""

    x: int = 0
    y: int = 0
    z: int = 0
    level: int = 0

    def child(self, direction: int) -> VoxelKey:
        """The child voxel in octant ``direction`` (bit 0: x, 1: y, 2: z)."""
        return VoxelKey(
            (self.x << 1) | (direction & 1),
            (self.y << 1) | ((direction >> 1) & 1),
            (self.z << 1) | ((direction >> 2) & 1),
            self.level + 1,
        )

    def parent(self) -> VoxelKey:
        return VoxelKey(self.x >> 1, self.y >> 1, self.z >> 1, max(self.level - 1, 0))

    def __str__(self) -> str:
        return f"{self.level}-{self.x}-{self.y}-{self.z}"

    def __hash__(self) -> int:
        t = ((self.x & _U64) << 48) & _U64
        t |= ((self.y & _U64) << 32) & _U64
        t |= ((self.z & _U64) << 16) & _U64
        t |= self.level & _U64
        return t