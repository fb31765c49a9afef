"""Read-only memory mapping of a region of a file."""

from __future__ import annotations

import mmap
import os
from dataclasses import dataclass


@dataclass
class MapContext:
    """State of one mapped file region."""

    fd: int = -1
    size: int = 0
    mapping: mmap.mmap | None = None
    start: int = 0

    def addr(self) -> mmap.mmap | None:
        """The underlying mapping, or None when nothing is mapped."""
        return self.mapping

    def data(self) -> bytes:
        """A copy of the mapped region."""
        if self.mapping is None:
            raise ValueError("file is not mapped")
        return self.mapping[self.start:self.start + self.size]

    def __len__(self) -> int:
        return self.size

    def __enter__(self) -> MapContext:
        return self

    def __exit__(self, *args: object) -> None:
        if self.mapping is not None:
            unmap_file(self)


def map_file(filename: str | os.PathLike, read_only: bool = True, pos: int = 0,
             size: int = 0) -> MapContext:
    """Map ``size`` bytes of ``filename`` starting at ``pos``, read-only."""
    if not read_only:
        raise ValueError("read_only must be true.")
    try:
        fd = os.open(filename, os.O_RDONLY | getattr(os, "O_BINARY", 0))
    except OSError as exc:
        raise OSError(f"Mapped file couldn't be opened: {os.fspath(filename)}") from exc

    ctx = MapContext(fd=fd, size=size)
    if pos < 0 or size <= 0:
        os.close(fd)
        raise OSError("Couldn't map file")

    aligned = pos - pos % mmap.ALLOCATIONGRANULARITY
    ctx.start = pos - aligned
    try:
        ctx.mapping = mmap.mmap(fd, ctx.start + size, offset=aligned,
                                access=mmap.ACCESS_READ)
    except (OSError, ValueError, OverflowError) as exc:
        os.close(fd)
        raise OSError("Couldn't map file") from exc
    return ctx


def unmap_file(ctx: MapContext) -> MapContext:
    """Release the mapping and close the file; the file is closed even on error."""
    try:
        if ctx.mapping is None:
            raise OSError("Couldn't unmap file.")
        try:
            ctx.mapping.close()
        except BufferError as exc:
            raise OSError("Couldn't unmap file.") from exc
        ctx.mapping = None
        ctx.size = 0
        ctx.start = 0
    finally:
        if ctx.fd >= 0:
            os.close(ctx.fd)
            ctx.fd = -1
    return ctx