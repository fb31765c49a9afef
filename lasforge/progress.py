"""Progress reporting to a file descriptor as framed binary messages."""

from __future__ import annotations

import math
import os
import struct
import sys
import threading

CHUNK_SIZE = 100_000

PROGRESS_MESSAGE_ID = 1000
ERROR_MESSAGE_ID = 1001


def _round_percent(fraction: float) -> int:
    # Round half away from zero, as the fraction is never negative here.
    return int(math.floor(fraction * 100.0 + 0.5))


class ProgressWriter:
    """Writes progress and error messages to a file descriptor.

    A progress message is ``<i32 1000><u32 percent><u32 length><text>`` and an
    error message is ``<i32 1001><u32 length><text>``, all little-endian.
    With a negative descriptor nothing is written, except that error messages
    go to standard error.  If a write fails the descriptor is closed and
    further messages are dropped.
    """

    CHUNK_SIZE = CHUNK_SIZE

    def __init__(self, fd: int = -1, debug: bool = False) -> None:
        self._lock = threading.Lock()
        self._fd = fd
        self._debug = debug
        self._percent = 0.0
        self._increment = 0.01
        self._point_increment = 0
        self._next_click = 0
        self._current = 0

    @property
    def fd(self) -> int:
        """The descriptor written to, or -1 when there is none."""
        return self._fd

    @property
    def percent(self) -> float:
        """The current progress as a fraction between 0 and 1."""
        with self._lock:
            return self._percent

    def set_increment(self, increment: float) -> None:
        """Set the amount added by each following ``write_increment``."""
        with self._lock:
            self._increment = increment

    def set_percent(self, percent: float) -> None:
        """Set the absolute progress fraction, limited to 0..1."""
        with self._lock:
            self._percent = max(0.0, min(1.0, percent))

    def write_increment(self, message: str) -> None:
        """Advance by the current increment and write ``message``."""
        with self._lock:
            self._write_increment_unlocked(message)

    def write(self, percent: float, message: str) -> None:
        """Set the progress fraction (limited to 0..1) and write ``message``."""
        with self._lock:
            self._percent = max(0.0, min(1.0, percent))
            self._write_message(_round_percent(self._percent), message)

    def write_error_message(self, message: str) -> None:
        """Send an error message, or print it to standard error with no descriptor."""
        if self._fd < 0:
            print(f"Error: {message}", file=sys.stderr)
            return
        text = message.encode("utf-8")
        payload = struct.pack("<iI", ERROR_MESSAGE_ID, len(text)) + text
        self._send(payload)

    def set_point_incrementer(self, total: int, total_clicks: int) -> None:
        """Prepare ``update`` to report about ``total_clicks`` times over ``total`` points."""
        if not 0 < total_clicks <= 100:
            raise ValueError("total_clicks must be between 1 and 100")
        with self._lock:
            self._current = 0
            if total < CHUNK_SIZE:
                self._point_increment = total
            else:
                self._point_increment = total // total_clicks
            self._next_click = self._point_increment

    def update(self, count: int = CHUNK_SIZE) -> None:
        """Count processed points and write a message at each threshold passed."""
        if self._fd < 0:
            return
        with self._lock:
            self._current += count
            while self._point_increment > 0 and self._current >= self._next_click:
                self._next_click += self._point_increment
                self._write_increment_unlocked(f"Processed {self._current} points")

    def _write_increment_unlocked(self, message: str) -> None:
        self._percent = min(1.0, self._percent + self._increment)
        self._write_message(_round_percent(self._percent), message)

    def _write_message(self, percent: int, message: str) -> None:
        if self._debug:
            print(f"Progress ({percent}% done): {message}")
        if self._fd < 0:
            return
        text = message.encode("utf-8")
        payload = struct.pack("<iII", PROGRESS_MESSAGE_ID, percent, len(text)) + text
        self._send(payload)

    def _send(self, payload: bytes) -> None:
        view = memoryview(payload)
        try:
            while view:
                written = os.write(self._fd, view)
                view = view[written:]
        except OSError:
            try:
                os.close(self._fd)
            except OSError:
                pass
            self._fd = -1