"""Adaptive binary arithmetic decoder."""

from __future__ import annotations

import struct

from .models import (
    AC_MAX_LENGTH,
    AC_MIN_LENGTH,
    BM_LENGTH_SHIFT,
    DM_LENGTH_SHIFT,
    BitModel,
    SymbolModel,
)

_U32 = 0xFFFFFFFF


class ArithmeticDecoder:
    """Decodes modelled symbols and raw bits from a byte buffer.

    The buffer may be handed to the constructor, after which
    ``read_init_bytes`` starts decoding, or to ``init_stream``, which
    does both steps at once.
    """

    def __init__(self, data: bytes | bytearray | memoryview | None = None) -> None:
        self._data = bytes(data) if data is not None else b""
        self._pos = 0
        self._value = 0
        self._length = AC_MAX_LENGTH
        self._has_data = False

    @property
    def bytes_read(self) -> int:
        """Number of bytes consumed from the buffer so far."""
        return self._pos

    def _get_byte(self) -> int:
        if self._pos >= len(self._data):
            raise EOFError("arithmetic decoder ran past the end of its input")
        b = self._data[self._pos]
        self._pos += 1
        return b

    def init_stream(self, data: bytes | bytearray | memoryview) -> None:
        """Take ``data`` as input and start decoding; empty data is ignored."""
        if not data:
            return
        self._data = bytes(data)
        self._pos = 0
        self._value = 0
        self._length = AC_MAX_LENGTH
        self.read_init_bytes()
        self._has_data = True

    def read_init_bytes(self) -> None:
        """Load the first four bytes of the stream into the decoder state."""
        value = 0
        for _ in range(4):
            value = (value << 8) | self._get_byte()
        self._value = value

    def decode_bit(self, model: BitModel) -> int:
        """Decode one bit using an adaptive bit model."""
        x = (model.bit_0_prob * (self._length >> BM_LENGTH_SHIFT)) & _U32
        sym = 1 if self._value >= x else 0

        if sym == 0:
            self._length = x
            model.bit_0_count += 1
        else:
            self._value = (self._value - x) & _U32
            self._length = (self._length - x) & _U32

        if self._length < AC_MIN_LENGTH:
            self._renorm_dec_interval()
        model.bits_until_update -= 1
        if model.bits_until_update == 0:
            model.update()
        return sym

    def decode_symbol(self, model: SymbolModel) -> int:
        """Decode one symbol using an adaptive symbol model."""
        dist = model.distribution
        y = self._length

        if model.decoder_table is not None:
            table = model.decoder_table
            self._length >>= DM_LENGTH_SHIFT
            if self._length == 0:
                raise ValueError("corrupt arithmetic-coded stream")
            dv = self._value // self._length
            t = dv >> model.table_shift
            if t + 1 >= len(table):
                raise ValueError("corrupt arithmetic-coded stream")

            sym = table[t]
            n = table[t + 1] + 1
            while n > sym + 1:
                k = (sym + n) >> 1
                if dist[k] > dv:
                    n = k
                else:
                    sym = k

            x = (dist[sym] * self._length) & _U32
            if sym != model.last_symbol:
                y = (dist[sym + 1] * self._length) & _U32
        else:
            x = sym = 0
            self._length >>= DM_LENGTH_SHIFT
            n = model.symbols
            k = n >> 1
            while True:
                z = (self._length * dist[k]) & _U32
                if z > self._value:
                    n = k
                    y = z
                else:
                    sym = k
                    x = z
                k = (sym + n) >> 1
                if k == sym:
                    break

        self._value = (self._value - x) & _U32
        self._length = (y - x) & _U32

        if self._length < AC_MIN_LENGTH:
            self._renorm_dec_interval()

        model.symbol_count[sym] += 1
        model.symbols_until_update -= 1
        if model.symbols_until_update == 0:
            model.update()
        return sym

    def _raw(self, bits: int) -> int:
        self._length >>= bits
        if self._length == 0:
            raise ValueError("corrupt arithmetic-coded stream")
        sym = self._value // self._length
        self._value = (self._value - self._length * sym) & _U32
        if self._length < AC_MIN_LENGTH:
            self._renorm_dec_interval()
        return sym

    def read_bit(self) -> int:
        """Read one bit without modelling."""
        sym = self._raw(1)
        if sym > 1:
            raise ValueError("corrupt arithmetic-coded stream")
        return sym

    def read_bits(self, bits: int) -> int:
        """Read ``bits`` raw bits (1 to 32)."""
        if not 1 <= bits <= 32:
            raise ValueError(f"bit count must be between 1 and 32, got {bits}")
        if bits > 19:
            low = self.read_short()
            high = self.read_bits(bits - 16) << 16
            return high | low
        sym = self._raw(bits)
        if sym >= (1 << bits):
            raise ValueError("corrupt arithmetic-coded stream")
        return sym

    def read_byte(self) -> int:
        sym = self._raw(8)
        if sym >= 1 << 8:
            raise ValueError("corrupt arithmetic-coded stream")
        return sym

    def read_short(self) -> int:
        sym = self._raw(16)
        if sym >= 1 << 16:
            raise ValueError("corrupt arithmetic-coded stream")
        return sym

    def read_int(self) -> int:
        low = self.read_short()
        high = self.read_short()
        return (high << 16) | low

    def read_float(self) -> float:
        return struct.unpack("<f", struct.pack("<I", self.read_int()))[0]

    def read_int64(self) -> int:
        low = self.read_int()
        high = self.read_int()
        return (high << 32) | low

    def read_double(self) -> float:
        return struct.unpack("<d", struct.pack("<Q", self.read_int64()))[0]

    def valid(self) -> bool:
        """Whether ``init_stream`` has supplied data to decode."""
        return self._has_data

    def _renorm_dec_interval(self) -> None:
        while True:
            self._value = ((self._value << 8) | self._get_byte()) & _U32
            self._length = (self._length << 8) & _U32
            if self._length >= AC_MIN_LENGTH:
                break