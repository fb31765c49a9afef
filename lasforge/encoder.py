"""Adaptive binary arithmetic encoder."""

from __future__ import annotations

import struct
from typing import Any

from .models import (
    AC_BUFFER_SIZE,
    AC_MAX_LENGTH,
    AC_MIN_LENGTH,
    BM_LENGTH_SHIFT,
    DM_LENGTH_SHIFT,
    BitModel,
    SymbolModel,
)

_U32 = 0xFFFFFFFF


class ArithmeticEncoder:
    """Encodes modelled symbols and raw bits into a byte sink.

    ``out`` may be ``None`` (bytes are collected internally), a ``bytearray``
    that is appended to, or any object with a ``write`` method.
    """

    def __init__(self, out: Any = None, valid: bool = True) -> None:
        sink = bytearray() if out is None else out
        if not isinstance(sink, bytearray) and not hasattr(sink, "write"):
            raise TypeError("output must be a bytearray or have a write() method")
        self._sink = sink
        self._valid = valid
        self._count = 0

        self._buffer = bytearray(2 * AC_BUFFER_SIZE)
        self._end_buffer = len(self._buffer)
        self._out_byte = 0
        self._end_byte = self._end_buffer

        self._base = 0
        self._length = AC_MAX_LENGTH

    @property
    def out_stream(self) -> Any:
        """The sink receiving encoded bytes."""
        return self._sink

    @property
    def is_valid(self) -> bool:
        return self._valid

    def make_valid(self) -> None:
        self._valid = True

    def _put(self, data: bytes | bytearray) -> None:
        if isinstance(self._sink, bytearray):
            self._sink.extend(data)
        else:
            self._sink.write(bytes(data))
        self._count += len(data)

    def done(self) -> None:
        """Finish encoding and flush all pending bytes to the sink."""
        init_base = self._base
        another_byte = True

        if self._length > 2 * AC_MIN_LENGTH:
            self._base = (self._base + AC_MIN_LENGTH) & _U32
            self._length = AC_MIN_LENGTH >> 1
        else:
            self._base = (self._base + (AC_MIN_LENGTH >> 1)) & _U32
            self._length = AC_MIN_LENGTH >> 9
            another_byte = False

        if init_base > self._base:
            self._propagate_carry()
        self._renorm_enc_interval()

        if self._end_byte != self._end_buffer:
            self._put(self._buffer[AC_BUFFER_SIZE:2 * AC_BUFFER_SIZE])

        if self._out_byte:
            self._put(self._buffer[:self._out_byte])

        # Trailing zeros keep the stream in step with the decoder's reads.
        self._put(b"\0\0\0" if another_byte else b"\0\0")

    def encode_bit(self, model: BitModel, sym: int) -> None:
        """Encode one bit using an adaptive bit model."""
        if sym not in (0, 1):
            raise ValueError(f"bit must be 0 or 1, got {sym}")

        x = (model.bit_0_prob * (self._length >> BM_LENGTH_SHIFT)) & _U32
        if sym == 0:
            self._length = x
            model.bit_0_count += 1
        else:
            init_base = self._base
            self._base = (self._base + x) & _U32
            self._length = (self._length - x) & _U32
            if init_base > self._base:
                self._propagate_carry()

        if self._length < AC_MIN_LENGTH:
            self._renorm_enc_interval()
        model.bits_until_update -= 1
        if model.bits_until_update == 0:
            model.update()

    def encode_symbol(self, model: SymbolModel, sym: int) -> None:
        """Encode one symbol using an adaptive symbol model."""
        if sym < 0 or sym > model.last_symbol:
            raise ValueError(
                f"symbol {sym} outside model range 0..{model.last_symbol}"
            )

        init_base = self._base
        if sym == model.last_symbol:
            x = (model.distribution[sym] * (self._length >> DM_LENGTH_SHIFT)) & _U32
            self._base = (self._base + x) & _U32
            self._length = (self._length - x) & _U32
        else:
            self._length >>= DM_LENGTH_SHIFT
            x = (model.distribution[sym] * self._length) & _U32
            self._base = (self._base + x) & _U32
            self._length = (model.distribution[sym + 1] * self._length - x) & _U32

        if init_base > self._base:
            self._propagate_carry()
        if self._length < AC_MIN_LENGTH:
            self._renorm_enc_interval()

        model.symbol_count[sym] += 1
        model.symbols_until_update -= 1
        if model.symbols_until_update == 0:
            model.update()

    def _raw(self, bits: int, sym: int) -> None:
        init_base = self._base
        self._length >>= bits
        self._base = (self._base + sym * self._length) & _U32
        if init_base > self._base:
            self._propagate_carry()
        if self._length < AC_MIN_LENGTH:
            self._renorm_enc_interval()

    def write_bit(self, sym: int) -> None:
        """Write one bit without modelling."""
        if sym not in (0, 1):
            raise ValueError(f"bit must be 0 or 1, got {sym}")
        self._raw(1, sym)

    def write_bits(self, bits: int, sym: int) -> None:
        """Write the low ``bits`` bits of ``sym`` without modelling."""
        if not 1 <= bits <= 32:
            raise ValueError(f"bit count must be between 1 and 32, got {bits}")
        if sym < 0 or sym >= (1 << bits):
            raise ValueError(f"value {sym} does not fit in {bits} bits")

        if bits > 19:
            self.write_short(sym & 0xFFFF)
            sym >>= 16
            bits -= 16
        self._raw(bits, sym)

    def write_byte(self, sym: int) -> None:
        if not 0 <= sym <= 0xFF:
            raise ValueError(f"byte value out of range: {sym}")
        self._raw(8, sym)

    def write_short(self, sym: int) -> None:
        if not 0 <= sym <= 0xFFFF:
            raise ValueError(f"short value out of range: {sym}")
        self._raw(16, sym)

    def write_int(self, sym: int) -> None:
        if not 0 <= sym <= _U32:
            raise ValueError(f"int value out of range: {sym}")
        self.write_short(sym & 0xFFFF)
        self.write_short(sym >> 16)

    def write_float(self, sym: float) -> None:
        (bits,) = struct.unpack("<I", struct.pack("<f", sym))
        self.write_int(bits)

    def write_int64(self, sym: int) -> None:
        if not 0 <= sym <= 0xFFFFFFFFFFFFFFFF:
            raise ValueError(f"int64 value out of range: {sym}")
        self.write_int(sym & _U32)
        self.write_int(sym >> 32)

    def write_double(self, sym: float) -> None:
        (bits,) = struct.unpack("<Q", struct.pack("<d", sym))
        self.write_int64(bits)

    def num_encoded(self) -> int:
        """Number of bytes put to the sink, or 0 when not valid."""
        return self._count if self._valid else 0

    def encoded_bytes(self) -> bytes | None:
        """The encoded data, or ``None`` when not valid."""
        if not self._valid:
            return None
        if isinstance(self._sink, bytearray):
            return bytes(self._sink)
        getvalue = getattr(self._sink, "getvalue", None)
        if getvalue is None:
            raise TypeError("output sink cannot return its contents")
        return bytes(getvalue())

    def _propagate_carry(self) -> None:
        buf = self._buffer
        b = self._end_buffer - 1 if self._out_byte == 0 else self._out_byte - 1
        while buf[b] == 0xFF:
            buf[b] = 0
            b = self._end_buffer - 1 if b == 0 else b - 1
        buf[b] += 1

    def _renorm_enc_interval(self) -> None:
        while True:
            self._buffer[self._out_byte] = self._base >> 24
            self._out_byte += 1
            if self._out_byte == self._end_byte:
                self._manage_outbuffer()
            self._base = (self._base << 8) & _U32
            self._length = (self._length << 8) & _U32
            if self._length >= AC_MIN_LENGTH:
                break

    def _manage_outbuffer(self) -> None:
        if self._out_byte == self._end_buffer:
            self._out_byte = 0
        start = self._out_byte
        self._put(self._buffer[start:start + AC_BUFFER_SIZE])
        self._end_byte = start + AC_BUFFER_SIZE