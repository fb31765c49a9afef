"""Predictive integer decompressor built on the arithmetic decoder."""

from __future__ import annotations

from typing import Any

from .models import BitModel, SymbolModel

_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


class IntegerDecompressor:
    """Decodes integers stored as corrections to a prediction."""

    def __init__(
        self,
        bits: int = 16,
        contexts: int = 1,
        bits_high: int = 8,
        range: int = 0,
    ) -> None:
        self.bits = bits
        self.contexts = contexts
        self.bits_high = bits_high
        self.range = range
        self.k = 0

        if range:
            self.corr_range = range
            self.corr_bits = range.bit_length()
            if self.corr_range == 1 << (self.corr_bits - 1):
                self.corr_bits -= 1
            self.corr_min = -(self.corr_range // 2)
            self.corr_max = self.corr_min + self.corr_range - 1
        elif bits and bits < 32:
            self.corr_bits = bits
            self.corr_range = 1 << bits
            self.corr_min = -(self.corr_range // 2)
            self.corr_max = self.corr_min + self.corr_range - 1
        else:
            self.corr_bits = 32
            self.corr_range = 0
            self.corr_min = _INT32_MIN
            self.corr_max = _INT32_MAX

        self.k_models: list[SymbolModel] = []
        self.corrector0 = BitModel()
        self.corrector_models: list[SymbolModel] = []

    def init(self) -> None:
        """Create the entropy models; does nothing if they already exist."""
        if self.k_models:
            return
        self.k_models = [SymbolModel(self.corr_bits + 1) for _ in range(self.contexts)]
        self.corrector_models = [
            SymbolModel(1 << min(i, self.bits_high))
            for i in range(1, self.corr_bits + 1)
        ]

    def decompress(self, dec: Any, pred: int, context: int = 0) -> int:
        """Decode the value that was compressed against ``pred``."""
        if not self.k_models:
            raise RuntimeError("init() must be called before decompress()")
        real = _to_int32(pred + self.read_corrector(dec, self.k_models[context]))
        if real < 0:
            real = _to_int32(real + self.corr_range)
        elif (real & 0xFFFFFFFF) >= self.corr_range:
            real = _to_int32(real - self.corr_range)
        return real

    def read_corrector(self, dec: Any, model: SymbolModel) -> int:
        """Decode one corrector whose magnitude class is coded with ``model``."""
        self.k = k = dec.decode_symbol(model)

        if k == 0:
            return dec.decode_bit(self.corrector0)
        if k >= 32:
            return self.corr_min

        if k <= self.bits_high:
            c = dec.decode_symbol(self.corrector_models[k - 1])
        else:
            k1 = k - self.bits_high
            c = dec.decode_symbol(self.corrector_models[k - 1])
            c = (c << k1) | dec.read_bits(k1)

        if c >= 1 << (k - 1):
            c += 1
        else:
            c -= (1 << k) - 1
        return _to_int32(c)