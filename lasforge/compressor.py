"""Predictive integer compressor built on the arithmetic encoder."""

from __future__ import annotations

from typing import Any

from .models import BitModel, SymbolModel

_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


class IntegerCompressor:
    """Encodes integers as corrections to a prediction."""

    bits_high = 8

    def __init__(self, bits: int = 16, contexts: int = 1) -> None:
        self.bits = bits
        self.contexts = contexts
        self.k = 0

        if bits and bits < 32:
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

    def compress(self, enc: Any, pred: int, real: int, context: int = 0) -> None:
        """Encode ``real`` as a correction of ``pred`` in the given context."""
        if not self.k_models:
            raise RuntimeError("init() must be called before compress()")
        corr = _to_int32(real - pred)
        if corr < self.corr_min:
            corr = _to_int32(corr + self.corr_range)
        elif corr > self.corr_max:
            corr = _to_int32(corr - self.corr_range)
        self.write_corrector(enc, corr, self.k_models[context])

    def write_corrector(self, enc: Any, c: int, model: SymbolModel) -> None:
        """Encode corrector ``c`` using ``model`` for its magnitude class."""
        c1 = (-c if c <= 0 else c - 1) & 0xFFFFFFFF
        self.k = c1.bit_length()

        enc.encode_symbol(model, self.k)

        k = self.k
        if k == 0:
            enc.encode_bit(self.corrector0, c)
            return
        # With k == 32 the value is INT_MIN and k alone carries it.
        if k == 32:
            return

        if c < 0:
            c += (1 << k) - 1
        else:
            c -= 1

        if k <= self.bits_high:
            enc.encode_symbol(self.corrector_models[k - 1], c)
        else:
            k1 = k - self.bits_high
            low = c & ((1 << k1) - 1)
            enc.encode_symbol(self.corrector_models[k - 1], c >> k1)
            enc.write_bits(k1, low)