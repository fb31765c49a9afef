"""Adaptive probability models used by the arithmetic coder."""

from __future__ import annotations

from collections.abc import Sequence

AC_HEADER_BYTE = 2
AC_BUFFER_SIZE = 1024

# Threshold for renormalization and maximum interval length.
AC_MIN_LENGTH = 0x01000000
AC_MAX_LENGTH = 0xFFFFFFFF

# Binary models.
BM_LENGTH_SHIFT = 13
BM_MAX_COUNT = 1 << BM_LENGTH_SHIFT

# General (multi-symbol) models.
DM_LENGTH_SHIFT = 15
DM_MAX_COUNT = 1 << DM_LENGTH_SHIFT

MAX_SYMBOLS = 1 << 11

_U32 = 0xFFFFFFFF


class SymbolModel:
    """Adaptive model over an alphabet of 2 to 2048 symbols."""

    def __init__(
        self,
        symbols: int,
        compress: bool = False,
        init_table: Sequence[int] | None = None,
    ) -> None:
        if symbols < 2 or symbols > MAX_SYMBOLS:
            raise ValueError("Invalid number of symbols")

        self.symbols = symbols
        self.compress = compress
        self.last_symbol = symbols - 1

        self.decoder_table: list[int] | None
        if not compress and symbols > 16:
            table_bits = 3
            while symbols > (1 << (table_bits + 2)):
                table_bits += 1
            self.table_size = 1 << table_bits
            self.table_shift = DM_LENGTH_SHIFT - table_bits
            self.decoder_table = [0] * (self.table_size + 2)
        else:
            self.decoder_table = None
            self.table_size = 0
            self.table_shift = 0

        self.distribution = [0] * symbols
        if init_table is not None:
            if len(init_table) < symbols:
                raise ValueError("Initial table is shorter than the alphabet")
            self.symbol_count = [int(c) & _U32 for c in init_table[:symbols]]
        else:
            self.symbol_count = [1] * symbols

        self.total_count = 0
        self.update_cycle = symbols
        self.symbols_until_update = 0
        self.update()
        self.update_cycle = (symbols + 6) >> 1
        self.symbols_until_update = self.update_cycle

    def update(self) -> None:
        """Rescale counts if needed and recompute the distribution."""
        self.total_count = (self.total_count + self.update_cycle) & _U32
        if self.total_count > DM_MAX_COUNT:
            self.symbol_count = [(c + 1) >> 1 for c in self.symbol_count]
            self.total_count = sum(self.symbol_count) & _U32

        scale = 0x80000000 // self.total_count
        shift = 31 - DM_LENGTH_SHIFT
        running = 0
        table = self.decoder_table
        use_table = not self.compress and self.table_size != 0 and table is not None

        s = 0
        for k, count in enumerate(self.symbol_count):
            self.distribution[k] = ((scale * running) & _U32) >> shift
            running = (running + count) & _U32
            if use_table:
                w = self.distribution[k] >> self.table_shift
                while s < w:
                    s += 1
                    table[s] = k - 1
        if use_table:
            table[0] = 0
            while s <= self.table_size:
                s += 1
                table[s] = self.symbols - 1

        self.update_cycle = ((5 * self.update_cycle) & _U32) >> 2
        max_cycle = (self.symbols + 6) << 3
        if self.update_cycle > max_cycle:
            self.update_cycle = max_cycle
        self.symbols_until_update = self.update_cycle


class BitModel:
    """Adaptive model for a single binary decision."""

    def __init__(self) -> None:
        self.bit_0_count = 1
        self.bit_count = 2
        self.bit_0_prob = 1 << (BM_LENGTH_SHIFT - 1)
        self.update_cycle = 4
        self.bits_until_update = 4

    def update(self) -> None:
        """Rescale counts if needed and recompute the bit-0 probability."""
        self.bit_count = (self.bit_count + self.update_cycle) & _U32
        if self.bit_count > BM_MAX_COUNT:
            self.bit_count = (self.bit_count + 1) >> 1
            self.bit_0_count = (self.bit_0_count + 1) >> 1
            if self.bit_0_count == self.bit_count:
                self.bit_count += 1

        scale = 0x80000000 // self.bit_count
        self.bit_0_prob = ((self.bit_0_count * scale) & _U32) >> (31 - BM_LENGTH_SHIFT)

        self.update_cycle = ((5 * self.update_cycle) & _U32) >> 2
        if self.update_cycle > 64:
            self.update_cycle = 64
        self.bits_until_update = self.update_cycle