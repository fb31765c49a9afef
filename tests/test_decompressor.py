import random

import pytest

from lasforge.compressor import IntegerCompressor
from lasforge.decoder import ArithmeticDecoder
from lasforge.decompressor import IntegerDecompressor
from lasforge.encoder import ArithmeticEncoder

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


def _round_trip(bits, contexts, triples):
    comp = IntegerCompressor(bits, contexts)
    comp.init()
    enc = ArithmeticEncoder()
    for pred, real, ctx in triples:
        comp.compress(enc, pred, real, ctx)
    enc.done()

    dec = ArithmeticDecoder()
    dec.init_stream(enc.encoded_bytes())
    decomp = IntegerDecompressor(bits, contexts)
    decomp.init()
    return [decomp.decompress(dec, pred, ctx) for pred, _, ctx in triples]


@pytest.mark.parametrize("bits", [4, 8, 16])
def test_round_trip_in_range(bits):
    rng = random.Random(bits)
    top = 1 << bits
    triples = [(rng.randrange(top), rng.randrange(top), 0) for _ in range(1500)]
    assert _round_trip(bits, 1, triples) == [real for _, real, _ in triples]


def test_round_trip_small_corrections():
    rng = random.Random(11)
    triples = []
    value = 30000
    for _ in range(2000):
        pred = value
        value = max(0, min(65535, value + rng.randint(-3, 3)))
        triples.append((pred, value, 0))
    assert _round_trip(16, 1, triples) == [real for _, real, _ in triples]


def test_round_trip_32_bit_extremes_and_contexts():
    rng = random.Random(5)
    specials = [0, 1, -1, 2, -2, INT32_MIN, INT32_MAX, INT32_MIN + 1]
    triples = []
    for i in range(600):
        pred = rng.choice(specials + [rng.randint(INT32_MIN, INT32_MAX)])
        real = rng.choice(specials + [rng.randint(INT32_MIN, INT32_MAX)])
        triples.append((pred, real, i % 2))
    assert _round_trip(32, 2, triples) == [real for _, real, _ in triples]


def test_default_corrector_bounds_are_int32():
    d = IntegerDecompressor(32)
    assert d.corr_bits == 32
    assert (d.corr_min, d.corr_max) == (INT32_MIN, INT32_MAX)


def test_range_sets_corrector_interval():
    d = IntegerDecompressor(range=1000)
    assert d.corr_range == 1000
    assert d.corr_max - d.corr_min + 1 == 1000
    assert d.corr_min == -(1000 // 2)


def test_power_of_two_range_matches_bits():
    by_range = IntegerDecompressor(range=1024)
    by_bits = IntegerDecompressor(bits=10)
    assert by_range.corr_bits == by_bits.corr_bits
    assert (by_range.corr_min, by_range.corr_max) == (by_bits.corr_min, by_bits.corr_max)


def test_init_builds_models_once():
    d = IntegerDecompressor(16, 3)
    d.init()
    models = d.k_models
    d.init()
    assert d.k_models is models
    assert len(d.k_models) == 3
    assert len(d.corrector_models) == d.corr_bits


def test_decompress_before_init_raises():
    d = IntegerDecompressor()
    with pytest.raises(RuntimeError):
        d.decompress(ArithmeticDecoder(), 0)