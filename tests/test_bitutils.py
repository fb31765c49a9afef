import math
import random

import pytest

from lasforge.bitutils import (
    StreamingMedian,
    Summer,
    byte_sum,
    clamp,
    clear_bit,
    d2i,
    d2u,
    i2d,
    pack,
    u2d,
    unpack,
)


def test_clear_bit():
    assert clear_bit(0b1111, 2) == 0b1011
    assert clear_bit(0b1011, 2) == 0b1011


def test_clear_bit_negative_raises():
    with pytest.raises(ValueError):
        clear_bit(5, -1)


def test_clamp():
    assert clamp(300, 0, 255) == 255
    assert clamp(-4, 0, 255) == 0
    assert clamp(17, 0, 255) == 17


def test_clamp_bad_range():
    with pytest.raises(ValueError):
        clamp(1, 10, 0)


def test_double_bits_round_trip():
    for d in (0.0, 1.0, -2.5, 1e300, math.pi):
        assert u2d(d2u(d)) == d
        assert i2d(d2i(d)) == d


def test_one_point_zero_bits():
    assert d2u(1.0) == 0x3FF0000000000000


def test_negative_double_is_negative_signed_int():
    assert d2i(-1.0) < 0
    assert d2u(-1.0) == d2i(-1.0) + (1 << 64)


def test_pack_little_endian():
    assert pack(1, "u32") == b"\x01\x00\x00\x00"
    assert pack(0x0102, "u16") == b"\x02\x01"


@pytest.mark.parametrize(
    "kind,value",
    [("u16", 65535), ("i16", -2), ("u32", 123456789), ("i32", -7),
     ("u64", (1 << 64) - 1), ("i64", -(1 << 40)), ("f64", -3.25)],
)
def test_pack_unpack_round_trip(kind, value):
    assert unpack(pack(value, kind), kind) == value


def test_unpack_unknown_kind():
    with pytest.raises(ValueError):
        unpack(b"\0" * 8, "q7")


def test_unpack_short_data():
    with pytest.raises(ValueError):
        unpack(b"\0\0", "u32")


def test_pack_out_of_range():
    with pytest.raises(ValueError):
        pack(70000, "u16")


def test_byte_sum():
    assert byte_sum(b"\x01\x02\x03") == 6


def test_summer_value_and_count_reset():
    s = Summer()
    s.add_value(b"\x01\x02")
    s.add_bytes(b"\x04")
    assert s.value() == 7
    assert s.value() == 0
    assert s.count() == 1
    assert s.count() == 0


def test_median_starts_at_zero():
    m = StreamingMedian()
    assert m.get() == 0


def test_median_converges_on_repeated_value():
    m = StreamingMedian()
    for _ in range(10):
        m.add(7)
    assert m.get() == 7


def test_median_window_stays_sorted():
    rng = random.Random(3)
    m = StreamingMedian()
    for _ in range(500):
        m.add(rng.randint(-1000, 1000))
        assert m.values == sorted(m.values)
        assert m.get() == m.values[2]


def test_median_reset():
    m = StreamingMedian()
    for v in (9, 9, 9, 9):
        m.add(v)
    m.reset()
    assert m.values == [0, 0, 0, 0, 0]
    assert m.high is True