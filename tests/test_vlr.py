import io
import struct

import pytest

from lasforge.vlr import (
    CopcInfoVlr,
    EbField,
    EbVlr,
    EvlrHeader,
    LazItem,
    LazVlr,
    Vlr,
    VlrHeader,
    VlrIndexRecord,
    WktVlr,
)


def test_vlr_header_wire_layout():
    h = VlrHeader(0, "LASF_Spec", 4, 192, "")
    d = h.data()
    assert len(d) == 54
    assert d[0:2] == b"\0\0"
    assert d[2:18] == b"LASF_Spec".ljust(16, b"\0")
    assert d[18:20] == struct.pack("<H", 4)
    assert d[20:22] == struct.pack("<H", 192)
    assert d[22:] == bytes(32)


def test_vlr_header_roundtrip_via_stream():
    h = VlrHeader(3, "laszip encoded", 22204, 52, "lazperf variant")
    buf = io.BytesIO()
    h.write(buf)
    buf.seek(0)
    assert VlrHeader.read(buf) == h
    assert VlrHeader.from_bytes(h.data()) == h


def test_vlr_header_short_stream():
    with pytest.raises(EOFError):
        VlrHeader.read(io.BytesIO(b"\0" * 10))


def test_evlr_header_roundtrip_large_length():
    h = EvlrHeader(0, "copc", 1, 2**40 + 5, "COPC info VLR")
    d = h.data()
    assert len(d) == 60
    assert d[20:28] == struct.pack("<Q", 2**40 + 5)
    back = EvlrHeader.read(io.BytesIO(d))
    assert back == h


def test_index_record_from_header():
    h = EvlrHeader(0, "LASF_Projection", 2112, 1000, "wkt")
    rec = VlrIndexRecord.from_header(h, 375)
    assert rec == VlrIndexRecord("LASF_Projection", 2112, 1000, "wkt", 375)


def test_vlr_is_abstract():
    with pytest.raises(TypeError):
        Vlr()


def test_laz_vlr_format0():
    v = LazVlr.for_format(0, 0, 50000)
    assert v.compressor == 2
    assert (v.ver_major, v.ver_minor, v.revision) == (3, 4, 3)
    assert v.items == [LazItem(6, 20, 2)]
    assert v.size() == 34 + 6
    assert v.num_points == 2**64 - 1
    assert v.valid()


def test_laz_vlr_format3_with_extra_bytes():
    v = LazVlr.for_format(3, 5, 50000)
    assert [i.type for i in v.items] == [6, 7, 8, 0]
    assert v.items[-1] == LazItem(0, 5, 2)


def test_laz_vlr_point14_formats():
    v7 = LazVlr.for_format(7, 2, 1000)
    assert v7.compressor == 3
    assert v7.items == [LazItem(10, 30, 3), LazItem(11, 6, 3), LazItem(14, 2, 3)]
    v8 = LazVlr.for_format(8, 0, 1000)
    assert v8.items == [LazItem(10, 30, 3), LazItem(12, 8, 3)]


def test_laz_vlr_default_not_valid():
    assert not LazVlr().valid()
    assert LazVlr().size() == 34


def test_laz_vlr_roundtrip():
    v = LazVlr.for_format(1, 3, 50000)
    d = v.data()
    assert len(d) == v.size()
    assert LazVlr.from_bytes(d) == v
    assert LazVlr.read(io.BytesIO(d + b"trailing")) == v


def test_laz_vlr_read_truncated_items():
    d = LazVlr.for_format(2, 0, 50000).data()
    with pytest.raises(EOFError):
        LazVlr.read(io.BytesIO(d[:-3]))


def test_laz_vlr_headers():
    v = LazVlr.for_format(6, 0, 50000)
    h = v.header()
    assert (h.user_id, h.record_id, h.description) == (
        "laszip encoded", 22204, "lazperf variant")
    assert h.data_length == v.size()
    assert v.eheader().data_length == v.size()
    assert v.eheader().record_id == 22204


def test_eb_field_defaults():
    f = EbField()
    assert f.data_type == 1
    assert f.scale == [0.0, 0.0, 0.0]


def test_eb_vlr_add_field_and_roundtrip():
    v = EbVlr()
    v.add_field()
    v.add_field()
    v.add_field(EbField(data_type=9, name="intensity2", scale=[0.5, 1.0, 2.0],
                        description="extra"))
    assert [f.name for f in v.items[:2]] == ["FIELD_0", "FIELD_1"]
    assert v.size() == 3 * 192
    d = v.data()
    assert len(d) == v.size()
    back = EbVlr.from_bytes(d)
    assert back == v
    assert EbVlr.read(io.BytesIO(d), len(d)) == v


def test_eb_vlr_ignores_partial_trailing_field():
    v = EbVlr([EbField(name="a")])
    back = EbVlr.from_bytes(v.data() + b"\0" * 100)
    assert len(back.items) == 1


def test_eb_vlr_bad_array_length():
    v = EbVlr([EbField(minval=[1.0])])
    with pytest.raises(ValueError):
        v.data()


def test_eb_vlr_headers():
    v = EbVlr([EbField()])
    h = v.header()
    assert (h.user_id, h.record_id, h.data_length) == ("LASF_Spec", 4, 192)
    assert v.eheader().data_length == 192


def test_wkt_vlr_roundtrip_and_header():
    text = 'GEOGCS["WGS 84"]'
    v = WktVlr(text)
    assert v.size() == len(text)
    assert WktVlr.read(io.BytesIO(v.data()), v.size()) == v
    h = v.header()
    assert (h.user_id, h.record_id, h.data_length) == (
        "LASF_Projection", 2112, len(text))


def test_wkt_vlr_header_length_truncated_but_eheader_full():
    v = WktVlr("x" * 70000)
    assert v.eheader().data_length == 70000
    assert v.header().data_length == 70000 & 0xFFFF


def test_copc_info_roundtrip():
    v = CopcInfoVlr(1.5, -2.5, 3.0, 100.0, 0.25, 123456789, 42, 10.0, 20.0)
    v.reserved[3] = 7
    d = v.data()
    assert len(d) == 160 == v.size()
    assert CopcInfoVlr.from_bytes(d) == v
    assert CopcInfoVlr.read(io.BytesIO(d)) == v
    assert d[40:48] == struct.pack("<Q", 123456789)


def test_copc_info_headers():
    v = CopcInfoVlr()
    h = v.header()
    assert (h.user_id, h.record_id, h.data_length, h.description) == (
        "copc", 1, 160, "COPC info VLR")
    assert v.eheader().data_length == 160


def test_copc_info_write_to_stream():
    v = CopcInfoVlr(spacing=2.0)
    buf = io.BytesIO()
    v.write(buf)
    assert buf.getvalue() == v.data()
    with pytest.raises(EOFError):
        CopcInfoVlr.read(io.BytesIO(buf.getvalue()[:100]))