import pytest

from lasforge.las import Dimension, extent_dims, pdrf_dims


def test_format_zero_has_twelve_dims():
    dims = pdrf_dims(0)
    assert len(dims) == 12
    assert dims[:3] == (Dimension.X, Dimension.Y, Dimension.Z)
    assert dims[-1] is Dimension.PointSourceId


def test_format_one_adds_gps_time():
    assert pdrf_dims(1) == pdrf_dims(0) + (Dimension.GpsTime,)


def test_format_three_has_gps_and_color():
    dims = pdrf_dims(3)
    assert dims[-4:] == (Dimension.GpsTime, Dimension.Red, Dimension.Green, Dimension.Blue)


def test_format_eight_ends_with_infrared():
    assert pdrf_dims(8)[-1] is Dimension.Infrared
    assert pdrf_dims(8)[:-1] == pdrf_dims(7)


@pytest.mark.parametrize("pdrf", [4, 5, 9, 10, -1, 11, 100])
def test_unsupported_formats_are_empty(pdrf):
    assert pdrf_dims(pdrf) == ()
    assert extent_dims(pdrf) == ()


@pytest.mark.parametrize("pdrf", [0, 1, 2, 3])
def test_extent_dims_empty_before_format_six(pdrf):
    assert extent_dims(pdrf) == ()


@pytest.mark.parametrize("pdrf", [6, 7, 8])
def test_extent_dims_same_set_as_pdrf_except_class_flags(pdrf):
    assert set(extent_dims(pdrf)) == set(pdrf_dims(pdrf)) - {Dimension.ClassFlags}


def test_extent_order_puts_scan_channel_after_returns():
    dims = extent_dims(6)
    assert dims.index(Dimension.ScanChannel) == dims.index(Dimension.NumberOfReturns) + 1


def test_no_duplicates():
    for pdrf in range(11):
        assert len(set(pdrf_dims(pdrf))) == len(pdrf_dims(pdrf))