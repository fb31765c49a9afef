"""Dimensions carried by each LAS point data record format."""

from __future__ import annotations

from enum import Enum


class Dimension(Enum):
    """Point dimensions that appear in LAS point formats."""

    X = "X"
    Y = "Y"
    Z = "Z"
    Intensity = "Intensity"
    ReturnNumber = "ReturnNumber"
    NumberOfReturns = "NumberOfReturns"
    ScanDirectionFlag = "ScanDirectionFlag"
    EdgeOfFlightLine = "EdgeOfFlightLine"
    Classification = "Classification"
    ScanAngleRank = "ScanAngleRank"
    UserData = "UserData"
    PointSourceId = "PointSourceId"
    GpsTime = "GpsTime"
    Red = "Red"
    Green = "Green"
    Blue = "Blue"
    ScanChannel = "ScanChannel"
    ClassFlags = "ClassFlags"
    Infrared = "Infrared"


D = Dimension

_BASE = (
    D.X, D.Y, D.Z, D.Intensity, D.ReturnNumber, D.NumberOfReturns,
    D.ScanDirectionFlag, D.EdgeOfFlightLine, D.Classification, D.ScanAngleRank,
    D.UserData, D.PointSourceId,
)
_RGB = (D.Red, D.Green, D.Blue)
_BASE14 = _BASE + (D.GpsTime, D.ScanChannel, D.ClassFlags)

_PDRF_DIMS: tuple[tuple[Dimension, ...], ...] = (
    _BASE,
    _BASE + (D.GpsTime,),
    _BASE + _RGB,
    _BASE + (D.GpsTime,) + _RGB,
    (),
    (),
    _BASE14,
    _BASE14 + _RGB,
    _BASE14 + _RGB + (D.Infrared,),
    (),
    (),
)

_EXTENT14 = (
    D.X, D.Y, D.Z, D.Intensity, D.ReturnNumber, D.NumberOfReturns, D.ScanChannel,
    D.ScanDirectionFlag, D.EdgeOfFlightLine, D.Classification, D.UserData,
    D.ScanAngleRank, D.PointSourceId, D.GpsTime,
)

_EXTENT_DIMS: tuple[tuple[Dimension, ...], ...] = (
    (), (), (), (), (), (),
    _EXTENT14,
    _EXTENT14 + _RGB,
    _EXTENT14 + _RGB + (D.Infrared,),
    (),
    (),
)


def _index(pdrf: int) -> int:
    return pdrf if 0 <= pdrf <= 10 else 10


def pdrf_dims(pdrf: int) -> tuple[Dimension, ...]:
    """Dimensions of a point data record format; empty for unsupported formats."""
    return _PDRF_DIMS[_index(pdrf)]


def extent_dims(pdrf: int) -> tuple[Dimension, ...]:
    """Dimensions in the order of the extended (1.4) layout; empty before format 6."""
    return _EXTENT_DIMS[_index(pdrf)]