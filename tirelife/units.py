#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 09:31:48
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Unit conversions

Everything is stored metric (km, liters). These helpers translate between
the stored value and the unit a vehicle or user works in. ``None`` passes
through unchanged so optional fields need no special casing.
"""
# ========================================================
# IMPORTS
# ========================================================
from enum import Enum
from typing import Optional

# ========================================================
# GLOABALS
# ========================================================
MILES_TO_KM = 1.609344
US_GALLONS_TO_LITERS = 3.785411784
UK_GALLONS_TO_LITERS = 4.54609


class DistanceUnit(str, Enum):
    KM = "km"
    MI = "mi"


class VolumeUnit(str, Enum):
    LITERS = "l"
    US_GALLONS = "gal-us"
    UK_GALLONS = "gal-uk"


_VOLUME_FACTORS = {
    VolumeUnit.US_GALLONS.value: US_GALLONS_TO_LITERS,
    VolumeUnit.UK_GALLONS.value: UK_GALLONS_TO_LITERS,
}


# ========================================================
# FUNCTIONS
# ========================================================
def to_metric_distance(value: Optional[float], unit: str) -> Optional[float]:
    """Distance in ``unit`` ('km' or 'mi') -> kilometers."""
    if value is None:
        return None
    if unit == DistanceUnit.MI.value:
        return value * MILES_TO_KM
    return value


def from_metric_distance(value: Optional[float], unit: str) -> Optional[float]:
    """Kilometers -> distance in ``unit``."""
    if value is None:
        return None
    if unit == DistanceUnit.MI.value:
        return value / MILES_TO_KM
    return value


def from_metric_distance_rounded(value: Optional[float],
                                 unit: str) -> Optional[int]:
    """
    Like from_metric_distance, rounded to a whole number.

    For display only, never feed the result back into storage.
    """
    converted = from_metric_distance(value, unit)
    if converted is None:
        return None
    return int(round(converted))


def to_metric_volume(value: Optional[float], unit: str) -> Optional[float]:
    """Volume in ``unit`` ('l', 'gal-us', 'gal-uk') -> liters."""
    if value is None:
        return None
    return value * _VOLUME_FACTORS.get(unit, 1.0)


def from_metric_volume(value: Optional[float], unit: str) -> Optional[float]:
    """Liters -> volume in ``unit``."""
    if value is None:
        return None
    return value / _VOLUME_FACTORS.get(unit, 1.0)


def is_distance_unit(unit: Optional[str]) -> bool:
    return unit in {u.value for u in DistanceUnit}
