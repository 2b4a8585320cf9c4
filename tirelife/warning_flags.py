#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 10:05:33
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Warning flags for tire set items and tire sets.

Flags are an IntFlag in code; only the storage column sees the integer.
"""
# ========================================================
# IMPORTS
# ========================================================
from datetime import datetime, timezone
from enum import IntFlag
from typing import Iterable, Optional
from dateutil.relativedelta import relativedelta
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife import config
from tirelife.dot_code import tire_age_years
from tirelife.entities import TireSetStatus
from tirelife.mileage import total_mileage_km


# ========================================================
# CLASSES
# ========================================================
class WarningFlag(IntFlag):
    NONE = 0
    AGE_WARNING = 1
    AGE_CRITICAL = 2
    MILEAGE_WARNING = 4
    MILEAGE_CRITICAL = 8
    TREAD_WARNING = 16
    TREAD_CRITICAL = 32
    # reserved: no hemisphere/season policy exists yet, never set
    SEASONAL_MISMATCH = 64
    STORAGE_LONG = 128
    TREAD_STALE = 256


ITEM_FLAGS = (WarningFlag.AGE_WARNING | WarningFlag.AGE_CRITICAL |
              WarningFlag.MILEAGE_WARNING | WarningFlag.MILEAGE_CRITICAL |
              WarningFlag.TREAD_WARNING | WarningFlag.TREAD_CRITICAL |
              WarningFlag.TREAD_STALE)


# ========================================================
# FUNCTIONS
# ========================================================
def flag_names(flags: int) -> list[str]:
    """Names of the bits set in ``flags``, lowest bit first."""
    flags = WarningFlag(flags or 0)
    return [f.name for f in WarningFlag if f and f in flags]


def _age_flags(item, limit_years, ratio, now) -> WarningFlag:
    age = tire_age_years(item.dot_code, now)
    if age is None:
        return WarningFlag.NONE
    if age >= limit_years:
        return WarningFlag.AGE_CRITICAL
    if age >= limit_years * ratio:
        return WarningFlag.AGE_WARNING
    return WarningFlag.NONE


def _mileage_flags(item, warranty_km, ratio, odometer_km) -> WarningFlag:
    total = total_mileage_km(item, odometer_km)
    if total >= warranty_km:
        return WarningFlag.MILEAGE_CRITICAL
    if total >= warranty_km * ratio:
        return WarningFlag.MILEAGE_WARNING
    return WarningFlag.NONE


def _tread_flags(item, limit_mm, multiplier, stale_months, now) -> WarningFlag:
    depth = item.tread_depth_current
    if depth is None:
        return WarningFlag.NONE

    flags = WarningFlag.NONE
    if depth <= limit_mm:
        flags |= WarningFlag.TREAD_CRITICAL
    elif depth <= limit_mm * multiplier:
        flags |= WarningFlag.TREAD_WARNING

    measured = item.tread_depth_measured_at
    # a reading without a timestamp cannot be trusted to be recent
    if measured is None or measured < now - relativedelta(months=stale_months):
        flags |= WarningFlag.TREAD_STALE
    return flags


def item_warning_flags(item, thresholds, current_odometer_km=None,
                       now: Optional[datetime] = None, *,
                       warning_ratio: float = None,
                       tread_warning_multiplier: float = None,
                       tread_stale_months: int = None) -> WarningFlag:
    """
    Compute the flags of one tire set item.

    Parameters
    ----------
    item : TireSetItem
        Anything with the item's dot_code, mileage and tread attributes.
    thresholds : Thresholds
        Effective limits of the parent set.
    current_odometer_km : float, optional
        Latest odometer of the vehicle, used for the live mileage stretch.
    now : datetime, optional
        Aware reference time, defaults to now (UTC).

    Returns
    -------
    WarningFlag
    """
    now = now or datetime.now(timezone.utc)
    ratio = config.WARNING_RATIO if warning_ratio is None else warning_ratio
    multiplier = (config.TREAD_WARNING_MULTIPLIER
                  if tread_warning_multiplier is None
                  else tread_warning_multiplier)
    stale_months = (config.TREAD_STALE_MONTHS if tread_stale_months is None
                    else tread_stale_months)

    return (_age_flags(item, thresholds.age_limit_years, ratio, now)
            | _mileage_flags(item, thresholds.mileage_warranty_km, ratio,
                             current_odometer_km)
            | _tread_flags(item, thresholds.tread_limit_mm, multiplier,
                           stale_months, now))


def set_warning_flags(tire_set, item_flags: Iterable[int],
                      now: Optional[datetime] = None, *,
                      storage_long_months: int = None) -> WarningFlag:
    """OR of the item flags plus the set level STORAGE_LONG flag."""
    now = now or datetime.now(timezone.utc)
    months = (config.STORAGE_LONG_MONTHS if storage_long_months is None
              else storage_long_months)

    flags = WarningFlag.NONE
    for f in item_flags:
        flags |= WarningFlag(f) & ITEM_FLAGS

    stored_at = tire_set.stored_at
    if (tire_set.status == TireSetStatus.STORED.value
            and stored_at is not None
            and stored_at < now - relativedelta(months=months)):
        flags |= WarningFlag.STORAGE_LONG
    return flags
