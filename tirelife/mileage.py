#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 10:41:12
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Mileage accounting for tire set items.

An item keeps a frozen ``mileage_accumulated_km`` (all past install periods)
and a live ``odometer_at_install_km`` marker while it is mounted. Ordinary
odometer updates cost nothing; the bookkeeping happens at swap time only.
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from typing import Iterable, Optional
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.entities import TireCondition

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)


# ========================================================
# FUNCTIONS
# ========================================================
def tracks_install_marker(item) -> bool:
    """Tires that came with the vehicle never get an install marker."""
    return item.tire_condition != TireCondition.CAME_WITH_VEHICLE.value


def mileage_since_install_km(item,
                             current_odometer_km: Optional[float]) -> float:
    """Distance of the current mounted period, 0 when not mounted."""
    marker = item.odometer_at_install_km
    if marker is None or current_odometer_km is None:
        return 0.0
    return max(current_odometer_km - marker, 0.0)


def total_mileage_km(item, current_odometer_km: Optional[float]) -> float:
    """
    Frozen accumulated distance plus the live stretch since install.
    """
    return ((item.mileage_accumulated_km or 0.0)
            + mileage_since_install_km(item, current_odometer_km))


def swap_out(items: Iterable, odometer_km: Optional[float],
             user_id=None) -> int:
    """
    Fold the distance since install into the accumulated total.

    The marker is cleared on every item, even when no valid delta exists,
    so no stale marker survives into storage. Returns the number of items
    whose accumulated mileage grew.
    """
    grown = 0
    for item in items:
        marker = item.odometer_at_install_km
        if (marker is not None and marker > 0 and odometer_km is not None
                and odometer_km > marker):
            item.mileage_accumulated_km = ((item.mileage_accumulated_km or 0)
                                           + (odometer_km - marker))
            grown += 1
        elif marker is not None:
            log.debug("Item %s: no positive delta (install %s, swap %s)",
                      item.id, marker, odometer_km)
        item.odometer_at_install_km = None
        item.updated_by = user_id
    return grown


def swap_in(items: Iterable, odometer_km: Optional[float],
            user_id=None) -> int:
    """Stamp the install marker on every trackable item. Returns the count."""
    stamped = 0
    for item in items:
        if tracks_install_marker(item) and odometer_km is not None:
            item.odometer_at_install_km = odometer_km
            stamped += 1
        else:
            item.odometer_at_install_km = None
        item.updated_by = user_id
    return stamped
