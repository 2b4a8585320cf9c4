#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 10:58:47
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Vehicle and user preference lookups
"""
# ========================================================
# IMPORTS
# ========================================================
from typing import Iterable, Optional
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.entities import RequestContext, UserRole
from tirelife.models import UserProfile, UserVehicle, Vehicle, VehicleStats
from tirelife.units import DistanceUnit, is_distance_unit


# ========================================================
# FUNCTIONS
# ========================================================
def get_accessible_vehicle(db, ctx: RequestContext,
                           vehicle_id) -> Optional[Vehicle]:
    """
    The vehicle if it belongs to the caller's account, is not removed and,
    for drivers, is assigned to the caller. Otherwise None.
    """
    if vehicle_id is None:
        return None
    v = db.get(Vehicle, vehicle_id)
    if v is None or v.account_id != ctx.account_id or v.removed_at:
        return None
    if ctx.role == UserRole.DRIVER and vehicle_id not in \
            accessible_vehicle_ids(db, ctx, [vehicle_id]):
        return None
    return v


def accessible_vehicle_ids(db, ctx: RequestContext,
                           vehicle_ids: Optional[Iterable] = None) -> set:
    """Subset of ``vehicle_ids`` (or all account vehicles) the caller sees."""
    q = db.query(Vehicle.id).filter(Vehicle.account_id == ctx.account_id,
                                    Vehicle.removed_at.is_(None))
    if vehicle_ids is not None:
        q = q.filter(Vehicle.id.in_(list(vehicle_ids)))
    if ctx.role == UserRole.DRIVER:
        q = q.join(UserVehicle, UserVehicle.vehicle_id == Vehicle.id) \
             .filter(UserVehicle.user_id == ctx.user_id)
    return {r[0] for r in q.all()}


def latest_odometer_km(db, vehicle_id) -> Optional[float]:
    stats = db.get(VehicleStats, vehicle_id)
    return stats.latest_odometer_km if stats else None


def latest_odometers_km(db, vehicle_ids: Iterable) -> dict:
    ids = list(vehicle_ids)
    if not ids:
        return {}
    rows = db.query(VehicleStats.vehicle_id, VehicleStats.latest_odometer_km) \
             .filter(VehicleStats.vehicle_id.in_(ids)).all()
    return {vid: km for vid, km in rows}


def get_user_profile(db, ctx: RequestContext) -> Optional[UserProfile]:
    p = db.get(UserProfile, ctx.user_id)
    if p is None or p.account_id != ctx.account_id:
        return None
    return p


def distance_unit_for(vehicle: Vehicle,
                      profile: Optional[UserProfile] = None) -> str:
    """
    The vehicle's own unit wins; the user's preference is the fallback.
    """
    if vehicle is not None and is_distance_unit(vehicle.mileage_in):
        return vehicle.mileage_in
    if profile is not None and is_distance_unit(profile.distance_unit):
        return profile.distance_unit
    return DistanceUnit.KM.value
