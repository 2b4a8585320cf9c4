#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 08:31:17
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Domain value types shared by models, validators and the controller.
"""
# ========================================================
# IMPORTS
# ========================================================
from dataclasses import dataclass
from enum import Enum
from typing import Optional
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife import config


# ========================================================
# ENUMS
# ========================================================
class TireSetStatus(str, Enum):
    """Business state of a tire set."""
    ACTIVE = "active"
    STORED = "stored"
    RETIRED = "retired"


class TireType(str, Enum):
    """Valid tire types."""
    SUMMER = "summer"
    WINTER = "winter"
    ALL_SEASON = "all_season"
    ALL_WEATHER = "all_weather"
    PERFORMANCE = "performance"
    OFF_ROAD = "off_road"


class TirePosition(str, Enum):
    ALL = "all"
    FRONT = "front"
    REAR = "rear"


class TireCondition(str, Enum):
    """Condition of a tire when it was acquired."""
    NEW = "new"
    USED = "used"
    CAME_WITH_VEHICLE = "came_with_vehicle"


class UserRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    DRIVER = "driver"
    VIEWER = "viewer"


# marker a client puts on an existing item to drop it from the set
ITEM_REMOVED = "removed"


# ========================================================
# CLASSES
# ========================================================
@dataclass(frozen=True)
class RequestContext:
    """Who is calling: resolved by the (external) auth layer."""
    account_id: int
    user_id: int
    role: UserRole = UserRole.OWNER

    @property
    def read_only(self) -> bool:
        return self.role == UserRole.VIEWER


@dataclass(frozen=True)
class Thresholds:
    """Effective warning limits of one tire set, all metric."""
    mileage_warranty_km: float
    age_limit_years: float
    tread_limit_mm: float

    @classmethod
    def for_set(cls, tire_set, defaults: Optional["Thresholds"] = None):
        """Fill unset thresholds of ``tire_set`` from ``defaults``."""
        d = defaults or cls(config.DEFAULT_MILEAGE_WARRANTY_KM,
                            config.DEFAULT_AGE_LIMIT_YEARS,
                            config.DEFAULT_TREAD_LIMIT_MM)
        return cls(
            mileage_warranty_km=(tire_set.mileage_warranty_km
                                 if tire_set.mileage_warranty_km is not None
                                 else d.mileage_warranty_km),
            age_limit_years=(tire_set.age_limit_years
                             if tire_set.age_limit_years is not None
                             else d.age_limit_years),
            tread_limit_mm=(tire_set.tread_limit_mm
                            if tire_set.tread_limit_mm is not None
                            else d.tread_limit_mm),
        )
