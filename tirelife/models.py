#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 08:44:09
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Models
"""
# ========================================================
# IMPORTS
# ========================================================
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base
from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text,
    TypeDecorator, text
)
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.entities import TireCondition, TirePosition, TireSetStatus
from tirelife.warning_flags import WarningFlag


# ========================================================
# GLOABALS
# ========================================================
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ========================================================
# COLUMN TYPES
# ========================================================
class UTCDateTime(TypeDecorator):
    """
    Stores naive UTC, hands back aware UTC (SQLite drops the tzinfo).
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class FlagColumn(TypeDecorator):
    """WarningFlag in Python, plain integer bitmask in the table."""
    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return int(value or 0)

    def process_result_value(self, value, dialect):
        return WarningFlag(value or 0)


# ========================================================
# CLASSES (COLLABORATOR MODELS)
# ========================================================
class Vehicle(Base):
    """
    Vehicle Class (owned by an account)
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, nullable=False, index=True)
    label = Column(String(200), nullable=False)
    # distance unit the vehicle's odometer is read in: 'km' or 'mi'
    mileage_in = Column(String(8), nullable=False, default="km")
    removed_at = Column(UTCDateTime, nullable=True)


class VehicleStats(Base):
    """
    Summary row per vehicle, maintained by the expense/fuel side.
    """
    __tablename__ = "vehicle_stats"

    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), primary_key=True)
    latest_odometer_km = Column(Float, nullable=True)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow,
                        nullable=False)


class UserProfile(Base):
    __tablename__ = "user_profiles"

    user_id = Column(Integer, primary_key=True)
    account_id = Column(Integer, nullable=False, index=True)
    distance_unit = Column(String(8), nullable=False, default="km")
    volume_unit = Column(String(8), nullable=False, default="l")
    home_currency = Column(String(3), nullable=True)


class UserVehicle(Base):
    """
    Vehicles a DRIVER may access.
    """
    __tablename__ = "user_vehicles"

    user_id = Column(Integer, primary_key=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), primary_key=True)


class Expense(Base):
    """
    Expense Class (tire purchase, installation or swap)
    """
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False,
                        index=True)
    tire_set_id = Column(Integer, ForeignKey("tire_sets.id"), nullable=True,
                         index=True)
    kind_id = Column(Integer, nullable=False)
    odometer_km = Column(Float, nullable=True)
    when_done = Column(UTCDateTime, nullable=False, default=utcnow)
    location = Column(String(256), nullable=True)
    where_done = Column(String(256), nullable=True)
    cost_work = Column(Float, nullable=False, default=0)
    cost_parts = Column(Float, nullable=False, default=0)
    subtotal = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    fees = Column(Float, nullable=False, default=0)
    total_price = Column(Float, nullable=False, default=0)
    paid_in_currency = Column(String(3), nullable=False)
    home_currency = Column(String(3), nullable=False)
    total_price_in_hc = Column(Float, nullable=False, default=0)
    short_note = Column(String(256), nullable=True)
    comments = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)


# ========================================================
# CLASSES (TIRE MODELS)
# ========================================================
class TireSet(Base):
    """
    TireSet Class
    """
    __tablename__ = "tire_sets"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False,
                        index=True)

    name = Column(String(128), nullable=False)
    tire_type = Column(String(32), nullable=False)
    quantity = Column(Integer, nullable=False, default=4)
    notes = Column(Text, nullable=True)

    status = Column(String(16), nullable=False,
                    default=TireSetStatus.ACTIVE.value, index=True)
    installed_at = Column(UTCDateTime, nullable=True)
    stored_at = Column(UTCDateTime, nullable=True)
    storage_location = Column(String(256), nullable=True)

    # null = use the global default from config
    mileage_warranty_km = Column(Integer, nullable=True)
    age_limit_years = Column(Integer, nullable=True)
    tread_limit_mm = Column(Float, nullable=True)

    warning_flags = Column(FlagColumn, nullable=False, default=0, index=True)

    created_by = Column(Integer, nullable=True)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_by = Column(Integer, nullable=True)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow,
                        nullable=False)
    removed_at = Column(UTCDateTime, nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("uq_tire_sets_one_active_per_vehicle", "vehicle_id",
              unique=True,
              sqlite_where=text(
                  "status = 'active' AND removed_at IS NULL"),
              postgresql_where=text(
                  "status = 'active' AND removed_at IS NULL")),
    )


class TireSetItem(Base):
    """
    TireSetItem Class (one tire, or a group of identical tires, in a set)
    """
    __tablename__ = "tire_set_items"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, nullable=False, index=True)
    tire_set_id = Column(Integer, ForeignKey("tire_sets.id"), nullable=False,
                         index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=True,
                        index=True)

    brand = Column(String(128), nullable=False)
    model = Column(String(128), nullable=True)
    tire_size = Column(String(32), nullable=False)
    position = Column(String(16), nullable=False,
                      default=TirePosition.ALL.value)
    quantity = Column(Integer, nullable=False)
    tire_condition = Column(String(32), nullable=False,
                            default=TireCondition.NEW.value)
    dot_code = Column(String(16), nullable=True)
    is_registered = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    tread_depth_initial = Column(Float, nullable=True)
    tread_depth_current = Column(Float, nullable=True)
    tread_depth_measured_at = Column(UTCDateTime, nullable=True)

    mileage_accumulated_km = Column(Float, nullable=False, default=0)
    odometer_at_install_km = Column(Float, nullable=True)

    warning_flags = Column(FlagColumn, nullable=False, default=0, index=True)

    created_by = Column(Integer, nullable=True)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_by = Column(Integer, nullable=True)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow,
                        nullable=False)
    removed_at = Column(UTCDateTime, nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class AuditLog(Base):
    """
    AuditLog Class
    """
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=True)
    # 'create', 'update', 'remove', 'swap'
    action = Column(String(50), nullable=False)
    tire_set_id = Column(Integer, nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
