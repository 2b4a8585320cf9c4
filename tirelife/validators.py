#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 11:52:19
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Input validation for tire sets and their items.

Every check raises ValidationFailedError naming the offending field.
"""
# ========================================================
# IMPORTS
# ========================================================
from datetime import datetime
from numbers import Number
from dateutil import parser as dateparser
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.entities import (
    ITEM_REMOVED, TireCondition, TirePosition, TireSetStatus, TireType
)
from tirelife.errors import ValidationFailedError

# ========================================================
# GLOABALS
# ========================================================
VALID_TIRE_TYPES = [t.value for t in TireType]
VALID_STATUSES = [s.value for s in TireSetStatus]
VALID_POSITIONS = [p.value for p in TirePosition]
VALID_CONDITIONS = [c.value for c in TireCondition]

MAX_QUANTITY = 20
MAX_TREAD_MM = 30
MAX_ACCUMULATED_KM = 1_000_000


# ========================================================
# FUNCTIONS
# ========================================================
def is_number(v) -> bool:
    return isinstance(v, Number) and not isinstance(v, bool)


def _is_int(v) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _check_str(params, field, max_len, required=False):
    v = params.get(field)
    if v is None or v == "":
        if required:
            raise ValidationFailedError(f"{field} is required", field)
        return
    if not isinstance(v, str):
        raise ValidationFailedError(f"{field} should be a string", field)
    if len(v) > max_len:
        raise ValidationFailedError(
            f"{field} should not exceed {max_len} characters", field)


def _check_range(params, field, low, high, msg, integer=False):
    v = params.get(field)
    if v is None:
        return
    ok = _is_int(v) if integer else is_number(v)
    if not ok or v < low or v > high:
        raise ValidationFailedError(msg, field)


def validate_tire_set(params: dict, creating: bool) -> None:
    """
    Validate tire set fields. On create, vehicle_id, name and tire_type are
    required; on update every field is optional.
    """
    if creating and params.get("vehicle_id") is None:
        raise ValidationFailedError("Vehicle ID is required", "vehicle_id")

    _check_str(params, "name", 128, required=creating)
    _check_str(params, "tire_type", 32, required=creating)
    _check_str(params, "storage_location", 256)

    tire_type = params.get("tire_type")
    if tire_type and tire_type not in VALID_TIRE_TYPES:
        raise ValidationFailedError(
            f"Tire type must be one of: {', '.join(VALID_TIRE_TYPES)}",
            "tire_type")

    status = params.get("status")
    if status and status not in VALID_STATUSES:
        raise ValidationFailedError(
            f"Tire set status must be one of: {', '.join(VALID_STATUSES)}",
            "status")

    _check_range(params, "quantity", 1, MAX_QUANTITY,
                 f"Quantity must be between 1 and {MAX_QUANTITY}",
                 integer=True)
    _check_range(params, "mileage_warranty", 1, 500_000,
                 "Mileage warranty must be between 1 and 500,000")
    _check_range(params, "age_limit_years", 1, 20,
                 "Age limit must be between 1 and 20 years", integer=True)
    _check_range(params, "tread_limit_mm", 0.5, 10,
                 "Tread limit must be between 0.5 and 10 mm")

    if "items" in params and params["items"] is not None:
        validate_items(params["items"])


def validate_warranty_km(km) -> None:
    """Warranty after unit conversion: 1,000 .. 500,000 km."""
    if km is not None and not 1000 <= km <= 500_000:
        raise ValidationFailedError(
            "Mileage warranty must be between 1,000 and 500,000 km",
            "mileage_warranty")


def validate_items(items) -> None:
    if not isinstance(items, (list, tuple)):
        raise ValidationFailedError("Items must be a list", "items")
    seen = set()
    for i, item in enumerate(items):
        validate_item(item, i)
        item_id = item.get("id")
        if item_id:
            if item_id in seen:
                raise ValidationFailedError(
                    f"Item {item_id} is listed more than once", "items")
            seen.add(item_id)


def validate_item(item, index: int) -> None:
    if not isinstance(item, dict):
        raise ValidationFailedError(f"Item at index {index} is invalid",
                                    "items")

    def fail(msg):
        raise ValidationFailedError(f"Item at index {index}: {msg}", "items")

    if item.get("status") == ITEM_REMOVED:
        if not item.get("id"):
            fail("only existing items can be removed")
        return

    if not item.get("id"):
        if not item.get("brand"):
            fail("brand is required for new items")
        if not item.get("tire_size"):
            fail("tire size is required for new items")
        if item.get("quantity") is None:
            fail("quantity is required for new items")

    for field, max_len in (("brand", 128), ("model", 128),
                           ("tire_size", 32), ("dot_code", 16)):
        v = item.get(field)
        if v is not None and (not isinstance(v, str) or len(v) > max_len):
            fail(f"{field} should be a string of at most {max_len} "
                 "characters")

    if item.get("position") and item["position"] not in VALID_POSITIONS:
        fail(f"position must be one of: {', '.join(VALID_POSITIONS)}")
    if (item.get("tire_condition")
            and item["tire_condition"] not in VALID_CONDITIONS):
        fail(f"condition must be one of: {', '.join(VALID_CONDITIONS)}")

    q = item.get("quantity")
    if q is not None and (not _is_int(q) or not 1 <= q <= MAX_QUANTITY):
        fail(f"quantity must be an integer between 1 and {MAX_QUANTITY}")

    for field in ("tread_depth_initial", "tread_depth_current"):
        v = item.get(field)
        if v is not None and (not is_number(v) or not 0 <= v <= MAX_TREAD_MM):
            fail(f"{field} must be between 0 and {MAX_TREAD_MM} mm")

    acc = item.get("mileage_accumulated")
    if acc is not None:
        if item.get("id"):
            fail("accumulated mileage can only be set when creating "
                 "new items")
        if not is_number(acc) or not 0 <= acc <= MAX_ACCUMULATED_KM:
            fail("accumulated mileage must be between 0 and 1,000,000")

    measured = item.get("tread_depth_measured_at")
    if measured is not None and measured != "" and \
            not isinstance(measured, datetime):
        try:
            dateparser.isoparse(str(measured))
        except ValueError:
            fail("tread_depth_measured_at must be an ISO 8601 timestamp")
