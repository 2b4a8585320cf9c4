"""
Unit tests for tirelife.validators
"""

# =========================
# Imports
# =========================
import pytest
from tirelife.errors import ValidationFailedError
from tirelife.validators import (
    validate_item, validate_items, validate_tire_set, validate_warranty_km
)


# -------------------------
# Tests: Tire set
# -------------------------
def test_create_requires_vehicle():
    with pytest.raises(ValidationFailedError) as e:
        validate_tire_set({"name": "Set", "tire_type": "winter"},
                          creating=True)
    assert e.value.field == "vehicle_id"


def test_update_fields_are_optional():
    validate_tire_set({"notes": "rotated"}, creating=False)


def test_unknown_status():
    with pytest.raises(ValidationFailedError) as e:
        validate_tire_set({"status": "lost"}, creating=False)
    assert e.value.field == "status"


def test_quantity_must_be_integer():
    with pytest.raises(ValidationFailedError):
        validate_tire_set({"quantity": 2.5}, creating=False)
    with pytest.raises(ValidationFailedError):
        validate_tire_set({"quantity": True}, creating=False)


@pytest.mark.parametrize("km", [999, 500_001])
def test_warranty_range_in_km(km):
    with pytest.raises(ValidationFailedError):
        validate_warranty_km(km)


def test_warranty_none_is_fine():
    validate_warranty_km(None)


# -------------------------
# Tests: Items
# -------------------------
def test_new_item_needs_brand_size_and_quantity():
    with pytest.raises(ValidationFailedError) as e:
        validate_item({"brand": "Conti", "quantity": 4}, 0)
    assert "tire size" in e.value.message


def test_only_existing_items_can_be_removed():
    validate_item({"id": 3, "status": "removed"}, 0)
    with pytest.raises(ValidationFailedError):
        validate_item({"status": "removed"}, 0)


def test_accumulated_mileage_only_on_create():
    validate_item({"brand": "Conti", "tire_size": "195/65R15",
                   "quantity": 4, "mileage_accumulated": 12000}, 0)
    with pytest.raises(ValidationFailedError):
        validate_item({"id": 3, "mileage_accumulated": 12000}, 0)


@pytest.mark.parametrize("item", [
    {"id": 1, "position": "left"},
    {"id": 1, "tire_condition": "worn"},
    {"id": 1, "tread_depth_current": 31},
    {"id": 1, "quantity": 21},
    {"id": 1, "dot_code": "1" * 17},
    {"id": 1, "tread_depth_measured_at": "yesterday"},
])
def test_invalid_item_fields(item):
    with pytest.raises(ValidationFailedError):
        validate_item(item, 0)


def test_item_listed_twice_is_rejected():
    with pytest.raises(ValidationFailedError) as e:
        validate_items([{"id": 3, "status": "removed"},
                        {"id": 3, "notes": "keep"}])
    assert e.value.field == "items"


def test_measured_at_accepts_iso_timestamps():
    validate_item({"id": 1, "tread_depth_current": 6.5,
                   "tread_depth_measured_at": "2025-03-01T10:00:00Z"}, 0)
