"""
Unit tests for tirelife.item_sync
=================================

Runs against the in-memory database; the parent set is created through the
controller so it carries real items.
"""

# =========================
# Imports
# =========================
import pytest
from conftest import tire_item
from tirelife.db import session_scope
from tirelife.errors import NotFoundError
from tirelife.item_sync import partition_items, sync_items
from tirelife.models import TireSet, TireSetItem


def load(db, set_id):
    return db.get(TireSet, set_id)


def items_of(db, set_id):
    return {i.id: i for i in db.query(TireSetItem)
            .filter(TireSetItem.tire_set_id == set_id).all()}


# -------------------------
# Tests: Partition
# -------------------------
def test_partition_is_disjoint():
    submitted = [
        {"id": 1, "status": "removed"},
        {"id": 2, "status": "removed"},
        {"id": 3, "brand": "Pirelli"},
        {"brand": "Conti", "tire_size": "205/55R16", "quantity": 4},
        {"id": None, "brand": "Nokian", "tire_size": "205/55R16",
         "quantity": 4},
    ]
    remove, update, create = partition_items(submitted)
    assert [i["id"] for i in remove] == [1, 2]
    assert [i["id"] for i in update] == [3]
    assert len(create) == 2


# -------------------------
# Tests: Sync
# -------------------------
def test_sync_counts_match_partition(session_factory, owner, new_set):
    created = new_set(items=[tire_item(), tire_item(), tire_item()])
    ids = [i["id"] for i in created["items"]]

    with session_scope(session_factory) as db:
        result = sync_items(db, load(db, created["id"]), owner, [
            {"id": ids[0], "status": "removed"},
            {"id": ids[1], "brand": "Pirelli"},
            tire_item(brand="Conti"),
            tire_item(brand="Nokian"),
        ], install_odometer_km=1000)

    assert result.removed_ids == [ids[0]]
    assert result.updated_ids == [ids[1]]
    assert len(result.created_ids) == 2

    with session_scope(session_factory) as db:
        items = items_of(db, created["id"])
        assert items[ids[0]].removed_at is not None
        assert items[ids[1]].brand == "Pirelli"
        assert items[ids[2]].removed_at is None
        assert len(items) == 5


def test_new_items_get_defaults(session_factory, owner, new_set):
    created = new_set(status="stored", items=[])
    with session_scope(session_factory) as db:
        result = sync_items(db, load(db, created["id"]), owner,
                            [tire_item(tread_depth_current=8.0)])
        item = db.get(TireSetItem, result.created_ids[0])
        assert item.position == "all"
        assert item.tire_condition == "new"
        assert item.mileage_accumulated_km == 0
        assert item.odometer_at_install_km is None
        assert item.tread_depth_measured_at is not None


def test_new_item_without_tread_has_no_measurement(session_factory, owner,
                                                   new_set):
    created = new_set(status="stored", items=[])
    with session_scope(session_factory) as db:
        result = sync_items(db, load(db, created["id"]), owner, [tire_item()])
        item = db.get(TireSetItem, result.created_ids[0])
        assert item.tread_depth_measured_at is None


def test_accumulated_mileage_is_converted(session_factory, owner, new_set):
    created = new_set(status="stored", items=[])
    with session_scope(session_factory) as db:
        result = sync_items(db, load(db, created["id"]), owner,
                            [tire_item(mileage_accumulated=100)],
                            distance_unit="mi")
        item = db.get(TireSetItem, result.created_ids[0])
        assert item.mileage_accumulated_km == pytest.approx(160.9344)


def test_update_cannot_touch_protected_fields(session_factory, owner,
                                              new_set):
    created = new_set()
    item_id = created["items"][0]["id"]
    with session_scope(session_factory) as db:
        sync_items(db, load(db, created["id"]), owner, [{
            "id": item_id, "mileage_accumulated_km": 99999,
            "tire_set_id": 999, "account_id": 2, "notes": "rotated",
        }])
    with session_scope(session_factory) as db:
        item = db.get(TireSetItem, item_id)
        assert item.notes == "rotated"
        assert item.mileage_accumulated_km == 0
        assert item.tire_set_id == created["id"]
        assert item.account_id == 1


def test_came_with_vehicle_clears_marker(session_factory, owner, new_set):
    created = new_set()
    item_id = created["items"][0]["id"]
    assert created["items"][0]["odometer_at_install"] == 1000
    with session_scope(session_factory) as db:
        sync_items(db, load(db, created["id"]), owner, [
            {"id": item_id, "tire_condition": "came_with_vehicle"}],
            install_odometer_km=1000)
    with session_scope(session_factory) as db:
        assert db.get(TireSetItem, item_id).odometer_at_install_km is None


def test_changed_tread_stamps_measurement(session_factory, owner, new_set):
    created = new_set()
    item_id = created["items"][0]["id"]
    with session_scope(session_factory) as db:
        sync_items(db, load(db, created["id"]), owner, [
            {"id": item_id, "tread_depth_current": 6.5}])
    with session_scope(session_factory) as db:
        item = db.get(TireSetItem, item_id)
        assert item.tread_depth_current == 6.5
        assert item.tread_depth_measured_at is not None


def test_unknown_item_id(session_factory, owner, new_set):
    created = new_set()
    with pytest.raises(NotFoundError):
        with session_scope(session_factory) as db:
            sync_items(db, load(db, created["id"]), owner,
                       [{"id": 9999, "brand": "Ghost"}])
