#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 12:30:57
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Item synchronization

Reconciles the item list a client submits for a tire set with the stored
items:
- with ``id`` and ``status == "removed"``: soft-delete
- with ``id``: update
- without ``id``: create
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from dateutil import parser as dateparser
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.entities import (
    ITEM_REMOVED, RequestContext, TireCondition, TirePosition
)
from tirelife.errors import NotFoundError
from tirelife.mileage import tracks_install_marker
from tirelife.models import TireSetItem, utcnow
from tirelife.units import to_metric_distance
from tirelife.warning_flags import WarningFlag

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "brand", "model", "tire_size", "position", "quantity", "tire_condition",
    "dot_code", "is_registered", "notes", "tread_depth_initial",
    "tread_depth_current", "expense_id",
)


# ========================================================
# CLASSES
# ========================================================
@dataclass
class SyncResult:
    created_ids: list = field(default_factory=list)
    updated_ids: list = field(default_factory=list)
    removed_ids: list = field(default_factory=list)


# ========================================================
# FUNCTIONS
# ========================================================
def partition_items(input_items):
    """
    Split submitted items into (remove, update, create) in one pass.
    """
    to_remove, to_update, to_create = [], [], []
    for item in input_items:
        if item.get("id"):
            if item.get("status") == ITEM_REMOVED:
                to_remove.append(item)
            else:
                to_update.append(item)
        else:
            to_create.append(item)
    return to_remove, to_update, to_create


def live_items(db, tire_set_id, account_id) -> list:
    return db.query(TireSetItem) \
             .filter(TireSetItem.tire_set_id == tire_set_id,
                     TireSetItem.account_id == account_id,
                     TireSetItem.removed_at.is_(None)) \
             .order_by(TireSetItem.id).all()


def soft_remove_items(db, item_ids, ctx: RequestContext,
                      now: Optional[datetime] = None) -> int:
    if not item_ids:
        return 0
    now = now or utcnow()
    return db.query(TireSetItem) \
             .filter(TireSetItem.id.in_(list(item_ids)),
                     TireSetItem.account_id == ctx.account_id,
                     TireSetItem.removed_at.is_(None)) \
             .update({TireSetItem.removed_at: now,
                      TireSetItem.updated_by: ctx.user_id,
                      TireSetItem.updated_at: now},
                     synchronize_session="fetch")


def _timestamp(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        value = dateparser.isoparse(str(value))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _apply_update(item: TireSetItem, data: dict, install_odometer_km, now):
    old_tread = item.tread_depth_current
    for name in UPDATABLE_FIELDS:
        if name in data:
            setattr(item, name, data[name])
    if "tread_depth_measured_at" in data:
        item.tread_depth_measured_at = _timestamp(
            data["tread_depth_measured_at"])

    if ("tread_depth_current" in data
            and "tread_depth_measured_at" not in data
            and data["tread_depth_current"] is not None
            and data["tread_depth_current"] != old_tread):
        item.tread_depth_measured_at = now

    if not tracks_install_marker(item):
        item.odometer_at_install_km = None
    elif item.odometer_at_install_km is None and \
            install_odometer_km is not None:
        item.odometer_at_install_km = install_odometer_km


def _new_item(tire_set, data: dict, ctx: RequestContext, install_odometer_km,
              distance_unit: str, now) -> TireSetItem:
    condition = data.get("tire_condition") or TireCondition.NEW.value
    tread_current = data.get("tread_depth_current")
    measured = (_timestamp(data.get("tread_depth_measured_at")) or now
                if tread_current is not None else None)
    accumulated = to_metric_distance(data.get("mileage_accumulated"),
                                     distance_unit)
    item = TireSetItem(
        account_id=ctx.account_id,
        tire_set_id=tire_set.id,
        brand=data.get("brand"),
        model=data.get("model") or None,
        tire_size=data.get("tire_size"),
        position=data.get("position") or TirePosition.ALL.value,
        quantity=data.get("quantity"),
        tire_condition=condition,
        dot_code=data.get("dot_code"),
        is_registered=bool(data.get("is_registered", False)),
        notes=data.get("notes"),
        expense_id=data.get("expense_id"),
        tread_depth_initial=data.get("tread_depth_initial"),
        tread_depth_current=tread_current,
        tread_depth_measured_at=measured,
        mileage_accumulated_km=accumulated or 0.0,
        warning_flags=WarningFlag.NONE,
        created_by=ctx.user_id,
        created_at=now,
    )
    item.odometer_at_install_km = (install_odometer_km
                                   if tracks_install_marker(item) else None)
    return item


def sync_items(db, tire_set, ctx: RequestContext, input_items,
               install_odometer_km: Optional[float] = None,
               distance_unit: str = "km",
               now: Optional[datetime] = None) -> SyncResult:
    """
    Apply the submitted item list to ``tire_set``.

    Parameters
    ----------
    install_odometer_km : float, optional
        Install marker for new items; pass None unless the set is ACTIVE.
    distance_unit : str
        Unit of ``mileage_accumulated`` in the input.

    Returns
    -------
    SyncResult
        Ids created, updated and removed by this call.
    """
    now = now or utcnow()
    result = SyncResult()
    input_items = input_items or []
    log.debug("Syncing %d item(s) for tire set %s", len(input_items),
              tire_set.id)

    to_remove, to_update, to_create = partition_items(input_items)
    existing = {i.id: i for i in live_items(db, tire_set.id, ctx.account_id)}

    if to_remove:
        ids = [d["id"] for d in to_remove if d["id"] in existing]
        missing = [d["id"] for d in to_remove if d["id"] not in existing]
        if missing:
            raise NotFoundError(
                f"Tire set item(s) {missing} not found in tire set "
                f"{tire_set.id}", "items")
        soft_remove_items(db, ids, ctx, now)
        result.removed_ids = ids

    for data in to_update:
        item = existing.get(data["id"])
        if item is None:
            raise NotFoundError(
                f"Tire set item {data['id']} not found in tire set "
                f"{tire_set.id}", "items")
        _apply_update(item, data, install_odometer_km, now)
        item.updated_by = ctx.user_id
        result.updated_ids.append(item.id)

    if to_create:
        new_items = [_new_item(tire_set, d, ctx, install_odometer_km,
                               distance_unit, now) for d in to_create]
        db.add_all(new_items)
        db.flush()
        result.created_ids = [i.id for i in new_items]

    log.debug("Sync complete for tire set %s: %d created, %d updated, "
              "%d removed", tire_set.id, len(result.created_ids),
              len(result.updated_ids), len(result.removed_ids))
    return result
