#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 14:02:13
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Tire Set Controller
===================

Lifecycle of tire sets: create, update, remove and swap, plus the scoped
reads. The controller is the only component callers talk to.

Responsibilities:
-----------------
- Keep at most one ACTIVE tire set per vehicle (callers must use swap).
- Run the mileage bookkeeping whenever a set is mounted or unmounted.
- Keep warning flags current after every mutation.
- Hand out plain dicts in the vehicle's display units.

Every mutation is one transaction under the cross-process write lock.

Author: https://github.com/tombo92
"""
# ========================================================
# IMPORTS
# ========================================================
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from sqlalchemy import or_
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife import config
from tirelife.db import session_scope
from tirelife.dot_code import parse_dot_code
from tirelife.entities import RequestContext, TireSetStatus
from tirelife.errors import (
    ForbiddenError, NotFoundError, ValidationFailedError
)
from tirelife.expenses import (
    create_tire_expense, expense_to_dict, link_expense_to_items
)
from tirelife.flag_job import FlagJobResult, compute_warning_flags
from tirelife.flag_job import refresh_set_flags
from tirelife.item_sync import live_items, soft_remove_items, sync_items
from tirelife.locking import WriteLock
from tirelife.mileage import mileage_since_install_km, swap_in, swap_out
from tirelife.mileage import total_mileage_km
from tirelife.models import AuditLog, TireSet, TireSetItem, Vehicle, utcnow
from tirelife.units import (
    from_metric_distance, from_metric_distance_rounded, to_metric_distance
)
from tirelife.validators import (
    is_number, validate_tire_set, validate_warranty_km
)
from tirelife.vehicles import (
    accessible_vehicle_ids, distance_unit_for, get_accessible_vehicle,
    get_user_profile, latest_odometer_km, latest_odometers_km
)
from tirelife.warning_flags import flag_names

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)

ACTIVE = TireSetStatus.ACTIVE.value
STORED = TireSetStatus.STORED.value
RETIRED = TireSetStatus.RETIRED.value

SET_FIELDS = ("name", "tire_type", "quantity", "notes", "storage_location",
              "age_limit_years", "tread_limit_mm")
# may be cleared with an explicit null
NULLABLE_SET_FIELDS = ("notes", "storage_location", "age_limit_years",
                       "tread_limit_mm")

MSG_ACTIVE_EXISTS = ("This vehicle already has an active tire set. Use the "
                     "swap feature to replace it, or save this set as stored.")
MSG_ODOMETER_REQUIRED = ("An odometer reading is required to track tire "
                         "mileage; no reading is known for this vehicle")


# ========================================================
# CLASSES
# ========================================================
@dataclass
class _Staged:
    """What one create/update carries from validation to post-processing."""
    vehicle: Vehicle
    distance_unit: str
    odometer_km: Optional[float]
    items: Optional[list] = None
    create_expense: bool = False
    expense_details: dict = field(default_factory=dict)


class TireSetController:
    """Lifecycle operations on tire sets."""

    def __init__(self, session_factory, lock_path: str = config.LOCK_PATH):
        self.session_factory = session_factory
        self._lock_path = lock_path

    # --------------------------------------------------------
    # Mutations
    # --------------------------------------------------------
    def create(self, ctx: RequestContext, params: dict) -> dict:
        """
        Create a tire set with its items and an optional purchase expense.

        Parameters
        ----------
        ctx : RequestContext
            The caller.
        params : dict
            ``vehicle_id``, ``name``, ``tire_type`` and optionally
            ``status`` (default active), ``quantity``, ``notes``,
            ``storage_location``, ``mileage_warranty`` (vehicle unit),
            ``age_limit_years``, ``tread_limit_mm``, ``items``,
            ``create_expense`` and ``expense_details``.

        Returns
        -------
        dict
            The stored set with its items, in display units.

        Raises
        ------
        ForbiddenError
            The caller is read-only.
        NotFoundError
            The vehicle is not accessible to the caller.
        ValidationFailedError
            Bad input, or another set is already active on the vehicle.
        """
        self._require_writer(ctx)
        params = params or {}
        validate_tire_set(params, creating=True)

        with WriteLock(self._lock_path), \
                session_scope(self.session_factory) as db:
            vehicle = self._vehicle(db, ctx, params["vehicle_id"])
            staged = self._stage(db, ctx, vehicle, params)
            status = params.get("status") or ACTIVE
            if status == ACTIVE:
                self._ensure_no_active(db, ctx, vehicle.id)

            now = utcnow()
            tire_set = TireSet(
                account_id=ctx.account_id,
                user_id=ctx.user_id,
                vehicle_id=vehicle.id,
                name=params["name"].strip(),
                tire_type=params["tire_type"],
                quantity=params.get("quantity") or 4,
                notes=params.get("notes"),
                status=status,
                installed_at=now if status == ACTIVE else None,
                stored_at=now if status == STORED else None,
                storage_location=params.get("storage_location"),
                age_limit_years=params.get("age_limit_years"),
                tread_limit_mm=params.get("tread_limit_mm"),
                warning_flags=0,
                created_by=ctx.user_id,
                updated_by=ctx.user_id,
                created_at=now,
                updated_at=now,
            )
            self._apply_warranty(tire_set, params, staged.distance_unit)
            db.add(tire_set)
            db.flush()

            install_km = staged.odometer_km if status == ACTIVE else None
            synced = sync_items(db, tire_set, ctx, staged.items,
                                install_km, staged.distance_unit, now)
            expense = self._attach_expense(
                db, ctx, staged, tire_set, synced.created_ids,
                config.EXPENSE_KIND_TIRE_REPLACEMENT)

            self._audit(db, ctx, "create", tire_set.id,
                        status=status, items=len(synced.created_ids))
            refresh_set_flags(db, tire_set, staged.odometer_km, now)
            db.flush()
            out = self._render(db, ctx, [tire_set])[0]
            out["expense"] = expense_to_dict(expense, staged.distance_unit)

        log.info("Tire set %s created for vehicle %s (%s)", out["id"],
                 out["vehicle_id"], status)
        return out

    def update(self, ctx: RequestContext, set_id, params: dict) -> dict:
        """
        Update a tire set and synchronize its items.

        Status changes keep the mileage bookkeeping consistent: leaving
        ACTIVE folds the driven distance into the items, entering ACTIVE
        stamps a new install marker. Both need an odometer reading. RETIRED
        is final.
        """
        self._require_writer(ctx)
        params = params or {}
        validate_tire_set(params, creating=False)

        with WriteLock(self._lock_path), \
                session_scope(self.session_factory) as db:
            tire_set = self._load_set(db, ctx, set_id)
            vehicle = self._vehicle(db, ctx, tire_set.vehicle_id)

            new_vehicle = params.get("vehicle_id")
            if new_vehicle is not None and new_vehicle != tire_set.vehicle_id:
                raise ValidationFailedError(
                    "A tire set cannot be moved to another vehicle",
                    "vehicle_id")

            old_status = tire_set.status
            new_status = params.get("status") or old_status
            if old_status == RETIRED and new_status != RETIRED:
                raise ValidationFailedError(
                    "A retired tire set cannot change its status", "status")
            if new_status == ACTIVE and old_status != ACTIVE:
                self._ensure_no_active(db, ctx, vehicle.id,
                                       exclude_id=tire_set.id)

            staged = self._stage(db, ctx, vehicle, params)
            moves_tires = (new_status != old_status
                           and ACTIVE in (old_status, new_status))
            if moves_tires and staged.odometer_km is None:
                raise ValidationFailedError(MSG_ODOMETER_REQUIRED, "odometer")
            now = utcnow()
            for name in SET_FIELDS:
                if params.get(name) is not None or \
                        (name in params and name in NULLABLE_SET_FIELDS):
                    setattr(tire_set, name, params[name])
            if params.get("name"):
                tire_set.name = params["name"].strip()
            if "mileage_warranty" in params:
                self._apply_warranty(tire_set, params, staged.distance_unit)

            if new_status != old_status:
                self._transition(db, ctx, tire_set, new_status,
                                 staged.odometer_km, now)
                db.flush()

            created_ids = []
            if staged.items is not None:
                install_km = (staged.odometer_km
                              if tire_set.status == ACTIVE else None)
                synced = sync_items(db, tire_set, ctx, staged.items,
                                    install_km, staged.distance_unit, now)
                created_ids = synced.created_ids
            expense = self._attach_expense(
                db, ctx, staged, tire_set, created_ids,
                config.EXPENSE_KIND_TIRE_REPLACEMENT)

            tire_set.updated_by = ctx.user_id
            tire_set.updated_at = now
            self._audit(db, ctx, "update", tire_set.id,
                        status=tire_set.status, previous=old_status)
            refresh_set_flags(db, tire_set, staged.odometer_km, now)
            db.flush()
            out = self._render(db, ctx, [tire_set])[0]
            out["expense"] = expense_to_dict(expense, staged.distance_unit)

        log.info("Tire set %s updated", set_id)
        return out

    def remove(self, ctx: RequestContext, set_id) -> dict:
        """Soft-delete a tire set together with all of its items."""
        self._require_writer(ctx)
        with WriteLock(self._lock_path), \
                session_scope(self.session_factory) as db:
            tire_set = self._load_set(db, ctx, set_id)
            out = self._render(db, ctx, [tire_set])[0]
            self._soft_remove(db, ctx, [tire_set.id])
            self._audit(db, ctx, "remove", tire_set.id)
        log.info("Tire set %s removed", set_id)
        return out

    def remove_many(self, ctx: RequestContext, set_ids) -> list:
        """
        Soft-delete several tire sets. Ids the caller cannot see are
        skipped. Returns the removed sets.
        """
        self._require_writer(ctx)
        set_ids = list(set_ids or [])
        if not set_ids:
            return []
        with WriteLock(self._lock_path), \
                session_scope(self.session_factory) as db:
            sets = self._visible_sets(db, ctx, set_ids)
            out = self._render(db, ctx, sets)
            ids = [s.id for s in sets]
            self._soft_remove(db, ctx, ids)
            for set_id in ids:
                self._audit(db, ctx, "remove", set_id)
        skipped = len(set_ids) - len(out)
        log.info("Removed %d tire set(s), skipped %d", len(out), skipped)
        return out

    def swap(self, ctx: RequestContext, vehicle_id, install_tire_set_id,
             odometer=None, storage_location=None, create_expense=False,
             expense_details=None) -> dict:
        """
        Mount a stored tire set and put the active one(s) into storage.

        Parameters
        ----------
        vehicle_id : int
            Vehicle to swap on.
        install_tire_set_id : int
            The STORED set to mount.
        odometer : float, optional
            Reading in the vehicle's unit; falls back to
            ``expense_details["odometer"]`` and then to the vehicle's
            latest known reading.
        storage_location : str, optional
            Where the outgoing set goes; keeps its old location if omitted.
        create_expense : bool
            Record a seasonal tire service expense for the swap.

        Returns
        -------
        dict
            ``installed_set``, ``stored_set`` (None when nothing was
            mounted) and ``expense``.
        """
        self._require_writer(ctx)
        expense_details = dict(expense_details or {})

        with WriteLock(self._lock_path), \
                session_scope(self.session_factory) as db:
            vehicle = self._vehicle(db, ctx, vehicle_id)
            incoming = self._swap_target(db, ctx, vehicle,
                                         install_tire_set_id)
            unit = distance_unit_for(vehicle, get_user_profile(db, ctx))
            odometer_km = self._swap_odometer(
                db, vehicle, unit, odometer, expense_details)

            now = utcnow()
            outgoing = self._active_sets(db, ctx, vehicle.id)
            if len(outgoing) > 1:
                log.warning("Vehicle %s has %d active tire sets, storing "
                            "all of them", vehicle.id, len(outgoing))
            for tire_set in outgoing:
                grown = swap_out(live_items(db, tire_set.id, ctx.account_id),
                                 odometer_km, ctx.user_id)
                log.debug("Swap-out of set %s: %d item(s) gained mileage",
                          tire_set.id, grown)
                tire_set.status = STORED
                tire_set.stored_at = now
                if storage_location:
                    tire_set.storage_location = storage_location
                tire_set.updated_by = ctx.user_id
            # outgoing sets leave ACTIVE before the incoming one enters it
            db.flush()

            incoming.status = ACTIVE
            incoming.installed_at = now
            incoming.stored_at = None
            incoming.storage_location = None
            incoming.updated_by = ctx.user_id
            swap_in(live_items(db, incoming.id, ctx.account_id),
                    odometer_km, ctx.user_id)
            db.flush()

            staged = _Staged(vehicle=vehicle, distance_unit=unit,
                             odometer_km=odometer_km,
                             create_expense=bool(create_expense),
                             expense_details=expense_details)
            if staged.create_expense and \
                    expense_details.get("odometer") is None:
                expense_details["odometer"] = from_metric_distance(
                    odometer_km, unit)
            expense = self._attach_expense(
                db, ctx, staged, incoming, [],
                config.EXPENSE_KIND_SEASONAL_TIRE_SERVICE)

            for tire_set in outgoing + [incoming]:
                refresh_set_flags(db, tire_set, odometer_km, now)
            self._audit(db, ctx, "swap", incoming.id,
                        vehicle_id=vehicle.id, odometer_km=odometer_km,
                        stored=[s.id for s in outgoing])
            db.flush()

            rendered = self._render(db, ctx, [incoming] + outgoing[:1])
            result = {
                "installed_set": rendered[0],
                "stored_set": rendered[1] if len(rendered) > 1 else None,
                "expense": expense_to_dict(expense, unit),
            }

        log.info("Swapped tire set %s onto vehicle %s at %.0f km",
                 incoming.id, vehicle.id, odometer_km)
        return result

    def compute_warning_flags(self, batch_size: Optional[int] = None
                              ) -> FlagJobResult:
        return compute_warning_flags(self.session_factory, batch_size)

    # --------------------------------------------------------
    # Reads
    # --------------------------------------------------------
    def get(self, ctx: RequestContext, set_id) -> dict:
        with session_scope(self.session_factory) as db:
            tire_set = self._load_set(db, ctx, set_id)
            return self._render(db, ctx, [tire_set])[0]

    def get_many(self, ctx: RequestContext, set_ids) -> list:
        """Sets in the order asked for; invisible ids are left out."""
        set_ids = list(set_ids or [])
        if not set_ids:
            return []
        with session_scope(self.session_factory) as db:
            sets = {s.id: s for s in self._visible_sets(db, ctx, set_ids)}
            ordered = [sets[i] for i in dict.fromkeys(set_ids) if i in sets]
            return self._render(db, ctx, ordered)

    def list_sets(self, ctx: RequestContext,
                  filters: Optional[dict] = None) -> list:
        """
        Tire sets of the caller's account, newest change first.

        Parameters
        ----------
        filters : dict, optional
            ``vehicle_id``, ``tire_type``, ``status`` (value or list),
            ``search`` (name or notes), ``has_warnings`` (bool) and
            ``warning_flags`` (any bit of the mask set).
        """
        filters = filters or {}
        with session_scope(self.session_factory) as db:
            vehicle_ids = accessible_vehicle_ids(db, ctx)
            q = db.query(TireSet) \
                  .filter(TireSet.account_id == ctx.account_id,
                          TireSet.removed_at.is_(None),
                          TireSet.vehicle_id.in_(list(vehicle_ids)))

            if filters.get("vehicle_id") is not None:
                q = q.filter(TireSet.vehicle_id == filters["vehicle_id"])
            if filters.get("tire_type"):
                q = q.filter(TireSet.tire_type == filters["tire_type"])
            status = filters.get("status")
            if status:
                if isinstance(status, (list, tuple, set)):
                    q = q.filter(TireSet.status.in_(list(status)))
                else:
                    q = q.filter(TireSet.status == status)
            search = (filters.get("search") or "").strip()
            if search:
                like = f"%{search}%"
                q = q.filter(or_(TireSet.name.ilike(like),
                                 TireSet.notes.ilike(like)))
            if filters.get("has_warnings") is not None:
                if filters["has_warnings"]:
                    q = q.filter(TireSet.warning_flags != 0)
                else:
                    q = q.filter(TireSet.warning_flags == 0)
            if filters.get("warning_flags"):
                mask = int(filters["warning_flags"])
                q = q.filter(TireSet.warning_flags.op("&")(mask) != 0)

            sets = q.order_by(TireSet.updated_at.desc(),
                              TireSet.id.desc()).all()
            return self._render(db, ctx, sets)

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------
    @staticmethod
    def _require_writer(ctx: RequestContext):
        if ctx.read_only:
            raise ForbiddenError(
                "Your role does not allow changing tire sets")

    @staticmethod
    def _vehicle(db, ctx: RequestContext, vehicle_id) -> Vehicle:
        vehicle = get_accessible_vehicle(db, ctx, vehicle_id)
        if vehicle is None:
            raise NotFoundError(f"Vehicle {vehicle_id} not found",
                                "vehicle_id")
        return vehicle

    @staticmethod
    def _load_set(db, ctx: RequestContext, set_id) -> TireSet:
        tire_set = db.query(TireSet) \
                     .filter(TireSet.id == set_id,
                             TireSet.account_id == ctx.account_id,
                             TireSet.removed_at.is_(None)).first()
        if tire_set is None or not accessible_vehicle_ids(
                db, ctx, [tire_set.vehicle_id]):
            raise NotFoundError(f"Tire set {set_id} not found", "id")
        return tire_set

    @staticmethod
    def _visible_sets(db, ctx: RequestContext, set_ids) -> list:
        sets = db.query(TireSet) \
                 .filter(TireSet.id.in_(list(set_ids)),
                         TireSet.account_id == ctx.account_id,
                         TireSet.removed_at.is_(None)) \
                 .order_by(TireSet.id).all()
        allowed = accessible_vehicle_ids(db, ctx,
                                         {s.vehicle_id for s in sets})
        return [s for s in sets if s.vehicle_id in allowed]

    @staticmethod
    def _active_sets(db, ctx: RequestContext, vehicle_id,
                     exclude_id=None) -> list:
        q = db.query(TireSet) \
              .filter(TireSet.account_id == ctx.account_id,
                      TireSet.vehicle_id == vehicle_id,
                      TireSet.status == ACTIVE,
                      TireSet.removed_at.is_(None))
        if exclude_id is not None:
            q = q.filter(TireSet.id != exclude_id)
        return q.order_by(TireSet.id).all()

    def _ensure_no_active(self, db, ctx, vehicle_id, exclude_id=None):
        if self._active_sets(db, ctx, vehicle_id, exclude_id):
            raise ValidationFailedError(MSG_ACTIVE_EXISTS, "status")

    @staticmethod
    def _stage(db, ctx, vehicle, params) -> _Staged:
        unit = distance_unit_for(vehicle, get_user_profile(db, ctx))
        details = dict(params.get("expense_details") or {})
        odometer = params.get("odometer")
        if odometer is not None:
            if not is_number(odometer) or odometer < 0:
                raise ValidationFailedError(
                    "Odometer must be a positive number", "odometer")
            odometer_km = to_metric_distance(odometer, unit)
        else:
            odometer_km = latest_odometer_km(db, vehicle.id)
        return _Staged(
            vehicle=vehicle,
            distance_unit=unit,
            odometer_km=odometer_km,
            items=params.get("items"),
            create_expense=bool(params.get("create_expense")),
            expense_details=details,
        )

    @staticmethod
    def _apply_warranty(tire_set, params, unit):
        warranty = params.get("mileage_warranty")
        if warranty is None:
            tire_set.mileage_warranty_km = None
            return
        km = to_metric_distance(warranty, unit)
        validate_warranty_km(km)
        tire_set.mileage_warranty_km = int(round(km))

    @staticmethod
    def _swap_target(db, ctx, vehicle, set_id) -> TireSet:
        incoming = db.query(TireSet) \
                     .filter(TireSet.id == set_id,
                             TireSet.account_id == ctx.account_id,
                             TireSet.removed_at.is_(None)).first()
        if incoming is None:
            raise NotFoundError(f"Tire set {set_id} not found",
                                "install_tire_set_id")
        if incoming.vehicle_id != vehicle.id:
            raise ValidationFailedError(
                "The tire set does not belong to this vehicle",
                "install_tire_set_id")
        if incoming.status == ACTIVE:
            raise ValidationFailedError(
                "The tire set is already installed", "install_tire_set_id")
        if incoming.status == RETIRED:
            raise ValidationFailedError(
                "A retired tire set cannot be installed",
                "install_tire_set_id")
        return incoming

    @staticmethod
    def _swap_odometer(db, vehicle, unit, odometer, details) -> float:
        raw = odometer if odometer is not None else details.get("odometer")
        if raw is not None:
            if not is_number(raw) or raw < 0:
                raise ValidationFailedError(
                    "Odometer must be a positive number", "odometer")
            return to_metric_distance(raw, unit)
        km = latest_odometer_km(db, vehicle.id)
        if km is None:
            raise ValidationFailedError(MSG_ODOMETER_REQUIRED, "odometer")
        return km

    @staticmethod
    def _transition(db, ctx, tire_set, new_status, odometer_km, now):
        items = live_items(db, tire_set.id, ctx.account_id)
        if tire_set.status == ACTIVE:
            swap_out(items, odometer_km, ctx.user_id)
        if new_status == ACTIVE:
            swap_in(items, odometer_km, ctx.user_id)
            tire_set.installed_at = now
            tire_set.stored_at = None
        elif new_status == STORED:
            tire_set.stored_at = now
        log.debug("Tire set %s: %s -> %s", tire_set.id, tire_set.status,
                  new_status)
        tire_set.status = new_status

    @staticmethod
    def _soft_remove(db, ctx, set_ids):
        now = utcnow()
        item_ids = [r[0] for r in db.query(TireSetItem.id).filter(
            TireSetItem.tire_set_id.in_(set_ids),
            TireSetItem.account_id == ctx.account_id,
            TireSetItem.removed_at.is_(None)).all()]
        soft_remove_items(db, item_ids, ctx, now)
        db.query(TireSet) \
          .filter(TireSet.id.in_(set_ids),
                  TireSet.account_id == ctx.account_id) \
          .update({TireSet.removed_at: now,
                   TireSet.updated_by: ctx.user_id,
                   TireSet.updated_at: now},
                  synchronize_session="fetch")

    @staticmethod
    def _attach_expense(db, ctx, staged: _Staged, tire_set, item_ids,
                        kind_id):
        """
        Record the expense of a mutation in a SAVEPOINT. A failure here is
        logged and rolled back; the tire set change itself stands.
        """
        if not staged.create_expense:
            return None
        try:
            with db.begin_nested():
                expense = create_tire_expense(
                    db, ctx, staged.vehicle, tire_set.id,
                    staged.expense_details, kind_id, staged.distance_unit)
                link_expense_to_items(db, item_ids, expense.id, ctx)
        except Exception:
            log.exception("Expense for tire set %s could not be created",
                          tire_set.id)
            return None
        return expense

    @staticmethod
    def _audit(db, ctx, action, tire_set_id, **details):
        db.add(AuditLog(account_id=ctx.account_id, user_id=ctx.user_id,
                        action=action, tire_set_id=tire_set_id,
                        details=json.dumps(details) if details else None))

    # --------------------------------------------------------
    # Output
    # --------------------------------------------------------
    def _render(self, db, ctx, sets) -> list:
        """Sets as dicts with their live items, in display units."""
        if not sets:
            return []
        set_ids = [s.id for s in sets]
        vehicle_ids = {s.vehicle_id for s in sets}
        vehicles = {v.id: v for v in db.query(Vehicle)
                    .filter(Vehicle.id.in_(list(vehicle_ids))).all()}
        odometers = latest_odometers_km(db, vehicle_ids)
        profile = get_user_profile(db, ctx)

        items_by_set = {i: [] for i in set_ids}
        for item in db.query(TireSetItem) \
                      .filter(TireSetItem.tire_set_id.in_(set_ids),
                              TireSetItem.account_id == ctx.account_id,
                              TireSetItem.removed_at.is_(None)) \
                      .order_by(TireSetItem.id).all():
            items_by_set[item.tire_set_id].append(item)

        out = []
        for tire_set in sets:
            unit = distance_unit_for(vehicles.get(tire_set.vehicle_id),
                                     profile)
            odometer = odometers.get(tire_set.vehicle_id)
            d = set_to_dict(tire_set, unit)
            d["items"] = [item_to_dict(i, unit, odometer)
                          for i in items_by_set[tire_set.id]]
            out.append(d)
        return out


# ========================================================
# FUNCTIONS
# ========================================================
def _iso(value: Optional[datetime]):
    return value.isoformat() if value else None


def set_to_dict(tire_set: TireSet, unit: str) -> dict:
    return {
        "id": tire_set.id,
        "vehicle_id": tire_set.vehicle_id,
        "user_id": tire_set.user_id,
        "name": tire_set.name,
        "tire_type": tire_set.tire_type,
        "quantity": tire_set.quantity,
        "notes": tire_set.notes,
        "status": tire_set.status,
        "installed_at": _iso(tire_set.installed_at),
        "stored_at": _iso(tire_set.stored_at),
        "storage_location": tire_set.storage_location,
        "mileage_warranty": from_metric_distance_rounded(
            tire_set.mileage_warranty_km, unit),
        "age_limit_years": tire_set.age_limit_years,
        "tread_limit_mm": tire_set.tread_limit_mm,
        "warning_flags": int(tire_set.warning_flags or 0),
        "warnings": flag_names(tire_set.warning_flags),
        "distance_unit": unit,
        "created_at": _iso(tire_set.created_at),
        "updated_at": _iso(tire_set.updated_at),
    }


def item_to_dict(item: TireSetItem, unit: str,
                 current_odometer_km: Optional[float] = None) -> dict:
    made = parse_dot_code(item.dot_code)
    return {
        "id": item.id,
        "tire_set_id": item.tire_set_id,
        "expense_id": item.expense_id,
        "brand": item.brand,
        "model": item.model,
        "tire_size": item.tire_size,
        "position": item.position,
        "quantity": item.quantity,
        "tire_condition": item.tire_condition,
        "dot_code": item.dot_code,
        "manufactured_on": made.isoformat() if made else None,
        "is_registered": bool(item.is_registered),
        "notes": item.notes,
        "tread_depth_initial": item.tread_depth_initial,
        "tread_depth_current": item.tread_depth_current,
        "tread_depth_measured_at": _iso(item.tread_depth_measured_at),
        "mileage_accumulated": from_metric_distance_rounded(
            item.mileage_accumulated_km, unit),
        "odometer_at_install": from_metric_distance_rounded(
            item.odometer_at_install_km, unit),
        "mileage_since_install": from_metric_distance_rounded(
            mileage_since_install_km(item, current_odometer_km), unit),
        "mileage_total": from_metric_distance_rounded(
            total_mileage_km(item, current_odometer_km), unit),
        "warning_flags": int(item.warning_flags or 0),
        "warnings": flag_names(item.warning_flags),
    }
