#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 11:20:36
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Expense records for tire purchases, installations and swaps.
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from datetime import datetime
from typing import Optional
from dateutil import parser as dateparser
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.config import DEFAULT_CURRENCY
from tirelife.entities import RequestContext
from tirelife.models import Expense, TireSetItem, utcnow
from tirelife.units import from_metric_distance, to_metric_distance
from tirelife.vehicles import get_user_profile

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)


# ========================================================
# FUNCTIONS
# ========================================================
def _num(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _when(value) -> datetime:
    if value is None or value == "":
        return utcnow()
    if isinstance(value, datetime):
        return value
    return dateparser.isoparse(str(value))


def create_tire_expense(db, ctx: RequestContext, vehicle, tire_set_id,
                        details: Optional[dict], default_kind_id: int,
                        distance_unit: str = "km") -> Expense:
    """
    Create an expense linked to a tire set and return it (flushed).

    Parameters
    ----------
    details : dict
        Cost fields (cost_work, cost_parts, tax, fees, subtotal,
        total_price), when_done, location, where_done, odometer (in
        ``distance_unit``), paid_in_currency, kind_id, short_note, comments.
    default_kind_id : int
        Expense kind when ``details`` names none.
    """
    details = details or {}

    currency = details.get("paid_in_currency")
    if not currency:
        profile = get_user_profile(db, ctx)
        currency = (profile.home_currency if profile and profile.home_currency
                    else DEFAULT_CURRENCY)
        log.debug("No currency in expense details, using %s", currency)

    cost_work = _num(details.get("cost_work"))
    cost_parts = _num(details.get("cost_parts"))
    tax = _num(details.get("tax"))
    fees = _num(details.get("fees"))
    subtotal = (_num(details["subtotal"])
                if details.get("subtotal") is not None
                else cost_work + cost_parts)
    total = (_num(details["total_price"])
             if details.get("total_price") is not None
             else subtotal + tax + fees)

    odometer = details.get("odometer")
    e = Expense(
        account_id=ctx.account_id,
        user_id=ctx.user_id,
        vehicle_id=vehicle.id,
        tire_set_id=tire_set_id,
        kind_id=details.get("kind_id") or default_kind_id,
        odometer_km=(to_metric_distance(_num(odometer), distance_unit)
                     if odometer is not None else None),
        when_done=_when(details.get("when_done")),
        location=details.get("location"),
        where_done=details.get("where_done"),
        cost_work=cost_work,
        cost_parts=cost_parts,
        subtotal=subtotal,
        tax=tax,
        fees=fees,
        total_price=total,
        paid_in_currency=currency,
        home_currency=currency,
        total_price_in_hc=_num(details.get("total_price_in_hc"), total),
        short_note=details.get("short_note"),
        comments=details.get("comments"),
    )
    db.add(e)
    db.flush()
    log.debug("Created tire expense %s for tire set %s", e.id, tire_set_id)
    return e


def link_expense_to_items(db, item_ids, expense_id, ctx: RequestContext):
    """Point the given items at the expense that paid for them."""
    if not item_ids:
        return 0
    n = db.query(TireSetItem) \
          .filter(TireSetItem.id.in_(list(item_ids)),
                  TireSetItem.account_id == ctx.account_id) \
          .update({TireSetItem.expense_id: expense_id,
                   TireSetItem.updated_by: ctx.user_id,
                   TireSetItem.updated_at: utcnow()},
                  synchronize_session="fetch")
    log.debug("Linked expense %s to %d item(s)", expense_id, n)
    return n


def expense_to_dict(e: Optional[Expense], distance_unit: str = "km"):
    if e is None:
        return None
    return {
        "id": e.id,
        "vehicle_id": e.vehicle_id,
        "tire_set_id": e.tire_set_id,
        "kind_id": e.kind_id,
        "odometer": from_metric_distance(e.odometer_km, distance_unit),
        "when_done": e.when_done.isoformat() if e.when_done else None,
        "location": e.location,
        "where_done": e.where_done,
        "cost_work": e.cost_work,
        "cost_parts": e.cost_parts,
        "subtotal": e.subtotal,
        "tax": e.tax,
        "fees": e.fees,
        "total_price": e.total_price,
        "paid_in_currency": e.paid_in_currency,
        "short_note": e.short_note,
        "comments": e.comments,
    }
