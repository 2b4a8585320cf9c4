#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 13:25:48
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Warning flags job

Recomputes and persists the warning flags of every item and set of every
account that has ACTIVE or STORED tire sets. Values are written only when
they changed, so a second run without new data writes nothing.

Run once with ``python -m tirelife.flag_job``; ``run.py`` schedules it.
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife import config
from tirelife.db import (
    init_db, make_engine, make_session_factory, session_scope
)
from tirelife.entities import Thresholds, TireSetStatus
from tirelife.item_sync import live_items
from tirelife.log import setup_logging
from tirelife.models import TireSet, utcnow
from tirelife.vehicles import latest_odometers_km
from tirelife.warning_flags import item_warning_flags, set_warning_flags

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = config.FLAG_JOB_MAX_REPORTED_ERRORS
FLAGGED_STATUSES = (TireSetStatus.ACTIVE.value, TireSetStatus.STORED.value)


# ========================================================
# CLASSES
# ========================================================
@dataclass
class FlagJobResult:
    accounts_processed: int = 0
    sets_processed: int = 0
    sets_updated: int = 0
    items_processed: int = 0
    items_updated: int = 0
    errors: int = 0
    error_messages: list = field(default_factory=list)

    def add(self, other: "FlagJobResult") -> None:
        self.accounts_processed += other.accounts_processed
        self.sets_processed += other.sets_processed
        self.sets_updated += other.sets_updated
        self.items_processed += other.items_processed
        self.items_updated += other.items_updated

    def record_error(self, message: str) -> None:
        self.errors += 1
        if len(self.error_messages) < MAX_REPORTED_ERRORS:
            self.error_messages.append(message)

    def to_dict(self) -> dict:
        return asdict(self)


# ========================================================
# FUNCTIONS
# ========================================================
def refresh_set_flags(db, tire_set, current_odometer_km=None,
                      now: Optional[datetime] = None,
                      items: Optional[list] = None) -> FlagJobResult:
    """
    Recompute the flags of one set and its live items.

    Only changed values are assigned, so an unchanged set produces no
    UPDATE. Returns the counts for this set.
    """
    now = now or utcnow()
    tally = FlagJobResult(sets_processed=1)
    thresholds = Thresholds.for_set(tire_set)
    if items is None:
        items = live_items(db, tire_set.id, tire_set.account_id)

    item_flags = []
    for item in items:
        flags = item_warning_flags(item, thresholds, current_odometer_km, now)
        tally.items_processed += 1
        if item.warning_flags != flags:
            item.warning_flags = flags
            tally.items_updated += 1
        item_flags.append(flags)

    flags = set_warning_flags(tire_set, item_flags, now)
    if tire_set.warning_flags != flags:
        tire_set.warning_flags = flags
        tally.sets_updated = 1
    return tally


def _account_page(session_factory, after_id, batch_size: int) -> list:
    """Next ``batch_size`` account ids with flaggable sets (keyset paging)."""
    with session_scope(session_factory) as db:
        q = db.query(TireSet.account_id) \
              .filter(TireSet.removed_at.is_(None),
                      TireSet.status.in_(FLAGGED_STATUSES))
        if after_id is not None:
            q = q.filter(TireSet.account_id > after_id)
        rows = q.distinct().order_by(TireSet.account_id) \
                .limit(batch_size).all()
    return [r[0] for r in rows]


def process_account(db, account_id, now: Optional[datetime] = None
                    ) -> FlagJobResult:
    now = now or utcnow()
    tally = FlagJobResult(accounts_processed=1)
    sets = db.query(TireSet) \
             .filter(TireSet.account_id == account_id,
                     TireSet.removed_at.is_(None),
                     TireSet.status.in_(FLAGGED_STATUSES)) \
             .order_by(TireSet.id).all()
    odometers = latest_odometers_km(db, {s.vehicle_id for s in sets})
    for tire_set in sets:
        tally.add(refresh_set_flags(db, tire_set,
                                    odometers.get(tire_set.vehicle_id), now))
    return tally


def compute_warning_flags(session_factory, batch_size: Optional[int] = None,
                          now: Optional[datetime] = None) -> FlagJobResult:
    """
    Recompute warning flags for all accounts.

    Parameters
    ----------
    session_factory : callable
        Returns a new SQLAlchemy session.
    batch_size : int, optional
        Accounts fetched per page, defaults to ``FLAG_JOB_BATCH_SIZE``.
    now : datetime, optional
        Reference time for age and staleness checks.

    Returns
    -------
    FlagJobResult
        Aggregated counts. Failed accounts are counted in ``errors`` and
        the first ``MAX_REPORTED_ERRORS`` messages are kept.
    """
    batch_size = batch_size or config.FLAG_JOB_BATCH_SIZE
    now = now or utcnow()
    result = FlagJobResult()
    log.info("Warning flags job started (batch size %d)", batch_size)

    after_id = None
    while True:
        account_ids = _account_page(session_factory, after_id, batch_size)
        if not account_ids:
            break
        for account_id in account_ids:
            try:
                with session_scope(session_factory) as db:
                    tally = process_account(db, account_id, now)
            except Exception as e:
                log.exception("Warning flags failed for account %s",
                              account_id)
                result.record_error(f"Account {account_id}: {e}")
                continue
            result.add(tally)
        after_id = account_ids[-1]
        if len(account_ids) < batch_size:
            break

    log.info("Warning flags job done: %d account(s), %d/%d set(s) and "
             "%d/%d item(s) updated, %d error(s)",
             result.accounts_processed, result.sets_updated,
             result.sets_processed, result.items_updated,
             result.items_processed, result.errors)
    return result


def main() -> int:
    setup_logging()
    engine = make_engine()
    init_db(engine)
    session_factory = make_session_factory(engine)
    result = compute_warning_flags(session_factory)
    return 1 if result.errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
