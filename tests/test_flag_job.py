"""
Unit tests for tirelife.flag_job
================================

The job runs against the in-memory database with a fixed reference time.
"""

# =========================
# Imports
# =========================
from datetime import datetime, timezone
from unittest.mock import patch
from conftest import tire_item
from tirelife import flag_job
from tirelife.db import session_scope
from tirelife.flag_job import compute_warning_flags
from tirelife.models import TireSet, TireSetItem
from tirelife.warning_flags import WarningFlag

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def set_flags(session_factory, set_id):
    with session_scope(session_factory) as db:
        return db.get(TireSet, set_id).warning_flags


# -------------------------
# Tests: Recompute
# -------------------------
def test_job_writes_changed_flags(new_set, session_factory):
    created = new_set(items=[tire_item(dot_code="0110")])
    with session_scope(session_factory) as db:
        db.query(TireSetItem).update({TireSetItem.warning_flags: 0})
        db.query(TireSet).update({TireSet.warning_flags: 0})

    result = compute_warning_flags(session_factory, now=NOW)

    assert result.accounts_processed == 1
    assert result.sets_processed == 1
    assert result.sets_updated == 1
    assert result.items_processed == 1
    assert result.items_updated == 1
    assert set_flags(session_factory, created["id"]) == \
        WarningFlag.AGE_CRITICAL


def test_second_run_writes_nothing(new_set, session_factory):
    new_set(items=[tire_item(dot_code="0118", tread_depth_current=2.2)])
    new_set(name="Summer", status="stored")
    compute_warning_flags(session_factory, now=NOW)

    result = compute_warning_flags(session_factory, now=NOW)

    assert result.sets_processed == 2
    assert result.items_processed == 3
    assert result.sets_updated == 0
    assert result.items_updated == 0


def test_retired_and_removed_sets_are_skipped(new_set, controller, owner,
                                              session_factory):
    new_set(status="retired")
    removed = new_set(status="stored")
    controller.remove(owner, removed["id"])
    result = compute_warning_flags(session_factory, now=NOW)
    assert result.accounts_processed == 0
    assert result.sets_processed == 0


def test_stored_set_gets_storage_flag(new_set, session_factory):
    created = new_set(status="stored", items=[])
    later = datetime(2030, 1, 1, tzinfo=timezone.utc)
    compute_warning_flags(session_factory, now=later)
    assert set_flags(session_factory, created["id"]) == \
        WarningFlag.STORAGE_LONG


def test_all_accounts_are_paged(new_set, other_owner, session_factory):
    new_set()
    new_set(ctx=other_owner, vehicle_id=3)
    result = compute_warning_flags(session_factory, batch_size=1, now=NOW)
    assert result.accounts_processed == 2
    assert result.errors == 0


# -------------------------
# Tests: Failures
# -------------------------
def test_failing_account_does_not_stop_the_job(new_set, other_owner,
                                               session_factory):
    new_set()
    new_set(ctx=other_owner, vehicle_id=3)
    real = flag_job.process_account

    def flaky(db, account_id, now=None):
        if account_id == 1:
            raise RuntimeError("broken data")
        return real(db, account_id, now)

    with patch("tirelife.flag_job.process_account", side_effect=flaky):
        result = compute_warning_flags(session_factory, now=NOW)

    assert result.accounts_processed == 1
    assert result.errors == 1
    assert result.error_messages == ["Account 1: broken data"]


def test_error_list_is_capped(new_set, other_owner, session_factory,
                              monkeypatch):
    new_set()
    new_set(ctx=other_owner, vehicle_id=3)
    monkeypatch.setattr(flag_job, "MAX_REPORTED_ERRORS", 1)

    with patch("tirelife.flag_job.process_account",
               side_effect=RuntimeError("down")):
        result = compute_warning_flags(session_factory, now=NOW)

    assert result.errors == 2
    assert len(result.error_messages) == 1
    assert result.to_dict()["errors"] == 2
