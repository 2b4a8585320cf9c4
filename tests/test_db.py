"""
Unit tests for tirelife.db
"""

# =========================
# Imports
# =========================
import pytest
from sqlalchemy.exc import OperationalError
from tirelife.db import session_scope
from tirelife.errors import PersistenceError, ValidationFailedError
from tirelife.models import TireSet, utcnow


def tire_set(**overrides):
    values = {"account_id": 1, "user_id": 10, "vehicle_id": 1,
              "name": "Set", "tire_type": "winter", "status": "active"}
    values.update(overrides)
    return TireSet(**values)


# -------------------------
# Tests: Single active set guard
# -------------------------
def test_second_active_set_violates_index(session_factory):
    with pytest.raises(ValidationFailedError):
        with session_scope(session_factory) as db:
            db.add(tire_set())
            db.flush()
            db.add(tire_set(name="Other"))

    with session_scope(session_factory) as db:
        assert db.query(TireSet).count() == 0


def test_index_ignores_stored_and_removed_sets(session_factory):
    with session_scope(session_factory) as db:
        db.add(tire_set())
        db.add(tire_set(name="Stored", status="stored"))
        db.add(tire_set(name="Gone", removed_at=utcnow()))
    with session_scope(session_factory) as db:
        assert db.query(TireSet).count() == 3


# -------------------------
# Tests: Session scope
# -------------------------
def test_database_errors_become_persistence_errors(session_factory):
    with pytest.raises(PersistenceError):
        with session_scope(session_factory):
            raise OperationalError("SELECT 1", {}, Exception("disk I/O"))


def test_other_errors_pass_through(session_factory):
    with pytest.raises(KeyError):
        with session_scope(session_factory) as db:
            db.add(tire_set())
            raise KeyError("boom")
    with session_scope(session_factory) as db:
        assert db.query(TireSet).count() == 0
