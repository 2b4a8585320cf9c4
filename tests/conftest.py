"""
Shared fixtures
===============

An in-memory SQLite database with two accounts:
- account 1: vehicle 1 (km, odometer 1000), vehicle 2 (miles, no odometer),
  user 10 (profile, EUR) and driver 20 (assigned to vehicle 1 only)
- account 2: vehicle 3 (km, odometer 5000)
"""

# =========================
# Imports
# =========================
import pytest
from sqlalchemy.pool import StaticPool
from tirelife.controller import TireSetController
from tirelife.db import init_db, make_engine, make_session_factory
from tirelife.db import session_scope
from tirelife.entities import RequestContext, UserRole
from tirelife.models import UserProfile, UserVehicle, Vehicle, VehicleStats


# -------------------------
# Fixtures: Database
# -------------------------
@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = make_session_factory(engine)
    with session_scope(factory) as db:
        db.add_all([
            Vehicle(id=1, account_id=1, label="Golf", mileage_in="km"),
            Vehicle(id=2, account_id=1, label="Mustang", mileage_in="mi"),
            Vehicle(id=3, account_id=2, label="Octavia", mileage_in="km"),
        ])
        db.flush()
        db.add_all([
            VehicleStats(vehicle_id=1, latest_odometer_km=1000),
            VehicleStats(vehicle_id=3, latest_odometer_km=5000),
            UserProfile(user_id=10, account_id=1, distance_unit="km",
                        volume_unit="l", home_currency="EUR"),
            UserVehicle(user_id=20, vehicle_id=1),
        ])
    yield factory
    factory.remove()


@pytest.fixture
def controller(session_factory, tmp_path):
    return TireSetController(session_factory, str(tmp_path / "tirelife.lock"))


# -------------------------
# Fixtures: Callers
# -------------------------
@pytest.fixture
def owner():
    return RequestContext(account_id=1, user_id=10, role=UserRole.OWNER)


@pytest.fixture
def viewer():
    return RequestContext(account_id=1, user_id=11, role=UserRole.VIEWER)


@pytest.fixture
def driver():
    return RequestContext(account_id=1, user_id=20, role=UserRole.DRIVER)


@pytest.fixture
def other_owner():
    return RequestContext(account_id=2, user_id=30, role=UserRole.OWNER)


# -------------------------
# Fixtures: Data
# -------------------------
def tire_item(**overrides):
    item = {"brand": "Michelin", "model": "Alpin 6", "tire_size": "205/55R16",
            "quantity": 2}
    item.update(overrides)
    return item


@pytest.fixture
def new_set(controller, owner):
    """Factory creating a tire set on vehicle 1 with two items."""
    def create(ctx=None, **overrides):
        params = {
            "vehicle_id": 1,
            "name": "Winter set",
            "tire_type": "winter",
            "items": [tire_item(position="front"),
                      tire_item(position="rear")],
        }
        params.update(overrides)
        return controller.create(ctx or owner, params)
    return create
