from datetime import datetime

import pytest
import pytz

from washlab.config import Config
from washlab.database.database import Database
from washlab.models.staff import StaffIdentity
from washlab.services.registry import Services


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    monkeypatch.setattr(Config, "TIMEZONE", "Africa/Accra")
    monkeypatch.setattr(Config, "STAFF_IDS", [42])
    monkeypatch.setattr(Config, "ADMIN_IDS", [7])
    monkeypatch.setattr(Config, "CURRENCY", "₵")
    monkeypatch.setattr(Config, "ORDER_CODE_PREFIX", "WL")


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "data")
    database.connect()
    return database


@pytest.fixture
def services(db):
    return Services(db, branch_id="main")


@pytest.fixture
def store(services):
    return services.store


@pytest.fixture
def staff():
    return StaffIdentity(
        success=True,
        staff_id="s1",
        staff_name="Kofi",
        verified_at=datetime(2026, 10, 19, 9, 0, tzinfo=pytz.utc),
    )


@pytest.fixture
def online_order(services):
    return services.orders.place_online_order(
        phone="0241234567",
        name="Ama Mensah",
        service_type="wash_and_dry",
        hall="Volta",
        room="B12",
    )
