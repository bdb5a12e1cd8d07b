from datetime import date, datetime
from decimal import Decimal

import pytest
import pytz

from washlab.services.order_store import OrderStore
from washlab.services.report_service import ReportService

DAY = date(2026, 10, 19)


@pytest.fixture
def reports(services, db):
    # every order in this module is created at 10:00 UTC on DAY
    store = OrderStore(db, clock=lambda: datetime(2026, 10, 19, 10, 0, tzinfo=pytz.utc))
    services.orders.store = store
    services.store = store
    return ReportService(store, services.transactions)


def test_report_counts_and_revenue(services, reports, staff):
    orders = services.orders
    online = orders.place_online_order("0241234567", "Ama", service_type="wash_only")
    online = orders.check_in(online.id, 10, "017", [])
    walkin = orders.create_walkin_order("0557654321", "Yaw")
    walkin = orders.check_in(walkin.id, 6, "018", [])
    orders.record_payment(walkin.id, "cash", staff)
    for _ in range(6):
        walkin = orders.advance_order(walkin.id, staff)
    orders.place_online_order("0209999999", "Esi", branch_id="annex")

    report = reports.generate_report(DAY, DAY)

    assert report["total_orders"] == 3
    assert report["online_orders"] == 2
    assert report["walkin_orders"] == 1
    assert report["completed_orders"] == 1
    assert report["paid_orders"] == 1
    assert report["total_revenue"] == Decimal("100.00")
    assert report["collected_revenue"] == Decimal("50.00")
    assert report["total_loads"] == 3
    assert report["status_counts"]["pending_dropoff"] == 1
    assert report["status_counts"]["checked_in"] == 1
    assert report["period"] == {"start": "2026-10-19", "end": "2026-10-19"}


def test_report_branch_filter(services, reports):
    services.orders.place_online_order("0241234567", "Ama")
    services.orders.place_online_order("0209999999", "Esi", branch_id="annex")

    assert reports.generate_report(DAY, DAY, branch_id="annex")["total_orders"] == 1
    assert reports.generate_report(DAY, DAY, branch_id="main")["total_orders"] == 1


def test_report_outside_range_is_empty(services, reports):
    services.orders.place_online_order("0241234567", "Ama")

    report = reports.generate_report(date(2026, 10, 20), date(2026, 10, 21))
    assert report["total_orders"] == 0
    assert report["total_revenue"] == Decimal(0)


def test_staff_takings(services, reports, staff):
    order = services.orders.create_walkin_order("", "")
    services.orders.check_in(order.id, 6, "1", [])
    services.orders.record_payment(order.id, "cash", staff)

    assert reports.staff_takings() == {"Kofi": Decimal("50.00")}
