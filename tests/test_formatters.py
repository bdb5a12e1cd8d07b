from datetime import datetime, timedelta
from decimal import Decimal

import pytz

from washlab.models.order import Order
from washlab.utils.formatters import format_datetime, format_price, format_weight, time_ago
from washlab.utils.keyboards import Keyboards
from washlab.utils.messages import Messages

NOW = datetime(2026, 10, 19, 10, 0, tzinfo=pytz.utc)


def make_order(**fields):
    data = {
        "id": "order-1",
        "code": "WL-4921",
        "status": "pending_dropoff",
        "order_type": "online",
        "created_at": NOW,
        "customer_name": "Ama",
        "customer_phone": "0241234567",
    }
    data.update(fields)
    return Order(**data)


def priced(**fields):
    return make_order(bag_card_number="042", weight=8.5, loads=1,
                      total_price=Decimal("50.00"), **fields)


def callbacks(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def test_format_price():
    assert format_price(Decimal("1234.5")) == "₵1,234.50"
    assert format_price(None) == "-"


def test_format_weight():
    assert format_weight(8.5) == "8.5 kg"
    assert format_weight(None) == "-"


def test_format_datetime_uses_branch_timezone(monkeypatch):
    from washlab.config import Config
    monkeypatch.setattr(Config, "TIMEZONE", "Asia/Tokyo")
    assert format_datetime(NOW) == "2026-10-19 19:00"


def test_time_ago():
    assert time_ago(NOW - timedelta(minutes=15), now=NOW) == "15m"
    assert time_ago(NOW - timedelta(hours=3), now=NOW) == "3h"


def test_tracking_hides_delivery_for_pickup():
    text = Messages.format_tracking(priced(status="washing"))

    assert "Out for Delivery" not in text
    assert "👉 Washing" in text
    assert "✅ Sorting" in text
    assert "₵50.00" in text


def test_tracking_shows_delivery_when_requested():
    text = Messages.format_tracking(make_order(include_delivery=True))

    assert "Out for Delivery" in text
    assert "priced at drop-off" in text


def test_order_card():
    text = Messages.format_order(priced(status="checked_in", items=[{"category": "shirts", "quantity": 5}]))

    assert "WL-4921" in text
    assert "5x shirts" in text
    assert "8.5 kg" in text


def test_empty_order_list():
    assert Messages.format_order_list("Ready", []) == "Ready\n\nNo orders."


def test_pending_card_has_no_advance_button():
    assert callbacks(Keyboards.staff_order_menu(make_order())) == ["order_order-1"]


def test_buttons_carry_the_version():
    order = priced(status="washing", version=4)
    assert callbacks(Keyboards.staff_order_menu(order)) == ["advance_order-1_4", "order_order-1"]


def test_ready_card_offers_both_exits():
    order = priced(status="ready", version=7)
    assert callbacks(Keyboards.staff_order_menu(order)) == [
        "advance_order-1_7",
        "deliver_order-1_7",
        "order_order-1",
    ]


def test_track_menu():
    assert callbacks(Keyboards.track_menu(make_order())) == ["track_WL-4921"]
