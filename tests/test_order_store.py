import re
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytz

from washlab.database.database import ORDERS_KEY, Database
from washlab.errors import (
    ConcurrentUpdateError,
    DuplicateOrderCodeError,
    ImmutableFieldError,
    InvalidTransitionError,
    PersistenceError,
)
from washlab.models.order import OrderType
from washlab.models.status import OrderStatus
from washlab.services.order_store import OrderStore

CHECK_IN = {
    "status": "checked_in",
    "bag_card_number": "042",
    "weight": 8.5,
    "loads": 1,
    "total_price": Decimal("50.00"),
    "items": [{"category": "shirts", "quantity": 5}],
}


class FlakyDatabase(Database):
    def __init__(self, data_dir):
        super().__init__(data_dir)
        self.broken = False

    def write(self, key, records):
        if self.broken:
            raise PersistenceError(key, OSError("disk full"))
        super().write(key, records)


class TickingClock:
    def __init__(self):
        self.now = datetime(2026, 10, 19, 8, 0, tzinfo=pytz.utc)

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def clocked_store(db):
    return OrderStore(db, clock=TickingClock())


def walk(store, order, *statuses):
    for status in statuses:
        order = store.update_order(order.id, {"status": status})
    return order


def test_create_online_order(store):
    order = store.create_order({"customer_phone": "0241234567", "customer_name": "Ama"})

    assert order.status == OrderStatus.PENDING_DROPOFF
    assert order.order_type == OrderType.ONLINE
    assert order.version == 1
    assert order.total_price is None
    assert re.fullmatch(r"WL-\d{4}", order.code)
    assert store.get_order(order.id) == order


def test_walkin_starts_checked_in(store):
    order = store.create_order({"order_type": "walkin"})
    assert order.status == OrderStatus.CHECKED_IN


def test_orders_are_newest_first(clocked_store):
    first = clocked_store.create_order({})
    second = clocked_store.create_order({})

    assert [o.id for o in clocked_store.orders] == [second.id, first.id]


def test_caller_cannot_set_version(store):
    order = store.create_order({"version": 9})
    assert order.version == 1


def test_codes_are_unique(store):
    codes = [store.create_order({}).code for _ in range(50)]
    assert len(set(codes)) == 50


def test_supplied_code_must_be_free(store):
    store.create_order({"code": "WL-4921"})
    with pytest.raises(DuplicateOrderCodeError):
        store.create_order({"code": "wl-4921"})


def test_lookup_by_code_ignores_case(store):
    order = store.create_order({"code": "WL-4921"})

    assert store.get_by_code("wl-4921") == order
    assert store.get_by_code(" WL-4921 ") == order
    assert store.get_by_code("WL-9999") is None


def test_lookup_by_phone_returns_newest(clocked_store):
    clocked_store.create_order({"customer_phone": "0241234567"})
    newest = clocked_store.create_order({"customer_phone": "0241234567"})

    assert clocked_store.get_by_phone("0241234567") == newest
    assert clocked_store.get_by_phone("0200000000") is None


def test_update_unknown_order_returns_none(store):
    assert store.update_order("order-missing", {"status": "washing"}) is None


def test_check_in_update(store):
    order = store.create_order({})
    updated = store.update_order(order.id, CHECK_IN)

    assert updated.status == OrderStatus.CHECKED_IN
    assert updated.loads == 1
    assert updated.total_price == Decimal("50.00")
    assert updated.version == 2
    assert updated.updated_at is not None


def test_check_in_without_price_is_rejected(store):
    order = store.create_order({})

    with pytest.raises(InvalidTransitionError):
        store.update_order(order.id, {"status": "checked_in", "bag_card_number": "042"})
    assert store.get_order(order.id).status == OrderStatus.PENDING_DROPOFF


def test_partial_pricing_is_rejected(store):
    order = store.create_order({})
    with pytest.raises(ValueError):
        store.update_order(order.id, {"weight": 5.0})


def test_status_cannot_go_backwards(store):
    order = store.create_order({})
    order = store.update_order(order.id, CHECK_IN)
    order = walk(store, order, "sorting", "washing")

    with pytest.raises(InvalidTransitionError):
        store.update_order(order.id, {"status": "sorting"})
    assert store.get_order(order.id).status == OrderStatus.WASHING


def test_status_cannot_skip_stages(store):
    order = store.create_order({"order_type": "walkin"})
    with pytest.raises(InvalidTransitionError):
        store.update_order(order.id, {"status": "ready"})


def test_completed_is_final(store):
    order = store.create_order({})
    order = store.update_order(order.id, CHECK_IN)
    order = walk(store, order, "sorting", "washing", "drying", "folding", "ready", "completed")

    for status in ("ready", "out_for_delivery", "pending_dropoff"):
        with pytest.raises(InvalidTransitionError):
            store.update_order(order.id, {"status": status})


def test_same_status_write_is_allowed(store):
    order = store.create_order({})
    updated = store.update_order(order.id, {"status": "pending_dropoff", "notes": "gate B"})

    assert updated.status == OrderStatus.PENDING_DROPOFF
    assert updated.notes == "gate B"


def test_creation_fields_are_fixed(store):
    order = store.create_order({})
    with pytest.raises(ImmutableFieldError):
        store.update_order(order.id, {"code": "WL-0001"})
    with pytest.raises(ImmutableFieldError):
        store.update_order(order.id, {"order_type": "walkin"})


def test_weight_cannot_be_changed(store):
    order = store.create_order({})
    store.update_order(order.id, CHECK_IN)

    with pytest.raises(ImmutableFieldError):
        store.update_order(order.id, {"weight": 9.0, "loads": 1, "total_price": Decimal("50.00")})


def test_service_type_locked_once_priced(store):
    order = store.create_order({})
    store.update_order(order.id, {"service_type": "wash_only"})
    store.update_order(order.id, CHECK_IN)

    with pytest.raises(ImmutableFieldError):
        store.update_order(order.id, {"service_type": "dry_only"})


def test_stale_version_is_rejected(store):
    order = store.create_order({})
    store.update_order(order.id, {"notes": "first"}, expected_version=1)

    with pytest.raises(ConcurrentUpdateError) as excinfo:
        store.update_order(order.id, {"notes": "second"}, expected_version=1)
    assert excinfo.value.actual == 2
    assert store.get_order(order.id).notes == "first"


def test_subscribers_see_changes(store):
    events = []
    unsubscribe = store.subscribe(
        lambda event, order: events.append((event, order.status, store.get_order(order.id)))
    )

    order = store.create_order({})
    updated = store.update_order(order.id, CHECK_IN)
    unsubscribe()
    store.update_order(order.id, {"notes": "quiet"})

    assert [e[0] for e in events] == ["created", "updated"]
    assert events[1][1] == OrderStatus.CHECKED_IN
    assert events[1][2] == updated


def test_failing_subscriber_does_not_block_others(store):
    seen = []

    def broken(event, order):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(lambda event, order: seen.append(event))
    store.create_order({})

    assert seen == ["created"]


def test_round_trip_through_storage(db):
    store = OrderStore(db)
    first = store.create_order({"customer_phone": "0241234567", "customer_name": "Ama"})
    store.update_order(first.id, CHECK_IN)
    store.create_order({"order_type": "walkin", "notes": "no starch"})

    reopened = OrderStore(db)

    assert [o.model_dump() for o in reopened.orders] == [o.model_dump() for o in store.orders]


def test_new_ids_do_not_reuse_stored_ones(db):
    first = OrderStore(db).create_order({})
    second = OrderStore(db).create_order({})

    assert second.id != first.id


def test_corrupt_snapshot_loads_empty(db):
    db.write(ORDERS_KEY, [{"bogus": 1}])
    assert OrderStore(db).orders == ()


def test_write_failure_keeps_memory_and_flush_retries(tmp_path):
    db = FlakyDatabase(tmp_path / "data")
    store = OrderStore(db)
    order = store.create_order({})

    db.broken = True
    with pytest.raises(PersistenceError):
        store.update_order(order.id, {"notes": "ring twice"})
    assert store.get_order(order.id).notes == "ring twice"

    db.broken = False
    store.flush()
    assert OrderStore(Database(tmp_path / "data")).get_order(order.id).notes == "ring twice"


def test_reload_picks_up_other_writers(db):
    store = OrderStore(db)
    other = OrderStore(db)
    order = other.create_order({})

    events = []
    store.subscribe(lambda event, changed: events.append(event))
    store.reload()

    assert store.get_order(order.id) is not None
    assert events == ["reloaded"]


def test_unpriced_order_cannot_leave_check_in(store):
    order = store.create_order({"order_type": "walkin"})

    with pytest.raises(InvalidTransitionError):
        store.update_order(order.id, {"status": "sorting"})
    assert store.get_order(order.id).status == OrderStatus.CHECKED_IN
