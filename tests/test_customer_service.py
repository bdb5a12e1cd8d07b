from decimal import Decimal

from washlab.models.customer import normalize_phone


def test_normalize_phone():
    assert normalize_phone("+233 (24) 123-4567") == "233241234567"
    assert normalize_phone(None) == ""


def test_create_returns_existing_customer(services):
    customers = services.customers
    first = customers.create_customer("024-123-4567", "Ama", hall="Volta")
    again = customers.create_customer("0241234567", "Someone Else")

    assert again.id == first.id
    assert again.name == "Ama"
    assert len(customers.list_customers()) == 1


def test_find_by_phone_ignores_formatting(services):
    services.customers.create_customer("0241234567", "Ama")

    assert services.customers.find_by_phone("024 123 4567").name == "Ama"
    assert services.customers.find_by_phone("") is None
    assert services.customers.find_by_phone("0200000000") is None


def test_update_customer(services):
    customer = services.customers.create_customer("0241234567", "Ama")
    updated = services.customers.update_customer(customer.id, {"room": "B12"})

    assert updated.room == "B12"
    assert updated.updated_at is not None
    assert services.customers.update_customer("cust-missing", {"room": "A1"}) is None


def test_tenth_wash_makes_a_loyalty_member(services):
    services.customers.create_customer("0241234567", "Ama")
    for _ in range(9):
        customer = services.customers.increment_order_stats("0241234567", Decimal("50.00"))
    assert not customer.is_loyalty_member

    customer = services.customers.increment_order_stats("0241234567", Decimal("50.00"))
    assert customer.is_loyalty_member
    assert customer.order_count == 10
    assert customer.total_spent == Decimal("500.00")


def test_stats_for_unknown_phone(services):
    assert services.customers.increment_order_stats("0200000000", Decimal("10")) is None


def test_loyalty_progress(services):
    customer = services.customers.create_customer("0241234567", "Ama")
    customer = services.customers.update_customer(customer.id, {"order_count": 13})

    assert services.customers.loyalty_progress(customer) == {
        "washes": 13,
        "free_washes_earned": 1,
        "towards_next": 3,
        "remaining": 7,
    }
