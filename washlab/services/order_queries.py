# washlab/services/order_queries.py
"""Read-side projections over an order snapshot.

All functions take any iterable of orders (newest first, as the store keeps
them) and return new lists; none of them mutate anything.
"""
from datetime import date, datetime
from typing import Iterable, List, Optional
import pytz
from ..models.order import Order, OrderType, PaymentStatus
from ..models.status import OrderStatus

INACTIVE_STATUSES = (OrderStatus.PENDING_DROPOFF, OrderStatus.COMPLETED)


def pending_orders(orders: Iterable[Order]) -> List[Order]:
    return [o for o in orders if o.status == OrderStatus.PENDING_DROPOFF]


def active_orders(orders: Iterable[Order]) -> List[Order]:
    """Orders somewhere between check-in and hand-over"""
    return [o for o in orders if o.status not in INACTIVE_STATUSES]


def ready_orders(orders: Iterable[Order]) -> List[Order]:
    return [o for o in orders if o.status == OrderStatus.READY]


def completed_orders(orders: Iterable[Order]) -> List[Order]:
    return [o for o in orders if o.status == OrderStatus.COMPLETED]


def find_by_code(orders: Iterable[Order], code: str) -> Optional[Order]:
    """Case-insensitive exact match on the order code"""
    wanted = (code or "").strip().lower()
    return next((o for o in orders if o.code.lower() == wanted), None)


def find_by_phone(orders: Iterable[Order], phone: str) -> Optional[Order]:
    """First order placed with exactly this phone number"""
    return next((o for o in orders if o.customer_phone == phone), None)


def orders_for_phone(orders: Iterable[Order], phone: str) -> List[Order]:
    return [o for o in orders if o.customer_phone == phone]


def filter_orders(orders: Iterable[Order],
                  day: Optional[date] = None,
                  start: Optional[date] = None,
                  end: Optional[date] = None,
                  branch_id: Optional[str] = None,
                  order_type: Optional[OrderType] = None,
                  status: Optional[OrderStatus] = None,
                  payment_status: Optional[PaymentStatus] = None,
                  tz: Optional[pytz.BaseTzInfo] = None) -> List[Order]:
    """Narrow a snapshot for reporting; every criterion left as None matches all.

    Dates are compared in ``tz`` (UTC when omitted).
    """
    if day is not None:
        start = end = day
    result = []
    for order in orders:
        if branch_id is not None and order.branch_id != branch_id:
            continue
        if order_type is not None and order.order_type != order_type:
            continue
        if status is not None and order.status != status:
            continue
        if payment_status is not None and order.payment_status != payment_status:
            continue
        if start is not None or end is not None:
            local_day = local_date(order.created_at, tz)
            if start is not None and local_day < start:
                continue
            if end is not None and local_day > end:
                continue
        result.append(order)
    return result


def local_date(moment: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> date:
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)
    return moment.astimezone(tz or pytz.utc).date()
