# washlab/services/order_store.py
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple
import pytz
from pydantic import ValidationError
from ..database.database import ORDERS_KEY
from ..errors import (
    ConcurrentUpdateError,
    DuplicateOrderCodeError,
    ImmutableFieldError,
    InvalidTransitionError,
)
from ..models.order import CREATION_FIELDS, SET_ONCE_FIELDS, Order, OrderType
from ..models.status import OrderStatus, can_transition
from . import order_queries
from .identity import IdGenerator, generate_order_code

Subscriber = Callable[[str, Optional[Order]], None]

# Bookkeeping the store owns; callers cannot write these
MANAGED_FIELDS = ("version", "updated_at")


def initial_status(order_type) -> OrderStatus:
    """Online orders wait for drop-off; walk-ins are at the counter already"""
    if OrderType(order_type) == OrderType.WALKIN:
        return OrderStatus.CHECKED_IN
    return OrderStatus.PENDING_DROPOFF


class OrderStore:
    """Single source of truth for orders.

    Orders are kept newest first. Every mutation validates the new state,
    swaps it in, notifies subscribers and then writes the whole collection
    back to storage. Write failures surface as ``PersistenceError`` after the
    in-memory change; ``flush()`` retries the write.
    """

    def __init__(self, db, id_generator: Optional[IdGenerator] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.logger = logging.getLogger(__name__)
        self.ids = id_generator or IdGenerator()
        self._clock = clock or (lambda: datetime.now(pytz.utc))
        self._subscribers: List[Subscriber] = []
        self._orders: List[Order] = self._load()
        self.ids.seed(o.id for o in self._orders)

    # -------------------- storage --------------------

    def _load(self) -> List[Order]:
        records = self.db.read(ORDERS_KEY)
        try:
            return [Order.model_validate(record) for record in records]
        except (ValidationError, TypeError) as e:
            self.logger.error(f"Stored orders are corrupt, starting with an empty list: {e}")
            return []

    def _persist(self):
        self.db.write(ORDERS_KEY, [o.model_dump(mode="json") for o in self._orders])

    def reload(self):
        """Re-read the stored snapshot, dropping unsaved in-memory changes"""
        self._orders = self._load()
        self.ids.seed(o.id for o in self._orders)
        self._notify("reloaded", None)

    def flush(self):
        """Write the current snapshot again, e.g. after a PersistenceError"""
        self._persist()

    # -------------------- subscribers --------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it"""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: str, order: Optional[Order]):
        for callback in list(self._subscribers):
            try:
                callback(event, order)
            except Exception as e:
                self.logger.error(f"Order subscriber failed on {event}: {e}", exc_info=True)

    # -------------------- mutations --------------------

    def create_order(self, fields: Dict[str, Any]) -> Order:
        """Add a new order and return it"""
        data = {k: v for k, v in fields.items() if k not in MANAGED_FIELDS}
        data.setdefault("order_type", OrderType.ONLINE)
        data.setdefault("status", initial_status(data["order_type"]))

        codes = [o.code for o in self._orders]
        if data.get("code"):
            if data["code"].lower() in {c.lower() for c in codes}:
                raise DuplicateOrderCodeError(data["code"])
        else:
            data["code"] = generate_order_code(codes)

        data["id"] = self.ids.order_id()
        data["created_at"] = self._clock()
        data["version"] = 1
        order = Order.model_validate(data)

        self._orders.insert(0, order)
        self.logger.info(f"Order {order.code} created ({order.order_type.value}, {order.status.value})")
        self._notify("created", order)
        self._persist()
        return order

    def update_order(self, order_id: str, updates: Dict[str, Any],
                     expected_version: Optional[int] = None) -> Optional[Order]:
        """Merge ``updates`` into an order.

        Returns the new order, or None when no order has this id.
        """
        index = self._index_of(order_id)
        if index is None:
            self.logger.warning(f"Update for unknown order {order_id} ignored")
            return None

        current = self._orders[index]
        if expected_version is not None and expected_version != current.version:
            raise ConcurrentUpdateError(order_id, expected_version, current.version)

        merged = current.model_dump()
        merged.update({k: v for k, v in updates.items() if k not in MANAGED_FIELDS})
        merged["version"] = current.version + 1
        merged["updated_at"] = self._clock()
        updated = Order.model_validate(merged)

        self._check_fixed_fields(current, updated)
        self._check_transition(current, updated)

        self._orders[index] = updated
        if updated.status != current.status:
            self.logger.info(
                f"Order {updated.code}: {current.status.value} -> {updated.status.value}"
            )
        self._notify("updated", updated)
        self._persist()
        return updated

    @staticmethod
    def _check_fixed_fields(current: Order, updated: Order):
        for name in CREATION_FIELDS:
            if getattr(updated, name) != getattr(current, name):
                raise ImmutableFieldError(name)
        for name in SET_ONCE_FIELDS:
            before = getattr(current, name)
            if before is not None and getattr(updated, name) != before:
                raise ImmutableFieldError(name)
        if current.is_priced and updated.service_type != current.service_type:
            raise ImmutableFieldError("service_type")
        if current.is_paid and not updated.is_paid:
            raise ImmutableFieldError("payment_status")

    @staticmethod
    def _check_transition(current: Order, updated: Order):
        if updated.status == current.status:
            return
        if not can_transition(current.status, updated.status):
            raise InvalidTransitionError(current.status.value, updated.status.value)
        if current.status == OrderStatus.PENDING_DROPOFF and (
            not updated.is_priced or updated.bag_card_number is None
        ):
            raise InvalidTransitionError(
                current.status.value, updated.status.value,
                "check-in must record weight, price and bag card together",
            )
        if current.status == OrderStatus.CHECKED_IN and not updated.is_priced:
            raise InvalidTransitionError(
                current.status.value, updated.status.value,
                "order must be weighed and priced first",
            )

    # -------------------- queries --------------------

    def _index_of(self, order_id: str) -> Optional[int]:
        for index, order in enumerate(self._orders):
            if order.id == order_id:
                return index
        return None

    @property
    def orders(self) -> Tuple[Order, ...]:
        return tuple(self._orders)

    def get_order(self, order_id: str) -> Optional[Order]:
        index = self._index_of(order_id)
        return self._orders[index] if index is not None else None

    def get_by_code(self, code: str) -> Optional[Order]:
        return order_queries.find_by_code(self._orders, code)

    def get_by_phone(self, phone: str) -> Optional[Order]:
        return order_queries.find_by_phone(self._orders, phone)

    def pending(self) -> List[Order]:
        return order_queries.pending_orders(self._orders)

    def active(self) -> List[Order]:
        return order_queries.active_orders(self._orders)

    def ready(self) -> List[Order]:
        return order_queries.ready_orders(self._orders)

    def completed(self) -> List[Order]:
        return order_queries.completed_orders(self._orders)
