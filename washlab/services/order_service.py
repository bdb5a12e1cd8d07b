# washlab/services/order_service.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union
import pytz
from ..errors import (
    InvalidTransitionError,
    OrderNotFoundError,
    PaymentError,
    PersistenceError,
    StaffVerificationError,
)
from ..models.customer import normalize_phone
from ..models.order import Order, OrderItem, OrderType, PaymentMethod, PaymentStatus, ServiceType
from ..models.staff import StaffIdentity
from ..models.status import OrderStatus, next_status
from ..models.transaction import Transaction
from . import order_queries, pricing
from .customer_service import CustomerService
from .order_store import OrderStore
from .transaction_service import TransactionService
from .voucher_service import VoucherService

ItemLike = Union[OrderItem, Dict[str, Any]]


class OrderService:
    """Order workflows for customers and wash-station staff"""

    def __init__(self, store: OrderStore, customer_service: CustomerService,
                 transaction_service: TransactionService,
                 voucher_service: Optional[VoucherService] = None,
                 branch_id: Optional[str] = None):
        self.store = store
        self.customer_service = customer_service
        self.transaction_service = transaction_service
        self.voucher_service = voucher_service
        self.branch_id = branch_id
        self.logger = logging.getLogger(__name__)

    def get_order(self, order_id: str) -> Order:
        order = self.store.get_order(order_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    def find_order(self, reference: str) -> Optional[Order]:
        """Order by id or by order code"""
        return self.store.get_order(reference) or self.store.get_by_code(reference)

    @staticmethod
    def estimate(service_type: Union[ServiceType, str], weight: float,
                 include_delivery: bool = False) -> pricing.PriceBreakdown:
        """Price quote shown before the bag is weighed at the counter"""
        return pricing.calculate_total_price(service_type, weight, include_delivery)

    # -------------------- creation --------------------

    def place_online_order(self, phone: str, name: str,
                           service_type: Union[ServiceType, str] = ServiceType.WASH_AND_DRY,
                           hall: str = "", room: str = "",
                           has_whites: bool = False, wash_separately: bool = False,
                           notes: str = "", include_delivery: bool = False,
                           branch_id: Optional[str] = None) -> Order:
        """Customer order waiting to be dropped off"""
        self._register_customer(phone, name, hall=hall, room=room)
        return self.store.create_order({
            "order_type": OrderType.ONLINE,
            "status": OrderStatus.PENDING_DROPOFF,
            "branch_id": branch_id or self.branch_id,
            "customer_phone": phone,
            "customer_name": name,
            "hall": hall,
            "room": room,
            "notes": notes,
            "service_type": service_type,
            "has_whites": has_whites,
            "wash_separately": wash_separately if has_whites else False,
            "include_delivery": include_delivery,
        })

    def create_walkin_order(self, phone: str, name: str,
                            service_type: Union[ServiceType, str] = ServiceType.WASH_AND_DRY,
                            notes: str = "", branch_id: Optional[str] = None) -> Order:
        """Order opened at the counter; it still needs weighing via check_in"""
        self._register_customer(phone, name)
        return self.store.create_order({
            "order_type": OrderType.WALKIN,
            "status": OrderStatus.CHECKED_IN,
            "branch_id": branch_id or self.branch_id,
            "customer_phone": phone,
            "customer_name": name,
            "notes": notes,
            "service_type": service_type,
        })

    def _register_customer(self, phone: str, name: str, **extra):
        if normalize_phone(phone):
            self.customer_service.find_or_create(phone, name, **extra)

    # -------------------- lifecycle --------------------

    def check_in(self, order_id: str, weight: float, bag_card_number: str,
                 items: Iterable[ItemLike], staff_name: Optional[str] = None,
                 expected_version: Optional[int] = None) -> Order:
        """Weigh, tag and price an order in one update"""
        order = self.get_order(order_id)
        if order.is_priced or order.status not in (OrderStatus.PENDING_DROPOFF,
                                                   OrderStatus.CHECKED_IN):
            raise InvalidTransitionError(
                order.status.value, OrderStatus.CHECKED_IN.value, "order is already checked in"
            )

        loads = pricing.calculate_loads(weight)
        return self.store.update_order(order.id, {
            "status": OrderStatus.CHECKED_IN,
            "bag_card_number": str(bag_card_number),
            "weight": weight,
            "loads": loads,
            "total_price": pricing.price_for_loads(order.service_type, loads),
            "items": [OrderItem.model_validate(item) for item in items],
            "checked_in_by": staff_name,
        }, expected_version=expected_version)

    def advance_order(self, order_id: str, identity: StaffIdentity,
                      expected_version: Optional[int] = None) -> Order:
        """Move an order to the stage after its current one"""
        self._require_staff(identity)
        order = self.get_order(order_id)
        target = next_status(order.status, delivery=order.include_delivery)
        if target is None:
            raise InvalidTransitionError(order.status.value, order.status.value,
                                         "order is already completed")
        if target == OrderStatus.CHECKED_IN:
            raise InvalidTransitionError(order.status.value, target.value,
                                         "pending orders move forward through check-in")
        return self.store.update_order(order.id, {"status": target},
                                       expected_version=expected_version)

    def send_out_for_delivery(self, order_id: str, identity: StaffIdentity,
                              expected_version: Optional[int] = None) -> Order:
        return self.set_status(order_id, OrderStatus.OUT_FOR_DELIVERY, identity, expected_version)

    def complete_order(self, order_id: str, identity: StaffIdentity,
                       expected_version: Optional[int] = None) -> Order:
        return self.set_status(order_id, OrderStatus.COMPLETED, identity, expected_version)

    def set_status(self, order_id: str, status: Union[OrderStatus, str],
                   identity: StaffIdentity, expected_version: Optional[int] = None) -> Order:
        """Explicit status change; the store rejects anything out of order"""
        self._require_staff(identity)
        order = self.get_order(order_id)
        return self.store.update_order(order.id, {"status": OrderStatus(status)},
                                       expected_version=expected_version)

    # -------------------- payment --------------------

    def record_payment(self, order_id: str, method: Union[PaymentMethod, str],
                       identity: StaffIdentity, voucher_code: Optional[str] = None,
                       expected_version: Optional[int] = None) -> Order:
        """Mark a priced order as paid and log the transaction"""
        self._require_staff(identity)
        order = self.get_order(order_id)
        if not order.is_priced:
            raise PaymentError(f"Order {order.code} has not been weighed yet")
        if order.is_paid:
            raise PaymentError(f"Order {order.code} is already paid")

        amount = order.total_price
        discount = Decimal(0)
        if voucher_code:
            if not self.voucher_service:
                raise PaymentError("Vouchers are not enabled")
            result = self.voucher_service.validate_voucher(
                voucher_code, amount, order.service_type.value
            )
            if not result["valid"]:
                raise PaymentError(result["error"])
            discount = result["discount"]
            amount = result["final_amount"]

        now = datetime.now(pytz.utc)
        method = PaymentMethod(method)
        save_error = None
        try:
            updated = self.store.update_order(order.id, {
                "payment_status": PaymentStatus.PAID,
                "payment_method": method,
                "paid_amount": amount,
                "paid_at": now,
                "processed_by": identity.staff_name,
            }, expected_version=expected_version)
        except PersistenceError as e:
            # the order is paid in memory; the payment log must still match it
            save_error = e
            updated = self.store.get_order(order.id)

        if voucher_code:
            self.voucher_service.redeem(voucher_code)

        self.transaction_service.record(Transaction(
            transaction_id=self.store.ids.transaction_id(),
            order_id=order.id,
            order_code=order.code,
            amount=amount,
            discount=discount,
            voucher_code=voucher_code,
            payment_method=method,
            staff_id=identity.staff_id,
            staff_name=identity.staff_name or identity.staff_id,
            verified_at=identity.verified_at or now,
            customer_phone=order.customer_phone,
            customer_name=order.customer_name,
            branch_id=order.branch_id,
            created_at=now,
        ))
        self.customer_service.increment_order_stats(order.customer_phone, amount)

        if save_error:
            self.logger.error(f"Payment for {order.code} recorded but the order was not saved: {save_error}")
            raise save_error
        return updated

    @staticmethod
    def _require_staff(identity: Optional[StaffIdentity]):
        if identity is None or not identity.success or not identity.staff_id:
            raise StaffVerificationError("Staff identity could not be verified")

    # -------------------- views --------------------

    def orders_for_customer(self, phone: str) -> List[Order]:
        return order_queries.orders_for_phone(self.store.orders, phone)
