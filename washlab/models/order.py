# washlab/models/order.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from .base import TimeStampedModel
from .status import OrderStatus

PRICED_FIELDS = ("weight", "loads", "total_price")

# Fields that never change after creation
CREATION_FIELDS = ("id", "code", "order_type", "created_at")

# Fields that never change once they hold a value
SET_ONCE_FIELDS = ("bag_card_number",) + PRICED_FIELDS


class ServiceType(str, Enum):
    WASH_ONLY = "wash_only"
    WASH_AND_DRY = "wash_and_dry"
    DRY_ONLY = "dry_only"

class OrderType(str, Enum):
    ONLINE = "online"
    WALKIN = "walkin"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"

class PaymentMethod(str, Enum):
    CASH = "cash"
    MOBILE_MONEY = "mobile_money"
    CARD = "card"
    USSD = "ussd"

class OrderItem(BaseModel):
    """Counted garments of one category"""
    category: str
    quantity: int = Field(default=1, ge=0)

    model_config = ConfigDict(frozen=True)

class Order(TimeStampedModel):
    """Laundry order.

    Instances are frozen; the store replaces an order with a freshly
    validated copy on every change.
    """
    id: str
    code: str
    branch_id: Optional[str] = None
    status: OrderStatus
    order_type: OrderType

    customer_phone: str = ""
    customer_name: str = ""
    hall: str = ""
    room: str = ""
    notes: str = ""

    service_type: ServiceType = ServiceType.WASH_AND_DRY
    has_whites: bool = False
    wash_separately: bool = False
    include_delivery: bool = False

    bag_card_number: Optional[str] = None
    items: List[OrderItem] = []
    weight: Optional[float] = Field(default=None, ge=0)
    loads: Optional[int] = Field(default=None, ge=1)
    total_price: Optional[Decimal] = Field(default=None, ge=0)
    checked_in_by: Optional[str] = None

    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[PaymentMethod] = None
    paid_amount: Optional[Decimal] = None
    paid_at: Optional[datetime] = None
    processed_by: Optional[str] = None

    version: int = Field(default=1, ge=1)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @model_validator(mode="after")
    def check_invariants(self) -> "Order":
        priced = [getattr(self, name) is not None for name in PRICED_FIELDS]
        if any(priced) and not all(priced):
            raise ValueError("weight, loads and total_price must be set together")
        if self.payment_status == PaymentStatus.PAID and (
            self.paid_amount is None or self.paid_at is None
        ):
            raise ValueError("a paid order needs paid_amount and paid_at")
        return self

    @property
    def is_priced(self) -> bool:
        return self.total_price is not None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
