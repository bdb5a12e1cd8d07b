# washlab/models/transaction.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from .base import TimeStampedModel
from .order import PaymentMethod

class Transaction(TimeStampedModel):
    """Recorded payment for an order, attributed to the verifying staff member"""
    transaction_id: str
    order_id: str
    order_code: str
    amount: Decimal
    discount: Decimal = Decimal(0)
    voucher_code: Optional[str] = None
    payment_method: PaymentMethod
    staff_id: str
    staff_name: str
    verified_at: datetime
    customer_phone: str = ""
    customer_name: str = ""
    branch_id: Optional[str] = None
