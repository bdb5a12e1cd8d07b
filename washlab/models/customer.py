# washlab/models/customer.py
import re
from decimal import Decimal
from typing import Optional
from .base import TimeStampedModel

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """Digits only; customers are keyed by this form"""
    return _NON_DIGITS.sub("", phone or "")


class Customer(TimeStampedModel):
    """Customer looked up by phone number"""
    id: str
    phone: str
    name: str
    email: Optional[str] = None
    hall: str = ""
    room: str = ""
    order_count: int = 0
    total_spent: Decimal = Decimal(0)
    is_loyalty_member: bool = False
