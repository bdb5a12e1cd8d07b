# washlab/models/voucher.py
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel

class VoucherType(str, Enum):
    """Voucher kinds"""
    PERCENTAGE = "percentage"  # percent off the subtotal
    FIXED = "fixed"  # flat amount off
    FREE_WASH = "free_wash"  # whole loads free

class Voucher(BaseModel):
    """Promo code"""
    code: str
    discount_type: VoucherType
    discount_value: Decimal
    usage_limit: Optional[int] = None
    used_count: int = 0
    is_active: bool = True
