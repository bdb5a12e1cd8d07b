# washlab/services/voucher_service.py
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional
from ..database.database import VOUCHERS_KEY
from ..models.voucher import Voucher, VoucherType
from .pricing import rate_per_load

class VoucherService:
    """Promo code management"""

    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)

    def _load(self) -> List[Voucher]:
        return [Voucher.model_validate(v) for v in self.db.read(VOUCHERS_KEY)]

    def _save(self, vouchers: List[Voucher]):
        self.db.write(VOUCHERS_KEY, [v.model_dump(mode="json") for v in vouchers])

    def list_vouchers(self) -> List[Voucher]:
        return self._load()

    def get_voucher(self, code: str) -> Optional[Voucher]:
        wanted = (code or "").strip().upper()
        return next((v for v in self._load() if v.code.upper() == wanted), None)

    def create_voucher(self, voucher: Voucher) -> Voucher:
        """Add a new voucher; codes are unique ignoring case"""
        vouchers = self._load()
        if any(v.code.upper() == voucher.code.upper() for v in vouchers):
            raise ValueError(f"Voucher {voucher.code} already exists")
        vouchers.append(voucher)
        self._save(vouchers)
        return voucher

    def toggle(self, code: str) -> Optional[Voucher]:
        """Switch a voucher between active and inactive"""
        return self._update(code, lambda v: {"is_active": not v.is_active})

    def validate_voucher(self, code: str, amount: Decimal,
                         service_type: Optional[str] = None) -> Dict[str, Any]:
        """Check a voucher against an amount and work out the discount"""
        voucher = self.get_voucher(code)
        if not voucher or not voucher.is_active:
            return {
                "valid": False,
                "error": "Voucher code is not valid"
            }

        if voucher.usage_limit is not None and voucher.used_count >= voucher.usage_limit:
            return {
                "valid": False,
                "error": "Voucher has been fully used"
            }

        amount = Decimal(amount)
        if voucher.discount_type == VoucherType.PERCENTAGE:
            discount = amount * voucher.discount_value / 100
        elif voucher.discount_type == VoucherType.FREE_WASH:
            discount = rate_per_load(service_type or "") * voucher.discount_value
        else:
            discount = voucher.discount_value
        discount = min(discount, amount).quantize(Decimal("0.01"))

        return {
            "valid": True,
            "code": voucher.code,
            "discount": discount,
            "final_amount": amount - discount
        }

    def redeem(self, code: str) -> Optional[Voucher]:
        """Count one use of a voucher"""
        return self._update(code, lambda v: {"used_count": v.used_count + 1})

    def _update(self, code: str, change) -> Optional[Voucher]:
        vouchers = self._load()
        for index, voucher in enumerate(vouchers):
            if voucher.code.upper() == (code or "").strip().upper():
                vouchers[index] = voucher.model_copy(update=change(voucher))
                self._save(vouchers)
                return vouchers[index]
        return None
