# washlab/services/identity.py
import random
import time
from typing import Iterable, Optional
from ..config import Config
from ..errors import OrderCodeExhaustedError

ORDER_CODE_MIN = 1000
ORDER_CODE_MAX = 9999
ORDER_CODE_MAX_RETRIES = 20


class IdGenerator:
    """Timestamp-based ids, strictly increasing within one process"""

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._last = 0

    def seed(self, existing_ids: Iterable[str]):
        """Never hand out a value at or below one already in use"""
        for existing in existing_ids:
            _, _, suffix = existing.rpartition("-")
            if suffix.isdigit():
                self._last = max(self._last, int(suffix))

    def next_value(self) -> int:
        value = max(self._clock() // 1000, self._last + 1)
        self._last = value
        return value

    def order_id(self) -> str:
        return f"order-{self.next_value()}"

    def customer_id(self) -> str:
        return f"cust-{self.next_value()}"

    def transaction_id(self) -> str:
        return f"txn-{self.next_value()}"


def generate_order_code(existing_codes: Iterable[str], prefix: Optional[str] = None,
                        rng: Optional[random.Random] = None) -> str:
    """Short code like ``WL-4921`` that none of ``existing_codes`` uses.

    Tries random suffixes first and falls back to the first free suffix
    once the random attempts keep colliding.
    """
    prefix = prefix or Config.ORDER_CODE_PREFIX
    rng = rng or random
    taken = {code.upper() for code in existing_codes}

    for _ in range(ORDER_CODE_MAX_RETRIES):
        code = f"{prefix}-{rng.randint(ORDER_CODE_MIN, ORDER_CODE_MAX)}"
        if code.upper() not in taken:
            return code

    for number in range(ORDER_CODE_MIN, ORDER_CODE_MAX + 1):
        code = f"{prefix}-{number}"
        if code.upper() not in taken:
            return code

    raise OrderCodeExhaustedError(f"All {prefix} order codes are in use")
