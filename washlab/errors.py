# washlab/errors.py
from __future__ import annotations


class WashLabError(Exception):
    pass


class OrderNotFoundError(WashLabError):
    def __init__(self, reference: str):
        super().__init__(f"Order {reference} not found")
        self.reference = reference


class InvalidTransitionError(WashLabError):
    def __init__(self, current: str, requested: str, reason: str | None = None):
        message = f"Cannot move order from {current} to {requested}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.current = current
        self.requested = requested


class ImmutableFieldError(WashLabError):
    def __init__(self, field: str):
        super().__init__(f"Field '{field}' cannot be changed once set")
        self.field = field


class ConcurrentUpdateError(WashLabError):
    def __init__(self, order_id: str, expected: int, actual: int):
        super().__init__(
            f"Order {order_id} was changed elsewhere (expected version {expected}, found {actual})"
        )
        self.order_id = order_id
        self.expected = expected
        self.actual = actual


class PersistenceError(WashLabError):
    def __init__(self, key: str, cause: Exception):
        super().__init__(f"Could not save '{key}': {cause}")
        self.key = key
        self.cause = cause


class OrderCodeExhaustedError(WashLabError):
    pass


class StaffVerificationError(WashLabError):
    pass


class PaymentError(WashLabError):
    pass


class DuplicateOrderCodeError(WashLabError):
    def __init__(self, code: str):
        super().__init__(f"Order code {code} is already in use")
        self.code = code
