# washlab/models/status.py
"""Order lifecycle.

Stages run forward only::

    pending_dropoff -> checked_in -> sorting -> washing -> drying -> folding
        -> ready -> out_for_delivery -> completed

with ``ready -> completed`` for in-person pickup.
"""
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple, Union


class OrderStatus(str, Enum):
    PENDING_DROPOFF = "pending_dropoff"
    CHECKED_IN = "checked_in"
    SORTING = "sorting"
    WASHING = "washing"
    DRYING = "drying"
    FOLDING = "folding"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    COMPLETED = "completed"


ORDER_STAGES: Tuple[OrderStatus, ...] = tuple(OrderStatus)

STAGE_LABELS: Dict[OrderStatus, str] = {
    OrderStatus.PENDING_DROPOFF: "Pending Drop-off",
    OrderStatus.CHECKED_IN: "Checked In",
    OrderStatus.SORTING: "Sorting",
    OrderStatus.WASHING: "Washing",
    OrderStatus.DRYING: "Drying",
    OrderStatus.FOLDING: "Folding",
    OrderStatus.READY: "Ready",
    OrderStatus.OUT_FOR_DELIVERY: "Out for Delivery",
    OrderStatus.COMPLETED: "Completed",
}

VALID_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING_DROPOFF: frozenset({OrderStatus.CHECKED_IN}),
    OrderStatus.CHECKED_IN: frozenset({OrderStatus.SORTING}),
    OrderStatus.SORTING: frozenset({OrderStatus.WASHING}),
    OrderStatus.WASHING: frozenset({OrderStatus.DRYING}),
    OrderStatus.DRYING: frozenset({OrderStatus.FOLDING}),
    OrderStatus.FOLDING: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.COMPLETED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
}

StatusLike = Union[OrderStatus, str]


def can_transition(current: StatusLike, requested: StatusLike) -> bool:
    """True when an order at ``current`` may be moved to ``requested``.

    Writing the status an order already has is allowed and changes nothing.
    Unknown status names are never legal.
    """
    try:
        current = OrderStatus(current)
        requested = OrderStatus(requested)
    except ValueError:
        return False
    if current == requested:
        return True
    return requested in VALID_TRANSITIONS[current]


def next_status(current: StatusLike, delivery: bool = False) -> Optional[OrderStatus]:
    """The stage staff are offered next; None once completed."""
    current = OrderStatus(current)
    if current == OrderStatus.READY:
        return OrderStatus.OUT_FOR_DELIVERY if delivery else OrderStatus.COMPLETED
    if current == OrderStatus.COMPLETED:
        return None
    return ORDER_STAGES[ORDER_STAGES.index(current) + 1]


def stage_index(status: StatusLike) -> int:
    return ORDER_STAGES.index(OrderStatus(status))


def stage_label(status: StatusLike) -> str:
    return STAGE_LABELS[OrderStatus(status)]
