# washlab/services/pricing.py
"""Load and price calculation.

Everything here is a pure function of its arguments and the static
``PricingConfig`` table.
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Union
from pydantic import BaseModel
from ..config import PricingConfig
from ..models.order import ServiceType

CENTS = Decimal("0.01")


class PriceBreakdown(BaseModel):
    subtotal: Decimal
    tax: Decimal
    service_fee: Decimal
    delivery_fee: Decimal
    total: Decimal
    loads: int


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def rate_per_load(service_type: Union[ServiceType, str]) -> Decimal:
    """Price of one load; unknown services are charged at the default rate"""
    key = service_type.value if isinstance(service_type, ServiceType) else str(service_type)
    prices = PricingConfig.SERVICE_PRICES
    return prices.get(key, prices[PricingConfig.DEFAULT_SERVICE])


def calculate_loads(weight: float) -> int:
    """Number of billable loads for a weight in kg.

    Anything strictly under one load plus the overflow allowance is a single
    load; heavier bags are rounded up to whole loads.
    """
    if not math.isfinite(weight) or weight < 0:
        raise ValueError(f"weight must be a non-negative number, got {weight}")
    kg_per_load = PricingConfig.KG_PER_LOAD
    if weight < kg_per_load + PricingConfig.OVERFLOW_ALLOWED:
        effective_weight = kg_per_load
    else:
        effective_weight = weight
    return math.ceil(effective_weight / kg_per_load)


def price_for_loads(service_type: Union[ServiceType, str], loads: int) -> Decimal:
    return _money(rate_per_load(service_type) * loads)


def calculate_total_price(service_type: Union[ServiceType, str], weight: float,
                          include_delivery: bool = False) -> PriceBreakdown:
    """Full customer-facing price for an order"""
    loads = calculate_loads(weight)
    subtotal = price_for_loads(service_type, loads)
    tax = _money(subtotal * PricingConfig.TAX_RATE)
    service_fee = _money(PricingConfig.SERVICE_FEE)
    delivery_fee = _money(PricingConfig.DELIVERY_FEE) if include_delivery else _money(Decimal(0))

    return PriceBreakdown(
        subtotal=subtotal,
        tax=tax,
        service_fee=service_fee,
        delivery_fee=delivery_fee,
        total=subtotal + tax + service_fee + delivery_fee,
        loads=loads,
    )
