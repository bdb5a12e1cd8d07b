# washlab/services/customer_service.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
import pytz
from pydantic import ValidationError
from ..config import PricingConfig
from ..database.database import CUSTOMERS_KEY
from ..models.customer import Customer, normalize_phone
from .identity import IdGenerator

class CustomerService:
    """Phone-first customer directory"""

    def __init__(self, db, id_generator: Optional[IdGenerator] = None):
        self.db = db
        self.ids = id_generator or IdGenerator()
        self.logger = logging.getLogger(__name__)

    def _load(self) -> List[Customer]:
        try:
            return [Customer.model_validate(c) for c in self.db.read(CUSTOMERS_KEY)]
        except (ValidationError, TypeError) as e:
            self.logger.error(f"Stored customers are corrupt, starting with an empty list: {e}")
            return []

    def _save(self, customers: List[Customer]):
        self.db.write(CUSTOMERS_KEY, [c.model_dump(mode="json") for c in customers])

    def list_customers(self) -> List[Customer]:
        """All known customers"""
        return self._load()

    def find_by_phone(self, phone: str) -> Optional[Customer]:
        """Look a customer up by phone, ignoring formatting"""
        clean_phone = normalize_phone(phone)
        if not clean_phone:
            return None
        return next((c for c in self._load() if c.phone == clean_phone), None)

    def create_customer(self, phone: str, name: str, **extra) -> Customer:
        """Register a customer, or return the existing one for this phone"""
        existing = self.find_by_phone(phone)
        if existing:
            return existing

        customer = Customer(
            id=self.ids.customer_id(),
            phone=normalize_phone(phone),
            name=name,
            created_at=datetime.now(pytz.utc),
            **extra
        )
        customers = self._load()
        customers.append(customer)
        self._save(customers)
        self.logger.info(f"Customer {customer.id} registered")
        return customer

    def find_or_create(self, phone: str, name: str, **extra) -> Customer:
        return self.create_customer(phone, name, **extra)

    def update_customer(self, customer_id: str, updates: Dict[str, Any]) -> Optional[Customer]:
        """Update customer details"""
        customers = self._load()
        for index, customer in enumerate(customers):
            if customer.id == customer_id:
                data = customer.model_dump()
                data.update(updates)
                data["updated_at"] = datetime.now(pytz.utc)
                customers[index] = Customer.model_validate(data)
                self._save(customers)
                return customers[index]
        return None

    def increment_order_stats(self, phone: str, amount: Decimal) -> Optional[Customer]:
        """Count one more paid order for the customer"""
        customer = self.find_by_phone(phone)
        if not customer:
            return None
        order_count = customer.order_count + 1
        return self.update_customer(customer.id, {
            "order_count": order_count,
            "total_spent": customer.total_spent + Decimal(amount),
            "is_loyalty_member": customer.is_loyalty_member
            or order_count >= PricingConfig.WASHES_FOR_FREE_WASH,
        })

    @staticmethod
    def loyalty_progress(customer: Customer) -> Dict[str, Any]:
        """Where the customer stands on the free-wash card"""
        target = PricingConfig.WASHES_FOR_FREE_WASH
        earned, towards_next = divmod(customer.order_count, target)
        return {
            "washes": customer.order_count,
            "free_washes_earned": earned,
            "towards_next": towards_next,
            "remaining": target - towards_next,
        }
