# washlab/services/transaction_service.py
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
import pytz
from ..config import Config
from ..database.database import TRANSACTIONS_KEY
from ..models.transaction import Transaction
from .order_queries import local_date

class TransactionService:
    """Append-only log of recorded payments"""

    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)
        self.tz = pytz.timezone(Config.TIMEZONE)

    def record(self, transaction: Transaction) -> Transaction:
        """Append a payment to the log"""
        self.db.append(TRANSACTIONS_KEY, transaction.model_dump(mode="json"))
        self.logger.info(
            f"Payment {transaction.transaction_id} for {transaction.order_code} "
            f"recorded by {transaction.staff_name}"
        )
        return transaction

    def list_transactions(self, day: Optional[date] = None,
                          branch_id: Optional[str] = None,
                          staff_id: Optional[str] = None) -> List[Transaction]:
        """Recorded payments, newest first"""
        transactions = [Transaction.model_validate(t) for t in self.db.read(TRANSACTIONS_KEY)]
        result = []
        for tx in reversed(transactions):
            if day is not None and local_date(tx.created_at, self.tz) != day:
                continue
            if branch_id is not None and tx.branch_id != branch_id:
                continue
            if staff_id is not None and tx.staff_id != staff_id:
                continue
            result.append(tx)
        return result

    def total_amount(self, transactions: List[Transaction]) -> Decimal:
        return sum((tx.amount for tx in transactions), Decimal(0))
