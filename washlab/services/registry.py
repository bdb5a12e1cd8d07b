# washlab/services/registry.py
from typing import Optional
from .attendance_service import AttendanceService
from .customer_service import CustomerService
from .identity import IdGenerator
from .order_service import OrderService
from .order_store import OrderStore
from .report_service import ReportService
from .transaction_service import TransactionService
from .voucher_service import VoucherService

class Services:
    """One instance of every service, sharing a single order store"""

    def __init__(self, db, branch_id: Optional[str] = None):
        self.db = db
        self.ids = IdGenerator()
        self.store = OrderStore(db, self.ids)
        self.customers = CustomerService(db, self.ids)
        self.transactions = TransactionService(db)
        self.vouchers = VoucherService(db)
        self.attendance = AttendanceService(db, branch_id)
        self.orders = OrderService(
            self.store, self.customers, self.transactions, self.vouchers, branch_id
        )
        self.reports = ReportService(self.store, self.transactions)
