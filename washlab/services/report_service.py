# washlab/services/report_service.py
from typing import Dict, Any, Optional
from datetime import date, datetime, timedelta
from decimal import Decimal
import pytz
from ..config import Config
from ..models.order import OrderType
from ..models.status import ORDER_STAGES
from . import order_queries

class ReportService:
    """Admin reporting over the order and payment logs"""

    def __init__(self, store, transaction_service):
        self.store = store
        self.transaction_service = transaction_service
        self.tz = pytz.timezone(Config.TIMEZONE)

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def get_daily_report(self, day: Optional[date] = None,
                         branch_id: Optional[str] = None) -> Dict[str, Any]:
        """Report for a single day"""
        day = day or self.today()
        return self.generate_report(day, day, branch_id)

    def get_weekly_report(self, branch_id: Optional[str] = None) -> Dict[str, Any]:
        """Report for the last seven days"""
        today = self.today()
        return self.generate_report(today - timedelta(days=6), today, branch_id)

    def get_monthly_report(self, branch_id: Optional[str] = None) -> Dict[str, Any]:
        """Report for the current month so far"""
        today = self.today()
        return self.generate_report(today.replace(day=1), today, branch_id)

    def generate_report(self, start_date: date, end_date: date,
                        branch_id: Optional[str] = None) -> Dict[str, Any]:
        """Report for an inclusive date range"""
        orders = order_queries.filter_orders(
            self.store.orders, start=start_date, end=end_date,
            branch_id=branch_id, tz=self.tz
        )

        # booked revenue comes from priced orders, collected from payments
        total_revenue = sum((o.total_price for o in orders if o.total_price is not None), Decimal(0))
        collected = sum((o.paid_amount for o in orders if o.is_paid), Decimal(0))

        status_counts = {status.value: 0 for status in ORDER_STAGES}
        for order in orders:
            status_counts[order.status.value] += 1

        total_loads = sum(o.loads or 0 for o in orders)
        total_weight = sum(o.weight or 0 for o in orders)

        return {
            "period": {
                "start": start_date.strftime("%Y-%m-%d"),
                "end": end_date.strftime("%Y-%m-%d")
            },
            "branch_id": branch_id,
            "total_orders": len(orders),
            "total_revenue": total_revenue,
            "collected_revenue": collected,
            "walkin_orders": sum(1 for o in orders if o.order_type == OrderType.WALKIN),
            "online_orders": sum(1 for o in orders if o.order_type == OrderType.ONLINE),
            "completed_orders": status_counts["completed"],
            "paid_orders": sum(1 for o in orders if o.is_paid),
            "total_loads": total_loads,
            "total_weight": total_weight,
            "status_counts": status_counts,
        }

    def staff_takings(self, day: Optional[date] = None,
                      branch_id: Optional[str] = None) -> Dict[str, Decimal]:
        """Collected amount per staff member for a day"""
        takings: Dict[str, Decimal] = {}
        for tx in self.transaction_service.list_transactions(day or self.today(), branch_id):
            takings[tx.staff_name] = takings.get(tx.staff_name, Decimal(0)) + tx.amount
        return takings
