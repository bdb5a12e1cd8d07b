# washlab/utils/messages.py
from typing import Any, Dict, Iterable
from ..config import PricingConfig
from ..models.order import Order
from ..models.status import ORDER_STAGES, OrderStatus, stage_index, stage_label
from ..services.pricing import PriceBreakdown
from ..utils.formatters import format_price, format_datetime, format_weight, time_ago

STATUS_EMOJI = {
    OrderStatus.PENDING_DROPOFF: "⏳",
    OrderStatus.CHECKED_IN: "📥",
    OrderStatus.SORTING: "🧺",
    OrderStatus.WASHING: "🫧",
    OrderStatus.DRYING: "🌬",
    OrderStatus.FOLDING: "👕",
    OrderStatus.READY: "✅",
    OrderStatus.OUT_FOR_DELIVERY: "🛵",
    OrderStatus.COMPLETED: "📦",
}

class Messages:
    @staticmethod
    def service_label(order: Order) -> str:
        return PricingConfig.SERVICE_LABELS.get(order.service_type.value, order.service_type.value)

    @staticmethod
    def format_order(order: Order) -> str:
        """Full order card for staff"""
        items_text = "\n".join(
            f"- {item.quantity}x {item.category}" for item in order.items
        ) or "- not counted yet"

        return (
            f"🧾 Order {order.code}\n"
            f"------------------\n"
            f"👤 {order.customer_name} ({order.customer_phone})\n"
            f"🧼 {Messages.service_label(order)}\n"
            f"🏷 Bag card: {order.bag_card_number or '-'}\n"
            f"⚖️ Weight: {format_weight(order.weight)} / loads: {order.loads or '-'}\n"
            f"{items_text}\n"
            f"------------------\n"
            f"💰 Total: {format_price(order.total_price)} ({order.payment_status.value})\n"
            f"📊 Status: {STATUS_EMOJI[order.status]} {stage_label(order.status)}\n"
            f"🕒 Created: {format_datetime(order.created_at)}\n"
        )

    @staticmethod
    def format_tracking(order: Order) -> str:
        """Customer view: where the order is on the washing line"""
        current = stage_index(order.status)
        lines = []
        for index, stage in enumerate(ORDER_STAGES):
            if stage == OrderStatus.OUT_FOR_DELIVERY and not order.include_delivery \
                    and order.status != OrderStatus.OUT_FOR_DELIVERY:
                continue
            mark = "✅" if index < current else ("👉" if index == current else "▫️")
            lines.append(f"{mark} {stage_label(stage)}")

        price = format_price(order.total_price) if order.is_priced else "priced at drop-off"
        return (
            f"🔎 Order {order.code}\n"
            f"{STATUS_EMOJI[order.status]} {stage_label(order.status)}\n\n"
            + "\n".join(lines)
            + f"\n\n💰 {price}"
        )

    @staticmethod
    def format_order_line(order: Order) -> str:
        return (
            f"{STATUS_EMOJI[order.status]} {order.code} · {order.customer_name} · "
            f"{stage_label(order.status)} · {time_ago(order.created_at)}"
        )

    @staticmethod
    def format_order_list(title: str, orders: Iterable[Order]) -> str:
        lines = [Messages.format_order_line(o) for o in orders]
        if not lines:
            return f"{title}\n\nNo orders."
        return f"{title} ({len(lines)})\n\n" + "\n".join(lines)

    @staticmethod
    def format_estimate(service_type: str, weight: float, quote: PriceBreakdown) -> str:
        label = PricingConfig.SERVICE_LABELS.get(service_type, service_type)
        text = (
            f"🧮 {label}, {format_weight(weight)}\n"
            f"Loads: {quote.loads}\n"
            f"Subtotal: {format_price(quote.subtotal)}\n"
            f"Tax: {format_price(quote.tax)}\n"
            f"Service fee: {format_price(quote.service_fee)}\n"
        )
        if quote.delivery_fee:
            text += f"Delivery: {format_price(quote.delivery_fee)}\n"
        return text + f"💰 Total: {format_price(quote.total)}"

    @staticmethod
    def format_report(report: Dict[str, Any]) -> str:
        period = report["period"]
        return (
            f"📈 Report {period['start']} → {period['end']}\n"
            f"Branch: {report['branch_id'] or 'all'}\n\n"
            f"Orders: {report['total_orders']:,} "
            f"(walk-in {report['walkin_orders']:,}, online {report['online_orders']:,})\n"
            f"Completed: {report['completed_orders']:,}\n"
            f"Paid: {report['paid_orders']:,}\n"
            f"Loads: {report['total_loads']:,}\n"
            f"Revenue: {format_price(report['total_revenue'])}\n"
            f"Collected: {format_price(report['collected_revenue'])}"
        )
