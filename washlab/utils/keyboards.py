# washlab/utils/keyboards.py
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from ..models.order import Order
from ..models.status import OrderStatus, next_status, stage_label

class Keyboards:
    @staticmethod
    def staff_order_menu(order: Order) -> InlineKeyboardMarkup:
        """Actions offered on a staff order card"""
        keyboard = []
        target = next_status(order.status, delivery=order.include_delivery)
        if target is not None and order.status != OrderStatus.PENDING_DROPOFF and order.is_priced:
            keyboard.append([InlineKeyboardButton(
                f"➡️ {stage_label(target)}", callback_data=f"advance_{order.id}_{order.version}"
            )])
        if order.status == OrderStatus.READY:
            other = OrderStatus.COMPLETED if order.include_delivery else OrderStatus.OUT_FOR_DELIVERY
            action = "complete" if other == OrderStatus.COMPLETED else "deliver"
            keyboard.append([InlineKeyboardButton(
                f"↪️ {stage_label(other)}", callback_data=f"{action}_{order.id}_{order.version}"
            )])
        keyboard.append([InlineKeyboardButton("🔄 Refresh", callback_data=f"order_{order.id}")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def track_menu(order: Order) -> InlineKeyboardMarkup:
        """Refresh button under a customer tracking card"""
        return InlineKeyboardMarkup([
            [InlineKeyboardButton("🔄 Refresh", callback_data=f"track_{order.code}")]
        ])
