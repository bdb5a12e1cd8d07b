# washlab/handlers/callback_handler.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from .customer_handlers import CustomerHandler
from .staff_handlers import StaffHandler
from ..errors import OrderNotFoundError, WashLabError

STAGE_ACTIONS = ("advance", "complete", "deliver")

class CallbackHandler(BaseHandler):
    """Route inline button presses"""

    def __init__(self, services):
        super().__init__(services)
        self.customer_handler = CustomerHandler(services)
        self.staff_handler = StaffHandler(services)

    async def handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle every callback query"""
        query = update.callback_query
        action, _, reference = query.data.partition("_")

        if action == "track":
            await self.customer_handler.show_tracking(update, reference)
        elif action in STAGE_ACTIONS or action == "order":
            await self.handle_order_callback(update, action, reference)
        else:
            await query.answer("⚠️ Unknown action")

    async def handle_order_callback(self, update: Update, action: str, reference: str):
        if not self.is_staff(update.effective_user.id):
            await update.callback_query.answer("⛔️ Staff only")
            return

        try:
            if action == "order":
                order = self.services.store.get_order(reference)
                if not order:
                    raise OrderNotFoundError(reference)
            else:
                # buttons carry the version they were drawn for
                order_id, _, version = reference.rpartition("_")
                order = self.staff_handler.apply_stage_action(
                    update, action, order_id, int(version)
                )
        except (WashLabError, ValueError) as e:
            await self.reply_error(update, e)
            return

        await self.reply(
            update,
            self.messages.format_order(order),
            reply_markup=self.keyboards.staff_order_menu(order)
        )
