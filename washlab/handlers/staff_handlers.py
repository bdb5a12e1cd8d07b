# washlab/handlers/staff_handlers.py
from typing import List
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..config import PricingConfig
from ..errors import OrderNotFoundError, WashLabError
from ..models.order import OrderItem, PaymentMethod
from ..utils.formatters import format_price

PAYMENT_METHODS = ", ".join(m.value for m in PaymentMethod)


def parse_items(args: List[str]) -> List[OrderItem]:
    """Turn ``shirts:5 trousers:2`` into order items; a bare word counts once"""
    items = []
    for arg in args:
        category, _, quantity = arg.partition(":")
        if not category:
            raise ValueError(f"Bad item '{arg}'")
        items.append(OrderItem(category=category, quantity=int(quantity) if quantity else 1))
    return items


class StaffHandler(BaseHandler):
    """Wash-station commands"""

    def _order_by_code(self, code: str):
        order = self.services.store.get_by_code(code)
        if not order:
            raise OrderNotFoundError(code)
        return order

    async def show_order(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Show one order card with its actions"""
        if await self.deny_if_not_staff(update, context):
            return
        if not context.args:
            await update.message.reply_text("Usage: /show <order code>")
            return
        try:
            order = self._order_by_code(context.args[0])
        except WashLabError as e:
            await self.reply_error(update, e)
            return
        await self.reply(update, self.messages.format_order(order),
                         reply_markup=self.keyboards.staff_order_menu(order))

    async def pending(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Online orders waiting for drop-off"""
        if await self.deny_if_not_staff(update, context):
            return
        await update.message.reply_text(
            self.messages.format_order_list("⏳ Pending drop-off", self.services.store.pending())
        )

    async def active(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Orders in processing"""
        if await self.deny_if_not_staff(update, context):
            return
        await update.message.reply_text(
            self.messages.format_order_list("🫧 In progress", self.services.store.active())
        )

    async def ready(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Orders ready for pickup"""
        if await self.deny_if_not_staff(update, context):
            return
        await update.message.reply_text(
            self.messages.format_order_list("✅ Ready for pickup", self.services.store.ready())
        )

    async def walkin(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Open an order for a customer at the counter"""
        if await self.deny_if_not_staff(update, context):
            return
        args = context.args or []
        if len(args) < 3 or args[0].lower() not in PricingConfig.SERVICE_PRICES:
            await update.message.reply_text("Usage: /walkin <service> <phone> <name>")
            return

        try:
            order = self.services.orders.create_walkin_order(
                phone=args[1], name=" ".join(args[2:]), service_type=args[0].lower()
            )
        except WashLabError as e:
            await self.reply_error(update, e)
            return

        await update.message.reply_text(
            f"✅ Walk-in order {order.code} opened.\n"
            f"Weigh it with /checkin {order.code} <kg> <bag card> [items]"
        )

    async def checkin(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Weigh, tag and price an order: /checkin <code> <kg> <bag card> [category:qty ...]"""
        if await self.deny_if_not_staff(update, context):
            return
        args = context.args or []
        if len(args) < 3:
            await update.message.reply_text(
                "Usage: /checkin <code> <kg> <bag card> [category:qty ...]"
            )
            return

        try:
            weight = float(args[1])
            items = parse_items(args[3:])
        except ValueError:
            await update.message.reply_text("❌ Weight must be a number and items look like shirts:5")
            return

        try:
            order = self._order_by_code(args[0])
            order = self.services.orders.check_in(
                order.id,
                weight=weight,
                bag_card_number=args[2],
                items=items,
                staff_name=update.effective_user.full_name,
                expected_version=order.version,
            )
        except (WashLabError, ValueError) as e:
            await self.reply_error(update, e)
            return

        await update.message.reply_text(
            f"📥 {order.code} checked in: {order.loads} load(s), {format_price(order.total_price)}\n\n"
            + self.messages.format_order(order),
            reply_markup=self.keyboards.staff_order_menu(order)
        )

    async def advance(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Move an order to its next stage"""
        await self._change_stage(update, context, "advance")

    async def complete(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Hand an order over to the customer"""
        await self._change_stage(update, context, "complete")

    async def deliver(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Send a ready order out for delivery"""
        await self._change_stage(update, context, "deliver")

    async def _change_stage(self, update: Update, context: ContextTypes.DEFAULT_TYPE, action: str):
        if await self.deny_if_not_staff(update, context):
            return
        if not context.args:
            await update.message.reply_text(f"Usage: /{action} <order code>")
            return

        try:
            order = self._order_by_code(context.args[0])
            order = self.apply_stage_action(update, action, order.id, order.version)
        except WashLabError as e:
            await self.reply_error(update, e)
            return

        await update.message.reply_text(
            self.messages.format_order(order),
            reply_markup=self.keyboards.staff_order_menu(order)
        )

    def apply_stage_action(self, update: Update, action: str, order_id: str, version=None):
        identity = self.staff_identity(update)
        orders = self.services.orders
        if action == "complete":
            return orders.complete_order(order_id, identity, expected_version=version)
        if action == "deliver":
            return orders.send_out_for_delivery(order_id, identity, expected_version=version)
        return orders.advance_order(order_id, identity, expected_version=version)

    async def pay(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Record payment: /pay <code> <method> [voucher]"""
        if await self.deny_if_not_staff(update, context):
            return
        args = context.args or []
        if len(args) < 2 or args[1].lower() not in {m.value for m in PaymentMethod}:
            await update.message.reply_text(f"Usage: /pay <code> <{PAYMENT_METHODS}> [voucher]")
            return

        try:
            order = self._order_by_code(args[0])
            order = self.services.orders.record_payment(
                order.id,
                method=args[1].lower(),
                identity=self.staff_identity(update),
                voucher_code=args[2] if len(args) > 2 else None,
                expected_version=order.version,
            )
        except WashLabError as e:
            await self.reply_error(update, e)
            return

        await update.message.reply_text(
            f"💳 {order.code} paid: {format_price(order.paid_amount)} by {order.payment_method.value}"
        )

    async def sign_in(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Clock in for a shift"""
        await self._attendance(update, context, sign_in=True)

    async def sign_out(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Clock out"""
        await self._attendance(update, context, sign_in=False)

    async def _attendance(self, update: Update, context: ContextTypes.DEFAULT_TYPE, sign_in: bool):
        if await self.deny_if_not_staff(update, context):
            return
        identity = self.staff_identity(update)
        attendance = self.services.attendance
        if attendance.is_signed_in(identity.staff_id) == sign_in:
            state = "signed in" if sign_in else "signed out"
            await update.message.reply_text(f"ℹ️ You are already {state}.")
            return

        record = attendance.sign_in(identity) if sign_in else attendance.sign_out(identity)
        verb = "Signed in" if sign_in else "Signed out"
        await update.message.reply_text(f"🕒 {verb}: {record.staff_name}")
