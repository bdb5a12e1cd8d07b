# washlab/handlers/customer_handlers.py
from typing import Any, Dict, List, Tuple
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..config import PricingConfig
from ..errors import WashLabError
from ..models.order import ServiceType

SERVICE_NAMES = ", ".join(s.value for s in ServiceType)

TEXT_OPTIONS = ("hall", "room", "notes")
FLAG_OPTIONS = {"whites": "has_whites", "separate": "wash_separately", "delivery": "include_delivery"}
YES = ("yes", "y", "true", "1")
NO = ("no", "n", "false", "0")


def parse_order_args(args: List[str]) -> Tuple[str, Dict[str, Any]]:
    """Split ``Ama Mensah hall=Volta delivery=yes`` into the name and booking options"""
    name_parts = []
    options: Dict[str, Any] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            name_parts.append(arg)
            continue
        key = key.lower()
        if key in TEXT_OPTIONS:
            options[key] = value.replace("_", " ")
        elif key in FLAG_OPTIONS:
            if value.lower() not in YES + NO:
                raise ValueError(f"{key} must be yes or no")
            options[FLAG_OPTIONS[key]] = value.lower() in YES
        else:
            raise ValueError(f"Unknown option '{key}'")
    return " ".join(name_parts), options

HELP_TEXT = (
    "🧺 WashLab\n\n"
    "/track <code> - where is my laundry\n"
    "/price <service> <kg> [delivery] - price estimate\n"
    "/order <service> <phone> <name> [hall= room= whites=yes separate=yes delivery=yes notes=]"
    " - book a drop-off\n\n"
    f"Services: {SERVICE_NAMES}"
)

class CustomerHandler(BaseHandler):
    """Commands for customers"""

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /start"""
        user = update.effective_user
        await update.message.reply_text(f"Hello {user.first_name}! 👋\n\n{HELP_TEXT}")

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /help"""
        await update.message.reply_text(HELP_TEXT)

    async def track(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Show order progress by order code"""
        if not context.args:
            await update.message.reply_text("Usage: /track <order code>, e.g. /track WL-4921")
            return

        await self.show_tracking(update, context.args[0])

    async def show_tracking(self, update: Update, code: str):
        order = self.services.store.get_by_code(code)
        if not order:
            await self.reply(update, f"❌ Order {code} not found.")
            return

        await self.reply(
            update,
            self.messages.format_tracking(order),
            reply_markup=self.keyboards.track_menu(order)
        )

    async def price(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Price estimate before drop-off"""
        args = context.args or []
        if len(args) < 2:
            await update.message.reply_text("Usage: /price <service> <kg> [delivery]")
            return

        service_type = args[0].lower()
        if service_type not in PricingConfig.SERVICE_PRICES:
            await update.message.reply_text(f"❌ Unknown service. Choose one of: {SERVICE_NAMES}")
            return
        try:
            weight = float(args[1])
            include_delivery = len(args) > 2 and args[2].lower() in ("delivery", "yes", "y")
            quote = self.services.orders.estimate(service_type, weight, include_delivery)
        except ValueError:
            await update.message.reply_text("❌ Weight must be a positive number of kg.")
            return

        await update.message.reply_text(self.messages.format_estimate(service_type, weight, quote))

    async def order(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Book an online order for drop-off"""
        args = context.args or []
        if len(args) < 3:
            await update.message.reply_text(
                "Usage: /order <service> <phone> <name> [hall=... room=... whites=yes "
                "separate=yes delivery=yes notes=...]"
            )
            return

        service_type = args[0].lower()
        if service_type not in PricingConfig.SERVICE_PRICES:
            await update.message.reply_text(f"❌ Unknown service. Choose one of: {SERVICE_NAMES}")
            return

        try:
            name, options = parse_order_args(args[2:])
        except ValueError as e:
            await update.message.reply_text(f"❌ {e}")
            return

        try:
            order = self.services.orders.place_online_order(
                phone=args[1],
                name=name,
                service_type=service_type,
                **options
            )
        except WashLabError as e:
            await self.reply_error(update, e)
            return

        await update.message.reply_text(
            f"✅ Order booked!\n\n"
            f"Your order code is {order.code}.\n"
            f"Drop your bag at the wash station and track it with /track {order.code}"
        )
