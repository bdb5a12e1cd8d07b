# washlab/handlers/admin_handlers.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..utils.formatters import format_price

class AdminHandler(BaseHandler):
    """Admin commands"""

    async def report(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Sales report: /report [daily|weekly|monthly] [branch]"""
        if not self.is_admin(update.effective_user.id):
            await update.message.reply_text("⛔️ You do not have access to this section.")
            return

        args = context.args or []
        period = args[0].lower() if args else "daily"
        branch_id = args[1] if len(args) > 1 else None
        reports = self.services.reports

        if period == "weekly":
            report = reports.get_weekly_report(branch_id)
        elif period == "monthly":
            report = reports.get_monthly_report(branch_id)
        else:
            report = reports.get_daily_report(branch_id=branch_id)

        await update.message.reply_text(self.messages.format_report(report))

    async def takings(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Today's collected payments per staff member"""
        if not self.is_admin(update.effective_user.id):
            await update.message.reply_text("⛔️ You do not have access to this section.")
            return

        takings = self.services.reports.staff_takings()
        if not takings:
            await update.message.reply_text("No payments recorded today.")
            return

        lines = [f"- {name}: {format_price(amount)}" for name, amount in sorted(takings.items())]
        await update.message.reply_text("💰 Today's takings\n\n" + "\n".join(lines))
