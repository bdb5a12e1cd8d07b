# washlab/handlers/base_handler.py
import logging
from datetime import datetime
import pytz
from telegram import Update
from telegram.ext import ContextTypes
from ..config import Config
from ..models.staff import StaffIdentity
from ..utils.keyboards import Keyboards
from ..utils.messages import Messages

class BaseHandler:
    """Base class for handlers"""
    def __init__(self, services):
        self.services = services
        self.keyboards = Keyboards()
        self.messages = Messages()
        self.logger = logging.getLogger(self.__class__.__module__)

    @staticmethod
    async def reply(update: Update, text: str, reply_markup=None):
        """Answer a command or refresh the message behind a button"""
        if update.callback_query:
            await update.callback_query.answer()
            await update.callback_query.edit_message_text(text, reply_markup=reply_markup)
        else:
            await update.message.reply_text(text, reply_markup=reply_markup)

    async def reply_error(self, update: Update, error: Exception):
        self.logger.warning(f"Request from {update.effective_user.id} failed: {error}")
        await self.reply(update, f"❌ {error}")

    def is_admin(self, user_id: int) -> bool:
        """Check admin access"""
        return user_id in Config.ADMIN_IDS

    def is_staff(self, user_id: int) -> bool:
        """Check wash-station access; admins count as staff"""
        return user_id in Config.STAFF_IDS or self.is_admin(user_id)

    def staff_identity(self, update: Update) -> StaffIdentity:
        """Verify the Telegram user as a staff member"""
        user = update.effective_user
        if not self.is_staff(user.id):
            return StaffIdentity(success=False)
        return StaffIdentity(
            success=True,
            staff_id=str(user.id),
            staff_name=user.full_name,
            verified_at=datetime.now(pytz.utc),
            method="telegram",
        )

    async def deny_if_not_staff(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
        if self.is_staff(update.effective_user.id):
            return False
        await self.reply(update, "⛔️ This command is for wash-station staff.")
        return True
