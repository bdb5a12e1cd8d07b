# washlab/bot.py
import logging
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    ContextTypes,
)
from .config import Config
from .database.database import Database
from .services.registry import Services
from .handlers import (
    AdminHandler,
    CallbackHandler,
    CustomerHandler,
    StaffHandler,
)

class WashLabBot:
    def __init__(self, db: Database = None):
        """Set up the bot"""
        Config.validate()
        self.logger = logging.getLogger(__name__)
        self.db = db or Database()
        self.db.connect()
        self.services = Services(self.db, Config.BRANCH_ID)
        self.application = Application.builder().token(Config.TELEGRAM_TOKEN).build()
        self.setup_handlers()

    def setup_handlers(self):
        """Register bot handlers"""
        customer = CustomerHandler(self.services)
        staff = StaffHandler(self.services)
        admin = AdminHandler(self.services)
        callbacks = CallbackHandler(self.services)

        # customer commands
        self.application.add_handler(CommandHandler("start", customer.start))
        self.application.add_handler(CommandHandler("help", customer.help))
        self.application.add_handler(CommandHandler("track", customer.track))
        self.application.add_handler(CommandHandler("price", customer.price))
        self.application.add_handler(CommandHandler("order", customer.order))

        # wash-station commands
        self.application.add_handler(CommandHandler("show", staff.show_order))
        self.application.add_handler(CommandHandler("pending", staff.pending))
        self.application.add_handler(CommandHandler("active", staff.active))
        self.application.add_handler(CommandHandler("ready", staff.ready))
        self.application.add_handler(CommandHandler("walkin", staff.walkin))
        self.application.add_handler(CommandHandler("checkin", staff.checkin))
        self.application.add_handler(CommandHandler("advance", staff.advance))
        self.application.add_handler(CommandHandler("complete", staff.complete))
        self.application.add_handler(CommandHandler("deliver", staff.deliver))
        self.application.add_handler(CommandHandler("pay", staff.pay))
        self.application.add_handler(CommandHandler("signin", staff.sign_in))
        self.application.add_handler(CommandHandler("signout", staff.sign_out))

        # admin commands
        self.application.add_handler(CommandHandler("report", admin.report))
        self.application.add_handler(CommandHandler("takings", admin.takings))

        # inline buttons
        self.application.add_handler(CallbackQueryHandler(callbacks.handle_callback))

        self.application.add_error_handler(self.on_error)

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        """Log errors no handler dealt with"""
        self.logger.error(f"Unhandled error for update {update}: {context.error}", exc_info=context.error)
        if isinstance(update, Update) and update.effective_message:
            await update.effective_message.reply_text("❌ Something went wrong, please try again.")

    def run(self):
        """Start polling until interrupted"""
        self.logger.info(f"Wash station bot for branch {Config.BRANCH_ID} starting")
        try:
            self.application.run_polling(allowed_updates=Update.ALL_TYPES)
        finally:
            self.db.close()
