# main.py
import logging
from washlab.bot import WashLabBot
from washlab.config import setup_logging

def main():
    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        # Initialize and start bot
        bot = WashLabBot()
        logger.info("Starting bot...")
        bot.run()
    except Exception as e:
        logger.error(f"Error starting bot: {e}", exc_info=True)
        raise

if __name__ == "__main__":
    main()
