# washlab/config.py
import os
import logging
from decimal import Decimal
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, List

# Load environment variables
load_dotenv()

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent


def _id_list(name: str) -> List[int]:
    return [
        int(id_) for id_ in os.getenv(name, "").split(",")
        if id_.strip().isdigit()
    ]


class Config:
    """Configuration settings for the wash station"""

    # Bot settings
    TELEGRAM_TOKEN: str = os.getenv("TELEGRAM_TOKEN", "")

    # Storage settings
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

    # Access settings
    ADMIN_IDS: List[int] = _id_list("ADMIN_IDS")
    STAFF_IDS: List[int] = _id_list("STAFF_IDS")

    # Branch this process serves
    BRANCH_ID: str = os.getenv("BRANCH_ID", "main")

    # Other settings
    TIMEZONE: str = os.getenv("TZ", "Africa/Accra")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CURRENCY: str = os.getenv("CURRENCY", "₵")
    ORDER_CODE_PREFIX: str = os.getenv("ORDER_CODE_PREFIX", "WL")

    # Paths
    LOG_DIR = BASE_DIR / "logs"

    @classmethod
    def validate(cls):
        """Check the settings the bot cannot start without"""
        if not cls.TELEGRAM_TOKEN:
            raise ValueError("No TELEGRAM_TOKEN set in environment")


class PricingConfig:
    """Static rate table"""

    KG_PER_LOAD: int = 8
    OVERFLOW_ALLOWED: int = 2

    SERVICE_PRICES: Dict[str, Decimal] = {
        "wash_only": Decimal("25"),
        "wash_and_dry": Decimal("50"),
        "dry_only": Decimal("25"),
    }
    SERVICE_LABELS: Dict[str, str] = {
        "wash_only": "Wash Only",
        "wash_and_dry": "Wash & Dry",
        "dry_only": "Dry Only",
    }
    DEFAULT_SERVICE: str = "wash_and_dry"

    DELIVERY_FEE: Decimal = Decimal("5.00")
    TAX_RATE: Decimal = Decimal("0.08")
    SERVICE_FEE: Decimal = Decimal("1.50")

    WASHES_FOR_FREE_WASH: int = 10


def setup_logging():
    """Configure logging settings"""
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    Config.LOG_DIR.mkdir(exist_ok=True)
    log_file = Config.LOG_DIR / "washlab.log"

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL),
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
