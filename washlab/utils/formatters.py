# washlab/utils/formatters.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
import pytz
from ..config import Config

def format_price(amount: Optional[Decimal]) -> str:
    """Format a money amount"""
    if amount is None:
        return "-"
    return f"{Config.CURRENCY}{Decimal(amount):,.2f}"

def format_datetime(dt: datetime) -> str:
    """Format a timestamp in the branch timezone"""
    local_tz = pytz.timezone(Config.TIMEZONE)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    local_time = dt.astimezone(local_tz)
    return local_time.strftime("%Y-%m-%d %H:%M")

def format_weight(weight: Optional[float]) -> str:
    if weight is None:
        return "-"
    return f"{weight:g} kg"

def time_ago(dt: datetime, now: Optional[datetime] = None) -> str:
    """Short age of an order, e.g. 15m or 3h"""
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    now = now or datetime.now(pytz.utc)
    minutes = int((now - dt).total_seconds() // 60)
    if minutes < 60:
        return f"{max(minutes, 0)}m"
    return f"{minutes // 60}h"
