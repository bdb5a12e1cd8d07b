"""Telegram handlers"""
from .base_handler import BaseHandler
from .customer_handlers import CustomerHandler
from .staff_handlers import StaffHandler
from .admin_handlers import AdminHandler
from .callback_handler import CallbackHandler

__all__ = [
    'BaseHandler',
    'CustomerHandler',
    'StaffHandler',
    'AdminHandler',
    'CallbackHandler',
]
