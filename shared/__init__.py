"""
Shared Module
Common utilities, configuration, and constants
"""

from .config import settings
from .constants import CATEGORIES, TRANSACTION_TYPES, PAYMENT_METHODS, TIPS_CATEGORY
from .logger import setup_logging
from .utils import format_amount, parse_amount, parse_timestamp
from .currency import convert, format_currency
from .enums import Currency, Language, TransactionType, PaymentMethod, Period, Frequency, Intent

__version__ = "1.0.0"

__all__ = [
    "settings",
    "CATEGORIES",
    "TRANSACTION_TYPES",
    "PAYMENT_METHODS",
    "TIPS_CATEGORY",
    "setup_logging",
    "format_amount",
    "parse_amount",
    "parse_timestamp",
    "convert",
    "format_currency",
    "Currency",
    "Language",
    "TransactionType",
    "PaymentMethod",
    "Period",
    "Frequency",
    "Intent",
]
