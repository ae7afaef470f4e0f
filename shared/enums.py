"""
Closed value sets used across the server, the bot and the dashboard client
"""

from enum import Enum


class Currency(str, Enum):
    EUR = 'EUR'
    USD = 'USD'
    PLN = 'PLN'


class Language(str, Enum):
    IT = 'it'
    EN = 'en'
    PL = 'pl'


class TransactionType(str, Enum):
    INCOME = 'INCOME'
    EXPENSE = 'EXPENSE'


class PaymentMethod(str, Enum):
    CASH = 'CASH'
    CARD = 'CARD'


class Period(str, Enum):
    """Reporting periods for dashboard filters and bot reports"""
    DAILY = 'DAILY'
    WEEKLY = 'WEEKLY'
    MONTHLY = 'MONTHLY'
    YEARLY = 'YEARLY'
    ALL = 'ALL'


class Frequency(str, Enum):
    MONTHLY = 'MONTHLY'
    YEARLY = 'YEARLY'


class Intent(str, Enum):
    """What a bot message asks for"""
    TRANSACTION = 'TRANSACTION'
    REPORT = 'REPORT'
    CHAT = 'CHAT'
