"""
Data models (dataclasses) for stored entities

Field names are snake_case in Python and camelCase on the wire
(REST bodies and the local cache).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from shared.constants import DEFAULT_CURRENCY, DEFAULT_LANGUAGE
from shared.enums import Currency, Frequency, Language, PaymentMethod, TransactionType
from shared.utils import parse_timestamp


@dataclass
class UserPreferences:
    """Display preferences of a user"""
    currency: Currency = Currency(DEFAULT_CURRENCY)
    language: Language = Language(DEFAULT_LANGUAGE)

    def to_dict(self) -> Dict[str, str]:
        return {'currency': self.currency.value, 'language': self.language.value}


@dataclass
class User:
    """User model"""
    id: str
    name: str
    avatar: str
    password: str
    telegram_chat_id: Optional[str] = None
    preferences: UserPreferences = field(default_factory=UserPreferences)

    @property
    def currency(self) -> Currency:
        return self.preferences.currency

    @property
    def language(self) -> Language:
        return self.preferences.language

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'name': self.name,
            'avatar': self.avatar,
            'password': self.password,
            'preferences': self.preferences.to_dict(),
        }
        if self.telegram_chat_id:
            data['telegramChatId'] = self.telegram_chat_id
        return data


@dataclass
class Transaction:
    """
    Transaction model

    Amount is never negative; the direction is carried by type.
    """
    id: str
    user_id: str
    date: str  # ISO-8601 text
    amount: float
    currency: Currency
    category: str
    type: TransactionType
    description: str = ''
    payment_method: PaymentMethod = PaymentMethod.CARD

    @property
    def timestamp(self) -> datetime:
        """Transaction instant as a local-time aware datetime"""
        return parse_timestamp(self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'userId': self.user_id,
            'date': self.date,
            'amount': self.amount,
            'currency': self.currency.value,
            'category': self.category,
            'description': self.description,
            'type': self.type.value,
            'paymentMethod': self.payment_method.value,
        }


@dataclass
class Subscription:
    """Recurring expense that materializes a transaction when due"""
    id: str
    user_id: str
    name: str
    amount: float
    currency: Currency
    category: str
    frequency: Frequency
    next_due_date: str  # ISO-8601 text
    active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'amount': self.amount,
            'currency': self.currency.value,
            'category': self.category,
            'frequency': self.frequency.value,
            'nextDueDate': self.next_due_date,
            'active': self.active,
        }
