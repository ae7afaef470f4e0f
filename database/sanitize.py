"""
Sanitization of wire/cached records into models

Every record read from the REST API, the local cache or a request body goes
through these functions once. Optional fields are resolved to their defaults
here and nowhere else.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from database.models import Subscription, Transaction, User, UserPreferences
from shared.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_CURRENCY,
    DEFAULT_LANGUAGE,
    DEFAULT_PASSWORD,
    DEFAULT_PAYMENT_METHOD,
)
from shared.enums import Currency, Frequency, Language, PaymentMethod, TransactionType
from shared.utils import parse_amount, parse_timestamp

logger = logging.getLogger(__name__)


def _enum_or_default(enum_cls, value: Any, default: str):
    try:
        return enum_cls(value)
    except ValueError:
        return enum_cls(default)


def _date_text(value: Any, field: str) -> str:
    """ISO text of a date value; raises ValueError when it cannot be parsed"""
    try:
        parse_timestamp(value)
    except (ValueError, TypeError, AttributeError):
        raise ValueError(f"Invalid {field}: {value!r}")
    return value if isinstance(value, str) else value.isoformat()


def _first(data: Dict[str, Any], *keys: str) -> Any:
    """Value of the first key present (accepts camelCase and snake_case)"""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def sanitize_transaction(data: Dict[str, Any]) -> Transaction:
    """
    Build a Transaction from a raw record, filling defaults

    Args:
        data: Wire record (camelCase) or database row (snake_case)

    Returns:
        Transaction with payment method (CARD), description ('') and currency
        resolved and amount coerced to a float

    Raises:
        ValueError: If id, owner, date, amount or type is missing or invalid
    """
    transaction_id = _first(data, 'id')
    user_id = _first(data, 'userId', 'user_id')
    date_value = _first(data, 'date')

    if not transaction_id or not user_id or not date_value:
        raise ValueError(f"Transaction record missing id, userId or date: {data}")

    amount = parse_amount(_first(data, 'amount'))
    if amount is None:
        raise ValueError(f"Invalid transaction amount: {data.get('amount')!r}")

    try:
        transaction_type = TransactionType(_first(data, 'type'))
    except ValueError:
        raise ValueError(f"Invalid transaction type: {data.get('type')!r}")

    return Transaction(
        id=str(transaction_id),
        user_id=str(user_id),
        date=_date_text(date_value, 'date'),
        amount=amount,
        currency=_enum_or_default(Currency, _first(data, 'currency'), DEFAULT_CURRENCY),
        category=_first(data, 'category') or DEFAULT_CATEGORY,
        type=transaction_type,
        description=_first(data, 'description') or '',
        payment_method=_enum_or_default(
            PaymentMethod,
            _first(data, 'paymentMethod', 'payment_method'),
            DEFAULT_PAYMENT_METHOD
        ),
    )


def sanitize_user(data: Dict[str, Any]) -> User:
    """
    Build a User from a raw record, filling defaults

    Raises:
        ValueError: If the id is missing
    """
    user_id = _first(data, 'id')
    if not user_id:
        raise ValueError(f"User record missing id: {data}")

    preferences = data.get('preferences') or {}
    chat_id = _first(data, 'telegramChatId', 'telegram_chat_id')

    return User(
        id=str(user_id),
        name=_first(data, 'name') or str(user_id),
        avatar=_first(data, 'avatar') or '',
        password=_first(data, 'password') or DEFAULT_PASSWORD,
        telegram_chat_id=str(chat_id).strip() if chat_id else None,
        preferences=UserPreferences(
            currency=_enum_or_default(
                Currency,
                preferences.get('currency', data.get('currency')),
                DEFAULT_CURRENCY
            ),
            language=_enum_or_default(
                Language,
                preferences.get('language', data.get('language')),
                DEFAULT_LANGUAGE
            ),
        ),
    )


def sanitize_subscription(data: Dict[str, Any]) -> Subscription:
    """
    Build a Subscription from a raw record, filling defaults

    Raises:
        ValueError: If id, owner, name, amount or next due date is missing or invalid
    """
    subscription_id = _first(data, 'id')
    user_id = _first(data, 'userId', 'user_id')
    next_due = _first(data, 'nextDueDate', 'next_due_date')
    amount = parse_amount(_first(data, 'amount'))

    if not subscription_id or not user_id or not next_due or amount is None:
        raise ValueError(f"Invalid subscription record: {data}")

    active = _first(data, 'active')

    return Subscription(
        id=str(subscription_id),
        user_id=str(user_id),
        name=_first(data, 'name') or DEFAULT_CATEGORY,
        amount=amount,
        currency=_enum_or_default(Currency, _first(data, 'currency'), DEFAULT_CURRENCY),
        category=_first(data, 'category') or DEFAULT_CATEGORY,
        frequency=_enum_or_default(Frequency, _first(data, 'frequency'), Frequency.MONTHLY.value),
        next_due_date=_date_text(next_due, 'next due date'),
        active=True if active is None else bool(active),
    )


def _sanitize_many(records: Iterable[Dict[str, Any]], sanitizer, kind: str) -> List:
    result = []
    for record in records:
        try:
            result.append(sanitizer(record))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping invalid {kind} record: {e}")
    return result


def sanitize_transactions(records: Iterable[Dict[str, Any]]) -> List[Transaction]:
    """Sanitize records, skipping (and logging) the ones that cannot be repaired"""
    return _sanitize_many(records, sanitize_transaction, 'transaction')


def sanitize_users(records: Iterable[Dict[str, Any]]) -> List[User]:
    return _sanitize_many(records, sanitize_user, 'user')


def sanitize_subscriptions(records: Iterable[Dict[str, Any]]) -> List[Subscription]:
    return _sanitize_many(records, sanitize_subscription, 'subscription')


def find_user(records: Iterable[Dict[str, Any]], user_id: str) -> Optional[User]:
    """Sanitized user with the given id, or None"""
    for user in sanitize_users(records):
        if user.id == user_id:
            return user
    return None
