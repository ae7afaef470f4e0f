"""
Materialization of due subscriptions into expense transactions
"""

import dataclasses
import logging
from datetime import datetime
from typing import Iterable, List, Tuple

from database.models import Subscription, Transaction
from shared.enums import Frequency, PaymentMethod, TransactionType
from shared.utils import add_months, parse_timestamp, to_local

logger = logging.getLogger(__name__)

MONTHS_PER_PERIOD = {
    Frequency.MONTHLY: 1,
    Frequency.YEARLY: 12,
}


def advance_due_date(next_due_date: str, frequency: Frequency) -> str:
    """
    Move a due date forward by one period, keeping its text format

    Args:
        next_due_date: ISO date ("2024-03-31") or date-time
        frequency: MONTHLY or YEARLY

    Returns:
        Next due date ("2024-04-30" for a monthly subscription due on Mar 31)

    Each step starts from the stored date, so a day clamped in a short month
    stays clamped: Jan 31 -> Feb 29 -> Mar 29. No anchor day is kept.
    """
    months = MONTHS_PER_PERIOD[Frequency(frequency)]

    if len(next_due_date) == 10:
        due = datetime.strptime(next_due_date, '%Y-%m-%d')
        return add_months(due, months).date().isoformat()

    return add_months(parse_timestamp(next_due_date), months).isoformat()


def subscription_transaction_id(subscription: Subscription) -> str:
    """Stable id of the transaction produced by one due date of a subscription"""
    return f"sub_{subscription.id}_{subscription.next_due_date[:10]}"


def materialize_due(
    subscriptions: Iterable[Subscription],
    now: datetime
) -> Tuple[List[Transaction], List[Subscription]]:
    """
    Produce the expense of every active subscription whose due date has passed

    Each due subscription yields one transaction per call and moves its due date
    forward by one period. The transaction id is derived from the subscription
    and the due date, so re-running after a failed write updates instead of
    duplicating.

    Args:
        subscriptions: Subscriptions of one user
        now: Current instant

    Returns:
        (new transactions, advanced subscriptions)
    """
    now = to_local(now)
    transactions = []
    advanced = []

    for subscription in subscriptions:
        if not subscription.active:
            continue

        if parse_timestamp(subscription.next_due_date) > now:
            continue

        transactions.append(Transaction(
            id=subscription_transaction_id(subscription),
            user_id=subscription.user_id,
            date=subscription.next_due_date,
            amount=subscription.amount,
            currency=subscription.currency,
            category=subscription.category,
            type=TransactionType.EXPENSE,
            description=subscription.name,
            payment_method=PaymentMethod.CARD,
        ))

        advanced.append(dataclasses.replace(
            subscription,
            next_due_date=advance_due_date(subscription.next_due_date, subscription.frequency)
        ))

        logger.info(f"Subscription {subscription.name} due on {subscription.next_due_date}, expense created")

    return transactions, advanced
