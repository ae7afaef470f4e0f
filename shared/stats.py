"""
Transaction aggregation: calendar period filters and income/expense totals
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from database.models import Transaction
from shared.currency import convert
from shared.enums import Currency, Period, TransactionType
from shared.utils import now_local, to_local


@dataclass(frozen=True)
class Stats:
    """Totals in one currency"""
    income: float = 0.0
    expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense

    def to_dict(self) -> Dict[str, float]:
        return {'income': self.income, 'expense': self.expense, 'balance': self.balance}


def in_period(moment: datetime, period: Period, reference: datetime) -> bool:
    """
    Check whether moment falls in the same calendar period as reference

    Both instants are compared in local time. Weeks are ISO weeks (Monday first).
    """
    period = Period(period)
    if period == Period.ALL:
        return True

    moment = to_local(moment)
    reference = to_local(reference)

    if period == Period.DAILY:
        return moment.date() == reference.date()
    if period == Period.WEEKLY:
        return moment.isocalendar()[:2] == reference.isocalendar()[:2]
    if period == Period.MONTHLY:
        return (moment.year, moment.month) == (reference.year, reference.month)
    if period == Period.YEARLY:
        return moment.year == reference.year

    return True


def filter_by_period(
    transactions: Iterable[Transaction],
    period: Period,
    reference: Optional[datetime] = None
) -> List[Transaction]:
    """
    Keep transactions in the same calendar period as the reference instant

    Args:
        transactions: Transactions to filter
        period: DAILY, WEEKLY, MONTHLY, YEARLY or ALL
        reference: Reference instant (defaults to now)

    Returns:
        Matching transactions in their original order
    """
    if Period(period) == Period.ALL:
        return list(transactions)

    if reference is None:
        reference = now_local()

    return [t for t in transactions if in_period(t.timestamp, period, reference)]


def compute_stats(transactions: Iterable[Transaction], base_currency: Currency) -> Stats:
    """
    Sum income and expense after converting each amount to base_currency

    Args:
        transactions: Any subset of transactions (may be empty)
        base_currency: Currency of the totals

    Returns:
        Stats with income, expense and balance = income - expense
    """
    income = 0.0
    expense = 0.0

    for t in transactions:
        amount = convert(t.amount, t.currency, base_currency)
        if t.type == TransactionType.INCOME:
            income += amount
        else:
            expense += amount

    return Stats(income=income, expense=expense)


def category_totals(
    transactions: Iterable[Transaction],
    base_currency: Currency,
    transaction_type: TransactionType = TransactionType.EXPENSE
) -> Dict[str, float]:
    """
    Totals per category for one transaction type, largest first
    """
    totals: Dict[str, float] = {}
    for t in transactions:
        if t.type != transaction_type:
            continue
        totals[t.category] = totals.get(t.category, 0.0) + convert(t.amount, t.currency, base_currency)

    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))
