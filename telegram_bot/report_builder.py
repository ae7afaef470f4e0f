"""
Bot report: income, expenses and balance over a rolling window
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from database.connection import get_db_connection
from database.models import Transaction, User
from database.repositories.transaction_repo import TransactionRepository
from shared.currency import currency_symbol
from shared.enums import Period
from shared.stats import compute_stats
from shared.utils import add_months, format_amount, now_local, to_local
from telegram_bot.config import ReportLabels

logger = logging.getLogger(__name__)


def report_window_start(period: Period, now: datetime) -> Optional[datetime]:
    """
    Start of the rolling window ending at now

    The window is counted back from midnight of today: DAILY covers today,
    WEEKLY the last 7 days, MONTHLY the last month, YEARLY the last year.
    ALL has no start.
    """
    period = Period(period)
    if period == Period.ALL:
        return None

    midnight = to_local(now).replace(hour=0, minute=0, second=0, microsecond=0)

    if period == Period.DAILY:
        return midnight
    if period == Period.WEEKLY:
        return midnight - timedelta(days=7)
    if period == Period.MONTHLY:
        return add_months(midnight, -1)
    return add_months(midnight, -12)


def transactions_in_window(
    transactions: Iterable[Transaction],
    period: Period,
    now: datetime
) -> List[Transaction]:
    start = report_window_start(period, now)
    now = to_local(now)
    return [
        t for t in transactions
        if (start is None or t.timestamp >= start) and t.timestamp <= now
    ]


def format_report(transactions: Iterable[Transaction], period: Period, user: User, now: datetime) -> str:
    """
    Render the report text (HTML)

    Args:
        transactions: All transactions of the user
        period: Window granularity
        user: Owner; totals are converted to the user's currency and labels
              use the user's language
        now: End of the window

    Returns:
        Report text
    """
    period = Period(period)
    language = user.language
    selected = transactions_in_window(transactions, period, now)
    stats = compute_stats(selected, user.currency)
    symbol = currency_symbol(user.currency)

    title = ReportLabels.label(ReportLabels.TITLES[period], language)
    lines = [
        f"📊 <b>Report ({title})</b>",
        "",
        f"🟢 {ReportLabels.label(ReportLabels.INCOME, language)}: {format_amount(stats.income, '+')} {symbol}",
        f"🔴 {ReportLabels.label(ReportLabels.EXPENSE, language)}: {format_amount(stats.expense, '-')} {symbol}",
        f"💰 {ReportLabels.label(ReportLabels.BALANCE, language)}: {format_amount(stats.balance)} {symbol}",
    ]
    return "\n".join(lines)


async def build_report(user: User, period: Period, now: Optional[datetime] = None) -> str:
    """
    Load the user's transactions and render the report

    Raises:
        Database errors propagate to the caller
    """
    now = now or now_local()

    async with get_db_connection() as conn:
        transactions = await TransactionRepository(conn).get_user_transactions(user.id)

    logger.info(f"Building {Period(period).value} report for user {user.id} ({len(transactions)} transactions)")
    return format_report(transactions, period, user, now)
