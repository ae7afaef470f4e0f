"""
Utility functions
"""

import calendar
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from shared.constants import ALL_CATEGORIES, TIPS_ALIASES, TIPS_CATEGORY


def parse_timestamp(value: Union[str, datetime, date]) -> datetime:
    """
    Parse an ISO-8601 date or date-time into a local-time aware datetime

    Args:
        value: "2024-03-01", "2024-03-01T10:00:00Z", "2024-03-01T10:00:00.000+01:00"
               or a date/datetime object

    Returns:
        Aware datetime in the local timezone. Naive input is taken as local time.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        parsed = datetime.fromisoformat(text)

    return to_local(parsed)


def to_local(moment: datetime) -> datetime:
    """Attach or convert to the local timezone"""
    # astimezone() on a naive datetime assumes local time
    return moment.astimezone()


def now_local() -> datetime:
    """Current instant in the local timezone"""
    return datetime.now(timezone.utc).astimezone()


def iso_now() -> str:
    """Current instant as ISO-8601 UTC text (the stored date format)"""
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def add_months(moment: datetime, months: int) -> datetime:
    """
    Shift a datetime by a number of months, clamping the day to the month length

    Args:
        moment: Starting point
        months: Months to add (negative to go back)

    Returns:
        Shifted datetime (e.g., Jan 31 + 1 month = Feb 28/29)
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def format_amount(amount: float, signed: str = '') -> str:
    """
    Format amount for bot messages

    Args:
        amount: Amount to format
        signed: Optional sign prefix ('+' or '-')

    Returns:
        Formatted string (e.g., "+1 500.00")
    """
    formatted = f"{amount:,.2f}".replace(",", " ")
    return f"{signed}{formatted}"


def parse_amount(value) -> Optional[float]:
    """
    Parse an amount from a form or wire value

    Args:
        value: Number or text ("12,50", "12.50 €")

    Returns:
        Non-negative amount or None if invalid
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        cleaned = re.sub(r'[€$\szł]', '', str(value)).replace(',', '.')
        if not cleaned:
            return None
        try:
            amount = float(cleaned)
        except ValueError:
            return None

    if not math.isfinite(amount) or amount < 0:
        return None

    return amount


def normalize_category(value: Any) -> Optional[str]:
    """
    Map a category name to its catalog spelling

    Matching ignores case; "tips" and its variants map to the tips category.

    Returns:
        Catalog category or None when unknown
    """
    if not isinstance(value, str) or not value.strip():
        return None

    key = value.strip().lower()
    if key in TIPS_ALIASES:
        return TIPS_CATEGORY

    for category in ALL_CATEGORIES:
        if category.lower() == key:
            return category
    return None
