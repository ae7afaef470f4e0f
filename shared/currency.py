"""
Currency conversion with fixed exchange rates
"""

from shared.constants import EXCHANGE_RATES, CURRENCY_SYMBOLS
from shared.enums import Currency


def convert(amount: float, from_currency: Currency, to_currency: Currency) -> float:
    """
    Convert amount between currencies through the reference currency (EUR)

    Args:
        amount: Amount in from_currency
        from_currency: Source currency
        to_currency: Target currency

    Returns:
        Amount in to_currency. Same-currency conversion returns amount untouched.
    """
    from_currency = Currency(from_currency)
    to_currency = Currency(to_currency)

    if from_currency == to_currency:
        return amount

    amount_in_reference = amount / EXCHANGE_RATES[from_currency.value]
    return amount_in_reference * EXCHANGE_RATES[to_currency.value]


def currency_symbol(currency: Currency) -> str:
    """Get display symbol for currency"""
    return CURRENCY_SYMBOLS.get(Currency(currency).value, Currency(currency).value)


def format_currency(amount: float, currency: Currency) -> str:
    """
    Format amount for display

    Returns:
        Formatted string (e.g., "1.500,00 €")
    """
    formatted = f"{amount:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"{formatted} {currency_symbol(currency)}"
