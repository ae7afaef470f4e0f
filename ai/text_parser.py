"""
Smart fill: free-text entry parser for the dashboard form using OpenAI
"""

import logging
from typing import Any, Dict, Optional

from ai.client import complete, parse_json_response
from ai.prompts import prompts
from shared.constants import CATEGORIES, DEFAULT_CATEGORY, TIPS_CATEGORY
from shared.enums import Currency, Language, PaymentMethod, TransactionType
from shared.exceptions import AIUnavailableError
from shared.utils import normalize_category, parse_amount

logger = logging.getLogger(__name__)


async def parse_transaction_text(text: str, language: Language = Language.IT) -> Optional[Dict[str, Any]]:
    """
    Parse a transaction from free text

    Args:
        text: User's text (e.g. "caffè 1.20 contanti")
        language: User language

    Returns:
        Form values or None if the text cannot be parsed
        {
            'amount': float,
            'currency': 'EUR' | 'USD' | 'PLN',
            'category': str,
            'type': 'INCOME' | 'EXPENSE',
            'description': str,
            'paymentMethod': 'CASH' | 'CARD'
        }
    """
    if not text or len(text.strip()) < 2:
        logger.warning("Text too short for parsing")
        return None

    try:
        logger.info(f"Parsing transaction text: {text[:100]}")

        prompt = prompts.smart_fill_prompt(text, Language(language).value)
        answer = await complete(prompt, json_mode=True)

        data = parse_json_response(answer)
        if not isinstance(data, dict):
            logger.error("Failed to parse JSON from smart fill response")
            return None

        return validate_form_values(data)

    except AIUnavailableError as e:
        logger.warning(f"Smart fill skipped: {e}")
        return None
    except Exception as e:
        logger.error(f"Error parsing transaction text: {e}", exc_info=True)
        return None


def validate_form_values(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Validate and complete values returned by the model

    Returns:
        Form values or None when the amount is unusable
    """
    amount = parse_amount(data.get('amount'))
    if amount is None or amount == 0:
        logger.error(f"Invalid amount: {data.get('amount')!r}")
        return None

    category = normalize_category(data.get('category'))
    if category is None:
        logger.warning(f"Category not found: {data.get('category')}, using default")
        category = DEFAULT_CATEGORY

    try:
        transaction_type = TransactionType(str(data.get('type', '')).upper())
    except ValueError:
        only_income = category in CATEGORIES['INCOME'] and category not in CATEGORIES['EXPENSE']
        transaction_type = TransactionType.INCOME if only_income else TransactionType.EXPENSE

    try:
        currency = Currency(str(data.get('currency', '')).upper())
    except ValueError:
        currency = None

    try:
        payment_method = PaymentMethod(str(data.get('paymentMethod', '')).upper())
    except ValueError:
        payment_method = PaymentMethod.CARD

    if category == TIPS_CATEGORY:
        transaction_type = TransactionType.INCOME
        payment_method = PaymentMethod.CASH

    result = {
        'amount': amount,
        'category': category,
        'type': transaction_type.value,
        'description': str(data.get('description') or '')[:200],
        'paymentMethod': payment_method.value,
    }
    if currency is not None:
        result['currency'] = currency.value

    return result
