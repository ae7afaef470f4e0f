"""
Intent classification of bot messages using OpenAI
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ai.client import complete, parse_json_response
from ai.prompts import prompts
from shared.enums import Currency, Intent, Language, PaymentMethod, Period, TransactionType
from shared.exceptions import AIUnavailableError
from shared.utils import normalize_category, parse_amount

logger = logging.getLogger(__name__)


@dataclass
class ParsedTransaction:
    """Transaction fields extracted from a message; None means not stated"""
    amount: float
    currency: Optional[Currency] = None
    category: Optional[str] = None
    type: Optional[TransactionType] = None
    description: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None


@dataclass
class IntentResult:
    """Classifier output for one message"""
    intent: Intent
    reply: str = ''
    transaction: Optional[ParsedTransaction] = None
    report_period: Period = Period.WEEKLY


def _optional_enum(enum_cls, value: Any):
    if value is None:
        return None
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        return None


def _parse_transaction_data(data: Any) -> Optional[ParsedTransaction]:
    if not isinstance(data, dict):
        return None

    raw_amount = data.get('amount')
    amount = parse_amount(raw_amount)
    if amount is None and isinstance(raw_amount, (int, float)) and not isinstance(raw_amount, bool):
        # Negative amounts carry the direction in the sign; keep the magnitude
        amount = parse_amount(abs(raw_amount))
    if amount is None or amount == 0:
        logger.warning(f"Transaction without a usable amount: {raw_amount!r}")
        return None

    category = normalize_category(data.get('category'))

    description = data.get('description')

    return ParsedTransaction(
        amount=amount,
        currency=_optional_enum(Currency, data.get('currency')),
        category=category,
        type=_optional_enum(TransactionType, data.get('type')),
        description=str(description).strip()[:200] if description else None,
        payment_method=_optional_enum(PaymentMethod, data.get('paymentMethod')),
    )


def parse_intent_response(data: Any) -> Optional[IntentResult]:
    """
    Validate the decoded classifier answer

    Args:
        data: Decoded JSON object

    Returns:
        IntentResult, or None when the answer is malformed (unknown intent, or a
        TRANSACTION without usable transaction data)
    """
    if not isinstance(data, dict):
        logger.error(f"Expected JSON object, got: {type(data).__name__}")
        return None

    intent = _optional_enum(Intent, data.get('intent'))
    if intent is None:
        logger.error(f"Unknown intent: {data.get('intent')!r}")
        return None

    reply = data.get('reply') or ''
    if not isinstance(reply, str):
        reply = str(reply)

    result = IntentResult(intent=intent, reply=reply.strip())

    if intent == Intent.TRANSACTION:
        result.transaction = _parse_transaction_data(data.get('transactionData'))
        if result.transaction is None:
            return None

    if intent == Intent.REPORT:
        result.report_period = _optional_enum(Period, data.get('reportType')) or Period.WEEKLY

    return result


async def classify_message(text: str, language: Language, now: datetime) -> Optional[IntentResult]:
    """
    Classify a bot message and extract transaction fields

    Args:
        text: Message text
        language: User language
        now: Current instant (given to the model as today's date)

    Returns:
        IntentResult, or None if the model is unavailable or answered badly
    """
    try:
        logger.info(f"Classifying message: {text[:100]}")

        prompt = prompts.intent_prompt(text, Language(language).value, now.isoformat())
        answer = await complete(prompt, json_mode=True)

        result = parse_intent_response(parse_json_response(answer))
        if result is not None:
            logger.info(f"Message classified as {result.intent.value}")
        return result

    except AIUnavailableError as e:
        logger.warning(f"Intent classification skipped: {e}")
        return None
    except Exception as e:
        logger.error(f"Error classifying message: {e}", exc_info=True)
        return None
