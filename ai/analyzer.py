"""
Natural-language financial summary using OpenAI
"""

import logging
from typing import Dict, List

from ai.client import complete
from ai.config import ai_config
from ai.prompts import prompts
from database.models import Transaction
from shared.enums import Currency, Language
from shared.exceptions import AIUnavailableError

logger = logging.getLogger(__name__)

MESSAGES = {
    'unavailable': {
        'it': "Analisi AI non disponibile: chiave API non configurata.",
        'en': "AI analysis unavailable: API key not configured.",
        'pl': "Analiza AI niedostępna: brak klucza API.",
    },
    'error': {
        'it': "Errore nell'analisi delle finanze.",
        'en': "Error while analyzing your finances.",
        'pl': "Błąd podczas analizy finansów.",
    },
    'empty': {
        'it': "Impossibile generare l'analisi.",
        'en': "Could not generate the analysis.",
        'pl': "Nie udało się wygenerować analizy.",
    },
}


def _message(key: str, language: Language) -> str:
    return MESSAGES[key].get(Language(language).value, MESSAGES[key]['en'])


def summarize_for_prompt(transactions: List[Transaction], limit: int) -> List[Dict]:
    """Compact records of the most recent transactions"""
    latest = sorted(transactions, key=lambda t: t.timestamp, reverse=True)[:limit]
    return [
        {
            'date': t.date[:10],
            'amount': t.amount,
            'currency': t.currency.value,
            'cat': t.category,
            'type': t.type.value,
            'method': t.payment_method.value,
        }
        for t in latest
    ]


async def analyze_finances(
    transactions: List[Transaction],
    language: Language,
    base_currency: Currency
) -> str:
    """
    Generate a short motivating report about the user's finances

    Args:
        transactions: User transactions
        language: Report language
        base_currency: Currency the user reasons in

    Returns:
        Markdown text, or a localized message when AI is unavailable or fails
    """
    try:
        summary = summarize_for_prompt(transactions, ai_config.ANALYSIS_SAMPLE_SIZE)
        prompt = prompts.analysis_prompt(summary, Language(language).value, Currency(base_currency).value)

        answer = await complete(prompt, max_tokens=ai_config.ANALYSIS_MAX_TOKENS)
        return answer or _message('empty', language)

    except AIUnavailableError as e:
        logger.warning(f"Analysis skipped: {e}")
        return _message('unavailable', language)
    except Exception as e:
        logger.error(f"Error analyzing finances: {e}", exc_info=True)
        return _message('error', language)
