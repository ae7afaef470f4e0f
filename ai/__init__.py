"""
AI Module
Text understanding and summaries using the OpenAI API
"""

from .intent_classifier import classify_message, IntentResult, ParsedTransaction
from .text_parser import parse_transaction_text
from .analyzer import analyze_finances

__version__ = "1.0.0"

__all__ = [
    "classify_message",
    "IntentResult",
    "ParsedTransaction",
    "parse_transaction_text",
    "analyze_finances"
]
