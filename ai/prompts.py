"""
Prompt templates for the language model
"""

import json
from typing import Dict, List

from shared.constants import CATEGORIES, TIPS_CATEGORY


def _category_list() -> str:
    names = CATEGORIES['EXPENSE'] + [c for c in CATEGORIES['INCOME'] if c not in CATEGORIES['EXPENSE']]
    return ", ".join(names)


class Prompts:
    """Builders for every prompt sent to the model"""

    @staticmethod
    def intent_prompt(text: str, language: str, current_date: str) -> str:
        return f"""
You are a smart financial assistant for a Telegram bot.
Current date: {current_date}.
User language: "{language}".

Analyze the user's text: "{text}"

Determine the INTENT:
1. "TRANSACTION": the user wants to add an expense or income (e.g. "10 euro pizza", "stipendio 1500").
2. "REPORT": the user asks for a summary, report or balance (e.g. "how much did I spend today?", "resoconto", "saldo").
3. "CHAT": general conversation or greeting (e.g. "hello", "info", "help").

Reply ONLY with a JSON object:
{{
  "intent": "TRANSACTION" | "REPORT" | "CHAT",
  "reply": "A short friendly answer in {language}. For TRANSACTION do not confirm saving, just acknowledge.",
  "transactionData": {{
    "amount": number (dot for decimals, always positive),
    "currency": "EUR" | "USD" | "PLN" | null,
    "category": one of [{_category_list()}],
    "type": "INCOME" | "EXPENSE",
    "description": "clean description",
    "paymentMethod": "CASH" | "CARD" | null
  }},
  "reportType": "DAILY" | "WEEKLY" | "MONTHLY" | "ALL"
}}

Rules:
- "transactionData" only when intent is TRANSACTION, "reportType" only when intent is REPORT (default WEEKLY).
- paymentMethod: "CASH" if the user mentions cash ("cash", "contanti", "gotówka"), "CARD" if the user
  mentions a card ("card", "carta", "bancomat", "karta"), null if not mentioned.
- Tips use category "{TIPS_CATEGORY}", type INCOME and paymentMethod CASH.
"""

    @staticmethod
    def smart_fill_prompt(text: str, language: str) -> str:
        return f"""
Analyze this expense or income entry: "{text}".
User language: "{language}".

Reply ONLY with a JSON object:
{{
  "amount": number (dot for decimals),
  "currency": "EUR" | "USD" | "PLN",
  "category": one of [{_category_list()}],
  "type": "INCOME" (salary, gifts, tips) or "EXPENSE" (everything else),
  "description": "short description",
  "paymentMethod": "CASH" | "CARD"
}}

Payment method rules:
- "CASH" if the text mentions cash, coins or a tip, or for small purchases (coffee, newspaper) with no other hint.
- "CARD" if the text mentions a card, online payment, Amazon or Apple Pay, or for large purchases with no other hint.
- If unsure, use "CARD".
"""

    @staticmethod
    def analysis_prompt(summary: List[Dict], language: str, base_currency: str) -> str:
        return f"""
Analyze these financial records: {json.dumps(summary, ensure_ascii=False)}.
Base currency: {base_currency}.
Write a short, motivating report in language "{language}". Use Markdown.
"""


prompts = Prompts()
