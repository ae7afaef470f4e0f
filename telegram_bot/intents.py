"""
Conversation flow of the bot

Each chat is either idle or waiting for the payment method of a parsed
transaction. Messages are classified as TRANSACTION, REPORT or CHAT; a
transaction without a payment method is parked in the pending store until the
Card/Cash button is pressed.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional

from ai.intent_classifier import IntentResult, classify_message
from database.connection import get_db_connection
from database.models import Transaction, User
from database.repositories.transaction_repo import TransactionRepository
from shared.constants import DEFAULT_CATEGORY, DEFAULT_LANGUAGE, TIPS_CATEGORY
from shared.enums import Intent, Language, PaymentMethod, Period, TransactionType
from shared.utils import format_amount, now_local
from telegram_bot.config import BotButtons, BotMessages
from telegram_bot.pending import PendingTransactionStore
from telegram_bot.report_builder import build_report

logger = logging.getLogger(__name__)

PAYMENT_ICONS = {
    PaymentMethod.CASH: "💵",
    PaymentMethod.CARD: "💳",
}


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_PAYMENT_METHOD = "awaiting_payment_method"


class ReplyMarkup(str, Enum):
    """Keyboard to attach to a reply"""
    NONE = "none"
    MAIN_MENU = "main_menu"
    PAYMENT_CHOICE = "payment_choice"


@dataclass
class BotReply:
    """What the bot answers to one update"""
    text: str
    markup: ReplyMarkup = ReplyMarkup.NONE
    language: str = DEFAULT_LANGUAGE
    saved: Optional[Transaction] = None
    expired: bool = False


@dataclass
class PendingTransaction:
    transaction: Transaction
    language: str


async def save_transaction_to_db(transaction: Transaction) -> bool:
    """
    Store a transaction

    Returns:
        True if stored, False on database error
    """
    try:
        async with get_db_connection() as conn:
            await TransactionRepository(conn).upsert(transaction)
        return True
    except Exception as e:
        logger.error(f"Error saving transaction to DB: {e}", exc_info=True)
        return False


def _language_of(user: User) -> str:
    try:
        return Language(user.language).value
    except ValueError:
        return DEFAULT_LANGUAGE


def _matches_button(text: str, labels: dict) -> bool:
    return text.strip() in labels.values()


class IntentDispatcher:
    """
    Routes bot messages and payment-method choices

    Args:
        classify: async (text, language, now) -> IntentResult or None
        save_transaction: async (transaction) -> bool
        build_report: async (user, period) -> report text
        pending: Store of transactions waiting for a payment method
        clock: Current instant
        id_factory: New transaction ids
    """

    def __init__(
        self,
        classify: Callable[[str, Language, datetime], Awaitable[Optional[IntentResult]]] = classify_message,
        save_transaction: Callable[[Transaction], Awaitable[bool]] = save_transaction_to_db,
        build_report: Callable[[User, Period], Awaitable[str]] = build_report,
        pending: Optional[PendingTransactionStore] = None,
        clock: Callable[[], datetime] = now_local,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4())
    ):
        self.classify = classify
        self.save_transaction = save_transaction
        self.build_report = build_report
        self.pending = pending if pending is not None else PendingTransactionStore()
        self.clock = clock
        self.id_factory = id_factory

    def state(self, chat_id: str) -> SessionState:
        if self.pending.get(chat_id) is None:
            return SessionState.IDLE
        return SessionState.AWAITING_PAYMENT_METHOD

    async def handle_message(self, chat_id: str, text: str, user: Optional[User]) -> BotReply:
        """
        Handle a free-text message

        Args:
            chat_id: Telegram chat id
            text: Message text
            user: User registered for this chat, or None

        Returns:
            BotReply
        """
        if user is None:
            logger.info(f"Message from unregistered chat {chat_id}")
            return BotReply(text=BotMessages.text(BotMessages.UNKNOWN_USER, DEFAULT_LANGUAGE, chat_id=chat_id))

        language = _language_of(user)

        if _matches_button(text, BotButtons.INFO):
            return BotReply(BotMessages.text(BotMessages.HELP, language), ReplyMarkup.MAIN_MENU, language)
        if _matches_button(text, BotButtons.ADD):
            return BotReply(BotMessages.text(BotMessages.ADD_HINT, language), ReplyMarkup.MAIN_MENU, language)
        if _matches_button(text, BotButtons.REPORT):
            return await self._report(user, Period.WEEKLY, '', language)

        now = self.clock()
        result = await self.classify(text, Language(language), now)

        if result is None:
            return BotReply(BotMessages.text(BotMessages.ERROR, language), language=language)

        if result.intent == Intent.REPORT:
            return await self._report(user, result.report_period, result.reply, language)

        if result.intent == Intent.TRANSACTION:
            return await self._transaction(chat_id, text, user, result, now, language)

        reply = result.reply or BotMessages.text(BotMessages.ERROR, language)
        return BotReply(reply, ReplyMarkup.MAIN_MENU, language)

    async def handle_payment_choice(self, chat_id: str, choice: str) -> BotReply:
        """
        Complete the pending transaction of a chat with the chosen payment method

        Args:
            chat_id: Telegram chat id
            choice: "CARD" or "CASH"

        Returns:
            BotReply (expired=True when nothing is pending)
        """
        entry = self.pending.get(chat_id)
        if entry is None:
            return BotReply(BotMessages.text(BotMessages.EXPIRED, DEFAULT_LANGUAGE), expired=True)

        try:
            method = PaymentMethod(choice)
        except ValueError:
            logger.warning(f"Unknown payment method choice: {choice!r}")
            return BotReply(BotMessages.text(BotMessages.ERROR, entry.language), language=entry.language)

        transaction = replace(entry.transaction, payment_method=method)

        if not await self.save_transaction(transaction):
            return BotReply(BotMessages.text(BotMessages.DB_ERROR, entry.language), language=entry.language)

        self.pending.clear(chat_id)
        logger.info(f"Pending transaction {transaction.id} saved for chat {chat_id} ({method.value})")

        text = BotMessages.text(
            BotMessages.SAVED_WITH_METHOD,
            entry.language,
            icon=PAYMENT_ICONS[method],
            method=method.value,
            description=transaction.description,
            amount=format_amount(transaction.amount),
            currency=transaction.currency.value
        )
        return BotReply(text, language=entry.language, saved=transaction)

    async def _report(self, user: User, period: Period, reply: str, language: str) -> BotReply:
        try:
            report = await self.build_report(user, period)
        except Exception as e:
            logger.error(f"Error building report: {e}", exc_info=True)
            return BotReply(BotMessages.text(BotMessages.ERROR, language), language=language)

        text = f"{reply}\n\n{report}" if reply else report
        return BotReply(text, ReplyMarkup.MAIN_MENU, language)

    def _build_transaction(self, text: str, user: User, result: IntentResult, now: datetime) -> Transaction:
        parsed = result.transaction
        transaction = Transaction(
            id=self.id_factory(),
            user_id=user.id,
            date=now.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z'),
            amount=parsed.amount,
            currency=parsed.currency or user.currency,
            category=parsed.category or DEFAULT_CATEGORY,
            type=parsed.type or TransactionType.EXPENSE,
            description=parsed.description or text.strip()[:200],
            payment_method=parsed.payment_method or PaymentMethod.CARD
        )

        if transaction.category == TIPS_CATEGORY:
            transaction = replace(transaction, type=TransactionType.INCOME, payment_method=PaymentMethod.CASH)

        return transaction

    async def _transaction(
        self,
        chat_id: str,
        text: str,
        user: User,
        result: IntentResult,
        now: datetime,
        language: str
    ) -> BotReply:
        transaction = self._build_transaction(text, user, result, now)
        resolved = transaction.category == TIPS_CATEGORY or result.transaction.payment_method is not None

        if not resolved:
            self.pending.set(chat_id, PendingTransaction(transaction, language))
            logger.info(f"Transaction {transaction.id} waiting for payment method in chat {chat_id}")
            question = BotMessages.text(
                BotMessages.ASK_PAYMENT_METHOD,
                language,
                reply=result.reply or "💸",
                amount=format_amount(transaction.amount),
                currency=transaction.currency.value,
                category=transaction.category
            )
            return BotReply(question, ReplyMarkup.PAYMENT_CHOICE, language)

        if not await self.save_transaction(transaction):
            return BotReply(BotMessages.text(BotMessages.DB_ERROR, language), language=language)

        logger.info(f"Transaction {transaction.id} saved for chat {chat_id}")
        saved = BotMessages.text(
            BotMessages.SAVED,
            language,
            category=transaction.category,
            icon=PAYMENT_ICONS[transaction.payment_method],
            amount=format_amount(transaction.amount),
            currency=transaction.currency.value,
            description=transaction.description
        )
        text = f"{result.reply}\n\n{saved}" if result.reply else saved
        return BotReply(text, ReplyMarkup.MAIN_MENU, language, saved=transaction)
