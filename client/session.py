"""
Dashboard session: login, transaction entry and statistics for one user
"""

import dataclasses
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ai.analyzer import analyze_finances
from ai.text_parser import parse_transaction_text
from client.data_service import DataService
from client.poller import RefreshPoller
from database.models import Transaction, User
from shared.constants import ALL_CATEGORIES
from shared.enums import Currency, Language, PaymentMethod, Period, TransactionType
from shared.exceptions import InvalidCredentialsError, ValidationError
from shared.stats import Stats, category_totals, compute_stats, filter_by_period
from shared.utils import iso_now, parse_amount, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    """All-time totals next to the totals of the selected period"""
    total: Stats
    period: Stats

    @property
    def balance(self) -> float:
        return self.total.balance


def build_transaction(form: Dict[str, Any], user: User) -> Transaction:
    """
    Validate a submitted form and build the transaction

    Args:
        form: Form values (amount, category, type, currency, date, description, paymentMethod)
        user: Owner; supplies the default currency

    Returns:
        New Transaction with a fresh id

    Raises:
        ValidationError: If amount or category is missing or a value is invalid
    """
    amount = parse_amount(form.get('amount'))
    if amount is None or amount == 0:
        raise ValidationError("Amount is required and must be a positive number", field='amount')

    category = (form.get('category') or '').strip()
    if not category:
        raise ValidationError("Category is required", field='category')
    if category not in ALL_CATEGORIES:
        logger.warning(f"Category outside the catalog: {category}")

    try:
        transaction_type = TransactionType(form.get('type') or TransactionType.EXPENSE.value)
        currency = Currency(form.get('currency') or user.currency.value)
        payment_method = PaymentMethod(form.get('paymentMethod') or PaymentMethod.CARD.value)
    except ValueError as e:
        raise ValidationError(str(e))

    date_value = form.get('date') or iso_now()
    try:
        parse_timestamp(date_value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {date_value}", field='date')

    return Transaction(
        id=str(uuid.uuid4()),
        user_id=user.id,
        date=date_value,
        amount=amount,
        currency=currency,
        category=category,
        type=transaction_type,
        description=(form.get('description') or '').strip(),
        payment_method=payment_method,
    )


class DashboardSession:
    """State of the dashboard for the logged-in user"""

    def __init__(self, data_service: DataService):
        self.data = data_service
        self.user: Optional[User] = None
        self.transactions: List[Transaction] = []
        self.poller: Optional[RefreshPoller] = None

    @property
    def base_currency(self) -> Currency:
        return self.user.currency if self.user else Currency.EUR

    def _require_user(self) -> User:
        if self.user is None:
            raise RuntimeError("No user logged in")
        return self.user

    # ==================== AUTH ====================

    async def login(self, user_id: str, password: str) -> User:
        """
        Log in with a plaintext password comparison

        Raises:
            InvalidCredentialsError: Unknown profile or wrong password
        """
        profile = await self.data.get_user_profile(user_id)

        if profile is None or password != profile.password:
            logger.info(f"Login failed for {user_id}")
            raise InvalidCredentialsError("Wrong password")

        self.user = profile
        self.transactions = await self.data.get_transactions(profile.id)
        logger.info(f"User {profile.id} logged in with {len(self.transactions)} transactions")
        return profile

    async def logout(self) -> None:
        await self.stop_polling()
        self.user = None
        self.transactions = []

    # ==================== DATA ====================

    def _apply_refresh(self, transactions: List[Transaction]) -> None:
        self.transactions = transactions

    async def reload(self) -> List[Transaction]:
        user = self._require_user()
        self.transactions = await self.data.refresh(user.id)
        return self.transactions

    def start_polling(self) -> RefreshPoller:
        user = self._require_user()
        if self.poller is None:
            self.poller = RefreshPoller(
                refresh=lambda: self.data.refresh(user.id),
                on_refresh=self._apply_refresh
            )
        self.poller.start()
        return self.poller

    async def stop_polling(self) -> None:
        if self.poller is not None:
            await self.poller.stop()
            self.poller = None

    def _note_user_action(self) -> None:
        if self.poller is not None:
            self.poller.note_user_action()

    async def submit_transaction(self, form: Dict[str, Any]) -> Transaction:
        """
        Validate and store a new transaction

        Raises:
            ValidationError: Nothing is written when the form is invalid
        """
        user = self._require_user()
        transaction = build_transaction(form, user)

        self._note_user_action()
        stored = await self.data.add_transaction(transaction)
        self.transactions = [stored] + [t for t in self.transactions if t.id != stored.id]
        return stored

    async def delete_transaction(self, transaction_id: str) -> None:
        self._require_user()
        self._note_user_action()
        await self.data.delete_transaction(transaction_id)
        self.transactions = [t for t in self.transactions if t.id != transaction_id]

    # ==================== STATS ====================

    def filtered(self, period: Period, reference: Optional[datetime] = None) -> List[Transaction]:
        return filter_by_period(self.transactions, period, reference)

    def stats(self, period: Period, reference: Optional[datetime] = None) -> DashboardStats:
        """
        Totals shown on the dashboard

        Returns:
            All-time totals (balance card) and totals of the selected period
        """
        return DashboardStats(
            total=compute_stats(self.transactions, self.base_currency),
            period=compute_stats(self.filtered(period, reference), self.base_currency),
        )

    def category_breakdown(
        self,
        period: Period,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        reference: Optional[datetime] = None
    ) -> Dict[str, float]:
        return category_totals(self.filtered(period, reference), self.base_currency, transaction_type)

    # ==================== PROFILE ====================

    async def update_preferences(
        self,
        currency: Optional[Currency] = None,
        language: Optional[Language] = None
    ) -> User:
        user = self._require_user()
        preferences = dataclasses.replace(
            user.preferences,
            currency=Currency(currency) if currency else user.preferences.currency,
            language=Language(language) if language else user.preferences.language,
        )
        self.user = await self.data.update_user_profile(dataclasses.replace(user, preferences=preferences))
        return self.user

    async def link_telegram_chat(self, chat_id: Optional[str]) -> User:
        """Register (or with None, unlink) the Telegram chat used by the bot"""
        user = self._require_user()
        chat_id = str(chat_id).strip() if chat_id else None
        self.user = await self.data.update_user_profile(dataclasses.replace(user, telegram_chat_id=chat_id))
        return self.user

    # ==================== AI ====================

    async def smart_fill(self, text: str) -> Optional[Dict[str, Any]]:
        """Prefill form values from free text, or None if the text cannot be parsed"""
        user = self._require_user()
        return await parse_transaction_text(text, user.language)

    async def analyze(self) -> str:
        """Natural-language summary of recent finances"""
        user = self._require_user()
        return await analyze_finances(self.transactions, user.language, user.currency)
