"""
Data service of the dashboard

Reads try the REST API first and fall back to the local cache when the server
is unavailable. Writes commit to the local cache immediately and replicate to
the server in the background; a failed replication is logged and never rolls
back local state. Everything returned to callers is sanitized.
"""

import asyncio
import dataclasses
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Set

from client.api_client import UNAVAILABLE, FinanceApiClient
from client.local_cache import SUBSCRIPTIONS, TRANSACTIONS, USERS, LocalCache
from client.reconcile import merge_transactions
from client.subscriptions import materialize_due
from database.models import Subscription, Transaction, User
from database.sanitize import (
    find_user,
    sanitize_subscription,
    sanitize_subscriptions,
    sanitize_transaction,
    sanitize_transactions,
    sanitize_user,
    sanitize_users,
)
from shared.constants import MOCK_USERS
from shared.utils import now_local

logger = logging.getLogger(__name__)


class DataService:
    """Persistence gateway over the REST API and the local cache"""

    def __init__(self, api: Optional[FinanceApiClient] = None, cache: Optional[LocalCache] = None):
        self.api = api or FinanceApiClient()
        self.cache = cache or LocalCache()
        self._replications: Set[asyncio.Task] = set()
        # Transaction writes the server has not acknowledged yet
        self._unsent_creates: Dict[str, dict] = {}
        self._unsent_deletes: Set[str] = set()

    # ==================== REPLICATION ====================

    def _replicate(
        self,
        call: Awaitable,
        description: str,
        on_done: Optional[Callable[[bool], None]] = None
    ) -> None:
        """
        Send a write to the server without waiting for it

        Args:
            call: Pending API call
            description: Used in log messages
            on_done: Called with True when the server accepted the write
        """
        async def _run():
            result = await call
            if result is UNAVAILABLE:
                logger.warning(f"Remote {description} not replicated; local copy kept")
            if on_done is not None:
                on_done(result is not UNAVAILABLE)

        task = asyncio.create_task(_run())
        self._replications.add(task)
        task.add_done_callback(self._replications.discard)

    async def drain(self) -> None:
        """Wait for in-flight replications (used on shutdown and in tests)"""
        while self._replications:
            await asyncio.gather(*list(self._replications), return_exceptions=True)

    async def close(self) -> None:
        await self.drain()
        await self.api.close()

    # ==================== TRANSACTIONS ====================

    async def get_transactions(self, user_id: str) -> List[Transaction]:
        """
        Get a user's transactions

        Args:
            user_id: Owner

        Returns:
            Server snapshot merged with the cache (and written back to the cache),
            or the cached records of this user when the server is unavailable
        """
        # Let writes issued before this read land first
        await self.drain()

        local = sanitize_transactions(self.cache.owned_by(TRANSACTIONS, user_id))

        data = await self.api.list_transactions(user_id)
        if data is UNAVAILABLE:
            logger.info(f"Server unavailable, serving {len(local)} cached transactions for {user_id}")
            return local

        remote = [
            t for t in sanitize_transactions(data)
            if t.user_id == user_id and t.id not in self._unsent_deletes
        ]
        merged = merge_transactions(remote, local)
        merged.extend(self._resend_unsent(user_id, {t.id for t in merged}))

        self.cache.replace_owned(TRANSACTIONS, user_id, [t.to_dict() for t in merged])
        return merged

    def _resend_unsent(self, user_id: str, known_ids: Set[str]) -> List[Transaction]:
        """
        Retry writes that failed while the server was unreachable

        Returns:
            Locally created records of this user that the server does not have yet
        """
        for transaction_id in list(self._unsent_deletes):
            self._send_delete(transaction_id)

        pending = []
        for payload in list(self._unsent_creates.values()):
            if payload['userId'] != user_id or payload['id'] in known_ids:
                continue
            pending.append(sanitize_transaction(payload))
            self._send_create(payload)

        return pending

    def _send_create(self, payload: dict) -> None:
        transaction_id = payload['id']
        self._unsent_creates[transaction_id] = payload

        def _done(accepted: bool) -> None:
            if accepted:
                self._unsent_creates.pop(transaction_id, None)

        self._replicate(self.api.create_transaction(payload), f"create of transaction {transaction_id}", _done)

    def _send_delete(self, transaction_id: str) -> None:
        self._unsent_deletes.add(transaction_id)

        def _done(accepted: bool) -> None:
            if accepted:
                self._unsent_deletes.discard(transaction_id)

        self._replicate(self.api.delete_transaction(transaction_id), f"delete of transaction {transaction_id}", _done)

    async def add_transaction(self, transaction: Transaction) -> Transaction:
        """
        Store a transaction (an existing id is overwritten, not duplicated)

        Returns:
            The sanitized record as committed locally
        """
        record = sanitize_transaction(transaction.to_dict())
        payload = record.to_dict()

        self.cache.upsert(TRANSACTIONS, payload)
        self._unsent_deletes.discard(record.id)
        self._send_create(payload)

        logger.info(f"Transaction {record.id} committed locally")
        return record

    async def update_transaction(self, transaction: Transaction) -> Transaction:
        """Replace a transaction by recreating it under the same id"""
        return await self.add_transaction(transaction)

    async def delete_transaction(self, transaction_id: str) -> None:
        """
        Delete a transaction by id

        A missing id is not an error and leaves the cache unchanged.
        """
        removed = self.cache.remove(TRANSACTIONS, transaction_id)
        self._unsent_creates.pop(transaction_id, None)
        self._send_delete(transaction_id)

        if removed:
            logger.info(f"Transaction {transaction_id} deleted locally")

    # ==================== USERS ====================

    def _cached_users(self) -> List[dict]:
        records = self.cache.all(USERS)
        if not records:
            self.cache.seed(USERS, MOCK_USERS)
            records = self.cache.all(USERS)
        return records

    async def list_users(self) -> List[User]:
        """Profiles known on this device (seeded with the default profiles)"""
        return sanitize_users(self._cached_users())

    async def get_user_profile(self, user_id: str) -> Optional[User]:
        """
        Get a user profile from the server, or from the cache when unavailable
        """
        data = await self.api.get_user(user_id)
        if data is not UNAVAILABLE:
            try:
                user = sanitize_user(data)
                self.cache.upsert(USERS, user.to_dict())
                return user
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Invalid user payload from server: {e}")

        return find_user(self._cached_users(), user_id)

    async def update_user_profile(self, user: User) -> User:
        """Store a profile locally and replicate it"""
        record = sanitize_user(user.to_dict())
        payload = record.to_dict()

        self._cached_users()
        self.cache.upsert(USERS, payload)
        self._replicate(self.api.update_user(payload), f"update of user {record.id}")
        return record

    # ==================== SUBSCRIPTIONS ====================

    async def get_subscriptions(self, user_id: str) -> List[Subscription]:
        data = await self.api.list_subscriptions(user_id)
        if data is UNAVAILABLE:
            return sanitize_subscriptions(self.cache.owned_by(SUBSCRIPTIONS, user_id))

        remote = [s for s in sanitize_subscriptions(data) if s.user_id == user_id]
        self.cache.replace_owned(SUBSCRIPTIONS, user_id, [s.to_dict() for s in remote])
        return remote

    async def add_subscription(self, subscription: Subscription) -> Subscription:
        record = sanitize_subscription(subscription.to_dict())
        payload = record.to_dict()

        self.cache.upsert(SUBSCRIPTIONS, payload)
        self._replicate(self.api.save_subscription(payload), f"save of subscription {record.id}")
        return record

    async def update_subscription(self, subscription: Subscription) -> Subscription:
        return await self.add_subscription(subscription)

    async def deactivate_subscription(self, subscription: Subscription) -> Subscription:
        """Stop a subscription from producing expenses (it is kept, not deleted)"""
        return await self.add_subscription(dataclasses.replace(subscription, active=False))

    async def delete_subscription(self, subscription_id: str) -> None:
        self.cache.remove(SUBSCRIPTIONS, subscription_id)
        self._replicate(self.api.delete_subscription(subscription_id), f"delete of subscription {subscription_id}")

    async def process_due_subscriptions(self, user_id: str, now: Optional[datetime] = None) -> List[Transaction]:
        """
        Turn due subscriptions into expenses and advance their due dates

        Returns:
            Transactions created in this cycle
        """
        subscriptions = await self.get_subscriptions(user_id)
        created, advanced = materialize_due(subscriptions, now or now_local())

        for transaction in created:
            await self.add_transaction(transaction)
        for subscription in advanced:
            await self.update_subscription(subscription)

        return created

    # ==================== REFRESH ====================

    async def refresh(self, user_id: str, now: Optional[datetime] = None) -> List[Transaction]:
        """One data-refresh cycle: materialize due subscriptions, then load transactions"""
        await self.process_due_subscriptions(user_id, now)
        return await self.get_transactions(user_id)
