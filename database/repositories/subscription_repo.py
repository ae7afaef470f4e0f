"""
Subscription repository for database operations
"""

import logging
from decimal import Decimal
from typing import List

import asyncpg

from database.models import Subscription
from database.sanitize import sanitize_subscription, sanitize_subscriptions

logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """Repository for Subscription operations"""

    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def upsert(self, subscription: Subscription) -> Subscription:
        """
        Create a subscription or replace the stored one with the same id

        Args:
            subscription: Sanitized subscription

        Returns:
            Stored Subscription object
        """
        try:
            row = await self.conn.fetchrow(
                """
                INSERT INTO subscriptions
                    (id, user_id, name, amount, currency, category, frequency, next_due_date, active)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                ON CONFLICT (id) DO UPDATE SET
                    user_id = EXCLUDED.user_id,
                    name = EXCLUDED.name,
                    amount = EXCLUDED.amount,
                    currency = EXCLUDED.currency,
                    category = EXCLUDED.category,
                    frequency = EXCLUDED.frequency,
                    next_due_date = EXCLUDED.next_due_date,
                    active = EXCLUDED.active
                RETURNING *
                """,
                subscription.id,
                subscription.user_id,
                subscription.name,
                Decimal(str(subscription.amount)),
                subscription.currency.value,
                subscription.category,
                subscription.frequency.value,
                subscription.next_due_date,
                subscription.active
            )

            logger.info(f"Subscription stored: id={subscription.id}, active={subscription.active}")
            return sanitize_subscription(dict(row))

        except Exception as e:
            logger.error(f"Error storing subscription: {e}", exc_info=True)
            raise

    async def get_user_subscriptions(self, user_id: str) -> List[Subscription]:
        """
        Get all subscriptions of a user

        Args:
            user_id: User ID

        Returns:
            List of Subscription objects ordered by next due date
        """
        rows = await self.conn.fetch(
            "SELECT * FROM subscriptions WHERE user_id = $1 ORDER BY next_due_date",
            user_id
        )

        return sanitize_subscriptions(dict(row) for row in rows)

    async def delete(self, subscription_id: str) -> bool:
        """
        Delete subscription

        Returns:
            True if a row was deleted
        """
        result = await self.conn.execute(
            "DELETE FROM subscriptions WHERE id = $1",
            subscription_id
        )

        deleted = result.split()[-1] != "0"
        if deleted:
            logger.info(f"Subscription deleted: id={subscription_id}")

        return deleted
