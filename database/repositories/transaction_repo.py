"""
Transaction repository for database operations
"""

import logging
from decimal import Decimal
from typing import List

import asyncpg

from database.models import Transaction
from database.sanitize import sanitize_transaction, sanitize_transactions

logger = logging.getLogger(__name__)


class TransactionRepository:
    """Repository for Transaction operations"""

    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def upsert(self, transaction: Transaction) -> Transaction:
        """
        Create a transaction, or overwrite the stored one with the same id

        Args:
            transaction: Sanitized transaction

        Returns:
            Stored Transaction object
        """
        try:
            row = await self.conn.fetchrow(
                """
                INSERT INTO transactions
                    (id, user_id, date, amount, currency, category, description, type, payment_method)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                ON CONFLICT (id) DO UPDATE SET
                    user_id = EXCLUDED.user_id,
                    date = EXCLUDED.date,
                    amount = EXCLUDED.amount,
                    currency = EXCLUDED.currency,
                    category = EXCLUDED.category,
                    description = EXCLUDED.description,
                    type = EXCLUDED.type,
                    payment_method = EXCLUDED.payment_method
                RETURNING *
                """,
                transaction.id,
                transaction.user_id,
                transaction.date,
                Decimal(str(transaction.amount)),
                transaction.currency.value,
                transaction.category,
                transaction.description,
                transaction.type.value,
                transaction.payment_method.value
            )

            logger.info(
                f"Transaction stored: id={transaction.id}, user_id={transaction.user_id}, "
                f"type={transaction.type.value}, amount={transaction.amount}"
            )
            return sanitize_transaction(dict(row))

        except Exception as e:
            logger.error(f"Error storing transaction: {e}", exc_info=True)
            raise

    async def get_user_transactions(self, user_id: str) -> List[Transaction]:
        """
        Get all transactions of a user, newest first

        Args:
            user_id: User ID

        Returns:
            List of Transaction objects
        """
        rows = await self.conn.fetch(
            "SELECT * FROM transactions WHERE user_id = $1 ORDER BY date DESC",
            user_id
        )

        return sanitize_transactions(dict(row) for row in rows)

    async def delete(self, transaction_id: str) -> bool:
        """
        Delete transaction

        Args:
            transaction_id: Transaction ID

        Returns:
            True if a row was deleted (deleting a missing id is not an error)
        """
        result = await self.conn.execute(
            "DELETE FROM transactions WHERE id = $1",
            transaction_id
        )

        deleted = result.split()[-1] != "0"
        if deleted:
            logger.info(f"Transaction deleted: id={transaction_id}")

        return deleted
