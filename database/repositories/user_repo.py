"""
User repository for database operations
"""

import logging
from typing import List, Optional

import asyncpg

from database.models import User
from database.sanitize import sanitize_user

logger = logging.getLogger(__name__)


def _row_to_user(row) -> User:
    data = dict(row)
    data['preferences'] = {'currency': data.pop('currency', None), 'language': data.pop('language', None)}
    return sanitize_user(data)


class UserRepository:
    """Repository for User operations"""

    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def upsert(self, user: User) -> User:
        """
        Create a user or replace the stored profile with the same id

        Args:
            user: Sanitized user

        Returns:
            Stored User object
        """
        try:
            row = await self.conn.fetchrow(
                """
                INSERT INTO users (id, name, avatar, password, telegram_chat_id, currency, language)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                ON CONFLICT (id) DO UPDATE SET
                    name = EXCLUDED.name,
                    avatar = EXCLUDED.avatar,
                    password = EXCLUDED.password,
                    telegram_chat_id = EXCLUDED.telegram_chat_id,
                    currency = EXCLUDED.currency,
                    language = EXCLUDED.language
                RETURNING *
                """,
                user.id,
                user.name,
                user.avatar,
                user.password,
                user.telegram_chat_id,
                user.preferences.currency.value,
                user.preferences.language.value
            )

            logger.info(f"User stored: id={user.id}")
            return _row_to_user(row)

        except Exception as e:
            logger.error(f"Error storing user: {e}", exc_info=True)
            raise

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID

        Args:
            user_id: User ID

        Returns:
            User object or None
        """
        row = await self.conn.fetchrow(
            "SELECT * FROM users WHERE id = $1",
            user_id
        )

        return _row_to_user(row) if row else None

    async def get_by_telegram_chat_id(self, chat_id: str) -> Optional[User]:
        """
        Get the user linked to a Telegram chat

        Args:
            chat_id: Telegram chat ID (as text)

        Returns:
            User object or None if the chat is not registered
        """
        row = await self.conn.fetchrow(
            "SELECT * FROM users WHERE telegram_chat_id = $1",
            str(chat_id)
        )

        return _row_to_user(row) if row else None

    async def get_all(self) -> List[User]:
        """
        Get all users

        Returns:
            List of User objects
        """
        rows = await self.conn.fetch("SELECT * FROM users ORDER BY name")
        return [_row_to_user(row) for row in rows]

    async def count(self) -> int:
        """
        Count total number of users

        Returns:
            Total user count
        """
        count = await self.conn.fetchval("SELECT COUNT(*) FROM users")
        return count or 0
