"""
Middleware for bot
"""

import logging
from typing import Callable, Dict, Any, Awaitable
from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from database.repositories.user_repo import UserRepository
from database.connection import get_db_connection

logger = logging.getLogger(__name__)


class UserMiddleware(BaseMiddleware):
    """
    Resolve the user registered for the chat

    Puts the User (or None for an unregistered chat) into data["db_user"].
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        data["db_user"] = None
        chat = data.get("event_chat")

        if chat is None:
            return await handler(event, data)

        try:
            async with get_db_connection() as conn:
                user_repo = UserRepository(conn)
                data["db_user"] = await user_repo.get_by_telegram_chat_id(str(chat.id))

        except Exception as e:
            logger.error(f"Error in UserMiddleware: {e}", exc_info=True)

        return await handler(event, data)
