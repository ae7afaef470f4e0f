"""
/start command handler
"""

import logging
from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.types import Message

from shared.constants import DEFAULT_LANGUAGE
from telegram_bot.config import BotMessages
from telegram_bot.keyboards import main_menu_keyboard

logger = logging.getLogger(__name__)
router = Router()


@router.message(CommandStart())
async def cmd_start(message: Message, db_user=None):
    """
    Handle /start command

    Echoes the chat id so it can be linked in the dashboard profile.
    """
    language = db_user.language.value if db_user else DEFAULT_LANGUAGE
    logger.info(f"/start from chat {message.chat.id} (registered: {db_user is not None})")

    await message.answer(
        BotMessages.text(BotMessages.WELCOME, language, chat_id=message.chat.id),
        reply_markup=main_menu_keyboard(language) if db_user else None
    )
