"""
/help command handler
"""

import logging
from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from shared.constants import DEFAULT_LANGUAGE
from telegram_bot.config import BotMessages

logger = logging.getLogger(__name__)
router = Router()


@router.message(Command("help"))
async def cmd_help(message: Message, db_user=None):
    """
    Handle /help command
    """
    language = db_user.language.value if db_user else DEFAULT_LANGUAGE
    await message.answer(BotMessages.text(BotMessages.HELP, language))
