"""
Text message handler
"""

import logging
from aiogram import Router, F
from aiogram.types import Message

from shared.constants import DEFAULT_LANGUAGE
from telegram_bot.config import BotMessages
from telegram_bot.intents import IntentDispatcher
from telegram_bot.keyboards import reply_markup_for

logger = logging.getLogger(__name__)
router = Router()


@router.message(F.text & ~F.text.startswith('/'))
async def handle_text_message(message: Message, intent_dispatcher: IntentDispatcher, db_user=None):
    """
    Handle text messages from user

    Everything that is not a command goes through the intent dispatcher.
    """
    try:
        reply = await intent_dispatcher.handle_message(str(message.chat.id), message.text, db_user)
        await message.answer(reply.text, reply_markup=reply_markup_for(reply))

    except Exception as e:
        logger.error(f"Error handling text message: {e}", exc_info=True)
        language = db_user.language.value if db_user else DEFAULT_LANGUAGE
        await message.answer(BotMessages.text(BotMessages.ERROR, language))
