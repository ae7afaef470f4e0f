"""
Card / Cash button handler
"""

import logging
from aiogram import Router, F
from aiogram.types import CallbackQuery

from shared.enums import PaymentMethod
from telegram_bot.intents import IntentDispatcher

logger = logging.getLogger(__name__)
router = Router()


@router.callback_query(F.data.in_({method.value for method in PaymentMethod}))
async def handle_payment_choice(callback: CallbackQuery, intent_dispatcher: IntentDispatcher):
    """
    Complete the pending transaction with the chosen payment method
    """
    chat_id = str(callback.message.chat.id) if callback.message else str(callback.from_user.id)
    reply = await intent_dispatcher.handle_payment_choice(chat_id, callback.data)

    if reply.expired:
        await callback.answer(reply.text)
        return

    await callback.answer()
    if not callback.message:
        return

    if reply.saved is None:
        # Keep the Card / Cash buttons on the question so the choice can be retried
        await callback.message.answer(reply.text)
        return

    await callback.message.edit_text(reply.text)
