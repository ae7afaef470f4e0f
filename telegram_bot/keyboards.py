"""
Keyboards for Telegram bot
"""

from aiogram.types import ReplyKeyboardMarkup, KeyboardButton, InlineKeyboardMarkup, InlineKeyboardButton

from shared.enums import PaymentMethod
from telegram_bot.config import BotButtons
from telegram_bot.intents import BotReply, ReplyMarkup


def main_menu_keyboard(language) -> ReplyKeyboardMarkup:
    """
    Main menu keyboard (Add / Report / Info) in the user's language
    """
    keyboard = ReplyKeyboardMarkup(
        keyboard=[
            [
                KeyboardButton(text=BotButtons.label(BotButtons.ADD, language)),
                KeyboardButton(text=BotButtons.label(BotButtons.REPORT, language)),
            ],
            [KeyboardButton(text=BotButtons.label(BotButtons.INFO, language))]
        ],
        resize_keyboard=True,
        is_persistent=True
    )
    return keyboard


def payment_method_keyboard() -> InlineKeyboardMarkup:
    """
    Card / Cash choice for a pending transaction
    """
    keyboard = InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text=BotButtons.CARD, callback_data=PaymentMethod.CARD.value),
                InlineKeyboardButton(text=BotButtons.CASH, callback_data=PaymentMethod.CASH.value)
            ]
        ]
    )
    return keyboard


def reply_markup_for(reply: BotReply):
    """Keyboard matching a dispatcher reply"""
    if reply.markup == ReplyMarkup.PAYMENT_CHOICE:
        return payment_method_keyboard()
    if reply.markup == ReplyMarkup.MAIN_MENU:
        return main_menu_keyboard(reply.language)
    return None
