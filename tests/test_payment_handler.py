from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from ai.intent_classifier import IntentResult, ParsedTransaction
from shared.enums import Intent
from telegram_bot.handlers.payment_handler import handle_payment_choice
from telegram_bot.intents import IntentDispatcher, SessionState
from telegram_bot.pending import PendingTransactionStore

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _callback(data, chat_id=1001):
    message = SimpleNamespace(
        chat=SimpleNamespace(id=chat_id),
        answer=AsyncMock(),
        edit_text=AsyncMock(),
    )
    return SimpleNamespace(
        data=data,
        message=message,
        from_user=SimpleNamespace(id=chat_id),
        answer=AsyncMock(),
    )


class FlakyStorage:
    def __init__(self):
        self.saved = []
        self.fail = True

    async def save(self, transaction):
        if self.fail:
            return False
        self.saved.append(transaction)
        return True


@pytest.fixture()
def storage():
    return FlakyStorage()


@pytest.fixture()
def dispatcher(storage):
    results = [IntentResult(
        intent=Intent.TRANSACTION,
        reply='Ok!',
        transaction=ParsedTransaction(amount=12.5, category='Ristoranti'),
    )]

    async def classify(text, language, now):
        return results.pop(0)

    return IntentDispatcher(
        classify=classify,
        save_transaction=storage.save,
        build_report=AsyncMock(return_value=''),
        pending=PendingTransactionStore(ttl=600),
        clock=lambda: NOW,
        id_factory=lambda: 'tx1'
    )


async def test_failed_save_leaves_buttons_for_retry(dispatcher, storage, matteo):
    await dispatcher.handle_message('1001', 'pizza 12.50', matteo)
    callback = _callback('CASH')

    await handle_payment_choice(callback, intent_dispatcher=dispatcher)

    callback.message.answer.assert_awaited_once()
    callback.message.edit_text.assert_not_awaited()
    assert dispatcher.state('1001') == SessionState.AWAITING_PAYMENT_METHOD

    storage.fail = False
    retry = _callback('CASH')

    await handle_payment_choice(retry, intent_dispatcher=dispatcher)

    retry.message.edit_text.assert_awaited_once()
    assert [t.id for t in storage.saved] == ['tx1']
    assert dispatcher.state('1001') == SessionState.IDLE


async def test_expired_choice_only_answers_the_callback(dispatcher):
    callback = _callback('CARD', chat_id=4242)

    await handle_payment_choice(callback, intent_dispatcher=dispatcher)

    callback.answer.assert_awaited_once()
    callback.message.answer.assert_not_awaited()
    callback.message.edit_text.assert_not_awaited()
