from datetime import datetime, timezone

import pytest

from ai.intent_classifier import IntentResult, ParsedTransaction, parse_intent_response
from shared.enums import Currency, Intent, PaymentMethod, Period, TransactionType
from telegram_bot.intents import IntentDispatcher, ReplyMarkup, SessionState
from telegram_bot.pending import PendingTransactionStore

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClassifier:
    def __init__(self):
        self.results = []
        self.calls = []

    async def __call__(self, text, language, now):
        self.calls.append((text, language))
        return self.results.pop(0) if self.results else None


class FakeStorage:
    def __init__(self):
        self.saved = []
        self.fail = False

    async def save(self, transaction):
        if self.fail:
            return False
        self.saved.append(transaction)
        return True


@pytest.fixture()
def classifier():
    return FakeClassifier()


@pytest.fixture()
def storage():
    return FakeStorage()


@pytest.fixture()
def reports():
    return []


@pytest.fixture()
def dispatcher(classifier, storage, reports):
    async def build_report(user, period):
        reports.append((user.id, period))
        return f"REPORT {Period(period).value}"

    ids = iter(f"tx{n}" for n in range(1, 100))
    return IntentDispatcher(
        classify=classifier,
        save_transaction=storage.save,
        build_report=build_report,
        pending=PendingTransactionStore(ttl=600),
        clock=lambda: NOW,
        id_factory=lambda: next(ids)
    )


def _transaction_result(**fields):
    return IntentResult(intent=Intent.TRANSACTION, reply='Ok!', transaction=ParsedTransaction(**fields))


async def test_tips_are_saved_as_cash_income_without_asking(dispatcher, classifier, storage, matteo):
    classifier.results.append(_transaction_result(
        amount=20.0, category='Mance', type=TransactionType.EXPENSE, payment_method=PaymentMethod.CARD
    ))

    reply = await dispatcher.handle_message('1001', 'mance 20', matteo)

    assert len(storage.saved) == 1
    saved = storage.saved[0]
    assert saved.type == TransactionType.INCOME
    assert saved.payment_method == PaymentMethod.CASH
    assert reply.saved == saved
    assert reply.markup != ReplyMarkup.PAYMENT_CHOICE
    assert dispatcher.state('1001') == SessionState.IDLE


async def test_tips_without_payment_method_skip_the_question(dispatcher, classifier, storage, matteo):
    classifier.results.append(_transaction_result(amount=5.0, category='Mance'))

    await dispatcher.handle_message('1001', 'mance 5', matteo)

    assert storage.saved[0].payment_method == PaymentMethod.CASH
    assert dispatcher.state('1001') == SessionState.IDLE


async def test_tips_alias_from_model_is_saved_as_cash_income(dispatcher, classifier, storage, matteo):
    classifier.results.append(parse_intent_response({
        'intent': 'TRANSACTION',
        'transactionData': {'amount': 20, 'category': 'tips', 'type': 'EXPENSE'},
    }))

    reply = await dispatcher.handle_message('1001', 'tips 20', matteo)

    assert [t.category for t in storage.saved] == ['Mance']
    assert storage.saved[0].type == TransactionType.INCOME
    assert storage.saved[0].payment_method == PaymentMethod.CASH
    assert reply.markup == ReplyMarkup.MAIN_MENU
    assert dispatcher.state('1001') == SessionState.IDLE


async def test_known_payment_method_is_saved_immediately(dispatcher, classifier, storage, matteo):
    classifier.results.append(_transaction_result(
        amount=12.5, category='Ristoranti', payment_method=PaymentMethod.CASH, description='Pizza'
    ))

    reply = await dispatcher.handle_message('1001', 'pizza 12.50 contanti', matteo)

    saved = storage.saved[0]
    assert saved.id == 'tx1'
    assert saved.user_id == 'user_matteo'
    assert saved.date == '2024-03-01T12:00:00Z'
    assert saved.type == TransactionType.EXPENSE
    assert saved.payment_method == PaymentMethod.CASH
    assert 'Ristoranti' in reply.text
    assert reply.markup == ReplyMarkup.MAIN_MENU


async def test_missing_payment_method_waits_for_button(dispatcher, classifier, storage, matteo):
    classifier.results.append(_transaction_result(amount=12.5, category='Ristoranti'))

    reply = await dispatcher.handle_message('1001', 'pizza 12.50', matteo)

    assert storage.saved == []
    assert reply.markup == ReplyMarkup.PAYMENT_CHOICE
    assert dispatcher.state('1001') == SessionState.AWAITING_PAYMENT_METHOD

    reply = await dispatcher.handle_payment_choice('1001', 'CASH')

    assert [t.payment_method for t in storage.saved] == [PaymentMethod.CASH]
    assert reply.saved.amount == 12.5
    assert dispatcher.state('1001') == SessionState.IDLE


async def test_new_transaction_overwrites_pending_one(dispatcher, classifier, storage, matteo):
    classifier.results.append(_transaction_result(amount=10.0, category='Ristoranti'))
    classifier.results.append(_transaction_result(amount=30.0, category='Shopping'))

    await dispatcher.handle_message('1001', 'pizza 10', matteo)
    await dispatcher.handle_message('1001', 'scarpe 30', matteo)
    await dispatcher.handle_payment_choice('1001', 'CARD')

    assert [(t.amount, t.category) for t in storage.saved] == [(30.0, 'Shopping')]


async def test_defaults_come_from_user_and_message(dispatcher, classifier, storage, diana):
    classifier.results.append(_transaction_result(amount=40.0, payment_method=PaymentMethod.CARD))

    await dispatcher.handle_message('2002', '  zakupy 40  ', diana)

    saved = storage.saved[0]
    assert saved.currency == Currency.PLN
    assert saved.category == 'Altro'
    assert saved.description == 'zakupy 40'
    assert saved.type == TransactionType.EXPENSE


async def test_unregistered_chat_gets_its_id_and_nothing_is_parsed(dispatcher, classifier, storage):
    reply = await dispatcher.handle_message('555', 'pizza 10', None)

    assert '555' in reply.text
    assert classifier.calls == []
    assert storage.saved == []
    assert dispatcher.state('555') == SessionState.IDLE


async def test_classifier_failure_keeps_state(dispatcher, classifier, storage, matteo):
    classifier.results.append(_transaction_result(amount=10.0, category='Ristoranti'))
    await dispatcher.handle_message('1001', 'pizza 10', matteo)

    reply = await dispatcher.handle_message('1001', '???', matteo)

    assert 'Errore' in reply.text
    assert dispatcher.state('1001') == SessionState.AWAITING_PAYMENT_METHOD
    assert storage.saved == []


async def test_choice_without_pending_transaction_has_expired(dispatcher, storage):
    reply = await dispatcher.handle_payment_choice('1001', 'CARD')

    assert reply.expired is True
    assert storage.saved == []


async def test_failed_save_keeps_pending_transaction(dispatcher, classifier, storage, matteo):
    classifier.results.append(_transaction_result(amount=10.0, category='Ristoranti'))
    await dispatcher.handle_message('1001', 'pizza 10', matteo)

    storage.fail = True
    reply = await dispatcher.handle_payment_choice('1001', 'CARD')

    assert 'DB' in reply.text
    assert dispatcher.state('1001') == SessionState.AWAITING_PAYMENT_METHOD

    storage.fail = False
    await dispatcher.handle_payment_choice('1001', 'CARD')
    assert len(storage.saved) == 1


async def test_report_intent_appends_report(dispatcher, classifier, reports, matteo):
    classifier.results.append(IntentResult(intent=Intent.REPORT, reply='Ecco:', report_period=Period.DAILY))

    reply = await dispatcher.handle_message('1001', 'quanto ho speso oggi?', matteo)

    assert reports == [('user_matteo', Period.DAILY)]
    assert reply.text == "Ecco:\n\nREPORT DAILY"
    assert reply.markup == ReplyMarkup.MAIN_MENU


async def test_chat_intent_returns_model_reply(dispatcher, classifier, storage, matteo):
    classifier.results.append(IntentResult(intent=Intent.CHAT, reply='Ciao!'))

    reply = await dispatcher.handle_message('1001', 'ciao', matteo)

    assert reply.text == 'Ciao!'
    assert storage.saved == []


async def test_menu_buttons(dispatcher, classifier, reports, matteo):
    info = await dispatcher.handle_message('1001', 'ℹ️ Info', matteo)
    report = await dispatcher.handle_message('1001', '📊 Resoconto', matteo)

    assert 'Come usare' in info.text
    assert report.text == "REPORT WEEKLY"
    assert classifier.calls == []
