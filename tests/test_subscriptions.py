from datetime import datetime

from client.subscriptions import advance_due_date, materialize_due
from shared.enums import Frequency, PaymentMethod, TransactionType


def test_advance_due_date_clamps_to_month_end():
    assert advance_due_date('2024-01-31', Frequency.MONTHLY) == '2024-02-29'
    assert advance_due_date('2024-12-15', Frequency.MONTHLY) == '2025-01-15'
    assert advance_due_date('2024-02-29', Frequency.YEARLY) == '2025-02-28'


def test_clamped_day_carries_into_following_months():
    february = advance_due_date('2024-01-31', Frequency.MONTHLY)

    assert advance_due_date(february, Frequency.MONTHLY) == '2024-03-29'


def test_due_subscription_becomes_expense(make_subscription):
    created, advanced = materialize_due([make_subscription()], datetime(2024, 1, 1, 9, 0))

    assert len(created) == 1
    transaction = created[0]
    assert transaction.id == 'sub_s1_2024-01-01'
    assert transaction.type == TransactionType.EXPENSE
    assert transaction.payment_method == PaymentMethod.CARD
    assert transaction.amount == 12.99
    assert transaction.description == 'Netflix'
    assert advanced[0].next_due_date == '2024-02-01'


def test_future_and_inactive_subscriptions_are_skipped(make_subscription):
    subscriptions = [
        make_subscription(id='future', next_due_date='2024-02-01'),
        make_subscription(id='inactive', active=False),
    ]

    assert materialize_due(subscriptions, datetime(2024, 1, 15)) == ([], [])


def test_one_period_per_cycle(make_subscription):
    # Three months overdue: one expense now, the rest on later cycles
    created, advanced = materialize_due([make_subscription()], datetime(2024, 3, 20))

    assert len(created) == 1
    assert advanced[0].next_due_date == '2024-02-01'
