"""
The merge keeps server values except for one field in one direction:
a local CASH payment method beats a server non-CASH value. It is not a
symmetric conflict resolution.
"""

from client.reconcile import merge_transactions
from shared.enums import PaymentMethod


def test_local_cash_overrides_server_card(make_transaction):
    remote = [make_transaction(payment_method=PaymentMethod.CARD)]
    local = [make_transaction(payment_method=PaymentMethod.CASH)]

    merged = merge_transactions(remote, local)

    assert merged[0].payment_method == PaymentMethod.CASH


def test_local_card_does_not_override_server_cash(make_transaction):
    remote = [make_transaction(payment_method=PaymentMethod.CASH)]
    local = [make_transaction(payment_method=PaymentMethod.CARD)]

    merged = merge_transactions(remote, local)

    assert merged[0].payment_method == PaymentMethod.CASH


def test_server_wins_for_other_fields(make_transaction):
    remote = [make_transaction(amount=20.0, description='Server', payment_method=PaymentMethod.CARD)]
    local = [make_transaction(amount=10.0, description='Local', payment_method=PaymentMethod.CASH)]

    merged = merge_transactions(remote, local)

    assert merged[0].amount == 20.0
    assert merged[0].description == 'Server'
    assert merged[0].payment_method == PaymentMethod.CASH


def test_server_card_kept_without_local_copy(make_transaction):
    merged = merge_transactions([make_transaction(id='t2')], [make_transaction(id='t1', payment_method=PaymentMethod.CASH)])

    assert [t.id for t in merged] == ['t2']
    assert merged[0].payment_method == PaymentMethod.CARD


def test_server_order_is_preserved(make_transaction):
    remote = [make_transaction(id='b'), make_transaction(id='a'), make_transaction(id='c')]

    assert [t.id for t in merge_transactions(remote, [])] == ['b', 'a', 'c']


def test_inputs_are_not_mutated(make_transaction):
    remote = [make_transaction(payment_method=PaymentMethod.CARD)]
    local = [make_transaction(payment_method=PaymentMethod.CASH)]

    merge_transactions(remote, local)

    assert remote[0].payment_method == PaymentMethod.CARD
