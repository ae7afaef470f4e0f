from datetime import datetime

from client.local_cache import SUBSCRIPTIONS, TRANSACTIONS
from shared.enums import PaymentMethod


async def test_read_falls_back_to_cache_of_requesting_user_on_timeout(service, server, cache, make_transaction):
    cache.upsert(TRANSACTIONS, make_transaction(id='mine').to_dict())
    cache.upsert(TRANSACTIONS, make_transaction(id='theirs', user_id='user_diana').to_dict())
    server.mode = 'timeout'

    transactions = await service.get_transactions('user_matteo')

    assert [t.id for t in transactions] == ['mine']


async def test_read_falls_back_to_cache_on_server_error(service, server, cache, make_transaction):
    cache.upsert(TRANSACTIONS, make_transaction(id='mine').to_dict())
    server.mode = 'error'

    transactions = await service.get_transactions('user_matteo')

    assert [t.id for t in transactions] == ['mine']


async def test_write_through_keeps_local_copy_when_server_is_down(service, server, cache, make_transaction):
    server.mode = 'error'

    await service.add_transaction(make_transaction(id='offline'))
    await service.drain()

    assert [r['id'] for r in cache.owned_by(TRANSACTIONS, 'user_matteo')] == ['offline']
    assert [t.id for t in await service.get_transactions('user_matteo')] == ['offline']


async def test_add_transaction_is_replicated(service, server, make_transaction):
    await service.add_transaction(make_transaction(id='t1', amount=12.5))
    await service.drain()

    assert server.transactions['t1']['amount'] == 12.5


async def test_recreating_an_id_updates_instead_of_duplicating(service, server, cache, make_transaction):
    await service.add_transaction(make_transaction(id='t1', amount=10.0))
    await service.drain()
    await service.update_transaction(make_transaction(id='t1', amount=15.0))
    await service.drain()

    assert [r['amount'] for r in cache.all(TRANSACTIONS)] == [15.0]
    assert len(server.transactions) == 1
    assert server.transactions['t1']['amount'] == 15.0


async def test_delete_unknown_id_is_a_no_op(service, server, cache, make_transaction):
    await service.add_transaction(make_transaction(id='t1'))
    await service.drain()
    before = cache.all(TRANSACTIONS)

    await service.delete_transaction('does-not-exist')
    await service.drain()

    assert cache.all(TRANSACTIONS) == before
    assert list(server.transactions) == ['t1']


async def test_delete_removes_locally_and_remotely(service, server, cache, make_transaction):
    await service.add_transaction(make_transaction(id='t1'))
    await service.drain()
    await service.delete_transaction('t1')
    await service.drain()

    assert cache.all(TRANSACTIONS) == []
    assert server.transactions == {}


async def test_refresh_merges_and_writes_back_only_this_users_slice(service, server, cache, make_transaction):
    server.transactions['t1'] = make_transaction(id='t1', payment_method=PaymentMethod.CARD).to_dict()
    cache.upsert(TRANSACTIONS, make_transaction(id='t1', payment_method=PaymentMethod.CASH).to_dict())
    cache.upsert(TRANSACTIONS, make_transaction(id='stale').to_dict())
    cache.upsert(TRANSACTIONS, make_transaction(id='other', user_id='user_diana').to_dict())

    transactions = await service.get_transactions('user_matteo')

    assert [(t.id, t.payment_method) for t in transactions] == [('t1', PaymentMethod.CASH)]
    assert {r['id'] for r in cache.all(TRANSACTIONS)} == {'t1', 'other'}
    assert cache.owned_by(TRANSACTIONS, 'user_matteo')[0]['paymentMethod'] == 'CASH'


async def test_unsent_create_is_resent_after_outage(service, server, make_transaction):
    server.mode = 'error'
    await service.add_transaction(make_transaction(id='offline'))
    await service.drain()

    server.mode = 'ok'
    transactions = await service.get_transactions('user_matteo')
    await service.drain()

    assert [t.id for t in transactions] == ['offline']
    assert 'offline' in server.transactions


async def test_unsent_delete_is_resent_after_outage(service, server, make_transaction):
    server.transactions['t1'] = make_transaction(id='t1').to_dict()
    server.mode = 'error'
    await service.delete_transaction('t1')
    await service.drain()

    server.mode = 'ok'
    transactions = await service.get_transactions('user_matteo')
    await service.drain()

    assert transactions == []
    assert server.transactions == {}


async def test_profile_falls_back_to_seeded_users(service, server):
    server.mode = 'timeout'

    user = await service.get_user_profile('user_diana')

    assert user.name == 'Diana'
    assert [u.id for u in await service.list_users()] == ['user_matteo', 'user_diana']


async def test_profile_update_is_written_through(service, server, matteo):
    updated = await service.update_user_profile(matteo)
    await service.drain()

    assert updated.telegram_chat_id == '1001'
    assert server.users['user_matteo']['telegramChatId'] == '1001'
    assert (await service.get_user_profile('user_matteo')).telegram_chat_id == '1001'


async def test_refresh_materializes_due_subscription_once(service, server, cache, make_subscription):
    server.subscriptions['s1'] = make_subscription().to_dict()
    now = datetime(2024, 1, 15, 12, 0)

    first = await service.refresh('user_matteo', now)
    second = await service.refresh('user_matteo', now)

    assert [t.id for t in first] == ['sub_s1_2024-01-01']
    assert [t.id for t in second] == ['sub_s1_2024-01-01']
    assert server.subscriptions['s1']['nextDueDate'] == '2024-02-01'
    assert cache.all(SUBSCRIPTIONS)[0]['nextDueDate'] == '2024-02-01'


async def test_deactivated_subscription_is_kept(service, server, make_subscription):
    subscription = await service.add_subscription(make_subscription())
    await service.drain()
    await service.deactivate_subscription(subscription)
    await service.drain()

    assert server.subscriptions['s1']['active'] is False
    assert (await service.get_subscriptions('user_matteo'))[0].active is False


async def test_remote_record_with_bad_date_is_skipped(service, server, make_transaction):
    good = make_transaction(id='ok').to_dict()
    server.transactions = {'ok': good, 'bad': dict(good, id='bad', date='not-a-date')}

    transactions = await service.get_transactions('user_matteo')

    assert [t.id for t in transactions] == ['ok']
