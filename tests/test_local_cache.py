import json

from client.local_cache import TRANSACTIONS, USERS, LocalCache


def _record(record_id, user_id):
    return {'id': record_id, 'userId': user_id, 'amount': 1}


def test_upsert_and_owned_by(cache):
    cache.upsert(TRANSACTIONS, _record('t1', 'a'))
    cache.upsert(TRANSACTIONS, _record('t2', 'b'))
    cache.upsert(TRANSACTIONS, {**_record('t1', 'a'), 'amount': 5})

    assert len(cache.all(TRANSACTIONS)) == 2
    assert cache.owned_by(TRANSACTIONS, 'a') == [{'id': 't1', 'userId': 'a', 'amount': 5}]


def test_remove_missing_id_changes_nothing(cache):
    cache.upsert(TRANSACTIONS, _record('t1', 'a'))

    assert cache.remove(TRANSACTIONS, 'nope') is False
    assert cache.remove(TRANSACTIONS, 't1') is True
    assert cache.all(TRANSACTIONS) == []


def test_replace_owned_keeps_other_users(cache):
    cache.upsert(TRANSACTIONS, _record('t1', 'a'))
    cache.upsert(TRANSACTIONS, _record('t2', 'a'))
    cache.upsert(TRANSACTIONS, _record('t3', 'b'))

    cache.replace_owned(TRANSACTIONS, 'a', [_record('t4', 'a')])

    ids = {r['id'] for r in cache.all(TRANSACTIONS)}
    assert ids == {'t3', 't4'}


def test_collections_are_persisted_as_json(tmp_path):
    cache = LocalCache(str(tmp_path))
    cache.seed(USERS, [{'id': 'u1', 'name': 'Ana'}])

    data = json.loads((tmp_path / 'users.json').read_text(encoding='utf-8'))
    assert data == {'u1': {'id': 'u1', 'name': 'Ana'}}
    assert LocalCache(str(tmp_path)).all(USERS) == [{'id': 'u1', 'name': 'Ana'}]


def test_legacy_array_and_corrupt_files(tmp_path):
    (tmp_path / 'transactions.json').write_text(json.dumps([_record('t1', 'a')]), encoding='utf-8')
    (tmp_path / 'users.json').write_text("{not json", encoding='utf-8')
    cache = LocalCache(str(tmp_path))

    assert cache.owned_by(TRANSACTIONS, 'a') == [_record('t1', 'a')]
    assert cache.all(USERS) == []
