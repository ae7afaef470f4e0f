"""Shared fixtures: model factories, an in-memory REST server and a data service wired to it."""

import json

import httpx
import pytest

from client.api_client import FinanceApiClient
from client.data_service import DataService
from client.local_cache import LocalCache
from database.models import Subscription, Transaction
from database.sanitize import sanitize_user
from shared.constants import MOCK_USERS
from shared.enums import Currency, Frequency, PaymentMethod, TransactionType


class FakeServer:
    """In-memory stand-in for the REST API, served through httpx.MockTransport."""

    def __init__(self):
        self.transactions = {}
        self.users = {u['id']: dict(u) for u in MOCK_USERS}
        self.subscriptions = {}
        # 'ok', 'error' (HTTP 503) or 'timeout'
        self.mode = 'ok'
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        self.requests.append((method, path))

        if self.mode == 'timeout':
            raise httpx.ReadTimeout("timed out", request=request)
        if self.mode == 'error':
            return httpx.Response(503, json={'error': 'Service unavailable'})

        if path == '/api/transactions':
            if method == 'GET':
                user_id = request.url.params.get('userId')
                return httpx.Response(200, json=[t for t in self.transactions.values() if t['userId'] == user_id])
            body = json.loads(request.content)
            self.transactions[body['id']] = body
            return httpx.Response(200, json=body)

        if path.startswith('/api/transactions/') and method == 'DELETE':
            self.transactions.pop(path.rsplit('/', 1)[1], None)
            return httpx.Response(200, json={'success': True})

        if path.startswith('/api/users/'):
            user_id = path.rsplit('/', 1)[1]
            if method == 'GET':
                return httpx.Response(200, json=self.users.get(user_id))
            body = json.loads(request.content)
            self.users[user_id] = body
            return httpx.Response(200, json=body)

        if path == '/api/subscriptions':
            if method == 'GET':
                user_id = request.url.params.get('userId')
                return httpx.Response(200, json=[s for s in self.subscriptions.values() if s['userId'] == user_id])
            body = json.loads(request.content)
            self.subscriptions[body['id']] = body
            return httpx.Response(200, json=body)

        if path.startswith('/api/subscriptions/') and method == 'DELETE':
            self.subscriptions.pop(path.rsplit('/', 1)[1], None)
            return httpx.Response(200, json={'success': True})

        return httpx.Response(404, json={'error': 'Not found'})


@pytest.fixture()
def server():
    return FakeServer()


@pytest.fixture()
def cache(tmp_path):
    return LocalCache(str(tmp_path / "cache"))


@pytest.fixture()
async def service(server, cache):
    api = FinanceApiClient(
        base_url="http://backend.test",
        timeout=5,
        transport=httpx.MockTransport(server.handler)
    )
    data_service = DataService(api=api, cache=cache)
    yield data_service
    await data_service.close()


@pytest.fixture()
def make_transaction():
    def _make(**overrides):
        values = dict(
            id='t1',
            user_id='user_matteo',
            date='2024-03-01T10:00:00',
            amount=10.0,
            currency=Currency.EUR,
            category='Ristoranti',
            type=TransactionType.EXPENSE,
            description='Pizza',
            payment_method=PaymentMethod.CARD,
        )
        values.update(overrides)
        return Transaction(**values)

    return _make


@pytest.fixture()
def make_subscription():
    def _make(**overrides):
        values = dict(
            id='s1',
            user_id='user_matteo',
            name='Netflix',
            amount=12.99,
            currency=Currency.EUR,
            category='Svago',
            frequency=Frequency.MONTHLY,
            next_due_date='2024-01-01',
        )
        values.update(overrides)
        return Subscription(**values)

    return _make


@pytest.fixture()
def matteo():
    return sanitize_user({**MOCK_USERS[0], 'telegramChatId': '1001'})


@pytest.fixture()
def diana():
    return sanitize_user({**MOCK_USERS[1], 'telegramChatId': '2002'})
