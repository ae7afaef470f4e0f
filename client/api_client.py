"""
HTTP client for the REST API

Every call is bounded by a timeout. Network errors, timeouts and non-2xx
responses are soft failures: they are logged and reported as UNAVAILABLE
instead of raising.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from shared.config import settings

logger = logging.getLogger(__name__)


class _Unavailable:
    """Sentinel result of a remote call that did not succeed"""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE = _Unavailable()


class FinanceApiClient:
    """Async client for the finance REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.BACKEND_URL).rstrip('/')
        self.timeout = settings.REMOTE_TIMEOUT if timeout is None else timeout
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={'Content-Type': 'application/json'},
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None
    ) -> Any:
        """
        Perform a request and decode the JSON body

        Returns:
            Decoded body, or UNAVAILABLE on timeout, network error, non-2xx or bad JSON
        """
        try:
            response = await self.client.request(method, path, params=params, json=json)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException:
            logger.warning(f"Remote {method} {path} timed out after {self.timeout}s")
        except httpx.HTTPStatusError as e:
            logger.warning(f"Remote {method} {path} failed: HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"Remote {method} {path} unreachable: {e}")
        except ValueError as e:
            logger.warning(f"Remote {method} {path} returned invalid JSON: {e}")

        return UNAVAILABLE

    # ==================== TRANSACTIONS ====================

    async def list_transactions(self, user_id: str) -> Any:
        """GET /api/transactions?userId="""
        data = await self._request('GET', '/api/transactions', params={'userId': user_id})
        if data is not UNAVAILABLE and not isinstance(data, list):
            logger.warning(f"Unexpected transactions payload: {type(data).__name__}")
            return UNAVAILABLE
        return data

    async def create_transaction(self, payload: Dict[str, Any]) -> Any:
        """POST /api/transactions (upsert by id)"""
        return await self._request('POST', '/api/transactions', json=payload)

    async def delete_transaction(self, transaction_id: str) -> Any:
        """DELETE /api/transactions/:id"""
        return await self._request('DELETE', f'/api/transactions/{transaction_id}')

    # ==================== USERS ====================

    async def get_user(self, user_id: str) -> Any:
        """GET /api/users/:id (null body when the user does not exist)"""
        data = await self._request('GET', f'/api/users/{user_id}')
        if data is None:
            return UNAVAILABLE
        return data

    async def update_user(self, payload: Dict[str, Any]) -> Any:
        """PUT /api/users/:id (upsert)"""
        return await self._request('PUT', f"/api/users/{payload['id']}", json=payload)

    # ==================== SUBSCRIPTIONS ====================

    async def list_subscriptions(self, user_id: str) -> Any:
        """GET /api/subscriptions?userId="""
        data = await self._request('GET', '/api/subscriptions', params={'userId': user_id})
        if data is not UNAVAILABLE and not isinstance(data, list):
            return UNAVAILABLE
        return data

    async def save_subscription(self, payload: Dict[str, Any]) -> Any:
        """POST /api/subscriptions (upsert by id)"""
        return await self._request('POST', '/api/subscriptions', json=payload)

    async def delete_subscription(self, subscription_id: str) -> Any:
        """DELETE /api/subscriptions/:id"""
        return await self._request('DELETE', f'/api/subscriptions/{subscription_id}')
