"""
API Handlers
REST endpoints used by the dashboard data service
"""

import json
import logging
from aiohttp import web

from database.connection import get_db_connection
from database.repositories.user_repo import UserRepository
from database.repositories.transaction_repo import TransactionRepository
from database.repositories.subscription_repo import SubscriptionRepository
from database.sanitize import sanitize_subscription, sanitize_transaction, sanitize_user

logger = logging.getLogger(__name__)


def _error(message: str, status: int) -> web.Response:
    return web.json_response({'error': message}, status=status)


async def _read_json(request) -> dict:
    """
    Decode a JSON object body

    Raises:
        ValueError: Body is not a JSON object
    """
    try:
        data = await request.json()
    except json.JSONDecodeError:
        raise ValueError("Invalid JSON body")

    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")

    return data


class APIHandler:
    """Handler for API requests from the dashboard"""

    # ==================== HEALTH ====================

    @staticmethod
    async def health_check(request):
        """
        GET /health
        """
        return web.json_response({'status': 'ok'})

    # ==================== TRANSACTIONS ====================

    @staticmethod
    async def get_transactions(request):
        """
        GET /api/transactions?userId=
        Get user's transactions, newest first
        """
        user_id = request.query.get('userId')
        if not user_id:
            return _error('userId is required', 400)

        try:
            async with get_db_connection() as conn:
                transactions = await TransactionRepository(conn).get_user_transactions(user_id)

            return web.json_response([t.to_dict() for t in transactions])

        except Exception as e:
            logger.error(f"Get transactions error: {e}", exc_info=True)
            return _error(str(e), 500)

    @staticmethod
    async def create_transaction(request):
        """
        POST /api/transactions
        Create a transaction, or replace the one with the same id
        """
        try:
            transaction = sanitize_transaction(await _read_json(request))
        except ValueError as e:
            return _error(str(e), 400)

        try:
            async with get_db_connection() as conn:
                stored = await TransactionRepository(conn).upsert(transaction)

            return web.json_response(stored.to_dict())

        except Exception as e:
            logger.error(f"Create transaction error: {e}", exc_info=True)
            return _error(str(e), 500)

    @staticmethod
    async def delete_transaction(request):
        """
        DELETE /api/transactions/{id}
        Deleting a missing id succeeds
        """
        transaction_id = request.match_info['id']

        try:
            async with get_db_connection() as conn:
                deleted = await TransactionRepository(conn).delete(transaction_id)

            return web.json_response({'success': True, 'deleted': deleted})

        except Exception as e:
            logger.error(f"Delete transaction error: {e}", exc_info=True)
            return _error(str(e), 500)

    # ==================== USERS ====================

    @staticmethod
    async def get_user(request):
        """
        GET /api/users/{id}
        Returns null for an unknown id
        """
        user_id = request.match_info['id']

        try:
            async with get_db_connection() as conn:
                user = await UserRepository(conn).get_by_id(user_id)

            return web.json_response(user.to_dict() if user else None)

        except Exception as e:
            logger.error(f"Get user error: {e}", exc_info=True)
            return _error(str(e), 500)

    @staticmethod
    async def update_user(request):
        """
        PUT /api/users/{id}
        Create or update a user profile
        """
        try:
            data = await _read_json(request)
            data['id'] = request.match_info['id']
            user = sanitize_user(data)
        except ValueError as e:
            return _error(str(e), 400)

        try:
            async with get_db_connection() as conn:
                stored = await UserRepository(conn).upsert(user)

            logger.info(f"User profile updated: {stored.id}")
            return web.json_response(stored.to_dict())

        except Exception as e:
            logger.error(f"Update user error: {e}", exc_info=True)
            return _error(str(e), 500)

    # ==================== SUBSCRIPTIONS ====================

    @staticmethod
    async def get_subscriptions(request):
        """
        GET /api/subscriptions?userId=
        """
        user_id = request.query.get('userId')
        if not user_id:
            return _error('userId is required', 400)

        try:
            async with get_db_connection() as conn:
                subscriptions = await SubscriptionRepository(conn).get_user_subscriptions(user_id)

            return web.json_response([s.to_dict() for s in subscriptions])

        except Exception as e:
            logger.error(f"Get subscriptions error: {e}", exc_info=True)
            return _error(str(e), 500)

    @staticmethod
    async def save_subscription(request):
        """
        POST /api/subscriptions
        Create or update a subscription
        """
        try:
            subscription = sanitize_subscription(await _read_json(request))
        except ValueError as e:
            return _error(str(e), 400)

        try:
            async with get_db_connection() as conn:
                stored = await SubscriptionRepository(conn).upsert(subscription)

            return web.json_response(stored.to_dict())

        except Exception as e:
            logger.error(f"Save subscription error: {e}", exc_info=True)
            return _error(str(e), 500)

    @staticmethod
    async def delete_subscription(request):
        """
        DELETE /api/subscriptions/{id}
        """
        subscription_id = request.match_info['id']

        try:
            async with get_db_connection() as conn:
                deleted = await SubscriptionRepository(conn).delete(subscription_id)

            return web.json_response({'success': True, 'deleted': deleted})

        except Exception as e:
            logger.error(f"Delete subscription error: {e}", exc_info=True)
            return _error(str(e), 500)


def setup_api_routes(app):
    """
    Setup API routes
    """
    app.router.add_get('/health', APIHandler.health_check)

    # Transactions
    app.router.add_get('/api/transactions', APIHandler.get_transactions)
    app.router.add_post('/api/transactions', APIHandler.create_transaction)
    app.router.add_delete('/api/transactions/{id}', APIHandler.delete_transaction)

    # Users
    app.router.add_get('/api/users/{id}', APIHandler.get_user)
    app.router.add_put('/api/users/{id}', APIHandler.update_user)

    # Subscriptions
    app.router.add_get('/api/subscriptions', APIHandler.get_subscriptions)
    app.router.add_post('/api/subscriptions', APIHandler.save_subscription)
    app.router.add_delete('/api/subscriptions/{id}', APIHandler.delete_subscription)

    logger.info("API routes configured")
