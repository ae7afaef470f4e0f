"""
Database Module
Handles storage of users, transactions and subscriptions in PostgreSQL
"""

from .connection import get_db_connection, init_database, close_database, run_migrations
from .models import User, UserPreferences, Transaction, Subscription
from .repositories.user_repo import UserRepository
from .repositories.transaction_repo import TransactionRepository
from .repositories.subscription_repo import SubscriptionRepository

__version__ = "1.0.0"

__all__ = [
    "get_db_connection",
    "init_database",
    "close_database",
    "run_migrations",
    "User",
    "UserPreferences",
    "Transaction",
    "Subscription",
    "UserRepository",
    "TransactionRepository",
    "SubscriptionRepository"
]
