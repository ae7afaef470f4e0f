"""
Repository pattern for database operations
"""

from .user_repo import UserRepository
from .transaction_repo import TransactionRepository
from .subscription_repo import SubscriptionRepository

__all__ = [
    "UserRepository",
    "TransactionRepository",
    "SubscriptionRepository"
]
