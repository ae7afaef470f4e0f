"""
Per-chat store of transactions waiting for a payment method
"""

import logging
import time
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

from shared.config import settings

logger = logging.getLogger(__name__)

T = TypeVar('T')


class PendingTransactionStore(Generic[T]):
    """
    In-memory key-value store keyed by chat id with expiry

    At most one value per chat; set() replaces the previous one. get, set and
    clear are the only operations, so an external session store can replace it.
    """

    def __init__(self, ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = settings.PENDING_TTL if ttl is None else ttl
        self.clock = clock
        self._items: Dict[str, Tuple[float, T]] = {}

    def get(self, chat_id: str) -> Optional[T]:
        """Pending value of a chat, or None if absent or expired"""
        item = self._items.get(chat_id)
        if item is None:
            return None

        stored_at, value = item
        if self.clock() - stored_at > self.ttl:
            logger.info(f"Pending transaction for chat {chat_id} expired")
            del self._items[chat_id]
            return None

        return value

    def set(self, chat_id: str, value: T) -> None:
        if chat_id in self._items:
            logger.info(f"Replacing pending transaction for chat {chat_id}")
        self._items[chat_id] = (self.clock(), value)

    def clear(self, chat_id: str) -> None:
        self._items.pop(chat_id, None)
