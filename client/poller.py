"""
Periodic background refresh of dashboard data
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from database.models import Transaction
from shared.config import settings

logger = logging.getLogger(__name__)


class RefreshPoller:
    """
    Refresh a user's transactions on a fixed interval

    A poll is skipped while the user acted within the debounce window, so a
    stale refresh cannot overwrite an edit that is still being replicated.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[List[Transaction]]],
        on_refresh: Optional[Callable[[List[Transaction]], None]] = None,
        interval: Optional[float] = None,
        debounce_window: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.refresh = refresh
        self.on_refresh = on_refresh
        self.interval = settings.POLL_INTERVAL if interval is None else interval
        self.debounce_window = settings.DEBOUNCE_WINDOW if debounce_window is None else debounce_window
        self.clock = clock
        self.last_user_action: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    def note_user_action(self) -> None:
        """Record that the user just changed something"""
        self.last_user_action = self.clock()

    def should_poll(self, now: Optional[float] = None) -> bool:
        if self.last_user_action is None:
            return True
        if now is None:
            now = self.clock()
        return now - self.last_user_action >= self.debounce_window

    async def tick(self) -> bool:
        """
        Run one poll cycle

        Returns:
            True if a refresh was performed
        """
        if not self.should_poll():
            logger.debug("Skipping poll, recent user action")
            return False

        transactions = await self.refresh()
        if self.on_refresh is not None:
            self.on_refresh(transactions)
        return True

    async def run(self) -> None:
        """Poll until stopped; errors in one cycle do not stop the loop"""
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Background refresh failed: {e}", exc_info=True)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
