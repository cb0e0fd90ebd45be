"""
Expiry Sweep Worker

Periodically removes expired records (and their clicks) from the registry to
reclaim memory. Expiration itself is enforced lazily at redirect time; this
worker only bounds how long dead records linger.

Architecture:
- Runs as an asyncio task owned by the application lifespan
- Calls URLService.sweep_expired() every ``interval`` seconds
- Stops promptly when asked, even in the middle of a wait
"""

import asyncio
import logging
from typing import Optional

from shortlinks_app.services.url_service import URLService

logger = logging.getLogger(__name__)


class ExpiryWorker:
    """
    Background sweeper for expired short links.

    Features:
    - Fixed sweep interval
    - Graceful stop (wakes up immediately)
    - Errors in one sweep never stop the loop
    """

    def __init__(self, service: URLService, interval: float = 60):
        """
        Initialize worker with dependencies.

        Args:
            service: Service whose registry is swept
            interval: Seconds between sweeps
        """
        self.service = service
        self.interval = interval
        self.running = False
        self.swept_count = 0
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    async def run(self):
        """Sweep until stopped"""
        if self._stop_event is None:
            self.running = True
            self._stop_event = asyncio.Event()
        logger.info("Expiry worker started (interval %ss)", self.interval)

        while self.running:
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

            if not self.running:
                break

            try:
                removed = await self.service.sweep_expired()
                self.swept_count += removed
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Expiry sweep failed")

        logger.info("Expiry worker stopped (%d records swept in total)", self.swept_count)

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop"""
        self.running = True
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run())
        return self._task

    def stop(self):
        """Ask the loop to finish after the current sweep"""
        self.running = False
        if self._stop_event is not None:
            self._stop_event.set()

    async def shutdown(self):
        """Stop and wait for the task to finish"""
        self.stop()
        if self._task is not None:
            await self._task
            self._task = None
