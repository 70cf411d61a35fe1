"""
Background mood decay for neglected pets.

Every interval the scheduler walks all stored users and asks the
coordinator to apply hunger decay. Decay goes through the same per-user
lock as live mutations, so it never interleaves with a feed or a purchase.
"""

import asyncio
import logging
from typing import Optional

from saveup_pet.config import DECAY_CHECK_INTERVAL_SECONDS
from saveup_pet.services.pet_service import PetService, run_decay_sweep

logger = logging.getLogger(__name__)


class PetDecayScheduler:
    """
    Background task applying mood decay.

    A pet that stays unfed keeps decaying on every sweep; feeding resets
    last_fed and stops it.
    """

    def __init__(self, service: PetService, interval_seconds: int = DECAY_CHECK_INTERVAL_SECONDS):
        """
        Initialize decay scheduler.

        Args:
            service: Coordinator that owns pet state
            interval_seconds: How often to sweep (in seconds)
        """
        self.service = service
        self.interval_seconds = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background decay task."""
        if self._running:
            logger.warning("Decay scheduler is already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._decay_loop())
        logger.info(f"Decay scheduler started (interval: {self.interval_seconds}s)")

    async def stop(self):
        """Stop the background decay task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Decay scheduler stopped")

    async def run_once(self) -> int:
        """Run a single sweep; returns the number of pets that decayed."""
        decayed = await run_decay_sweep(self.service)
        logger.info(f"Decay sweep complete: {decayed} pet(s) decayed")
        return decayed

    async def _decay_loop(self):
        while self._running:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Error in decay sweep: {e}", exc_info=True)

            await asyncio.sleep(self.interval_seconds)
