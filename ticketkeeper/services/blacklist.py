"""Periodic purge of expired blacklist entries."""

from typing import Callable, List

from .base import BlacklistStore
from ..core.logger import LoggerMixin
from ..utils.time import now_seconds


class BlacklistCleaner(LoggerMixin):
    """Removes temporary blacklist entries once they expire."""

    def __init__(self, store: BlacklistStore, clock: Callable[[], int] = now_seconds):
        self.store = store
        self.clock = clock

    async def clean(self) -> List[str]:
        """Delete every expired entry; permanent entries are kept.

        Returns:
            Ids of the removed entries
        """
        now = self.clock()
        removed = []

        for entry in await self.store.all():
            if not entry.is_expired(now):
                continue
            try:
                await self.store.delete(entry.id)
                removed.append(entry.id)
            except Exception as e:
                self.logger.error(f"Failed to remove expired blacklist entry {entry.id}: {e}")

        if removed:
            self.logger.info(f"Removed {len(removed)} expired blacklist entr{'y' if len(removed) == 1 else 'ies'}")
        return removed
