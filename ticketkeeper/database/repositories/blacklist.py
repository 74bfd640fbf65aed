"""Blacklist store backed by the ``blacklist`` collection."""
from typing import Optional

from .base import BaseRepository
from ..models import BlacklistEntry
from ...services.base import BlacklistStore
from ...utils.time import now_ms, now_seconds, seconds_to_ms


class BlacklistRepository(BaseRepository[BlacklistEntry], BlacklistStore):
    """Blacklisted users and roles keyed by their id."""

    model_class = BlacklistEntry

    async def add(self, target_id: int, kind: str, reason: str = "",
                  duration_seconds: Optional[int] = None) -> None:
        """Blacklist a user or role, permanently when no duration is given."""
        added_at = now_ms()
        data = {'type': kind, 'reason': reason, 'addedAt': added_at}
        if duration_seconds:
            data['expiresAt'] = added_at + seconds_to_ms(duration_seconds)
        await self.set(str(target_id), data)

    async def is_blacklisted(self, target_id: int) -> bool:
        entry = await self.get(str(target_id))
        return entry is not None and not entry.is_expired(now_seconds())
