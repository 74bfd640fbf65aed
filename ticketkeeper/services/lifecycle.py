"""
Ticket lifecycle sweeps.

Two independent passes over the ticket store: auto-close closes open tickets
whose channel has been silent longer than a threshold, auto-delete removes
closed tickets some time after they were closed. Each pass reads its own
snapshot and evaluates tickets one at a time; a failure on one ticket is
logged and the pass moves on to the next.
"""

from typing import Callable, List, Optional

from .base import ActivityOracle, TicketActions, TicketStore
from ..core.logger import LoggerMixin
from ..database.models import Ticket
from ..utils.time import now_seconds


def threshold_exceeded(now: int, since: Optional[int], threshold: int) -> bool:
    """True when strictly more than ``threshold`` seconds passed since ``since``."""
    if since is None:
        return False
    return now - since > threshold


class LifecycleSweeper(LoggerMixin):
    """Applies the inactivity-close and post-close-delete policies."""

    def __init__(self, store: TicketStore, oracle: ActivityOracle, actions: TicketActions,
                 auto_close_threshold: int = 86400, auto_delete_threshold: int = 86400,
                 clock: Callable[[], int] = now_seconds):
        self.store = store
        self.oracle = oracle
        self.actions = actions
        self.auto_close_threshold = auto_close_threshold
        self.auto_delete_threshold = auto_delete_threshold
        self.clock = clock

    async def _snapshot(self) -> List[Ticket]:
        return list(await self.store.all() or [])

    async def auto_close_pass(self) -> List[str]:
        """Close open tickets with no message for longer than the threshold.

        Returns:
            Channel ids that were closed during this pass
        """
        now = self.clock()
        open_tickets = [ticket for ticket in await self._snapshot() if ticket.is_open]
        closed = []

        for ticket in open_tickets:
            channel_id = ticket.channel_id
            try:
                last_message = await self.oracle.last_message_timestamp(channel_id)
                if last_message is None:
                    continue

                if threshold_exceeded(now, last_message, self.auto_close_threshold):
                    if await self.actions.close(channel_id):
                        closed.append(channel_id)
            except Exception as e:
                self.logger.error(f"Auto-close failed for ticket {channel_id}: {type(e).__name__}: {e}")

        if closed:
            self.logger.info(f"Auto-closed {len(closed)} inactive ticket(s)")
        return closed

    async def auto_delete_pass(self) -> List[str]:
        """Delete closed tickets that were closed longer than the threshold ago.

        Tickets without a recorded closing time are left alone.

        Returns:
            Channel ids that were deleted during this pass
        """
        now = self.clock()
        closed_tickets = [ticket for ticket in await self._snapshot() if ticket.is_closed]
        deleted = []

        for ticket in closed_tickets:
            channel_id = ticket.channel_id
            try:
                if not threshold_exceeded(now, ticket.closed_at, self.auto_delete_threshold):
                    continue

                await self.actions.delete(channel_id)
                deleted.append(channel_id)
            except Exception as e:
                self.logger.error(f"Auto-delete failed for ticket {channel_id}: {type(e).__name__}: {e}")

        if deleted:
            self.logger.info(f"Auto-deleted {len(deleted)} closed ticket(s)")
        return deleted
