"""Ticket statistics published through channel names."""

from typing import Dict, List, Tuple

from .base import ChannelPublisher, TicketStore
from ..core.config import StatsChannelsConfig
from ..core.logger import LoggerMixin
from ..database.models import Ticket


STAT_KEYS = ('total_tickets', 'open_tickets', 'closed_tickets', 'claimed_tickets')


def compute_stats(tickets: List[Ticket]) -> Dict[str, int]:
    """Aggregate counts over a ticket snapshot."""
    return {
        'total_tickets': len(tickets),
        'open_tickets': sum(1 for ticket in tickets if ticket.is_open),
        'closed_tickets': sum(1 for ticket in tickets if ticket.is_closed),
        'claimed_tickets': sum(1 for ticket in tickets if ticket.claimed),
    }


class StatsUpdater(LoggerMixin):
    """Recomputes ticket counts and renames the configured display channels."""

    def __init__(self, store: TicketStore, publisher: ChannelPublisher, config: StatsChannelsConfig):
        self.store = store
        self.publisher = publisher
        self.config = config

    def targets(self) -> List[Tuple[str, int, str]]:
        """(stat key, channel id, name template) for each configured channel."""
        targets = []
        for key in STAT_KEYS:
            channel_id = getattr(self.config, key)
            if channel_id:
                targets.append((key, channel_id, getattr(self.config, f"{key}_name")))
        return targets

    async def update(self) -> Dict[str, int]:
        """Publish the current counts.

        Returns:
            The computed statistics
        """
        stats = compute_stats(list(await self.store.all() or []))

        for key, channel_id, template in self.targets():
            name = template.replace("{stats}", str(stats[key]))
            try:
                await self.publisher.rename(channel_id, name)
            except Exception as e:
                self.logger.error(f"Failed to update stats channel {channel_id} ({key}): {e}")

        self.logger.debug(f"Stats channels updated: {stats}")
        return stats
