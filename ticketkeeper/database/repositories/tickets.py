"""Ticket store backed by the ``tickets`` collection."""
from typing import Any, Dict, List

from .base import BaseRepository
from ..models import Ticket, TicketStatus
from ...services.base import TicketStore


class TicketRepository(BaseRepository[Ticket], TicketStore):
    """Tickets keyed by channel id."""

    model_class = Ticket

    async def open(self, channel_id: str, owner_id: int, **fields: Any) -> Ticket:
        """Record a newly opened ticket channel."""
        data: Dict[str, Any] = {'status': TicketStatus.OPEN.value, 'ownerId': str(owner_id)}
        data.update(fields)
        await self.set(channel_id, data)
        data['_id'] = str(channel_id)
        return Ticket.from_dict(data)

    async def with_status(self, status: TicketStatus) -> List[Ticket]:
        return [ticket for ticket in await self.all() if ticket.status is status]
