"""
Collaborator interfaces for the periodic services.

The sweeps only talk to these abstractions; MongoDB repositories and
Discord adapters implement them in production, in-memory fakes in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..database.models import BlacklistEntry, Ticket


class TicketStore(ABC):
    """Persisted mapping of channel id to ticket record."""

    @abstractmethod
    async def all(self) -> List[Ticket]:
        """Return every ticket."""
        pass

    @abstractmethod
    async def get(self, channel_id: str) -> Optional[Ticket]:
        """Return one ticket, or None."""
        pass

    @abstractmethod
    async def update(self, channel_id: str, fields: Dict[str, Any]) -> None:
        """Set the given fields on a ticket."""
        pass

    @abstractmethod
    async def delete(self, channel_id: str) -> None:
        """Remove a ticket record."""
        pass


class BlacklistStore(ABC):
    """Persisted blacklist of users and roles."""

    @abstractmethod
    async def all(self) -> List[BlacklistEntry]:
        pass

    @abstractmethod
    async def delete(self, target_id: str) -> None:
        pass


class ActivityOracle(ABC):
    """Source of last-activity timestamps for ticket channels."""

    @abstractmethod
    async def last_message_timestamp(self, channel_id: str) -> Optional[int]:
        """Seconds since the epoch of the newest message, or None if unknown."""
        pass


class TicketActions(ABC):
    """Side effects the lifecycle sweeps trigger."""

    @abstractmethod
    async def close(self, channel_id: str) -> bool:
        """Close a ticket: status Closed, closedAt now.

        Returns False when there was nothing to close.
        """
        pass

    @abstractmethod
    async def delete(self, channel_id: str) -> None:
        """Delete a ticket record and its channel. Irreversible."""
        pass


class ChannelPublisher(ABC):
    """Displays a value by renaming a channel."""

    @abstractmethod
    async def rename(self, channel_id: int, name: str) -> None:
        pass
