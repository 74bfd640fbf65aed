"""Ticket and blacklist records."""
from enum import Enum
from typing import Any, Optional

from .base import BaseModel
from ...utils.time import ms_to_seconds


def _stored_seconds(value: Any) -> Optional[int]:
    """Whole seconds from a stored millisecond value.

    Numeric strings are accepted; anything else counts as unset.
    """
    if not value or isinstance(value, bool):
        return None
    try:
        return ms_to_seconds(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


class TicketStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


class Ticket(BaseModel):
    """A ticket record keyed by its channel id.

    Stored fields use the persisted names (``status``, ``closedAt`` in
    milliseconds, ``ownerId``...). Everything except status and closing
    time is opaque to the lifecycle sweeps.
    """

    @property
    def channel_id(self) -> str:
        return self.id

    @property
    def status(self) -> Optional[TicketStatus]:
        try:
            return TicketStatus(self._data.get('status'))
        except ValueError:
            return None

    @property
    def is_open(self) -> bool:
        return self.status is TicketStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status is TicketStatus.CLOSED

    @property
    def closed_at(self) -> Optional[int]:
        """Closing time in seconds, or None when never recorded."""
        return _stored_seconds(self._data.get('closedAt'))


class BlacklistEntry(BaseModel):
    """A blacklisted user or role keyed by its id.

    ``expiresAt`` is in milliseconds; an entry without it is permanent.
    """

    @property
    def expires_at(self) -> Optional[int]:
        return _stored_seconds(self._data.get('expiresAt'))

    @property
    def is_permanent(self) -> bool:
        return self.expires_at is None

    def is_expired(self, now: int) -> bool:
        return not self.is_permanent and now >= self.expires_at
