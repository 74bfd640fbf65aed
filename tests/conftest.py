"""
Shared fixtures: in-memory stand-ins for the store, oracle and actions
"""
from typing import Any, Dict, List, Optional


from ticketkeeper.database.models import BlacklistEntry, Ticket
from ticketkeeper.services.base import (
    ActivityOracle, BlacklistStore, ChannelPublisher, TicketActions, TicketStore
)

NOW = 1_700_000_000


class MemoryTicketStore(TicketStore):
    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None):
        self.records = {key: dict(value) for key, value in (records or {}).items()}
        self.reads = 0

    async def all(self) -> List[Ticket]:
        self.reads += 1
        return [Ticket.from_dict({'_id': key, **value}) for key, value in self.records.items()]

    async def get(self, channel_id: str) -> Optional[Ticket]:
        value = self.records.get(channel_id)
        return Ticket.from_dict({'_id': channel_id, **value}) if value is not None else None

    async def update(self, channel_id: str, fields: Dict[str, Any]) -> None:
        self.records.setdefault(channel_id, {}).update(fields)

    async def delete(self, channel_id: str) -> None:
        self.records.pop(channel_id, None)


class MemoryBlacklistStore(BlacklistStore):
    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None):
        self.records = dict(records or {})
        self.fail_on = set()

    async def all(self) -> List[BlacklistEntry]:
        return [BlacklistEntry.from_dict({'_id': key, **value}) for key, value in self.records.items()]

    async def delete(self, target_id: str) -> None:
        if target_id in self.fail_on:
            raise RuntimeError("store unavailable")
        self.records.pop(target_id, None)


class FakeOracle(ActivityOracle):
    """Last message times in seconds; ids in ``failing`` raise."""

    def __init__(self, timestamps: Optional[Dict[str, int]] = None, failing=()):
        self.timestamps = dict(timestamps or {})
        self.failing = set(failing)
        self.queried: List[str] = []

    async def last_message_timestamp(self, channel_id: str) -> Optional[int]:
        self.queried.append(channel_id)
        if channel_id in self.failing:
            raise RuntimeError(f"history unavailable for {channel_id}")
        return self.timestamps.get(channel_id)


class RecordingActions(TicketActions):
    """Records calls; ids in ``failing`` raise, ids in ``already_closed`` are not closed again."""

    def __init__(self, failing=(), already_closed=()):
        self.failing = set(failing)
        self.already_closed = set(already_closed)
        self.closed: List[str] = []
        self.deleted: List[str] = []

    async def close(self, channel_id: str) -> bool:
        if channel_id in self.failing:
            raise RuntimeError(f"cannot close {channel_id}")
        if channel_id in self.already_closed:
            return False
        self.closed.append(channel_id)
        return True

    async def delete(self, channel_id: str) -> None:
        if channel_id in self.failing:
            raise RuntimeError(f"cannot delete {channel_id}")
        self.deleted.append(channel_id)


class RecordingPublisher(ChannelPublisher):
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.names: Dict[int, str] = {}

    async def rename(self, channel_id: int, name: str) -> None:
        if channel_id in self.failing:
            raise RuntimeError("rate limited")
        self.names[channel_id] = name


def open_ticket(**fields):
    return {'status': 'Open', 'ownerId': '42', **fields}


def closed_ticket(closed_seconds_ago: Optional[int] = None, **fields):
    record = {'status': 'Closed', 'ownerId': '42', **fields}
    if closed_seconds_ago is not None:
        record['closedAt'] = (NOW - closed_seconds_ago) * 1000
    return record
