"""Database models."""
from .base import BaseModel
from .ticket import BlacklistEntry, Ticket, TicketStatus

__all__ = ['BaseModel', 'BlacklistEntry', 'Ticket', 'TicketStatus']
