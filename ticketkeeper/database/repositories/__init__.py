"""Repositories for MongoDB collections."""
from .base import BaseRepository
from .blacklist import BlacklistRepository
from .tickets import TicketRepository

__all__ = ['BaseRepository', 'BlacklistRepository', 'TicketRepository']
