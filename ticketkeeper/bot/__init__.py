"""
Discord bot module for ticketkeeper
Contains the main bot client and the process entry point
"""

from .client import TicketKeeperBot

__all__ = ['TicketKeeperBot']
