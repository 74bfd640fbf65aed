"""
Custom exceptions for ticketkeeper
Provides structured error handling across the application
"""

from typing import Optional


class TicketKeeperError(Exception):
    """Base exception for ticketkeeper."""
    pass


class ConfigurationError(TicketKeeperError):
    """Raised when there's a configuration error."""
    pass


class DatabaseError(TicketKeeperError):
    """Raised when there's a database error."""
    pass


class TicketActionError(TicketKeeperError):
    """Raised when closing or deleting a ticket fails."""

    def __init__(self, message: str, channel_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.channel_id = channel_id

    def __str__(self):
        if self.channel_id:
            return f"[ticket {self.channel_id}] {self.message}"
        return self.message


class StartupError(TicketKeeperError):
    """Raised when the bot cannot log in.

    ``kind`` is one of ``INVALID_TOKEN``, ``DISALLOWED_INTENTS`` or ``ERROR``.
    """

    def __init__(self, message: str, kind: str = "ERROR"):
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self):
        return f"{self.kind}: {self.message}"
