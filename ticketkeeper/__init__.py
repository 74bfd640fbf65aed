"""ticketkeeper: a Discord support ticket bot with automatic lifecycle sweeps."""

__version__ = "1.0.0"
