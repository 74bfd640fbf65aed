"""
Services run by the bot: lifecycle sweeps, blacklist cleanup, stats and scheduling
"""

from .blacklist import BlacklistCleaner
from .lifecycle import LifecycleSweeper, threshold_exceeded
from .scheduler import TicketScheduler
from .stats import StatsUpdater

__all__ = [
    'BlacklistCleaner',
    'LifecycleSweeper',
    'StatsUpdater',
    'TicketScheduler',
    'threshold_exceeded',
]
